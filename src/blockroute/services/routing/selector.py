"""Route selection: strict search, fallback policy, ranking and truncation."""

from __future__ import annotations

import logging
import math
from typing import Any, Optional, Sequence

from ...models.domain import Block
from .candidates import DEFAULT_MAX_PAIRS, find_routes
from .distance import DistanceService, default_distance_service
from .models import RouteResult

DEFAULT_MAX_ROUTES = 5
# Stops share one date, so no usable gap exceeds a day.
MAX_GAP_MINUTES = 24 * 60

logger = logging.getLogger(__name__)


def _finite_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def normalize_min_gap(value: Any) -> int:
    """Floor the gap to whole minutes; negative or non-finite values become 0.

    Gaps above a day are clamped to ``MAX_GAP_MINUTES``: no strict pair
    qualifies either way, and fallback scores shift by the same constant.
    """
    number = _finite_number(value)
    if number is None:
        return 0
    return max(0, math.floor(min(number, MAX_GAP_MINUTES)))


def minutes_from_hours(hours: Any) -> int:
    """Whole minutes for a gap in hours, clamped to ``[0, MAX_GAP_MINUTES]``."""
    number = _finite_number(hours)
    if number is None:
        return 0
    return max(0, round(min(number, MAX_GAP_MINUTES / 60) * 60))


def same_day_pool(start_block: Block, all_blocks: Sequence[Block]) -> list[Block]:
    """Blocks sharing the start block's date, excluding it, earliest first."""
    pool = [b for b in all_blocks if b.date == start_block.date and b.id != start_block.id]
    pool.sort(key=lambda b: b.start_time)
    return pool


def generate_routes_from_start(
    start_block: Block,
    all_blocks: Sequence[Block],
    min_gap_minutes: Any,
    *,
    distance_service: Optional[DistanceService] = None,
    max_routes: int = DEFAULT_MAX_ROUTES,
    max_pairs: int = DEFAULT_MAX_PAIRS,
) -> RouteResult:
    """Rank up to ``max_routes`` three-stop itineraries starting at ``start_block``.

    The strict search runs first. Only when it finds nothing and the gap is
    positive does a fallback search run, and its results replace the strict
    ones. ``next_immediate_block`` is the earliest later block of the day,
    regardless of the gap, and is ``None`` when the start is the last block.
    """

    distances = distance_service or default_distance_service
    min_gap = normalize_min_gap(min_gap_minutes)
    pool = same_day_pool(start_block, all_blocks)
    next_block = next((b for b in pool if b.start_time > start_block.start_time), None)

    candidates = find_routes(
        start_block, pool, min_gap, False, distance_service=distances, max_pairs=max_pairs
    )
    if not candidates and min_gap > 0:
        logger.debug(f"No strict route from block {start_block.id} with gap {min_gap}; trying fallback")
        candidates = find_routes(
            start_block, pool, min_gap, True, distance_service=distances, max_pairs=max_pairs
        )

    candidates.sort(key=lambda route: route.sort_key())
    return RouteResult(
        routes=[route.to_calculated() for route in candidates[:max_routes]],
        next_immediate_block=next_block,
    )
