"""Route suggestion orchestration service."""

from __future__ import annotations

import functools
import logging
import math
from typing import Optional, Sequence

from ...config import settings
from ...data.blocks_repository import get_block, load_blocks
from ...models.domain import Block
from ...schemas.blocks import BlockModel
from ...schemas.routing import (
    RouteSuggestionModel,
    RouteSuggestionRequest,
    RouteSuggestionResponse,
)
from .models import CalculatedRoute, RouteResult
from .selector import MAX_GAP_MINUTES, minutes_from_hours
from .worker import RouteWorker

logger = logging.getLogger(__name__)


class RouteGenerationError(RuntimeError):
    """Raised when the route engine reports a failure envelope."""


@functools.lru_cache(maxsize=1)
def get_route_worker() -> RouteWorker:
    return RouteWorker()


def _gap_label(hours: float) -> str:
    return f"{hours:g}h"


def _effective_hours(requested: Optional[float]) -> float:
    if requested is None:
        return float(settings.default_min_gap_hours)
    if not math.isfinite(requested):
        return 0.0
    return min(max(0.0, requested), MAX_GAP_MINUTES / 60)


def _describe(route: CalculatedRoute, has_min_gap: bool, gap_label: str) -> str:
    if route.is_fallback:
        return f"Next available blocks (gap < {gap_label})." if has_min_gap else "Next available blocks."
    return f"Optimized circuit with {gap_label} windows." if has_min_gap else "Optimized circuit with no minimum gap."


def _info_message(result: RouteResult, has_min_gap: bool, gap_label: str) -> Optional[str]:
    if not result.routes:
        upcoming = result.next_immediate_block
        if upcoming is not None:
            return (
                "Could not build a full 3-block itinerary. "
                f"Next block today is {upcoming.name} at {upcoming.start_clock}."
            )
        return "End of the line! No more blocks scheduled today after this one."
    if result.routes[0].is_fallback and has_min_gap:
        return (
            f"No blocks found with a {gap_label} gap, so the next available ones "
            "were selected instead."
        )
    return None


def build_suggestions(
    result: RouteResult,
    blocks: Sequence[Block],
    min_gap_hours: float,
) -> list[RouteSuggestionModel]:
    lookup = {block.id: block for block in blocks}
    has_min_gap = minutes_from_hours(min_gap_hours) > 0
    gap_label = _gap_label(min_gap_hours)
    suggestions: list[RouteSuggestionModel] = []
    for index, route in enumerate(result.routes, start=1):
        suggestions.append(
            RouteSuggestionModel(
                title=f"Route {index}",
                description=_describe(route, has_min_gap, gap_label),
                block_ids=list(route.block_ids),
                total_distance_km=round(route.total_dist, 3),
                is_fallback=route.is_fallback,
                stops=[BlockModel.from_block(lookup[block_id]) for block_id in route.block_ids],
            )
        )
    return suggestions


def suggest_routes(payload: RouteSuggestionRequest) -> RouteSuggestionResponse:
    start_block = get_block(payload.start_block_id)
    if start_block is None:
        raise ValueError(f"Block {payload.start_block_id} not found.")

    blocks = load_blocks()
    hours = _effective_hours(payload.min_gap_hours)
    min_gap_minutes = minutes_from_hours(hours)

    envelope = get_route_worker().run(start_block, blocks, min_gap_minutes)
    if not envelope.get("success"):
        raise RouteGenerationError(envelope.get("error") or "Failed to generate routes")

    result: RouteResult = envelope["result"]
    logger.info(
        f"Generated {len(result.routes)} routes from block {start_block.id} "
        f"(gap={min_gap_minutes}min, fallback={bool(result.routes and result.routes[0].is_fallback)})"
    )

    upcoming = result.next_immediate_block
    return RouteSuggestionResponse(
        start_block_id=start_block.id,
        min_gap_minutes=min_gap_minutes,
        routes=build_suggestions(result, blocks, hours),
        next_immediate_block=BlockModel.from_block(upcoming) if upcoming else None,
        message=_info_message(result, min_gap_minutes > 0, _gap_label(hours)),
    )
