"""Enumeration and scoring of ``[start, B, C]`` candidate routes."""

from __future__ import annotations

import logging
from typing import Sequence

from ...models.domain import Block
from .distance import DistanceService
from .models import CandidateRoute

DEFAULT_MAX_PAIRS = 100

logger = logging.getLogger(__name__)


def _gap_score(previous_time: int, next_time: int, min_gap: int, fallback_mode: bool) -> int:
    deviation = next_time - (previous_time + min_gap)
    return abs(deviation) if fallback_mode else deviation


def _accepts(previous_time: int, next_time: int, min_gap: int, fallback_mode: bool) -> bool:
    if next_time <= previous_time:
        return False
    return fallback_mode or next_time >= previous_time + min_gap


def find_routes(
    start_block: Block,
    candidates: Sequence[Block],
    min_gap: int,
    fallback_mode: bool,
    *,
    distance_service: DistanceService,
    max_pairs: int = DEFAULT_MAX_PAIRS,
) -> list[CandidateRoute]:
    """Score every valid ``(B, C)`` continuation of ``start_block``.

    Strict mode keeps only transitions at least ``min_gap`` minutes apart and
    scores the surplus over the gap. Fallback mode drops the floor, keeps
    plain chronological order and scores the absolute distance from the
    ideal gap. Enumeration stops after ``max_pairs`` scored pairs, so the
    result is best-effort on large pools.
    """

    results: list[CandidateRoute] = []
    start_time = start_block.start_time

    for block_b in candidates:
        if len(results) >= max_pairs:
            break
        if block_b.id == start_block.id:
            continue
        time_b = block_b.start_time
        if not _accepts(start_time, time_b, min_gap, fallback_mode):
            continue

        dist_ab = distance_service.distance(start_block, block_b)
        gap_ab = _gap_score(start_time, time_b, min_gap, fallback_mode)

        for block_c in candidates:
            if block_c.id in (block_b.id, start_block.id):
                continue
            time_c = block_c.start_time
            if not _accepts(time_b, time_c, min_gap, fallback_mode):
                continue

            results.append(
                CandidateRoute(
                    block_ids=(start_block.id, block_b.id, block_c.id),
                    total_dist=dist_ab + distance_service.distance(block_b, block_c),
                    is_fallback=fallback_mode,
                    gap_ab=gap_ab,
                    gap_bc=_gap_score(time_b, time_c, min_gap, fallback_mode),
                )
            )
            if len(results) >= max_pairs:
                break

    mode = "fallback" if fallback_mode else "strict"
    logger.debug(
        f"Scored {len(results)} {mode} route candidates from block {start_block.id} "
        f"(pool={len(candidates)}, min_gap={min_gap}, cap={max_pairs})"
    )
    return results
