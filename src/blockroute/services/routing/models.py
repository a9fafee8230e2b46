"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ...models.domain import Block


@dataclass(slots=True)
class CandidateRoute:
    """A scored ``[start, B, C]`` triple, alive only during one generation call."""

    block_ids: tuple[int, int, int]
    total_dist: float
    is_fallback: bool
    gap_ab: int
    gap_bc: int

    def sort_key(self) -> tuple[int, int, float]:
        return (self.gap_ab, self.gap_bc, self.total_dist)

    def to_calculated(self) -> CalculatedRoute:
        return CalculatedRoute(
            block_ids=self.block_ids,
            total_dist=self.total_dist,
            is_fallback=self.is_fallback,
        )


@dataclass(slots=True)
class CalculatedRoute:
    block_ids: tuple[int, int, int]
    total_dist: float
    is_fallback: bool


@dataclass(slots=True)
class RouteResult:
    routes: List[CalculatedRoute] = field(default_factory=list)
    next_immediate_block: Optional[Block] = None
