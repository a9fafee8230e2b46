"""Route suggestion request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from .blocks import BlockModel


class RouteSuggestionRequest(BaseModel):
    start_block_id: int
    min_gap_hours: Optional[float] = Field(
        default=None,
        description="Minimum gap between consecutive stops, in hours. Defaults to the configured value.",
    )


class RouteSuggestionModel(BaseModel):
    title: str
    description: str
    block_ids: List[int]
    total_distance_km: float = Field(..., ge=0)
    is_fallback: bool
    stops: List[BlockModel]


class RouteSuggestionResponse(BaseModel):
    start_block_id: int
    min_gap_minutes: int
    routes: List[RouteSuggestionModel]
    next_immediate_block: Optional[BlockModel] = None
    message: Optional[str] = None


class CacheClearResponse(BaseModel):
    cleared_entries: int
