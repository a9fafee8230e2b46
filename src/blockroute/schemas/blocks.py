"""Block response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.domain import Block


class BlockModel(BaseModel):
    id: int
    name: str
    date: str
    start_time: str = Field(..., description="Start time as HH:MM.")
    end_time: Optional[str] = None
    start_minutes: int = Field(..., ge=0, description="Start time in minutes since midnight.")
    latitude: float
    longitude: float
    location: str = ""
    address: str = ""
    category: str = ""
    favorites: int = 0

    @classmethod
    def from_block(cls, block: Block) -> BlockModel:
        return cls(
            id=block.id,
            name=block.name,
            date=block.date,
            start_time=block.start_clock,
            end_time=block.end_clock,
            start_minutes=block.start_time,
            latitude=block.lat,
            longitude=block.lng,
            location=block.location,
            address=block.address,
            category=block.category,
            favorites=block.favorites,
        )


class BlockListResponse(BaseModel):
    date: Optional[str] = None
    query: Optional[str] = None
    count: int
    blocks: List[BlockModel]


class AvailableDatesResponse(BaseModel):
    dates: List[str]
    default_date: str
