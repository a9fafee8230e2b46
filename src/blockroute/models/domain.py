"""Domain models for festival block records."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class Block:
    """A scheduled street-festival block, enriched once at load time.

    ``start_time``/``end_time`` are minutes since midnight parsed from the
    ``HH:MM`` labels, and ``searchable_text`` is the normalized name,
    location and address used by text search.
    """

    id: int
    name: str
    date: str
    start_time_label: str
    start_time: int
    lat: float
    lng: float
    location: str = ""
    address: str = ""
    category: str = ""
    favorites: int = 0
    end_time_label: Optional[str] = None
    end_time: Optional[int] = None
    searchable_text: str = ""

    @property
    def start_clock(self) -> str:
        return clock_label(self.start_time)

    @property
    def end_clock(self) -> Optional[str]:
        return clock_label(self.end_time) if self.end_time is not None else None


def clock_label(minutes: int) -> str:
    """Format minutes since midnight as ``HH:MM``."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
