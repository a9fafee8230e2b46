"""Great-circle distances between blocks with a per-pair cache."""

from __future__ import annotations

import logging
import math
from typing import Optional

from ...config import settings
from ...models.domain import Block

EARTH_RADIUS_KM = 6371.0

logger = logging.getLogger(__name__)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in km between two decimal-degree coordinates."""

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    half_d_phi = math.radians(lat2 - lat1) / 2
    half_d_lambda = math.radians(lon2 - lon1) / 2

    h = math.sin(half_d_phi) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(half_d_lambda) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def pair_key(block_a: Block, block_b: Block) -> tuple[int, int]:
    """Canonical unordered key for a block pair."""
    if block_a.id <= block_b.id:
        return (block_a.id, block_b.id)
    return (block_b.id, block_a.id)


class DistanceService:
    """Haversine distances between blocks, memoised per unordered id pair.

    Coordinates never change once a block is loaded, so an entry stays valid
    until the block set itself is replaced; callers reloading blocks must
    call :meth:`clear_cache`. Writes are idempotent, so concurrent callers
    may share one instance without locking.
    """

    def __init__(self, max_entries: Optional[int] = None) -> None:
        self.max_entries = max_entries
        self._cache: dict[tuple[int, int], float] = {}

    def distance(self, block_a: Block, block_b: Block) -> float:
        key = pair_key(block_a, block_b)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        first, second = (block_a, block_b) if block_a.id <= block_b.id else (block_b, block_a)
        value = haversine_km(first.lat, first.lng, second.lat, second.lng)
        if self.max_entries is not None and len(self._cache) >= self.max_entries:
            logger.info(f"Distance cache reached {self.max_entries} entries; resetting")
            self._cache.clear()
        self._cache[key] = value
        return value

    def clear_cache(self) -> int:
        """Drop every cached distance and return how many entries were removed."""
        dropped = len(self._cache)
        self._cache.clear()
        return dropped

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: object) -> bool:
        return key in self._cache


default_distance_service = DistanceService(max_entries=settings.distance_cache_max_entries)


def clear_distance_cache() -> int:
    """Clear the process-wide distance cache used by the HTTP service."""
    return default_distance_service.clear_cache()
