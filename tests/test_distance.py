import math

import pytest

from blockroute.models.domain import Block
from blockroute.services.routing.distance import DistanceService, haversine_km, pair_key


def _block(bid: int, lat: float, lng: float) -> Block:
    return Block(
        id=bid,
        name=f"Block {bid}",
        date="2026-02-14",
        start_time_label="12:00",
        start_time=720,
        lat=lat,
        lng=lng,
    )


def test_haversine_known_distance():
    # Copacabana to Ipanema beach fronts, roughly 2.9 km apart.
    distance = haversine_km(-22.9711, -43.1822, -22.9868, -43.2050)
    assert distance == pytest.approx(2.9, abs=0.2)


def test_haversine_zero_for_identical_coordinates():
    assert haversine_km(-22.9, -43.2, -22.9, -43.2) == 0.0


def test_haversine_quarter_meridian():
    assert haversine_km(0.0, 0.0, 90.0, 0.0) == pytest.approx(math.pi * 6371.0 / 2)


def test_distance_is_symmetric_and_non_negative():
    service = DistanceService()
    a = _block(1, -22.9711, -43.1822)
    b = _block(2, -22.9068, -43.1729)

    assert service.distance(a, b) == service.distance(b, a)
    assert service.distance(a, b) > 0


def test_reverse_lookup_uses_one_cache_slot():
    service = DistanceService()
    a = _block(7, -22.9711, -43.1822)
    b = _block(3, -22.9068, -43.1729)

    service.distance(a, b)
    assert service.cache_size == 1
    service.distance(b, a)
    assert service.cache_size == 1
    assert (3, 7) in service
    assert pair_key(a, b) == pair_key(b, a) == (3, 7)


def test_cached_value_is_reused_and_stable_after_clear():
    service = DistanceService()
    a = _block(1, -22.9711, -43.1822)
    b = _block(2, -22.9068, -43.1729)

    first = service.distance(a, b)
    second = service.distance(b, a)
    assert first == second

    assert service.clear_cache() == 1
    assert len(service) == 0
    assert service.distance(b, a) == first


def test_cache_resets_when_bound_is_reached():
    service = DistanceService(max_entries=2)
    origin = _block(1, -22.90, -43.20)
    others = [_block(i, -22.90 + i / 100, -43.20) for i in range(2, 5)]

    for other in others:
        service.distance(origin, other)

    assert service.cache_size <= 2
    assert (1, 4) in service
