import threading

from blockroute.models.domain import Block
from blockroute.services.routing import worker as route_worker
from blockroute.services.routing.distance import DistanceService
from blockroute.services.routing.models import RouteResult
from blockroute.services.routing.worker import RouteWorker, handle_route_message


def _block(bid: int, minutes: int, lat: float = -22.90) -> Block:
    return Block(
        id=bid,
        name=f"Block {bid}",
        date="2026-02-14",
        start_time_label=f"{minutes // 60:02d}:{minutes % 60:02d}",
        start_time=minutes,
        lat=lat,
        lng=-43.20,
    )


def test_handle_route_message_success():
    start = _block(1, 720)
    blocks = [start, _block(2, 960, -22.91), _block(3, 1205, -22.92)]

    reply = handle_route_message(
        {"start_block": start, "all_blocks": blocks, "min_gap_minutes": 240},
        DistanceService(),
    )

    assert reply["success"] is True
    assert isinstance(reply["result"], RouteResult)
    assert reply["result"].routes[0].block_ids == (1, 2, 3)


def test_handle_route_message_reports_errors_without_partial_result():
    reply = handle_route_message({"start_block": None, "all_blocks": [], "min_gap_minutes": 60}, DistanceService())

    assert reply["success"] is False
    assert "result" not in reply
    assert reply["error"]


def test_handle_route_message_missing_field():
    reply = handle_route_message({"all_blocks": []}, DistanceService())

    assert reply == {"success": False, "error": "'start_block'"}


def test_handle_route_message_treats_bad_gap_as_zero():
    start = _block(1, 600)
    blocks = [start, _block(2, 630), _block(3, 660)]

    reply = handle_route_message(
        {"start_block": start, "all_blocks": blocks, "min_gap_minutes": float("nan")},
        DistanceService(),
    )

    assert reply["success"] is True
    assert reply["result"].routes[0].is_fallback is False


def test_worker_runs_concurrent_requests_independently():
    blocks = [_block(i, 480 + i * 30, -22.90 - i * 0.001) for i in range(1, 15)]
    distances = DistanceService()

    with RouteWorker(max_workers=4, timeout=10, distance_service=distances) as worker:
        futures = {block.id: worker.submit(block, blocks, 60) for block in blocks[:6]}
        replies = {bid: future.result(timeout=10) for bid, future in futures.items()}

    for bid, reply in replies.items():
        assert reply["success"] is True
        for route in reply["result"].routes:
            assert route.block_ids[0] == bid


def test_worker_run_reports_timeout(monkeypatch):
    release = threading.Event()

    def slow_handler(message, distance_service=None):
        release.wait(5)
        return {"success": True, "result": RouteResult()}

    monkeypatch.setattr(route_worker, "handle_route_message", slow_handler)
    worker = RouteWorker(max_workers=1, timeout=0.05, distance_service=DistanceService())
    try:
        start = _block(1, 600)
        reply = worker.run(start, [start], 60)
    finally:
        release.set()
        worker.shutdown()

    assert reply["success"] is False
    assert "timed out" in reply["error"]
