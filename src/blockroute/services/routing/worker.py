"""Background execution of the route engine behind a message envelope."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Mapping, Optional, Sequence

from ...config import settings
from ...models.domain import Block
from .distance import DistanceService, default_distance_service
from .selector import generate_routes_from_start

DEFAULT_ERROR_MESSAGE = "Failed to generate routes"

logger = logging.getLogger(__name__)


def handle_route_message(
    message: Mapping[str, Any],
    distance_service: Optional[DistanceService] = None,
) -> dict:
    """Run one engine call and wrap the outcome.

    Replies ``{"success": True, "result": RouteResult}`` or
    ``{"success": False, "error": message}``; a failure never carries a
    partial result.
    """
    try:
        result = generate_routes_from_start(
            message["start_block"],
            message["all_blocks"],
            message.get("min_gap_minutes", 0),
            distance_service=distance_service or default_distance_service,
            max_routes=message.get("max_routes", settings.max_routes),
            max_pairs=message.get("max_pairs", settings.max_pairs_considered),
        )
    except Exception as exc:
        logger.exception(f"Route generation failed: {exc}")
        return {"success": False, "error": str(exc) or DEFAULT_ERROR_MESSAGE}
    return {"success": True, "result": result}


class RouteWorker:
    """Thread pool that runs route generation off the caller's thread."""

    def __init__(
        self,
        max_workers: int | None = None,
        timeout: float | None = None,
        distance_service: DistanceService | None = None,
    ) -> None:
        self.max_workers = max_workers or settings.worker_max_workers
        self.timeout = timeout if timeout is not None else settings.worker_timeout_seconds
        self.distance_service = distance_service or default_distance_service
        self._executor = ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="route-worker"
        )

    def submit(self, start_block: Block, all_blocks: Sequence[Block], min_gap_minutes: Any) -> Future:
        message = {
            "start_block": start_block,
            "all_blocks": tuple(all_blocks),
            "min_gap_minutes": min_gap_minutes,
        }
        return self._executor.submit(handle_route_message, message, self.distance_service)

    def run(self, start_block: Block, all_blocks: Sequence[Block], min_gap_minutes: Any) -> dict:
        """Submit a request and wait for its envelope, up to the configured timeout."""
        future = self.submit(start_block, all_blocks, min_gap_minutes)
        try:
            return future.result(timeout=self.timeout)
        except FutureTimeoutError:
            logger.warning(f"Route generation for block {start_block.id} timed out after {self.timeout}s")
            return {"success": False, "error": f"Route generation timed out after {self.timeout}s"}

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> RouteWorker:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()
