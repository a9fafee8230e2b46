"""Block listing and search endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, status

from ...data.blocks_repository import available_dates, default_date, get_block, search_blocks
from ...schemas.blocks import AvailableDatesResponse, BlockListResponse, BlockModel

router = APIRouter(prefix="/blocks", tags=["blocks"])

logger = logging.getLogger(__name__)


def _data_unavailable(exc: Exception) -> HTTPException:
    logger.exception(f"Block data unavailable: {exc}")
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"Block data unavailable: {exc}",
    )


@router.get("", response_model=BlockListResponse, status_code=status.HTTP_200_OK)
def list_blocks(
    date: str | None = Query(default=None, description="Only blocks on this ISO date"),
    q: str | None = Query(default=None, description="Free-text search on name, location and address"),
) -> BlockListResponse:
    try:
        blocks = search_blocks(q or "", day=date)
    except (FileNotFoundError, ValueError) as exc:
        raise _data_unavailable(exc) from exc
    return BlockListResponse(
        date=date,
        query=q,
        count=len(blocks),
        blocks=[BlockModel.from_block(block) for block in blocks],
    )


@router.get("/dates", response_model=AvailableDatesResponse, status_code=status.HTTP_200_OK)
def list_dates() -> AvailableDatesResponse:
    try:
        return AvailableDatesResponse(dates=available_dates(), default_date=default_date())
    except (FileNotFoundError, ValueError) as exc:
        raise _data_unavailable(exc) from exc


@router.get("/{block_id}", response_model=BlockModel, status_code=status.HTTP_200_OK)
def read_block(block_id: int) -> BlockModel:
    try:
        block = get_block(block_id)
    except (FileNotFoundError, ValueError) as exc:
        raise _data_unavailable(exc) from exc
    if block is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Block {block_id} not found")
    return BlockModel.from_block(block)
