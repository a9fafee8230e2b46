"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/data", status_code=status.HTTP_200_OK)
def health_data() -> dict:
    """Report whether the block dataset can be loaded."""
    from ...data.blocks_repository import load_blocks

    try:
        blocks = load_blocks()
    except (FileNotFoundError, ValueError) as exc:
        return {"source": str(settings.blocks_file), "healthy": False, "error": str(exc)}
    return {"source": str(settings.blocks_file), "healthy": True, "blocks": len(blocks)}
