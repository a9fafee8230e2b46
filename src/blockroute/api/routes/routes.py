"""Route suggestion endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.routing import CacheClearResponse, RouteSuggestionRequest, RouteSuggestionResponse
from ...services.routing.distance import clear_distance_cache
from ...services.routing.service import RouteGenerationError, suggest_routes

router = APIRouter(prefix="/routes", tags=["routes"])

logger = logging.getLogger(__name__)


@router.post("/suggest", response_model=RouteSuggestionResponse, status_code=status.HTTP_200_OK)
def suggest(payload: RouteSuggestionRequest) -> RouteSuggestionResponse:
    try:
        return suggest_routes(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except RouteGenerationError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to generate routes: {exc}",
        ) from exc
    except Exception as exc:
        logger.exception(f"Error suggesting routes: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to suggest routes: {str(exc)}",
        ) from exc


@router.post("/cache/clear", response_model=CacheClearResponse, status_code=status.HTTP_200_OK)
def clear_cache() -> CacheClearResponse:
    """Drop cached block-to-block distances."""
    return CacheClearResponse(cleared_entries=clear_distance_cache())
