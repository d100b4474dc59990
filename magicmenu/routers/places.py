"""Nearby-restaurant lookup, proxied to the places provider."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from magicmenu.config import settings
from magicmenu.services.places import DEFAULT_RADIUS_METERS, PlacesError, search_nearby

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/places", tags=["places"])


@router.get("/nearby")
async def nearby(
    lat: Optional[float] = Query(default=None, ge=-90, le=90),
    lng: Optional[float] = Query(default=None, ge=-180, le=180),
    radius: int = Query(default=DEFAULT_RADIUS_METERS, ge=1, le=50_000),
) -> dict:
    """
    Restaurants around (lat, lng).
    400 when coordinates are missing or the provider rejects the query,
    500 when no provider key is configured.
    """
    if lat is None or lng is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Latitude and longitude are required",
            headers={"X-Error-Code": "PLACES_MISSING_COORDINATES"},
        )
    if not settings.google_places_api_key:
        logger.error("GOOGLE_PLACES_API_KEY is not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Google Places API key not configured",
            headers={"X-Error-Code": "PLACES_NOT_CONFIGURED"},
        )

    try:
        results = await search_nearby(lat, lng, settings.google_places_api_key, radius=radius)
    except PlacesError as exc:
        detail = exc.message if not exc.details else f"{exc.message}: {exc.details}"
        raise HTTPException(
            status_code=exc.status_code,
            detail=detail,
            headers={"X-Error-Code": "PLACES_PROVIDER_ERROR"},
        ) from exc
    return {"results": results}
