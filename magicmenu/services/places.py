"""
Places service — proxies Google Places Nearby Search for restaurants.

Responses are cached per (lat, lng, radius) for 5 minutes so repeated map
refreshes don't burn provider quota.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from cachetools import TTLCache

logger = logging.getLogger(__name__)

NEARBY_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"
DEFAULT_RADIUS_METERS = 5000
REQUEST_TIMEOUT_SECONDS = 10.0

# Key  : (lat, lng, radius) rounded to ~1 m
# Value: list of provider result dicts
_cache_nearby: TTLCache = TTLCache(maxsize=2_000, ttl=300)


class PlacesError(Exception):
    """Provider answered with a non-OK status or could not be reached."""

    def __init__(self, message: str, details: Optional[str] = None, status_code: int = 400) -> None:
        super().__init__(message)
        self.message = message
        self.details = details
        self.status_code = status_code


def _cache_key(lat: float, lng: float, radius: int) -> tuple[float, float, int]:
    return (round(lat, 5), round(lng, 5), radius)


def clear_cache() -> None:
    _cache_nearby.clear()


async def search_nearby(
    lat: float,
    lng: float,
    api_key: str,
    radius: int = DEFAULT_RADIUS_METERS,
    client: Optional[httpx.AsyncClient] = None,
) -> list[dict[str, Any]]:
    """
    Return restaurants near (lat, lng) within radius metres.

    Raises PlacesError(400) on a provider status other than OK and
    PlacesError(502) when the provider cannot be reached.
    """
    key = _cache_key(lat, lng, radius)
    cached = _cache_nearby.get(key)
    if cached is not None:
        return cached

    params = {
        "location": f"{lat},{lng}",
        "radius": str(radius),
        "type": "restaurant",
        "key": api_key,
    }
    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=REQUEST_TIMEOUT_SECONDS)
    try:
        response = await client.get(NEARBY_SEARCH_URL, params=params)
        data = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("Places API request failed: %s", exc)
        raise PlacesError("Failed to fetch places data", str(exc), status_code=502) from exc
    finally:
        if owns_client:
            await client.aclose()

    status = data.get("status")
    # ZERO_RESULTS is the provider's way of saying "nothing nearby"
    if status == "ZERO_RESULTS":
        results: list[dict[str, Any]] = []
    elif status == "OK":
        results = data.get("results", [])
    else:
        logger.warning("Places API returned status %s", status)
        raise PlacesError(f"Places API error: {status}", data.get("error_message"))

    _cache_nearby[key] = results
    return results
