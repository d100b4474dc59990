"""
Restaurant endpoints — registration, listing, logo upload, QR codes and the
public menu payload.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from magicmenu.config import settings
from magicmenu.dependencies import (
    current_user,
    get_logo_storage,
    get_mirror,
    get_notices,
    get_resolver,
)
from magicmenu.schemas import (
    LogoResponse,
    MenuCategory,
    MenuResponse,
    QrResponse,
    RegisterResponse,
    RestaurantCreate,
    RestaurantList,
)
from magicmenu.services.mirror import MirrorValidationError, MutationMirror
from magicmenu.services.qr import build_menu_url, generate_qr_png, to_data_url
from magicmenu.services.resolver import FallbackResolver
from magicmenu.services.storage import MediaStorage, StorageError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/restaurants", tags=["restaurants"])

SEARCH_FIELDS = ("name", "description", "address")


def restaurant_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Restaurant not found",
        headers={"X-Error-Code": "RESTAURANT_NOT_FOUND"},
    )


def _bad_request(detail: str, code: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=detail,
        headers={"X-Error-Code": code},
    )


# ── Registration ─────────────────────────────────────────────────────────────


@router.post("/register", response_model=RegisterResponse)
async def register_restaurant(
    body: RestaurantCreate,
    mirror: MutationMirror = Depends(get_mirror),
    user: Optional[dict[str, Any]] = Depends(current_user),
    notices: list[str] = Depends(get_notices),
) -> RegisterResponse:
    """
    Create a restaurant with its default menu, sample reviews and QR code.
    The signed-in user, if any, becomes the owner.
    """
    try:
        restaurant = await asyncio.wait_for(
            mirror.create_restaurant(
                body, owner_user_id=user["id"] if user else None, require_slug=True
            ),
            timeout=settings.registration_timeout_seconds,
        )
    except MirrorValidationError as exc:
        raise _bad_request(str(exc), "REGISTRATION_INVALID") from exc
    except asyncio.TimeoutError as exc:
        logger.error("Registration of %r timed out", body.name)
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail="Registration timed out. Please try again.",
            headers={"X-Error-Code": "REGISTRATION_TIMEOUT"},
        ) from exc

    return RegisterResponse(
        restaurant=restaurant,
        message=f"Restaurant '{restaurant['name']}' registered successfully",
        notices=notices,
    )


# ── Listing ──────────────────────────────────────────────────────────────────


@router.get("", response_model=RestaurantList)
async def list_restaurants(
    q: Optional[str] = Query(default=None, max_length=100),
    limit: int = Query(default=20, ge=1, le=100),
    resolver: FallbackResolver = Depends(get_resolver),
    notices: list[str] = Depends(get_notices),
) -> RestaurantList:
    """All restaurants, or those whose name/description/address contain q."""
    predicate = None
    needle = (q or "").strip().lower()
    if needle:
        def predicate(record: dict[str, Any]) -> bool:
            return any(needle in str(record.get(f) or "").lower() for f in SEARCH_FIELDS)

    restaurants = await resolver.resolve("restaurants", predicate=predicate, limit=limit)
    return RestaurantList(restaurants=restaurants, notices=notices)


# ── Logo upload ──────────────────────────────────────────────────────────────


@router.post("/{restaurant_id}/logo", response_model=LogoResponse)
async def upload_logo(
    restaurant_id: str,
    logo: Optional[UploadFile] = File(default=None),
    resolver: FallbackResolver = Depends(get_resolver),
    mirror: MutationMirror = Depends(get_mirror),
    storage: MediaStorage = Depends(get_logo_storage),
) -> LogoResponse:
    """Store an image as the restaurant's logo and record its public URL."""
    restaurant = await resolver.find_one("restaurants", {"id": restaurant_id})
    if restaurant is None:
        raise restaurant_not_found()

    if logo is None or not logo.filename:
        raise _bad_request("No file provided", "LOGO_MISSING")
    if not (logo.content_type or "").startswith("image/"):
        raise _bad_request("File must be an image", "LOGO_NOT_IMAGE")

    # Read one byte past the limit so oversize files are detected without
    # buffering arbitrarily large uploads
    data = await logo.read(settings.logo_max_bytes + 1)
    if len(data) > settings.logo_max_bytes:
        limit_mb = settings.logo_max_bytes // (1024 * 1024)
        raise _bad_request(f"File size must be less than {limit_mb}MB", "LOGO_TOO_LARGE")

    ext = logo.filename.rsplit(".", 1)[-1].lower() if "." in logo.filename else "png"
    path = f"{restaurant_id}/logo.{ext}"
    try:
        logo_url = await storage.upload(path, data, logo.content_type)
    except StorageError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload logo",
            headers={"X-Error-Code": "STORAGE_FAILED"},
        ) from exc

    await mirror.update_entity("restaurants", restaurant_id, {"logo_url": logo_url})
    logger.info("Stored logo for restaurant %s at %s", restaurant_id, logo_url)
    return LogoResponse(logo_url=logo_url, message="Logo uploaded successfully")


# ── QR code ──────────────────────────────────────────────────────────────────


@router.post("/{restaurant_id}/qr", response_model=QrResponse)
async def generate_qr(
    restaurant_id: str,
    resolver: FallbackResolver = Depends(get_resolver),
    mirror: MutationMirror = Depends(get_mirror),
) -> QrResponse:
    """
    Render a QR code for the restaurant's public menu.
    Encodes the slug when the restaurant is known, otherwise the raw id.
    """
    restaurant = await resolver.find_one("restaurants", {"id": restaurant_id})
    slug = restaurant["slug"] if restaurant else restaurant_id
    menu_url = build_menu_url(settings.app_public_url, slug)

    try:
        qr_url = to_data_url(await generate_qr_png(menu_url))
    except (ValueError, OSError) as exc:
        logger.error("QR generation for %s failed: %s", restaurant_id, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate QR code",
            headers={"X-Error-Code": "QR_FAILED"},
        ) from exc

    if restaurant is not None:
        await mirror.update_entity("restaurants", restaurant_id, {"qr_url": qr_url})
    return QrResponse(qr_url=qr_url, encoded_url=menu_url, restaurant_id=restaurant_id)


# ── Public menu ──────────────────────────────────────────────────────────────


@router.get("/{slug}/menu", response_model=MenuResponse)
async def get_menu(
    slug: str,
    resolver: FallbackResolver = Depends(get_resolver),
    notices: list[str] = Depends(get_notices),
) -> MenuResponse:
    """Restaurant, its categories in display order, and their active dishes."""
    restaurant = await resolver.find_one("restaurants", {"slug": slug})
    if restaurant is None:
        raise restaurant_not_found()

    rid = restaurant["id"]
    categories = await resolver.resolve("categories", {"restaurant_id": rid})
    categories.sort(key=lambda c: c["sort_order"])  # stable: ties keep insertion order
    items = await resolver.resolve(
        "menu_items", {"restaurant_id": rid}, predicate=lambda r: r.get("is_active", True) is not False
    )

    by_category: dict[str, list[dict[str, Any]]] = {c["id"]: [] for c in categories}
    uncategorized = []
    for item in items:
        bucket = by_category.get(item.get("category_id") or "")
        (bucket if bucket is not None else uncategorized).append(item)

    return MenuResponse(
        restaurant=restaurant,
        categories=[MenuCategory(category=c, items=by_category[c["id"]]) for c in categories],
        uncategorized=uncategorized,
        notices=notices,
    )
