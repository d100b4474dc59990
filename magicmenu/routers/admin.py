"""
Admin endpoints — user management, review moderation, analytics, demo data.
Every route requires a signed-in user whose role grants the capability.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from magicmenu.dependencies import get_mirror, get_notices, get_resolver, require_capability, require_user
from magicmenu.routers.restaurants import restaurant_not_found
from magicmenu.routers.reviews import newest_first
from magicmenu.schemas import (
    AnalyticsSummary,
    ReviewList,
    ReviewPatch,
    ReviewRead,
    RolePatch,
    UserList,
    UserRead,
    UserStats,
)
from magicmenu.services.authz import authorize, role_of
from magicmenu.services.mirror import MutationMirror
from magicmenu.services.resolver import FallbackResolver, normalize

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])

# Users who signed in within this window count as active
ACTIVE_WINDOW = timedelta(days=30)
TOP_RESTAURANTS = 5


def _not_found(detail: str, code: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=detail,
        headers={"X-Error-Code": code},
    )


def _parse_ts(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def user_stats(users: list[dict[str, Any]], now: Optional[datetime] = None) -> UserStats:
    now = now or datetime.now(timezone.utc)
    roles = Counter(role_of(u) for u in users)
    active = 0
    for user in users:
        seen = _parse_ts(user.get("last_sign_in_at"))
        if seen is not None and now - seen <= ACTIVE_WINDOW:
            active += 1
    return UserStats(
        total=len(users),
        active=active,
        owners=roles["owner"],
        customers=roles["customer"],
        admins=roles["admin"],
    )


# ── Users ────────────────────────────────────────────────────────────────────


@router.get("/users", response_model=UserList)
async def list_users(
    _: dict = Depends(require_capability("users:manage")),
    resolver: FallbackResolver = Depends(get_resolver),
    notices: list[str] = Depends(get_notices),
) -> UserList:
    users = await resolver.resolve("users")
    users.sort(key=lambda u: u.get("created_at") or "", reverse=True)
    return UserList(users=users, stats=user_stats(users), notices=notices)


@router.patch("/users/{user_id}/role", response_model=UserRead)
async def change_role(
    user_id: str,
    body: RolePatch,
    admin: dict = Depends(require_capability("users:manage")),
    resolver: FallbackResolver = Depends(get_resolver),
    mirror: MutationMirror = Depends(get_mirror),
) -> UserRead:
    user = await resolver.find_one("users", {"id": user_id}, normalized=False)
    if user is None:
        raise _not_found("User not found", "USER_NOT_FOUND")
    metadata = {**(user.get("user_metadata") or {}), "user_type": body.user_type}
    updated = await mirror.update_entity("users", user_id, {"user_metadata": metadata})
    logger.info("Admin %s set role of %s to %s", admin["id"], user_id, body.user_type)
    return UserRead(**normalize("users", updated or {**user, "user_metadata": metadata}))


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    admin: dict = Depends(require_capability("users:manage")),
    mirror: MutationMirror = Depends(get_mirror),
) -> Response:
    if user_id == admin["id"]:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account",
            headers={"X-Error-Code": "SELF_DELETE"},
        )
    if not await mirror.delete_entity("users", user_id):
        raise _not_found("User not found", "USER_NOT_FOUND")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ── Reviews ──────────────────────────────────────────────────────────────────


@router.get("/reviews", response_model=ReviewList)
async def all_reviews(
    _: dict = Depends(require_capability("reviews:moderate")),
    resolver: FallbackResolver = Depends(get_resolver),
    notices: list[str] = Depends(get_notices),
) -> ReviewList:
    reviews = await resolver.resolve("reviews")
    return ReviewList(reviews=newest_first(reviews), notices=notices)


@router.patch("/reviews/{review_id}", response_model=ReviewRead)
async def edit_review(
    review_id: str,
    body: ReviewPatch,
    _: dict = Depends(require_capability("reviews:moderate")),
    mirror: MutationMirror = Depends(get_mirror),
) -> ReviewRead:
    updated = await mirror.update_entity("reviews", review_id, body.model_dump(exclude_none=True))
    if updated is None:
        raise _not_found("Review not found", "REVIEW_NOT_FOUND")
    return ReviewRead(**normalize("reviews", updated))


@router.delete("/reviews/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(
    review_id: str,
    _: dict = Depends(require_capability("reviews:moderate")),
    mirror: MutationMirror = Depends(get_mirror),
) -> Response:
    if not await mirror.delete_entity("reviews", review_id):
        raise _not_found("Review not found", "REVIEW_NOT_FOUND")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ── Restaurants ──────────────────────────────────────────────────────────────


@router.delete("/restaurants/{restaurant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_restaurant(
    restaurant_id: str,
    user: dict = Depends(require_user),
    resolver: FallbackResolver = Depends(get_resolver),
    mirror: MutationMirror = Depends(get_mirror),
) -> Response:
    """
    Remove the restaurant record only. Its categories, dishes and reviews
    stay in the store.
    """
    restaurant = await resolver.find_one("restaurants", {"id": restaurant_id})
    if restaurant is None:
        raise restaurant_not_found()
    if not authorize(user, "restaurant:manage", restaurant):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden",
            headers={"X-Error-Code": "FORBIDDEN"},
        )
    await mirror.delete_entity("restaurants", restaurant_id)
    logger.info("User %s deleted restaurant %s", user["id"], restaurant_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ── Analytics ────────────────────────────────────────────────────────────────


@router.get("/analytics", response_model=AnalyticsSummary)
async def analytics(
    _: dict = Depends(require_capability("analytics:view")),
    resolver: FallbackResolver = Depends(get_resolver),
    notices: list[str] = Depends(get_notices),
) -> AnalyticsSummary:
    """Counts derived from the stored records; nothing is synthesized."""
    restaurants = await resolver.resolve("restaurants")
    categories = await resolver.resolve("categories")
    items = await resolver.resolve("menu_items")
    reviews = await resolver.resolve("reviews")
    users = await resolver.resolve("users")

    ratings = [r["rating"] for r in reviews]
    histogram = Counter(ratings)
    top = sorted(
        restaurants,
        key=lambda r: (r["avg_rating"], r["review_count"]),
        reverse=True,
    )[:TOP_RESTAURANTS]

    return AnalyticsSummary(
        restaurants=len(restaurants),
        categories=len(categories),
        menu_items=len(items),
        active_menu_items=sum(1 for i in items if i["is_active"]),
        reviews=len(reviews),
        users=len(users),
        average_rating=round(sum(ratings) / len(ratings), 2) if ratings else 0.0,
        ratings_histogram={str(star): histogram.get(star, 0) for star in range(1, 6)},
        top_restaurants=[
            {k: r[k] for k in ("id", "slug", "name", "avg_rating", "review_count")} for r in top
        ],
        notices=notices,
    )


# ── Demo data ────────────────────────────────────────────────────────────────


@router.post("/demo-data")
async def load_demo_data(
    _: dict = Depends(require_capability("demo:seed")),
    mirror: MutationMirror = Depends(get_mirror),
) -> dict:
    """Write the demo restaurants, menus, users and reviews into the local store."""
    if not mirror.writes_local:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Demo data is only available when the local store is in use",
            headers={"X-Error-Code": "DEMO_DATA_UNAVAILABLE"},
        )
    counts = mirror.seed_demo_dataset()
    return {"success": True, "counts": counts}
