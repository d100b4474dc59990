"""Public review endpoints. Moderation lives in the admin router."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from magicmenu.dependencies import get_mirror, get_notices, get_resolver, require_user
from magicmenu.routers.restaurants import restaurant_not_found
from magicmenu.schemas import ReviewCreate, ReviewList, ReviewRead
from magicmenu.services.authz import authorize
from magicmenu.services.mirror import MutationMirror
from magicmenu.services.resolver import FallbackResolver, normalize

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/restaurants", tags=["reviews"])


def newest_first(reviews: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return sorted(reviews, key=lambda r: r.get("created_at") or "", reverse=True)


@router.get("/{restaurant_id}/reviews", response_model=ReviewList)
async def list_reviews(
    restaurant_id: str,
    resolver: FallbackResolver = Depends(get_resolver),
    notices: list[str] = Depends(get_notices),
) -> ReviewList:
    reviews = await resolver.resolve("reviews", {"restaurant_id": restaurant_id})
    return ReviewList(reviews=newest_first(reviews), notices=notices)


@router.post(
    "/{restaurant_id}/reviews",
    response_model=ReviewRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_review(
    restaurant_id: str,
    body: ReviewCreate,
    user: dict[str, Any] = Depends(require_user),
    resolver: FallbackResolver = Depends(get_resolver),
    mirror: MutationMirror = Depends(get_mirror),
) -> ReviewRead:
    """Add a review; the restaurant's avg_rating/review_count follow."""
    if not authorize(user, "review:write"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden",
            headers={"X-Error-Code": "FORBIDDEN"},
        )
    if await resolver.find_one("restaurants", {"id": restaurant_id}) is None:
        raise restaurant_not_found()

    review = await mirror.create_entity("reviews", {
        "restaurant_id": restaurant_id,
        "user_id": user["id"],
        "rating": body.rating,
        "comment": body.comment.strip(),
    })
    logger.info("User %s reviewed %s (%d stars)", user["id"], restaurant_id, body.rating)
    return ReviewRead(**normalize("reviews", review))
