"""Dish detail and dish editing endpoints."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from magicmenu.dependencies import get_mirror, get_notices, get_resolver, require_user
from magicmenu.routers.restaurants import restaurant_not_found
from magicmenu.schemas import DishDetail, MenuItemPatch
from magicmenu.services.authz import authorize
from magicmenu.services.mirror import MutationMirror
from magicmenu.services.resolver import FallbackResolver, normalize
from magicmenu.utils.formatting import format_price, split_list

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/restaurants", tags=["dishes"])


def _dish_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Dish not found",
        headers={"X-Error-Code": "DISH_NOT_FOUND"},
    )


async def _load(
    resolver: FallbackResolver, slug: str, dish_id: str
) -> tuple[dict[str, Any], dict[str, Any]]:
    restaurant = await resolver.find_one("restaurants", {"slug": slug})
    if restaurant is None:
        raise restaurant_not_found()
    dish = await resolver.find_one("menu_items", {"id": dish_id, "restaurant_id": restaurant["id"]})
    if dish is None:
        raise _dish_not_found()
    return restaurant, dish


def _detail(restaurant: dict[str, Any], dish: dict[str, Any], notices: list[str]) -> DishDetail:
    return DishDetail(
        restaurant=restaurant,
        dish=dish,
        price_display=format_price(dish.get("price_cents"), dish.get("currency_code") or "USD"),
        ingredient_list=split_list(dish.get("ingredients")),
        allergen_list=split_list(dish.get("allergens")),
        notices=notices,
    )


@router.get("/{slug}/dishes/{dish_id}", response_model=DishDetail)
async def get_dish(
    slug: str,
    dish_id: str,
    resolver: FallbackResolver = Depends(get_resolver),
    notices: list[str] = Depends(get_notices),
) -> DishDetail:
    """One dish with its formatted price and split ingredient/allergen lists."""
    restaurant, dish = await _load(resolver, slug, dish_id)
    return _detail(restaurant, dish, notices)


@router.patch("/{slug}/dishes/{dish_id}", response_model=DishDetail)
async def update_dish(
    slug: str,
    dish_id: str,
    body: MenuItemPatch,
    user: dict[str, Any] = Depends(require_user),
    resolver: FallbackResolver = Depends(get_resolver),
    mirror: MutationMirror = Depends(get_mirror),
    notices: list[str] = Depends(get_notices),
) -> DishDetail:
    """Partial update by the restaurant's owner or an admin."""
    restaurant, dish = await _load(resolver, slug, dish_id)
    if not authorize(user, "dish:edit", restaurant):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the restaurant owner can edit its dishes",
            headers={"X-Error-Code": "FORBIDDEN"},
        )

    changes = body.model_dump(exclude_none=True)
    if not changes:
        return _detail(restaurant, dish, notices)

    updated = await mirror.update_entity("menu_items", dish_id, changes)
    if updated is None:
        raise _dish_not_found()
    logger.info("Dish %s updated by %s: %s", dish_id, user.get("id"), sorted(changes))
    return _detail(restaurant, normalize("menu_items", updated), notices)
