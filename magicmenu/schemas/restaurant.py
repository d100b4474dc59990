"""Pydantic schemas for restaurants, categories and dishes."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class RestaurantRead(BaseModel):
    """
    Unified view model for a restaurant, whichever store it came from.
    Local demo records may carry extra keys; they are ignored.
    """

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: str
    slug: str
    name: str
    description: str = ""
    phone: str = ""
    address: str = ""
    logo_url: Optional[str] = None
    qr_url: Optional[str] = None
    avg_rating: float = 0.0
    review_count: int = 0
    owner_user_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class RestaurantCreate(BaseModel):
    """
    Body for POST /api/restaurants/register.
    Fields are optional here so that missing ones are reported as one
    validation message instead of a schema error.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    slug: Optional[str] = None


class CategoryRead(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    restaurant_id: str
    name: str
    sort_order: int = 0
    created_at: Optional[str] = None


class NutritionInfo(BaseModel):
    """Display strings; numeric input such as calories=280 becomes "280"."""

    model_config = ConfigDict(coerce_numbers_to_str=True, extra="ignore")

    calories: Optional[str] = None
    protein: Optional[str] = None
    carbs: Optional[str] = None
    fat: Optional[str] = None
    fiber: Optional[str] = None


class MenuItemRead(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    restaurant_id: str
    category_id: Optional[str] = None
    name: str
    description: str = ""
    price_cents: int = 0
    currency_code: str = "USD"
    is_active: bool = True
    image_url: Optional[str] = None
    ingredients: str = ""
    allergens: str = ""
    nutrition_info: Optional[NutritionInfo] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class MenuItemPatch(BaseModel):
    """Body for PATCH /api/restaurants/{slug}/dishes/{dish_id} — partial update."""

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    price_cents: Optional[int] = Field(default=None, ge=0)
    currency_code: Optional[str] = Field(default=None, min_length=3, max_length=3)
    is_active: Optional[bool] = None
    image_url: Optional[str] = None
    ingredients: Optional[str] = None
    allergens: Optional[str] = None
    nutrition_info: Optional[NutritionInfo] = None


class DishDetail(BaseModel):
    """Response for the dish detail endpoint."""

    restaurant: RestaurantRead
    dish: MenuItemRead
    price_display: str
    ingredient_list: list[str] = Field(default_factory=list)
    allergen_list: list[str] = Field(default_factory=list)
    notices: list[str] = Field(default_factory=list)


class MenuCategory(BaseModel):
    """A category together with its active dishes."""

    category: CategoryRead
    items: list[MenuItemRead] = Field(default_factory=list)


class MenuResponse(BaseModel):
    """Public menu page payload."""

    restaurant: RestaurantRead
    categories: list[MenuCategory] = Field(default_factory=list)
    uncategorized: list[MenuItemRead] = Field(default_factory=list)
    notices: list[str] = Field(default_factory=list)


class RestaurantList(BaseModel):
    restaurants: list[RestaurantRead]
    notices: list[str] = Field(default_factory=list)


class RegisterResponse(BaseModel):
    success: bool = True
    restaurant: RestaurantRead
    message: str
    notices: list[str] = Field(default_factory=list)


class QrResponse(BaseModel):
    qr_url: str
    encoded_url: str
    restaurant_id: str
    note: str = "QR code generated successfully!"


class LogoResponse(BaseModel):
    success: bool = True
    logo_url: str
    message: str


class AnalyticsSummary(BaseModel):
    """Counts derived from whichever store the resolver answered from."""

    restaurants: int
    categories: int
    menu_items: int
    active_menu_items: int
    reviews: int
    users: int
    average_rating: float
    ratings_histogram: dict[str, int]
    top_restaurants: list[dict[str, Any]]
    notices: list[str] = Field(default_factory=list)
