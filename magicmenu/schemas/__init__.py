"""Pydantic schemas package."""

from magicmenu.schemas.restaurant import (
    AnalyticsSummary,
    CategoryRead,
    DishDetail,
    LogoResponse,
    MenuCategory,
    MenuItemPatch,
    MenuItemRead,
    MenuResponse,
    NutritionInfo,
    QrResponse,
    RegisterResponse,
    RestaurantCreate,
    RestaurantList,
    RestaurantRead,
)
from magicmenu.schemas.review import ReviewCreate, ReviewList, ReviewPatch, ReviewRead
from magicmenu.schemas.user import (
    ForgotPasswordRequest,
    LoginRequest,
    ResetPasswordRequest,
    RolePatch,
    SignupRequest,
    UserList,
    UserMetadata,
    UserRead,
    UserStats,
)

# Collection name → view model used to normalize records from either store
VIEW_MODELS = {
    "restaurants": RestaurantRead,
    "categories": CategoryRead,
    "menu_items": MenuItemRead,
    "reviews": ReviewRead,
    "users": UserRead,
}

__all__ = [
    "AnalyticsSummary", "CategoryRead", "DishDetail", "LogoResponse",
    "MenuCategory", "MenuItemPatch", "MenuItemRead", "MenuResponse",
    "NutritionInfo", "QrResponse", "RegisterResponse", "RestaurantCreate",
    "RestaurantList", "RestaurantRead",
    "ReviewCreate", "ReviewList", "ReviewPatch", "ReviewRead",
    "ForgotPasswordRequest", "LoginRequest", "ResetPasswordRequest",
    "RolePatch", "SignupRequest", "UserList", "UserMetadata", "UserRead",
    "UserStats", "VIEW_MODELS",
]
