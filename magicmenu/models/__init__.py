"""SQLAlchemy ORM models package."""

from magicmenu.database import Base
from magicmenu.models.user import User
from magicmenu.models.restaurant import Category, MenuItem, Restaurant
from magicmenu.models.review import Review

__all__ = ["Base", "User", "Restaurant", "Category", "MenuItem", "Review"]
