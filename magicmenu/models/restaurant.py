"""Restaurant, Category and MenuItem ORM models."""

from sqlalchemy import (
    Column, Integer, Text, String, Float, Boolean,
    JSON, TIMESTAMP, func,
)

from magicmenu.database import Base


class Restaurant(Base):
    """
    A published restaurant.
    avg_rating and review_count are maintained by review writes, never
    edited directly.
    """

    __tablename__ = "restaurants"

    id = Column(String(64), primary_key=True)
    slug = Column(String(120), nullable=False, unique=True, index=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False, server_default="")
    phone = Column(String(40), nullable=False, server_default="")
    address = Column(Text, nullable=False, server_default="")

    logo_url = Column(Text, nullable=True)
    qr_url = Column(Text, nullable=True)   # data URL or public storage URL

    avg_rating = Column(Float, nullable=False, server_default="0")
    review_count = Column(Integer, nullable=False, server_default="0")

    owner_user_id = Column(String(64), nullable=True, index=True)

    created_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class Category(Base):
    """Menu section of a restaurant. restaurant_id is not a foreign key."""

    __tablename__ = "categories"

    id = Column(String(64), primary_key=True)
    restaurant_id = Column(String(64), nullable=False, index=True)
    name = Column(Text, nullable=False)
    sort_order = Column(Integer, nullable=False, server_default="0")
    created_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )


class MenuItem(Base):
    """A dish. Prices are integer minor units (cents)."""

    __tablename__ = "menu_items"

    id = Column(String(64), primary_key=True)
    restaurant_id = Column(String(64), nullable=False, index=True)
    category_id = Column(String(64), nullable=True, index=True)

    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False, server_default="")
    price_cents = Column(Integer, nullable=False, server_default="0")
    currency_code = Column(String(3), nullable=False, server_default="USD")
    is_active = Column(Boolean, nullable=False, server_default="1")
    image_url = Column(Text, nullable=True)

    # Comma-separated free text
    ingredients = Column(Text, nullable=False, server_default="")
    allergens = Column(Text, nullable=False, server_default="")

    # {"calories", "protein", "carbs", "fat", "fiber"}
    nutrition_info = Column(JSON, nullable=True)

    created_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
