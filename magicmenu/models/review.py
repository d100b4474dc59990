"""Review ORM model."""

from sqlalchemy import Column, Integer, Text, String, TIMESTAMP, func

from magicmenu.database import Base


class Review(Base):
    """
    A customer review for a restaurant.
    Every insert/update/delete recomputes the parent restaurant's
    avg_rating and review_count in the same transaction.
    """

    __tablename__ = "reviews"

    id = Column(String(64), primary_key=True)
    restaurant_id = Column(String(64), nullable=False, index=True)
    user_id = Column(String(64), nullable=True)

    rating = Column(Integer, nullable=False)   # 1–5
    comment = Column(Text, nullable=False, server_default="")

    created_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
