"""User ORM model."""

from sqlalchemy import Column, String, Text, JSON, TIMESTAMP, func

from magicmenu.database import Base


class User(Base):
    """
    An account. The role lives in user_metadata["user_type"]
    ('customer' | 'owner' | 'admin') and is the only input to authorization.
    """

    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(Text, nullable=True)

    user_metadata = Column(JSON, nullable=False, default=dict)

    created_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )
    last_sign_in_at = Column(TIMESTAMP(timezone=True), nullable=True)
