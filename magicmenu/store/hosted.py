"""
Hosted backend — table-level access to the relational database.

Wraps async SQLAlchemy sessions behind the same record-shaped surface as the
Local Record Store: callers pass and receive plain dicts keyed by column
name, with datetimes rendered as ISO-8601 strings.

Every driver or SQL error is re-raised as BackendError so the resolver and
mirror can decide whether to degrade or propagate.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import DateTime, func, inspect, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from magicmenu.models import Category, MenuItem, Restaurant, Review, User

logger = logging.getLogger(__name__)

Record = dict[str, Any]

TABLES = {
    "restaurants": Restaurant,
    "categories": Category,
    "menu_items": MenuItem,
    "reviews": Review,
    "users": User,
}


class BackendError(Exception):
    """Raised when the hosted backend cannot complete an operation."""


def _to_record(row: Any) -> Record:
    """Render an ORM row as a plain dict."""
    out: Record = {}
    for column in row.__table__.columns:
        value = getattr(row, column.key)
        if isinstance(value, datetime):
            value = value.isoformat()
        out[column.key] = value
    return out


def _coerce(model: Any, record: Record) -> Record:
    """Keep only real columns and parse ISO strings for timestamp columns."""
    columns = {c.key: c for c in model.__table__.columns}
    values: Record = {}
    for key, value in record.items():
        column = columns.get(key)
        if column is None:
            continue
        if isinstance(column.type, DateTime) and isinstance(value, str):
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        values[key] = value
    return values


class HostedBackend:
    """Record-level CRUD over the ORM tables."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    @staticmethod
    def model_for(collection: str) -> Any:
        try:
            return TABLES[collection]
        except KeyError:
            raise BackendError(f"Unknown collection: {collection}") from None

    async def ping(self) -> bool:
        """Return True if a simple SELECT 1 succeeds."""
        try:
            async with self.session_factory() as session:
                await session.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("Hosted backend ping failed: %s", exc)
            return False

    async def select(
        self,
        collection: str,
        filters: Optional[dict[str, Any]] = None,
        limit: Optional[int] = None,
    ) -> list[Record]:
        """Equality-filtered select. Categories come back in display order."""
        model = self.model_for(collection)
        stmt = select(model)
        for key, value in (filters or {}).items():
            column = getattr(model, key, None)
            if column is None:
                raise BackendError(f"{collection} has no column {key!r}")
            stmt = stmt.where(column == value)
        if model is Category:
            stmt = stmt.order_by(Category.sort_order, Category.created_at)
        elif hasattr(model, "created_at"):
            stmt = stmt.order_by(model.created_at)
        if limit:
            stmt = stmt.limit(limit)
        try:
            async with self.session_factory() as session:
                rows = (await session.execute(stmt)).scalars().all()
        except (SQLAlchemyError, OSError) as exc:
            raise BackendError(f"Failed to query {collection}: {exc}") from exc
        return [_to_record(r) for r in rows]

    async def insert(self, collection: str, record: Record) -> Record:
        model = self.model_for(collection)
        try:
            async with self.session_factory() as session:
                row = model(**_coerce(model, record))
                session.add(row)
                await session.flush()
                if model is Review:
                    await self._refresh_rating(session, row.restaurant_id)
                await session.commit()
                await session.refresh(row)
                return _to_record(row)
        except (SQLAlchemyError, OSError, ValueError) as exc:
            raise BackendError(f"Failed to insert into {collection}: {exc}") from exc

    async def insert_many(self, collection: str, records: list[Record]) -> int:
        """Insert several rows in one transaction (sample datasets)."""
        model = self.model_for(collection)
        try:
            async with self.session_factory() as session:
                session.add_all([model(**_coerce(model, r)) for r in records])
                await session.commit()
        except (SQLAlchemyError, OSError, ValueError) as exc:
            raise BackendError(f"Failed to insert into {collection}: {exc}") from exc
        return len(records)

    async def update(self, collection: str, record_id: str, changes: Record) -> Optional[Record]:
        """Apply changes to one row. Returns None if the id is unknown."""
        model = self.model_for(collection)
        try:
            async with self.session_factory() as session:
                row = await session.get(model, record_id)
                if row is None:
                    return None
                for key, value in _coerce(model, changes).items():
                    if key != "id":
                        setattr(row, key, value)
                await session.flush()
                if model is Review:
                    await self._refresh_rating(session, row.restaurant_id)
                await session.commit()
                await session.refresh(row)
                return _to_record(row)
        except (SQLAlchemyError, OSError, ValueError) as exc:
            raise BackendError(f"Failed to update {collection}/{record_id}: {exc}") from exc

    async def delete(self, collection: str, record_id: str) -> bool:
        """Delete one row. Rows that reference it are not touched."""
        model = self.model_for(collection)
        try:
            async with self.session_factory() as session:
                row = await session.get(model, record_id)
                if row is None:
                    return False
                restaurant_id = getattr(row, "restaurant_id", None)
                await session.delete(row)
                await session.flush()
                if model is Review:
                    await self._refresh_rating(session, restaurant_id)
                await session.commit()
                return True
        except (SQLAlchemyError, OSError) as exc:
            raise BackendError(f"Failed to delete {collection}/{record_id}: {exc}") from exc

    async def table_exists(self, collection: str) -> bool:
        """Probe whether the collection's table exists in the database."""
        table_name = self.model_for(collection).__tablename__
        try:
            async with self.session_factory() as session:
                conn = await session.connection()
                return await conn.run_sync(
                    lambda sync_conn: inspect(sync_conn).has_table(table_name)
                )
        except (SQLAlchemyError, OSError) as exc:
            raise BackendError(f"Failed to inspect {table_name}: {exc}") from exc

    @staticmethod
    async def _refresh_rating(session: AsyncSession, restaurant_id: Optional[str]) -> None:
        """Recompute avg_rating/review_count from the reviews table."""
        if not restaurant_id:
            return
        avg, count = (
            await session.execute(
                select(func.avg(Review.rating), func.count(Review.id)).where(
                    Review.restaurant_id == restaurant_id
                )
            )
        ).one()
        restaurant = await session.get(Restaurant, restaurant_id)
        if restaurant is None:
            return
        restaurant.avg_rating = round(float(avg), 2) if avg is not None else 0.0
        restaurant.review_count = int(count or 0)
