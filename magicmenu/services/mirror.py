"""
Mutation Mirror — the write path.

Write targets depend on the startup data mode:

  demo      → Local Record Store only
  live      → hosted backend only; BackendError propagates to the caller
  fallback  → hosted backend when configured (failures become a logged
              warning plus a notice), always mirrored into the local store

Nothing ever pushes local-only writes to the hosted backend later.

Derived data kept consistent by the mirror:
  - a new restaurant gets the default categories, sample dishes, sample
    reviews and a QR-code reference;
  - every review write recomputes the parent's avg_rating/review_count
    (in the local store under the store lock; the hosted backend does the
    same inside its own transaction).

Deletes never cascade: removing a restaurant leaves its categories, dishes
and reviews in place.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional, Union

from magicmenu.schemas import RestaurantCreate
from magicmenu.services.qr import build_menu_url, generate_qr_data_url
from magicmenu.services.resolver import DataMode
from magicmenu.store.hosted import BackendError, HostedBackend
from magicmenu.store.local import LocalRecordStore
from magicmenu.utils.demo_data import (
    DEFAULT_CATEGORIES,
    DEFAULT_DISHES,
    DEFAULT_REVIEWS,
    DEMO_CATEGORIES,
    DEMO_MENU_ITEMS,
    DEMO_RESTAURANTS,
    DEMO_USERS,
    FALLBACK_REVIEWER_IDS,
    PLACEHOLDER_IMAGE,
)
from magicmenu.utils.formatting import slugify

logger = logging.getLogger(__name__)

Record = dict[str, Any]

REQUIRED_RESTAURANT_FIELDS = ("name", "description", "phone", "address")

# Collections whose records carry an updated_at column
_TRACKS_UPDATES = {"restaurants", "menu_items", "reviews"}

HOSTED_WRITE_FAILED_NOTICE = "Saved locally; the menu database is unreachable right now."


class MirrorValidationError(ValueError):
    """Raised for missing fields, bad slugs and duplicate slugs."""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _ago(**delta: float) -> str:
    return (datetime.now(timezone.utc) - timedelta(**delta)).isoformat()


def _review_records(restaurant: Record, reviewer_ids: list[str]) -> list[Record]:
    """Sample reviews for a restaurant, oldest first."""
    ids = (reviewer_ids + FALLBACK_REVIEWER_IDS)[: len(DEFAULT_REVIEWS)]
    records = []
    for n, ((rating, template, days), user_id) in enumerate(zip(DEFAULT_REVIEWS, ids), start=1):
        stamp = _ago(days=days)
        records.append({
            "id": f"review-{restaurant['id']}-{n}",
            "restaurant_id": restaurant["id"],
            "user_id": user_id,
            "rating": rating,
            "comment": template.format(name=restaurant["name"]),
            "created_at": stamp,
            "updated_at": stamp,
        })
    return records


class MutationMirror:
    """Applies creates/updates/deletes to the authoritative store(s)."""

    def __init__(
        self,
        store: LocalRecordStore,
        hosted: Optional[HostedBackend],
        mode: DataMode = "fallback",
        notices: Optional[list[str]] = None,
        public_url: str = "http://localhost:3000",
    ) -> None:
        self.store = store
        self.hosted = hosted
        self.mode = mode
        self.notices: list[str] = notices if notices is not None else []
        self.public_url = public_url

    @property
    def writes_local(self) -> bool:
        return self.mode != "live"

    @property
    def writes_hosted(self) -> bool:
        return self.mode != "demo" and self.hosted is not None

    # ── Restaurants ──────────────────────────────────────────────────────────

    async def create_restaurant(
        self,
        form: Union[RestaurantCreate, Record],
        owner_user_id: Optional[str] = None,
        require_slug: bool = False,
    ) -> Record:
        """
        Validate, insert and seed a new restaurant.

        Required: name, description, phone, address, and slug when
        require_slug is set. The slug is slugify(form.slug or form.name)
        and must be unique.
        """
        data = form.model_dump() if isinstance(form, RestaurantCreate) else dict(form)
        required = REQUIRED_RESTAURANT_FIELDS
        if require_slug:
            required += ("slug",)
        missing = [f for f in required if not str(data.get(f) or "").strip()]
        if missing:
            raise MirrorValidationError(
                "All fields are required: name, description, phone, address, slug "
                f"(missing: {', '.join(missing)})"
            )
        slug = slugify(data.get("slug") or data["name"])
        if not slug:
            raise MirrorValidationError(
                "Please enter a valid restaurant name to generate a URL slug"
            )

        if self.writes_hosted:
            await self._check_hosted_slug(slug)

        now = _now()
        restaurant: Record = {
            "id": str(uuid.uuid4()),
            "slug": slug,
            "name": data["name"].strip(),
            "description": data["description"].strip(),
            "phone": data["phone"].strip(),
            "address": data["address"].strip(),
            "logo_url": None,
            "qr_url": None,
            "avg_rating": 0.0,
            "review_count": 0,
            "owner_user_id": owner_user_id,
            "created_at": now,
            "updated_at": now,
        }

        def _slug_is_free(records: list[Record]) -> None:
            if any(r.get("slug") == slug for r in records):
                raise MirrorValidationError(
                    "A restaurant with this name already exists. Please choose a different name."
                )

        restaurant = await self.create_entity("restaurants", restaurant, guard=_slug_is_free)
        logger.info("Created restaurant %s (%s) in %s mode", restaurant["id"], slug, self.mode)

        await self.seed_menu(restaurant)
        await self.seed_reviews(restaurant)

        qr_url = await generate_qr_data_url(build_menu_url(self.public_url, slug))
        updated = await self.update_entity("restaurants", restaurant["id"], {"qr_url": qr_url})
        return updated or {**restaurant, "qr_url": qr_url}

    async def _check_hosted_slug(self, slug: str) -> None:
        existing = await self._hosted("select", "restaurants", {"slug": slug})
        if existing:
            raise MirrorValidationError(
                "A restaurant with this name already exists. Please choose a different name."
            )

    async def seed_menu(self, restaurant: Record) -> tuple[list[Record], list[Record]]:
        """Default categories and sample dishes for a new restaurant."""
        rid = restaurant["id"]
        categories = []
        for n, (name, sort_order) in enumerate(DEFAULT_CATEGORIES, start=1):
            categories.append(await self.create_entity("categories", {
                "id": f"cat-{rid}-{n}",
                "restaurant_id": rid,
                "name": name,
                "sort_order": sort_order,
            }))
        items = []
        for n, dish in enumerate(DEFAULT_DISHES, start=1):
            record = {k: v for k, v in dish.items() if k != "category"}
            items.append(await self.create_entity("menu_items", {
                **record,
                "id": f"item-{rid}-{n}",
                "restaurant_id": rid,
                "category_id": f"cat-{rid}-{dish['category']}",
                "currency_code": "USD",
                "is_active": True,
                "image_url": PLACEHOLDER_IMAGE,
            }))
        logger.info("Seeded %d categories and %d dishes for %s", len(categories), len(items), rid)
        return categories, items

    async def seed_reviews(self, restaurant: Record) -> list[Record]:
        """Three sample reviews written by the first known users."""
        reviewer_ids = [u["id"] for u in await self._known_users(limit=3) if u.get("id")]
        return [
            await self.create_entity("reviews", review)
            for review in _review_records(restaurant, reviewer_ids)
        ]

    async def _known_users(self, limit: int) -> list[Record]:
        if self.writes_local:
            return self.store.read("users")[:limit]
        return (await self._hosted("select", "users", None, limit)) or []

    # ── Generic CRUD ─────────────────────────────────────────────────────────

    async def create_entity(
        self,
        collection: str,
        record: Record,
        guard: Optional[Callable[[list[Record]], None]] = None,
    ) -> Record:
        """
        Insert a record, filling id and timestamps.

        guard runs against the current local collection under the store lock
        right before the local insert; it raises to reject the write.
        """
        record = self._stamp(collection, record)
        if self.writes_local:
            with self.store.transaction():
                if guard is not None:
                    guard(self.store.read(collection))
                self.store.upsert(collection, record)
                if collection == "reviews":
                    self._refresh_local_rating(record.get("restaurant_id"))
        if self.writes_hosted:
            saved = await self._hosted("insert", collection, record)
            if saved is not None and not self.writes_local:
                return saved
        if self.writes_local:
            return self.store.get(collection, record["id"]) or record
        return record

    async def update_entity(self, collection: str, record_id: str, patch: Record) -> Optional[Record]:
        """Replace fields of one record. Returns None if no store knows the id."""
        changes = {k: v for k, v in patch.items() if k not in ("id", "created_at")}
        if collection in _TRACKS_UPDATES:
            changes["updated_at"] = _now()
        result: Optional[Record] = None
        if self.writes_local:
            with self.store.transaction():
                result = self.store.patch(collection, record_id, changes)
                if result is not None and collection == "reviews":
                    self._refresh_local_rating(result.get("restaurant_id"))
        if self.writes_hosted:
            saved = await self._hosted("update", collection, record_id, changes)
            if result is None:
                result = saved
        return result

    async def delete_entity(self, collection: str, record_id: str) -> bool:
        """Remove one record. Records that point at it are kept (no cascade)."""
        removed = False
        if self.writes_local:
            with self.store.transaction():
                existing = self.store.get(collection, record_id)
                removed = self.store.remove(collection, record_id)
                if removed and collection == "reviews" and existing:
                    self._refresh_local_rating(existing.get("restaurant_id"))
        if self.writes_hosted:
            removed = bool(await self._hosted("delete", collection, record_id)) or removed
        if removed:
            logger.info("Deleted %s/%s", collection, record_id)
        return removed

    # ── Demo dataset ─────────────────────────────────────────────────────────

    def seed_demo_dataset(self) -> dict[str, int]:
        """
        Write the demo users, restaurants, menus and reviews into the local
        store. Upserts by id, so running it twice is harmless.
        """
        now = _now()
        with self.store.transaction():
            for user in DEMO_USERS:
                seen = user["seen_hours_ago"]
                self.store.upsert("users", {
                    "id": user["id"],
                    "email": user["email"],
                    "created_at": _ago(days=user["created_days_ago"]),
                    "last_sign_in_at": _ago(hours=seen) if seen is not None else None,
                    "user_metadata": {
                        "first_name": user["first_name"],
                        "last_name": user["last_name"],
                        "user_type": user["user_type"],
                    },
                })
            for restaurant in DEMO_RESTAURANTS:
                self.store.upsert("restaurants", {
                    **restaurant,
                    "qr_url": None,
                    "created_at": now,
                    "updated_at": now,
                })
            for category in DEMO_CATEGORIES:
                self.store.upsert("categories", {**category, "created_at": now})
            for item in DEMO_MENU_ITEMS:
                self.store.upsert("menu_items", {
                    **item,
                    "currency_code": "USD",
                    "is_active": True,
                    "image_url": PLACEHOLDER_IMAGE,
                    "created_at": now,
                    "updated_at": now,
                })
            reviewer_ids = [u["id"] for u in DEMO_USERS]
            review_count = 0
            for restaurant in DEMO_RESTAURANTS:
                for review in _review_records(restaurant, reviewer_ids):
                    self.store.upsert("reviews", review)
                    review_count += 1
                self._refresh_local_rating(restaurant["id"])
        logger.info("Demo dataset written to the local store")
        return {
            "users": len(DEMO_USERS),
            "restaurants": len(DEMO_RESTAURANTS),
            "categories": len(DEMO_CATEGORIES),
            "menu_items": len(DEMO_MENU_ITEMS),
            "reviews": review_count,
        }

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _stamp(self, collection: str, record: Record) -> Record:
        stamped = dict(record)
        stamped.setdefault("id", str(uuid.uuid4()))
        now = _now()
        stamped.setdefault("created_at", now)
        if collection in _TRACKS_UPDATES:
            stamped.setdefault("updated_at", stamped["created_at"])
        return stamped

    def _refresh_local_rating(self, restaurant_id: Optional[str]) -> None:
        """Recompute a restaurant's aggregates from the local reviews. Caller holds the lock."""
        if not restaurant_id:
            return
        ratings = [
            int(r["rating"])
            for r in self.store.read("reviews")
            if r.get("restaurant_id") == restaurant_id and r.get("rating") is not None
        ]
        avg = round(sum(ratings) / len(ratings), 2) if ratings else 0.0
        self.store.patch("restaurants", restaurant_id, {
            "avg_rating": avg,
            "review_count": len(ratings),
        })

    async def _hosted(self, op: str, *args: Any) -> Any:
        """
        Run one hosted-backend call. In live mode failures propagate; otherwise
        they are logged, reported as a notice, and the call yields None.
        """
        try:
            return await getattr(self.hosted, op)(*args)
        except BackendError as exc:
            if self.mode == "live":
                raise
            logger.warning("Hosted %s on %s failed, keeping local copy: %s", op, args[0], exc)
            if HOSTED_WRITE_FAILED_NOTICE not in self.notices:
                self.notices.append(HOSTED_WRITE_FAILED_NOTICE)
            return None
