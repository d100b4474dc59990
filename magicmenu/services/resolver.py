"""
Fallback Resolver — the read path over the Local Record Store and the
hosted backend.

The data mode is fixed at startup (DATA_MODE):

  fallback  — demo shim. If the local collection holds ANY record, only local
              records are considered (filtered); the hosted backend is queried
              only when the local collection is empty. Strict precedence, never
              a merge: hosted records are invisible while local data exists.
  demo      — local store only.
  live      — hosted backend only.

Hosted-backend failures never reach the caller: they are logged, the result
is an empty list, and a notice is appended for the UI to show as a toast.
Every record is normalized through its collection's view model so both
sources produce the same shape.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Literal, Optional

from pydantic import ValidationError

from magicmenu.schemas import VIEW_MODELS
from magicmenu.store.hosted import BackendError, HostedBackend
from magicmenu.store.local import LocalRecordStore

logger = logging.getLogger(__name__)

DataMode = Literal["fallback", "demo", "live"]
Record = dict[str, Any]
Predicate = Callable[[Record], bool]

BACKEND_UNAVAILABLE_NOTICE = "Couldn't reach the menu database; showing what is available."


def normalize(collection: str, record: Record) -> Record:
    """Validate a raw record through its view model and return plain JSON data."""
    model = VIEW_MODELS.get(collection)
    if model is None:
        return dict(record)
    return model.model_validate(record).model_dump(mode="json")


def _matches(record: Record, filters: Optional[dict[str, Any]], predicate: Optional[Predicate]) -> bool:
    if filters:
        for key, value in filters.items():
            if record.get(key) != value:
                return False
    return predicate is None or predicate(record)


class FallbackResolver:
    """Unified read access; one instance per request collects that request's notices."""

    def __init__(
        self,
        store: LocalRecordStore,
        hosted: Optional[HostedBackend],
        mode: DataMode = "fallback",
        notices: Optional[list[str]] = None,
    ) -> None:
        self.store = store
        self.hosted = hosted
        self.mode = mode
        self.notices: list[str] = notices if notices is not None else []
        self.last_source: Optional[str] = None

    async def resolve(
        self,
        collection: str,
        filters: Optional[dict[str, Any]] = None,
        predicate: Optional[Predicate] = None,
        limit: Optional[int] = None,
        normalized: bool = True,
    ) -> list[Record]:
        """
        Return the records of a collection that match filters and predicate.

        filters are equality conditions applied by both stores; predicate is
        an extra Python-side test applied to whichever source answered.
        """
        if self.mode != "live":
            local = self.store.read(collection)
            if local or self.mode == "demo":
                self.last_source = "local"
                records = [r for r in local if _matches(r, filters, predicate)]
                return self._finish(collection, records, limit, normalized)

        records = await self._query_hosted(collection, filters)
        records = [r for r in records if predicate is None or predicate(r)]
        return self._finish(collection, records, limit, normalized)

    async def find_one(
        self,
        collection: str,
        filters: Optional[dict[str, Any]] = None,
        predicate: Optional[Predicate] = None,
        normalized: bool = True,
    ) -> Optional[Record]:
        records = await self.resolve(collection, filters, predicate, limit=1, normalized=normalized)
        return records[0] if records else None

    async def _query_hosted(self, collection: str, filters: Optional[dict[str, Any]]) -> list[Record]:
        if self.hosted is None:
            self.last_source = None
            return []
        try:
            records = await self.hosted.select(collection, filters)
        except BackendError as exc:
            logger.error("Hosted read of %s failed: %s", collection, exc)
            self.last_source = None
            self.notify(BACKEND_UNAVAILABLE_NOTICE)
            return []
        self.last_source = "hosted"
        return records

    def _finish(
        self, collection: str, records: list[Record], limit: Optional[int], normalized: bool
    ) -> list[Record]:
        if normalized:
            records = list(self._normalized(collection, records))
        if limit:
            records = records[:limit]
        return records

    @staticmethod
    def _normalized(collection: str, records: list[Record]):
        for record in records:
            try:
                yield normalize(collection, record)
            except ValidationError as exc:
                logger.warning(
                    "Skipping malformed %s record %r (%d field errors)",
                    collection,
                    record.get("id"),
                    exc.error_count(),
                )

    def notify(self, message: str) -> None:
        if message not in self.notices:
            self.notices.append(message)
