"""Append-only document storage for session records and fraud alerts.

Two collections are used: ``user_sessions`` and ``fraud_alerts``. Records are
plain mappings keyed by snake_case field names. The store assigns the
``timestamp`` field when the caller does not supply one.
"""

import asyncio
import itertools
import logging
from collections import defaultdict
from collections.abc import Callable, Mapping, Sequence
from datetime import UTC, datetime
from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from signup_guard.api.modules.fraud.gateway import (
    RANGE_OPERATORS,
    RangeFilter,
    RecordGateway,
    build_filters,
    row_to_dict,
)
from signup_guard.api.modules.fraud.models import FraudAlertRecord, UserSession
from signup_guard.database.base import Base

logger = logging.getLogger(__name__)

USER_SESSIONS = "user_sessions"
FRAUD_ALERTS = "fraud_alerts"


class DocumentStore(Protocol):
    async def insert(self, collection: str, record: Mapping[str, Any]) -> str:
        """Append a record and return its id. Raises on failure."""
        ...

    async def query(
        self,
        collection: str,
        equals: Mapping[str, Any],
        ranges: Sequence[RangeFilter] = (),
    ) -> list[dict[str, Any]]:
        ...


def utc_now() -> datetime:
    return datetime.now(UTC)


class InMemoryDocumentStore:
    """Per-process test double for ``DocumentStore``.

    The application always wires ``SqlDocumentStore``; this one backs the unit
    tests, which inject a fixed clock.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._clock = clock
        self._collections: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()

    def records(self, collection: str) -> list[dict[str, Any]]:
        return [dict(item) for item in self._collections.get(collection, [])]

    async def insert(self, collection: str, record: Mapping[str, Any]) -> str:
        async with self._lock:
            doc_id = str(next(self._ids))
            item = dict(record)
            item.setdefault("timestamp", self._clock())
            item["id"] = doc_id
            self._collections[collection].append(item)
        return doc_id

    async def query(
        self,
        collection: str,
        equals: Mapping[str, Any],
        ranges: Sequence[RangeFilter] = (),
    ) -> list[dict[str, Any]]:
        async with self._lock:
            items = list(self._collections.get(collection, []))

        def matches(item: dict[str, Any]) -> bool:
            for field, value in equals.items():
                if item.get(field) != value:
                    return False
            for field, op, value in ranges:
                candidate = item.get(field)
                if candidate is None or not RANGE_OPERATORS[op](candidate, value):
                    return False
            return True

        return [dict(item) for item in items if matches(item)]


class SqlDocumentStore:
    """Document store on top of the SQLAlchemy tables.

    Every call runs in its own session; inserts commit immediately.
    """

    collections: dict[str, type[Base]] = {
        USER_SESSIONS: UserSession,
        FRAUD_ALERTS: FraudAlertRecord,
    }

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    def _model(self, collection: str) -> type[Base]:
        try:
            return self.collections[collection]
        except KeyError:
            raise ValueError(f"Unknown collection: {collection}") from None

    async def insert(self, collection: str, record: Mapping[str, Any]) -> str:
        model = self._model(collection)
        async with self._session_factory() as session:
            try:
                row = await RecordGateway(session, model).create(record)
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            return str(row.id)

    async def query(
        self,
        collection: str,
        equals: Mapping[str, Any],
        ranges: Sequence[RangeFilter] = (),
    ) -> list[dict[str, Any]]:
        model = self._model(collection)
        filters = build_filters(model, equals, ranges)
        async with self._session_factory() as session:
            rows = await RecordGateway(session, model).find(filters)
            return [row_to_dict(row) for row in rows]


__all__ = (
    "FRAUD_ALERTS",
    "USER_SESSIONS",
    "DocumentStore",
    "InMemoryDocumentStore",
    "RangeFilter",
    "SqlDocumentStore",
    "utc_now",
)
