"""Tests for the document stores."""

from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from conftest import NOW, signup_record

from signup_guard.api.modules.fraud.store import (
    FRAUD_ALERTS,
    USER_SESSIONS,
    InMemoryDocumentStore,
    RangeFilter,
    SqlDocumentStore,
)
from signup_guard.database import Base, build_engine, build_session_factory

SESSION_DEFAULTS = {
    "is_active": False,
    "browser": "Chrome",
    "browser_version": "120.0",
    "os": "Windows",
    "os_version": "10/11",
    "device": "Desktop",
    "screen_resolution": "1920x1080",
    "color_depth": "24-bit",
    "language": "en-US",
    "platform": "Win32",
    "hardware_concurrency": 8,
    "user_agent": "Mozilla/5.0",
}


def full_record(user_id: str, **overrides) -> dict:
    return {**SESSION_DEFAULTS, **signup_record(user_id, **overrides)}


@pytest_asyncio.fixture
async def sql_store(tmp_path):
    # Import models so Base.metadata knows about them
    import signup_guard.api.modules.fraud.models  # noqa: F401

    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield SqlDocumentStore(build_session_factory(engine))
    await engine.dispose()


class TestInMemoryDocumentStore:
    @pytest.mark.asyncio
    async def test_insert_assigns_id_and_timestamp(self, store):
        doc_id = await store.insert(USER_SESSIONS, {"user_id": "u1"})

        [record] = store.records(USER_SESSIONS)
        assert record["id"] == doc_id
        assert record["timestamp"] == NOW

    @pytest.mark.asyncio
    async def test_query_applies_equality_and_range(self, store):
        await store.insert(USER_SESSIONS, signup_record("u1", timestamp=NOW))
        await store.insert(
            USER_SESSIONS, signup_record("u2", timestamp=NOW - timedelta(days=2))
        )
        await store.insert(USER_SESSIONS, signup_record("u3", ip="198.51.100.1"))

        records = await store.query(
            USER_SESSIONS,
            equals={"ip": "203.0.113.7"},
            ranges=[RangeFilter("timestamp", ">=", NOW - timedelta(days=1))],
        )

        assert [r["user_id"] for r in records] == ["u1"]

    @pytest.mark.asyncio
    async def test_collections_are_separate(self, store):
        await store.insert(FRAUD_ALERTS, {"user_id": "u1"})

        assert await store.query(USER_SESSIONS, equals={"user_id": "u1"}) == []


class TestSqlDocumentStore:
    @pytest.mark.asyncio
    async def test_insert_and_query_sessions(self, sql_store):
        await sql_store.insert(USER_SESSIONS, full_record("u1"))
        await sql_store.insert(USER_SESSIONS, full_record("u2"))
        await sql_store.insert(USER_SESSIONS, full_record("u3", action="login"))

        records = await sql_store.query(
            USER_SESSIONS,
            equals={"ip": "203.0.113.7", "action": "signup"},
        )

        assert sorted(r["user_id"] for r in records) == ["u1", "u2"]
        assert records[0]["email"].endswith("@example.com")

    @pytest.mark.asyncio
    async def test_timestamp_range(self, sql_store):
        now = datetime.now(UTC)
        await sql_store.insert(
            USER_SESSIONS, full_record("recent", timestamp=now - timedelta(hours=2))
        )
        await sql_store.insert(
            USER_SESSIONS, full_record("old", timestamp=now - timedelta(hours=30))
        )

        records = await sql_store.query(
            USER_SESSIONS,
            equals={"action": "signup"},
            ranges=[RangeFilter("timestamp", ">=", now - timedelta(hours=24))],
        )

        assert [r["user_id"] for r in records] == ["recent"]

    @pytest.mark.asyncio
    async def test_server_assigns_timestamp(self, sql_store):
        record = full_record("u1")
        del record["timestamp"]

        doc_id = await sql_store.insert(USER_SESSIONS, record)
        [stored] = await sql_store.query(USER_SESSIONS, equals={"user_id": "u1"})

        assert stored["id"] == int(doc_id)
        assert stored["timestamp"] is not None

    @pytest.mark.asyncio
    async def test_alert_details_round_trip_as_json(self, sql_store):
        await sql_store.insert(
            FRAUD_ALERTS,
            {
                "user_id": "u1",
                "email": "u1@example.com",
                "risk_level": "medium",
                "reason": "IP has 3 accounts (limit: 3)",
                "details": {"risk_score": 40, "ip_accounts": ["a@x.com"]},
            },
        )

        [alert] = await sql_store.query(FRAUD_ALERTS, equals={"risk_level": "medium"})

        assert alert["details"]["ip_accounts"] == ["a@x.com"]

    @pytest.mark.asyncio
    async def test_unknown_collection_is_rejected(self, sql_store):
        with pytest.raises(ValueError):
            await sql_store.query("payments", equals={})
