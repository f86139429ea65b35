from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
import pytest

from signup_guard.api.modules.fraud.schema import ClientEnvironment
from signup_guard.api.modules.fraud.store import USER_SESSIONS, InMemoryDocumentStore

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)

CHROME_WINDOWS_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.6099.109 Safari/537.36"
)


def fixed_clock() -> datetime:
    return NOW


class FailingDocumentStore:
    """Store whose every call raises, as during a database outage."""

    async def insert(self, collection: str, record: Any) -> str:
        raise ConnectionError("database unavailable")

    async def query(self, collection: str, equals: Any, ranges: Any = ()) -> list:
        raise ConnectionError("database unavailable")


def signup_record(
    user_id: str,
    ip: str = "203.0.113.7",
    fingerprint: str = "f" * 64,
    timestamp: datetime | None = None,
    action: str = "signup",
) -> dict[str, Any]:
    return {
        "user_id": user_id,
        "email": f"{user_id}@example.com",
        "action": action,
        "ip": ip,
        "device_fingerprint": fingerprint,
        "timestamp": timestamp or NOW - timedelta(hours=1),
    }


@pytest.fixture
def environment() -> ClientEnvironment:
    return ClientEnvironment(
        user_agent=CHROME_WINDOWS_UA,
        screen_width=1920,
        screen_height=1080,
        color_depth=24,
        timezone="Europe/Berlin",
        timezone_offset_minutes=-120,
        language="en-US",
        platform="Win32",
        hardware_concurrency=8,
        max_touch_points=0,
    )


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore(clock=fixed_clock)


@pytest.fixture
def seed(store: InMemoryDocumentStore) -> Callable[..., Any]:
    async def _seed(*records: dict[str, Any]) -> None:
        for record in records:
            await store.insert(USER_SESSIONS, record)

    return _seed


def json_transport(routes: dict[str, Any]) -> httpx.MockTransport:
    """Route requests by host to a JSON body, status code or exception."""

    def handler(request: httpx.Request) -> httpx.Response:
        outcome = routes.get(request.url.host)
        if outcome is None:
            raise httpx.ConnectError("no route", request=request)
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, int):
            return httpx.Response(outcome, json={"error": True})
        return httpx.Response(200, json=outcome)

    return httpx.MockTransport(handler)
