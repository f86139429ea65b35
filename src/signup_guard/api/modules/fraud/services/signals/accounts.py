import logging
from dataclasses import dataclass, field

from signup_guard.api.modules.fraud.exceptions import SignalUnavailableError
from signup_guard.api.modules.fraud.schema import UNKNOWN_IP
from signup_guard.api.modules.fraud.services.core import truncate_fingerprint
from signup_guard.api.modules.fraud.store import USER_SESSIONS, DocumentStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AccountLimitResult:
    exceeded: bool
    count: int
    accounts: list[str] = field(default_factory=list)


async def count_signup_accounts(
    store: DocumentStore,
    field_name: str,
    value: str,
) -> tuple[int, list[str]]:
    records = await store.query(
        USER_SESSIONS,
        equals={field_name: value, "action": "signup"},
    )
    users = {record["user_id"] for record in records}
    accounts = [record["email"] for record in records]
    return len(users), accounts


class IpAccountLimitCheck:
    def __init__(self, store: DocumentStore, limit: int = 3, fail_open: bool = True):
        self._store = store
        self._limit = limit
        self._fail_open = fail_open

    @property
    def limit(self) -> int:
        return self._limit

    async def check(self, ip: str) -> AccountLimitResult:
        if ip == UNKNOWN_IP:
            return AccountLimitResult(exceeded=False, count=0)

        try:
            count, accounts = await count_signup_accounts(self._store, "ip", ip)
        except Exception as exc:
            if not self._fail_open:
                raise SignalUnavailableError("ip_account_limit") from exc
            logger.exception("Error checking IP account limit")
            return AccountLimitResult(exceeded=False, count=0)

        exceeded = count >= self._limit
        if exceeded:
            logger.warning("IP %s has %d accounts (limit: %d)", ip, count, self._limit)
        return AccountLimitResult(exceeded=exceeded, count=count, accounts=accounts)


class DeviceAccountLimitCheck:
    def __init__(self, store: DocumentStore, limit: int = 3, fail_open: bool = True):
        self._store = store
        self._limit = limit
        self._fail_open = fail_open

    @property
    def limit(self) -> int:
        return self._limit

    async def check(self, fingerprint: str) -> AccountLimitResult:
        try:
            count, accounts = await count_signup_accounts(
                self._store, "device_fingerprint", fingerprint
            )
        except Exception as exc:
            if not self._fail_open:
                raise SignalUnavailableError("device_account_limit") from exc
            logger.exception("Error checking device account limit")
            return AccountLimitResult(exceeded=False, count=0)

        exceeded = count >= self._limit
        if exceeded:
            logger.warning(
                "Device %s has %d accounts (limit: %d)",
                truncate_fingerprint(fingerprint, 8),
                count,
                self._limit,
            )
        return AccountLimitResult(exceeded=exceeded, count=count, accounts=accounts)


__all__ = (
    "AccountLimitResult",
    "DeviceAccountLimitCheck",
    "IpAccountLimitCheck",
    "count_signup_accounts",
)
