import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from signup_guard.api.modules.fraud.exceptions import SignalUnavailableError
from signup_guard.api.modules.fraud.schema import UNKNOWN_IP
from signup_guard.api.modules.fraud.store import (
    USER_SESSIONS,
    DocumentStore,
    RangeFilter,
    utc_now,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class VelocityResult:
    suspicious: bool
    recent_count: int


class VelocityCheck:
    """Counts signups from one IP inside a trailing time window."""

    def __init__(
        self,
        store: DocumentStore,
        threshold: int = 5,
        window: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = utc_now,
        fail_open: bool = True,
    ):
        self._store = store
        self._threshold = threshold
        self._window = window
        self._clock = clock
        self._fail_open = fail_open

    @property
    def window_hours(self) -> int:
        return int(self._window.total_seconds() // 3600)

    async def check(self, ip: str) -> VelocityResult:
        if ip == UNKNOWN_IP:
            return VelocityResult(suspicious=False, recent_count=0)

        cutoff = self._clock() - self._window
        try:
            records = await self._store.query(
                USER_SESSIONS,
                equals={"ip": ip, "action": "signup"},
                ranges=[RangeFilter("timestamp", ">=", cutoff)],
            )
        except Exception as exc:
            if not self._fail_open:
                raise SignalUnavailableError("velocity") from exc
            logger.exception("Error checking signup velocity")
            return VelocityResult(suspicious=False, recent_count=0)

        recent_count = len(records)
        suspicious = recent_count >= self._threshold
        if suspicious:
            logger.warning(
                "Rapid signup velocity detected: %d signups from %s in %d hours",
                recent_count,
                ip,
                self.window_hours,
            )
        return VelocityResult(suspicious=suspicious, recent_count=recent_count)


__all__ = ("VelocityCheck", "VelocityResult")
