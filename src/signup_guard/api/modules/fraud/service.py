import logging
from dataclasses import dataclass

from signup_guard.api.modules.fraud.exceptions import SignupBlockedError
from signup_guard.api.modules.fraud.schema import (
    ClientEnvironment,
    FraudAlert,
    SessionAction,
    SessionSnapshot,
    UserSessionRecord,
)
from signup_guard.api.modules.fraud.services import (
    FraudScoringEngine,
    SessionInfoAggregator,
)
from signup_guard.api.modules.fraud.services.core import should_block_signup
from signup_guard.api.modules.fraud.store import (
    FRAUD_ALERTS,
    USER_SESSIONS,
    DocumentStore,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SessionLogResult:
    snapshot: SessionSnapshot
    alert: FraudAlert | None = None


class SessionLoggerService:
    """Entry point used by the authentication flow on login and signup.

    Signups are scored before the session is stored. A high or critical
    alert raises ``SignupBlockedError`` and no session record is written.
    Storage failures are logged and never abort the caller.
    """

    def __init__(
        self,
        aggregator: SessionInfoAggregator,
        scoring: FraudScoringEngine,
        store: DocumentStore,
    ):
        self._aggregator = aggregator
        self._scoring = scoring
        self._store = store

    async def _save_alert(self, alert: FraudAlert) -> None:
        try:
            await self._store.insert(
                FRAUD_ALERTS,
                alert.model_dump(exclude={"timestamp"}),
            )
            logger.info("Fraud alert stored for %s", alert.user_id)
        except Exception:
            logger.exception("Failed to store fraud alert")

    async def _save_session(self, record: UserSessionRecord) -> None:
        try:
            await self._store.insert(USER_SESSIONS, record.model_dump())
            logger.info("Session logged for %s (%s)", record.user_id, record.action)
        except Exception:
            logger.exception("Failed to store user session, continuing auth flow")

    async def log_user_session(
        self,
        user_id: str,
        email: str,
        action: SessionAction,
        environment: ClientEnvironment,
        request_ip: str | None = None,
    ) -> SessionLogResult:
        logger.info("Logging %s session for %s", action, user_id)
        snapshot = await self._aggregator.collect(environment, request_ip=request_ip)
        logger.debug(
            "Session info collected",
            extra={
                "ip": snapshot.ip,
                "browser": snapshot.device.browser,
                "os": snapshot.device.os,
                "country": snapshot.geolocation.country if snapshot.geolocation else None,
            },
        )

        alert: FraudAlert | None = None
        if action == "signup":
            alert = await self._scoring.evaluate(
                user_id=user_id,
                email=email,
                ip=snapshot.ip,
                fingerprint=snapshot.fingerprint,
            )
            if alert is not None:
                await self._save_alert(alert)
                if should_block_signup(alert):
                    logger.error("Signup blocked, %s risk: %s", alert.risk_level, alert.reason)
                    raise SignupBlockedError(alert.reason, alert.risk_level)
                logger.warning("Suspicious signup allowed: %s", alert.reason)

        record = UserSessionRecord.from_snapshot(user_id, email, action, snapshot)
        await self._save_session(record)
        return SessionLogResult(snapshot=snapshot, alert=alert)


__all__ = ("SessionLogResult", "SessionLoggerService")
