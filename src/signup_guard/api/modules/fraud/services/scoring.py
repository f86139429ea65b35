import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from signup_guard.api.modules.fraud.exceptions import SignalUnavailableError
from signup_guard.api.modules.fraud.schema import FraudAlert, RiskLevel
from signup_guard.api.modules.fraud.services.core import (
    risk_level_for_score,
    truncate_fingerprint,
)
from signup_guard.api.modules.fraud.services.signals import (
    DeviceAccountLimitCheck,
    DisposableEmailCheck,
    IpAccountLimitCheck,
    VelocityCheck,
)
from signup_guard.api.modules.fraud.store import utc_now
from signup_guard.settings import FraudConfig

logger = logging.getLogger(__name__)


class FraudScoringEngine:
    """Combines the four risk signals into a score and an optional alert.

    Weights are additive and the sum is not clamped, so the maximum is the
    sum of all weights (130 with the defaults). No alert is produced below
    ``alert_score_threshold``.
    """

    def __init__(
        self,
        config: FraudConfig,
        ip_check: IpAccountLimitCheck,
        device_check: DeviceAccountLimitCheck,
        velocity_check: VelocityCheck,
        email_check: DisposableEmailCheck,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._config = config
        self._ip_check = ip_check
        self._device_check = device_check
        self._velocity_check = velocity_check
        self._email_check = email_check
        self._clock = clock

    def risk_level(self, score: int) -> RiskLevel:
        return risk_level_for_score(
            score,
            critical_threshold=self._config.critical_score_threshold,
            high_threshold=self._config.high_score_threshold,
            medium_threshold=self._config.alert_score_threshold,
        )

    async def evaluate(
        self,
        user_id: str,
        email: str,
        ip: str,
        fingerprint: str,
    ) -> FraudAlert | None:
        logger.debug("Running fraud detection checks for %s", user_id)

        try:
            async with asyncio.TaskGroup() as group:
                ip_task = group.create_task(self._ip_check.check(ip))
                device_task = group.create_task(self._device_check.check(fingerprint))
                velocity_task = group.create_task(self._velocity_check.check(ip))
        except* SignalUnavailableError as errors:
            # siblings are already cancelled and joined by the task group
            raise errors.exceptions[0]

        ip_result = ip_task.result()
        device_result = device_task.result()
        velocity_result = velocity_task.result()
        disposable = self._email_check.check(email)

        score = 0
        reasons: list[str] = []
        details: dict[str, Any] = {}

        if ip_result.exceeded:
            score += self._config.ip_limit_weight
            reasons.append(
                f"IP has {ip_result.count} accounts (limit: {self._ip_check.limit})"
            )
            details["ip_accounts"] = ip_result.accounts

        if device_result.exceeded:
            score += self._config.device_limit_weight
            reasons.append(
                f"Device has {device_result.count} accounts "
                f"(limit: {self._device_check.limit})"
            )
            details["device_accounts"] = device_result.accounts

        if velocity_result.suspicious:
            score += self._config.velocity_weight
            reasons.append(
                f"{velocity_result.recent_count} signups in "
                f"{self._velocity_check.window_hours} hours"
            )
            details["velocity_count"] = velocity_result.recent_count

        if disposable:
            score += self._config.disposable_email_weight
            reasons.append("Disposable email domain detected")
            details["disposable_email"] = True

        if score < self._config.alert_score_threshold:
            logger.info("No fraud detected (risk score: %d)", score)
            return None

        risk_level = self.risk_level(score)
        logger.warning("Fraud alert: %s risk (score: %d)", risk_level, score)

        return FraudAlert(
            user_id=user_id,
            email=email,
            risk_level=risk_level,
            reason="; ".join(reasons),
            details={
                **details,
                "risk_score": score,
                "ip": ip,
                "fingerprint": truncate_fingerprint(fingerprint),
            },
            timestamp=self._clock(),
        )


__all__ = ("FraudScoringEngine",)
