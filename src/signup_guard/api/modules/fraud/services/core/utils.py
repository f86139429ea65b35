from signup_guard.api.modules.fraud.schema import FraudAlert, RiskLevel

FINGERPRINT_LOG_PREFIX = 16


def risk_level_for_score(
    score: int,
    critical_threshold: int = 80,
    high_threshold: int = 60,
    medium_threshold: int = 30,
) -> RiskLevel:
    if score >= critical_threshold:
        return "critical"
    if score >= high_threshold:
        return "high"
    if score >= medium_threshold:
        return "medium"
    return "low"


def should_block_signup(alert: FraudAlert | None) -> bool:
    if alert is None:
        return False
    return alert.risk_level in ("high", "critical")


def truncate_fingerprint(fingerprint: str, length: int = FINGERPRINT_LOG_PREFIX) -> str:
    return f"{fingerprint[:length]}..."


__all__ = (
    "FINGERPRINT_LOG_PREFIX",
    "risk_level_for_score",
    "should_block_signup",
    "truncate_fingerprint",
)
