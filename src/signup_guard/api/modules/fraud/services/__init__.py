from signup_guard.api.modules.fraud.services.fingerprint import FingerprintGenerator
from signup_guard.api.modules.fraud.services.scoring import FraudScoringEngine
from signup_guard.api.modules.fraud.services.session_info import SessionInfoAggregator

__all__ = (
    "FingerprintGenerator",
    "FraudScoringEngine",
    "SessionInfoAggregator",
)
