from signup_guard.api.modules.fraud.services.core.utils import (
    risk_level_for_score,
    should_block_signup,
    truncate_fingerprint,
)

__all__ = (
    "risk_level_for_score",
    "should_block_signup",
    "truncate_fingerprint",
)
