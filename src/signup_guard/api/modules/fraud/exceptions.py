from signup_guard.api.modules.fraud.schema import RiskLevel


class SignupBlockedError(Exception):
    """Raised when a signup scores high or critical risk.

    The authentication flow must not create the account.
    """

    def __init__(self, reason: str, risk_level: RiskLevel):
        self.reason = reason
        self.risk_level = risk_level
        super().__init__(
            f"Account creation blocked: {reason}. "
            "Please contact support if you believe this is an error."
        )


class SignalUnavailableError(Exception):
    """A fail-closed evaluator could not read session history."""

    def __init__(self, signal: str):
        self.signal = signal
        super().__init__(f"Risk signal '{signal}' is unavailable")


__all__ = ("SignalUnavailableError", "SignupBlockedError")
