from signup_guard.api.modules.fraud.services.signals.accounts import (
    AccountLimitResult,
    DeviceAccountLimitCheck,
    IpAccountLimitCheck,
)
from signup_guard.api.modules.fraud.services.signals.email import (
    DisposableEmailCheck,
    is_disposable_email,
)
from signup_guard.api.modules.fraud.services.signals.velocity import (
    VelocityCheck,
    VelocityResult,
)

__all__ = (
    "AccountLimitResult",
    "DeviceAccountLimitCheck",
    "DisposableEmailCheck",
    "IpAccountLimitCheck",
    "VelocityCheck",
    "VelocityResult",
    "is_disposable_email",
)
