import logging
from collections.abc import Callable
from hashlib import sha256

from signup_guard.api.modules.fraud.schema import ClientEnvironment
from signup_guard.api.modules.fraud.services.device import get_device_info

logger = logging.getLogger(__name__)

Digest = Callable[[bytes], bytes]


def sha256_digest(data: bytes) -> bytes:
    return sha256(data).digest()


def fingerprint_components(environment: ClientEnvironment) -> str:
    device = get_device_info(environment)
    return "|".join(
        (
            device.user_agent,
            device.screen_resolution,
            device.color_depth,
            environment.timezone,
            device.language,
            device.platform,
            str(device.hardware_concurrency),
            str(environment.max_touch_points),
            str(environment.timezone_offset_minutes),
        )
    )


def rolling_hash(value: str) -> str:
    """31-multiplier string hash kept in signed 32-bit range."""
    acc = 0
    for char in value:
        acc = ((acc << 5) - acc + ord(char)) & 0xFFFFFFFF
    if acc >= 0x80000000:
        acc -= 0x100000000
    return format(abs(acc), "x")


class FingerprintGenerator:
    """Derives a stable per-browser identifier from a client environment.

    The digest is injectable. If it raises, the generator falls back to
    ``rolling_hash`` so a usable identifier is always produced, at the cost
    of collision resistance.
    """

    def __init__(self, digest: Digest = sha256_digest):
        self._digest = digest

    def generate(self, environment: ClientEnvironment) -> str:
        components = fingerprint_components(environment)
        try:
            return self._digest(components.encode("utf-8")).hex()
        except Exception:
            logger.exception("Fingerprint digest failed, using fallback hash")
            return rolling_hash(components)


__all__ = (
    "FingerprintGenerator",
    "fingerprint_components",
    "rolling_hash",
    "sha256_digest",
)
