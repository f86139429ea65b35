import logging
from collections.abc import Callable
from datetime import datetime

from signup_guard.api.modules.fraud.schema import (
    UNKNOWN_IP,
    ClientEnvironment,
    SessionSnapshot,
)
from signup_guard.api.modules.fraud.services.device import get_device_info
from signup_guard.api.modules.fraud.services.fingerprint import FingerprintGenerator
from signup_guard.api.modules.fraud.services.network import (
    GeolocationClient,
    IpLookupClient,
    normalize_ip,
)
from signup_guard.api.modules.fraud.store import utc_now

logger = logging.getLogger(__name__)


class SessionInfoAggregator:
    """Builds the per-attempt session snapshot.

    Device data and fingerprint come first; IP and geolocation are best
    effort. Any failure degrades to ``ip="unknown"`` and no geolocation.
    """

    def __init__(
        self,
        ip_client: IpLookupClient,
        geo_client: GeolocationClient,
        fingerprints: FingerprintGenerator,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._ip_client = ip_client
        self._geo_client = geo_client
        self._fingerprints = fingerprints
        self._clock = clock

    async def collect(
        self,
        environment: ClientEnvironment,
        request_ip: str | None = None,
    ) -> SessionSnapshot:
        try:
            device = get_device_info(environment)
            fingerprint = self._fingerprints.generate(environment)

            ip = normalize_ip(request_ip) or await self._ip_client.resolve_client_ip()
            geolocation = (
                await self._geo_client.resolve(ip) if ip != UNKNOWN_IP else None
            )
            return SessionSnapshot(
                ip=ip,
                geolocation=geolocation,
                device=device,
                fingerprint=fingerprint,
                timestamp=self._clock().isoformat(),
            )
        except Exception:
            logger.exception("Failed to collect session info, degrading to device data")
            return SessionSnapshot(
                ip=UNKNOWN_IP,
                geolocation=None,
                device=get_device_info(environment),
                fingerprint=self._fingerprints.generate(environment),
                timestamp=self._clock().isoformat(),
            )


__all__ = ("SessionInfoAggregator",)
