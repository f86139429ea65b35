from signup_guard.api.modules.fraud.services.network.client import (
    GeolocationClient,
    GeolocationProvider,
    IpapiCoProvider,
    IpapiIsProvider,
    IpLookupClient,
    IpLookupProvider,
    JsonIpLookupProvider,
)
from signup_guard.api.modules.fraud.services.network.common import (
    RequestIpResolver,
    normalize_headers,
    normalize_ip,
    public_ip,
)
from signup_guard.api.modules.fraud.services.network.fallback import attempt_in_order

__all__ = (
    "GeolocationClient",
    "GeolocationProvider",
    "IpLookupClient",
    "IpLookupProvider",
    "IpapiCoProvider",
    "IpapiIsProvider",
    "JsonIpLookupProvider",
    "RequestIpResolver",
    "attempt_in_order",
    "normalize_headers",
    "normalize_ip",
    "public_ip",
)
