import logging
from collections.abc import Sequence
from typing import Any, Protocol

import httpx

from signup_guard.api.modules.fraud.schema import UNKNOWN_IP, GeolocationInfo
from signup_guard.api.modules.fraud.services.network.common import normalize_ip
from signup_guard.api.modules.fraud.services.network.fallback import attempt_in_order

logger = logging.getLogger(__name__)


def _parse_float(value: object) -> float:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0


def _text(value: object) -> str:
    if isinstance(value, str) and value:
        return value
    return "Unknown"


def _json_object(response: httpx.Response) -> dict[str, Any]:
    response.raise_for_status()
    data = response.json()
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object")
    if data.get("error"):
        raise ValueError(f"Provider reported an error: {data.get('reason')}")
    return data


class IpLookupProvider(Protocol):
    async def lookup(self, client: httpx.AsyncClient) -> str | None:
        ...


class JsonIpLookupProvider:
    """Public-IP echo service answering a JSON object with the IP under ``key``."""

    def __init__(self, url: str, key: str = "ip"):
        self.url = url
        self.key = key

    def __str__(self) -> str:
        return self.url

    async def lookup(self, client: httpx.AsyncClient) -> str | None:
        data = _json_object(await client.get(self.url))
        value = data.get(self.key)
        if not isinstance(value, str):
            return None
        return normalize_ip(value)


class GeolocationProvider(Protocol):
    def url_for(self, ip: str) -> str:
        ...

    def parse(self, data: dict[str, Any], ip: str) -> GeolocationInfo:
        ...


class IpapiCoProvider:
    def __init__(self, base_url: str = "https://ipapi.co"):
        self.base_url = base_url.rstrip("/")

    def __str__(self) -> str:
        return self.base_url

    def url_for(self, ip: str) -> str:
        return f"{self.base_url}/{ip}/json/"

    def parse(self, data: dict[str, Any], ip: str) -> GeolocationInfo:
        return GeolocationInfo(
            ip=data.get("ip") or ip,
            country=_text(data.get("country_name")),
            region=_text(data.get("region")),
            city=_text(data.get("city")),
            timezone=_text(data.get("timezone")),
            isp=_text(data.get("org")),
            latitude=_parse_float(data.get("latitude")),
            longitude=_parse_float(data.get("longitude")),
        )


class IpapiIsProvider:
    def __init__(self, base_url: str = "https://ipapi.is"):
        self.base_url = base_url.rstrip("/")

    def __str__(self) -> str:
        return self.base_url

    def url_for(self, ip: str) -> str:
        return f"{self.base_url}/?q={ip}"

    def parse(self, data: dict[str, Any], ip: str) -> GeolocationInfo:
        location = data.get("location") or {}
        company = data.get("company") or {}
        return GeolocationInfo(
            ip=data.get("ip") or ip,
            country=_text(location.get("country")),
            region=_text(location.get("state")),
            city=_text(location.get("city")),
            timezone=_text(location.get("timezone")),
            isp=_text(company.get("name")),
            latitude=_parse_float(location.get("latitude")),
            longitude=_parse_float(location.get("longitude")),
        )


class IpLookupClient:
    def __init__(
        self,
        client: httpx.AsyncClient,
        providers: Sequence[IpLookupProvider],
        timeout_seconds: float = 3.0,
    ):
        self._client = client
        self._providers = list(providers)
        self._timeout = timeout_seconds

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    async def resolve_client_ip(self) -> str:
        ip = await attempt_in_order(
            self._providers,
            lambda provider: provider.lookup(self._client),
            timeout_seconds=self._timeout,
            label="IP lookup",
        )
        if ip is None:
            return UNKNOWN_IP
        logger.debug("Client IP resolved: %s", ip)
        return ip


class GeolocationClient:
    def __init__(
        self,
        client: httpx.AsyncClient,
        providers: Sequence[GeolocationProvider],
        timeout_seconds: float = 5.0,
    ):
        self._client = client
        self._providers = list(providers)
        self._timeout = timeout_seconds

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    async def resolve(self, ip: str) -> GeolocationInfo | None:
        if not ip or ip == UNKNOWN_IP:
            return None

        async def fetch(provider: GeolocationProvider) -> GeolocationInfo:
            response = await self._client.get(provider.url_for(ip))
            return provider.parse(_json_object(response), ip)

        return await attempt_in_order(
            self._providers,
            fetch,
            timeout_seconds=self._timeout,
            label="Geolocation",
        )


__all__ = (
    "GeolocationClient",
    "GeolocationProvider",
    "IpLookupClient",
    "IpLookupProvider",
    "IpapiCoProvider",
    "IpapiIsProvider",
    "JsonIpLookupProvider",
)
