"""HTTP clients provider for dependency injection."""

from collections.abc import AsyncIterator

import httpx
from dishka import Provider, Scope, provide

from signup_guard.api.modules.fraud.services.network import (
    GeolocationClient,
    IpapiCoProvider,
    IpapiIsProvider,
    IpLookupClient,
    JsonIpLookupProvider,
)
from signup_guard.settings import Config


class HttpClientsProvider(Provider):
    """Provider for the shared httpx client and the IP/geolocation clients.

    A single ``httpx.AsyncClient`` lives for the APP scope so connections are
    pooled across lookups. Per-attempt deadlines are enforced by the lookup
    clients themselves; the client-level timeout only caps a stray request.

    ``transport`` lets tests route every request to an ``httpx.MockTransport``.
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        super().__init__()
        self._transport = transport

    @provide(scope=Scope.APP)
    async def get_httpx_client(self) -> AsyncIterator[httpx.AsyncClient]:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(10.0),
            limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            yield client

    @provide(scope=Scope.APP)
    def get_ip_lookup_client(
        self,
        client: httpx.AsyncClient,
        config: Config,
    ) -> IpLookupClient:
        providers = [
            JsonIpLookupProvider(url=item.url, key=item.key)
            for item in config.resolver.ip_lookup_providers
        ]
        return IpLookupClient(
            client,
            providers,
            timeout_seconds=config.resolver.ip_lookup_timeout_seconds,
        )

    @provide(scope=Scope.APP)
    def get_geolocation_client(
        self,
        client: httpx.AsyncClient,
        config: Config,
    ) -> GeolocationClient:
        providers = [
            IpapiCoProvider(config.resolver.ipapi_co_base_url),
            IpapiIsProvider(config.resolver.ipapi_is_base_url),
        ]
        return GeolocationClient(
            client,
            providers,
            timeout_seconds=config.resolver.geolocation_timeout_seconds,
        )
