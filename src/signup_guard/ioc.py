from collections.abc import AsyncIterator
from datetime import timedelta

import httpx
from dishka import AsyncContainer, Provider, Scope, make_async_container, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from signup_guard.api.modules.fraud.service import SessionLoggerService
from signup_guard.api.modules.fraud.services import (
    FingerprintGenerator,
    FraudScoringEngine,
    SessionInfoAggregator,
)
from signup_guard.api.modules.fraud.services.network import (
    GeolocationClient,
    IpLookupClient,
    RequestIpResolver,
)
from signup_guard.api.modules.fraud.services.signals import (
    DeviceAccountLimitCheck,
    DisposableEmailCheck,
    IpAccountLimitCheck,
    VelocityCheck,
)
from signup_guard.api.modules.fraud.store import DocumentStore, SqlDocumentStore
from signup_guard.clients.providers import HttpClientsProvider
from signup_guard.database import build_engine, build_session_factory
from signup_guard.settings import Config, get_config


class AppProvider(Provider):
    """Application provider for dependency injection."""

    def __init__(self, config: Config | None = None):
        super().__init__()
        self._config = config

    @provide(scope=Scope.APP)
    def get_config(self) -> Config:
        return self._config or get_config()


class DatabaseProvider(Provider):
    @provide(scope=Scope.APP)
    async def get_engine(self, config: Config) -> AsyncIterator[AsyncEngine]:
        engine = build_engine(config.database_url)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(
        self,
        engine: AsyncEngine,
    ) -> async_sessionmaker[AsyncSession]:
        return build_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    @provide(scope=Scope.APP)
    def get_document_store(
        self,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> DocumentStore:
        return SqlDocumentStore(session_factory)


class ServicesProvider(Provider):
    """Services provider for dependency injection."""

    @provide(scope=Scope.APP)
    def get_request_ip_resolver(self, config: Config) -> RequestIpResolver:
        return RequestIpResolver(trust_forwarded_ip=config.fraud.trust_forwarded_ip)

    @provide(scope=Scope.APP)
    def get_fingerprint_generator(self) -> FingerprintGenerator:
        return FingerprintGenerator()

    @provide(scope=Scope.APP)
    def get_session_info_aggregator(
        self,
        ip_client: IpLookupClient,
        geo_client: GeolocationClient,
        fingerprints: FingerprintGenerator,
    ) -> SessionInfoAggregator:
        return SessionInfoAggregator(
            ip_client=ip_client,
            geo_client=geo_client,
            fingerprints=fingerprints,
        )

    @provide(scope=Scope.APP)
    def get_ip_account_limit_check(
        self,
        config: Config,
        store: DocumentStore,
    ) -> IpAccountLimitCheck:
        return IpAccountLimitCheck(
            store,
            limit=config.fraud.ip_account_limit,
            fail_open=config.fraud.fail_open,
        )

    @provide(scope=Scope.APP)
    def get_device_account_limit_check(
        self,
        config: Config,
        store: DocumentStore,
    ) -> DeviceAccountLimitCheck:
        return DeviceAccountLimitCheck(
            store,
            limit=config.fraud.device_account_limit,
            fail_open=config.fraud.fail_open,
        )

    @provide(scope=Scope.APP)
    def get_velocity_check(self, config: Config, store: DocumentStore) -> VelocityCheck:
        return VelocityCheck(
            store,
            threshold=config.fraud.velocity_threshold,
            window=timedelta(hours=config.fraud.velocity_window_hours),
            fail_open=config.fraud.fail_open,
        )

    @provide(scope=Scope.APP)
    def get_disposable_email_check(self, config: Config) -> DisposableEmailCheck:
        return DisposableEmailCheck(config.fraud.disposable_domains)

    @provide(scope=Scope.APP)
    def get_fraud_scoring_engine(
        self,
        config: Config,
        ip_check: IpAccountLimitCheck,
        device_check: DeviceAccountLimitCheck,
        velocity_check: VelocityCheck,
        email_check: DisposableEmailCheck,
    ) -> FraudScoringEngine:
        return FraudScoringEngine(
            config=config.fraud,
            ip_check=ip_check,
            device_check=device_check,
            velocity_check=velocity_check,
            email_check=email_check,
        )

    @provide(scope=Scope.APP)
    def get_session_logger(
        self,
        aggregator: SessionInfoAggregator,
        scoring: FraudScoringEngine,
        store: DocumentStore,
    ) -> SessionLoggerService:
        return SessionLoggerService(
            aggregator=aggregator,
            scoring=scoring,
            store=store,
        )


def get_async_container(
    config: Config | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncContainer:
    return make_async_container(
        AppProvider(config),
        DatabaseProvider(),
        ServicesProvider(),
        HttpClientsProvider(transport),
    )
