"""End-to-end tests for session logging and signup blocking."""

import pytest
from conftest import FailingDocumentStore, fixed_clock, signup_record

from signup_guard.api.modules.fraud.exceptions import SignupBlockedError
from signup_guard.api.modules.fraud.service import SessionLoggerService
from signup_guard.api.modules.fraud.services import (
    FingerprintGenerator,
    FraudScoringEngine,
    SessionInfoAggregator,
)
from signup_guard.api.modules.fraud.services.network import RequestIpResolver
from signup_guard.api.modules.fraud.services.signals import (
    DeviceAccountLimitCheck,
    DisposableEmailCheck,
    IpAccountLimitCheck,
    VelocityCheck,
)
from signup_guard.api.modules.fraud.store import FRAUD_ALERTS, USER_SESSIONS
from signup_guard.settings import FraudConfig

IP = "203.0.113.7"


class StaticIpClient:
    def __init__(self, ip: str):
        self.ip = ip

    async def resolve_client_ip(self) -> str:
        return self.ip


class RotatingIpClient:
    def __init__(self):
        self.calls = 0

    async def resolve_client_ip(self) -> str:
        self.calls += 1
        return f"8.8.{self.calls}.8"


class NoGeoClient:
    async def resolve(self, ip: str) -> None:
        return None


def _service(store, ip: str = IP, ip_client=None) -> SessionLoggerService:
    aggregator = SessionInfoAggregator(
        ip_client=ip_client or StaticIpClient(ip),
        geo_client=NoGeoClient(),
        fingerprints=FingerprintGenerator(),
        clock=fixed_clock,
    )
    scoring = FraudScoringEngine(
        config=FraudConfig(),
        ip_check=IpAccountLimitCheck(store),
        device_check=DeviceAccountLimitCheck(store),
        velocity_check=VelocityCheck(store, clock=fixed_clock),
        email_check=DisposableEmailCheck(),
        clock=fixed_clock,
    )
    return SessionLoggerService(aggregator=aggregator, scoring=scoring, store=store)


@pytest.fixture
def fingerprint(environment):
    return FingerprintGenerator().generate(environment)


class TestSessionLogger:
    @pytest.mark.asyncio
    async def test_login_is_recorded_without_scoring(self, store, seed, environment):
        await seed(*(signup_record(f"user-{i}", ip=IP) for i in range(5)))

        result = await _service(store).log_user_session(
            "user-0", "user-0@example.com", "login", environment
        )

        assert result.alert is None
        assert store.records(FRAUD_ALERTS) == []
        logins = [r for r in store.records(USER_SESSIONS) if r["action"] == "login"]
        assert len(logins) == 1
        assert logins[0]["is_active"] is True

    @pytest.mark.asyncio
    async def test_session_record_has_defaults_without_geolocation(
        self, store, environment, fingerprint
    ):
        await _service(store).log_user_session(
            "new", "new@gmail.com", "signup", environment
        )

        [record] = store.records(USER_SESSIONS)
        assert record["is_active"] is False
        assert record["country"] == "Unknown"
        assert record["latitude"] == 0
        assert record["device_fingerprint"] == fingerprint
        assert record["browser"] == "Chrome"
        assert record["timestamp"] is not None

    @pytest.mark.asyncio
    async def test_medium_risk_signup_proceeds_with_alert(self, store, seed, environment):
        await seed(*(signup_record(f"user-{i}", ip=IP) for i in range(3)))

        result = await _service(store).log_user_session(
            "new", "new@gmail.com", "signup", environment
        )

        assert result.alert is not None
        assert result.alert.risk_level == "medium"
        [alert] = store.records(FRAUD_ALERTS)
        assert alert["risk_level"] == "medium"
        assert alert["details"]["risk_score"] == 40
        signups = [r for r in store.records(USER_SESSIONS) if r["user_id"] == "new"]
        assert len(signups) == 1

    @pytest.mark.asyncio
    async def test_critical_risk_signup_is_blocked(
        self, store, seed, environment, fingerprint
    ):
        await seed(
            *(signup_record(f"user-{i}", ip=IP, fingerprint=fingerprint) for i in range(3))
        )

        with pytest.raises(SignupBlockedError) as excinfo:
            await _service(store).log_user_session(
                "new", "new@gmail.com", "signup", environment
            )

        assert excinfo.value.risk_level == "critical"
        assert excinfo.value.reason == (
            "IP has 3 accounts (limit: 3); Device has 3 accounts (limit: 3)"
        )
        assert "contact support" in str(excinfo.value)
        [alert] = store.records(FRAUD_ALERTS)
        assert alert["risk_level"] == "critical"
        assert all(r["user_id"] != "new" for r in store.records(USER_SESSIONS))

    @pytest.mark.asyncio
    async def test_disposable_email_alone_is_not_alerted(self, store, environment):
        result = await _service(store).log_user_session(
            "new", "test@yopmail.com", "signup", environment
        )

        assert result.alert is None
        assert store.records(FRAUD_ALERTS) == []
        assert len(store.records(USER_SESSIONS)) == 1

    @pytest.mark.asyncio
    async def test_unknown_ip_only_device_signal_applies(
        self, store, seed, environment, fingerprint
    ):
        await seed(
            *(
                signup_record(f"user-{i}", ip="unknown", fingerprint=fingerprint)
                for i in range(3)
            )
        )

        result = await _service(store, ip="unknown").log_user_session(
            "new", "new@gmail.com", "signup", environment
        )

        assert result.alert is not None
        assert result.alert.details["risk_score"] == 40

    @pytest.mark.asyncio
    async def test_store_outage_never_blocks_auth(self, environment):
        result = await _service(FailingDocumentStore()).log_user_session(
            "new", "new@mailinator.com", "signup", environment
        )

        assert result.alert is None
        assert result.snapshot.ip == IP

    @pytest.mark.asyncio
    async def test_shared_proxy_peer_does_not_block_distinct_users(
        self, store, environment
    ):
        ip_client = RotatingIpClient()
        service = _service(store, ip_client=ip_client)
        request_ip = RequestIpResolver().resolve_headers(
            {"X-Forwarded-For": "8.8.8.8"}, "10.0.0.1"
        )

        for i in range(7):
            device = environment.model_copy(update={"screen_width": 1000 + i})
            result = await service.log_user_session(
                f"user-{i}",
                f"user-{i}@gmail.com",
                "signup",
                device,
                request_ip=request_ip,
            )
            assert result.alert is None

        assert request_ip is None
        assert ip_client.calls == 7
        assert len({r["ip"] for r in store.records(USER_SESSIONS)}) == 7
