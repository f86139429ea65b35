from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from signup_guard.api.common.schema import PaginationParams

SessionAction = Literal["login", "signup"]
RiskLevel = Literal["low", "medium", "high", "critical"]

UNKNOWN_IP = "unknown"


class ClientEnvironment(BaseModel):
    """Browser and runtime characteristics reported by the client."""

    user_agent: str = Field(..., min_length=1, max_length=2048)
    screen_width: int = Field(..., ge=0, le=10000)
    screen_height: int = Field(..., ge=0, le=10000)
    color_depth: int = Field(default=24, ge=0, le=64)
    timezone: str = Field(default="UTC", max_length=128)
    timezone_offset_minutes: int = Field(default=0, ge=-840, le=840)
    language: str = Field(default="", max_length=32)
    platform: str = Field(default="", max_length=128)
    hardware_concurrency: int = Field(default=0, ge=0, le=256)
    max_touch_points: int = Field(default=0, ge=0, le=64)

    model_config = ConfigDict(extra="forbid", frozen=True)


class DeviceInfo(BaseModel):
    browser: str
    browser_version: str
    os: str
    os_version: str
    device: Literal["Desktop", "Mobile", "Tablet"]
    screen_resolution: str
    color_depth: str
    language: str
    platform: str
    user_agent: str
    hardware_concurrency: int

    model_config = ConfigDict(frozen=True)


class GeolocationInfo(BaseModel):
    ip: str
    country: str = "Unknown"
    region: str = "Unknown"
    city: str = "Unknown"
    timezone: str = "Unknown"
    isp: str = "Unknown"
    latitude: float = 0
    longitude: float = 0

    model_config = ConfigDict(frozen=True)


class SessionSnapshot(BaseModel):
    ip: str
    geolocation: GeolocationInfo | None
    device: DeviceInfo
    fingerprint: str
    timestamp: str

    model_config = ConfigDict(frozen=True)


class UserSessionRecord(BaseModel):
    user_id: str
    email: str
    action: SessionAction
    is_active: bool

    ip: str
    country: str = "Unknown"
    region: str = "Unknown"
    city: str = "Unknown"
    timezone: str = "Unknown"
    isp: str = "Unknown"
    latitude: float = 0
    longitude: float = 0

    browser: str
    browser_version: str
    os: str
    os_version: str
    device: str
    screen_resolution: str
    color_depth: str
    language: str
    platform: str
    hardware_concurrency: int

    device_fingerprint: str
    user_agent: str

    @classmethod
    def from_snapshot(
        cls,
        user_id: str,
        email: str,
        action: SessionAction,
        snapshot: SessionSnapshot,
    ) -> "UserSessionRecord":
        geo = snapshot.geolocation
        device = snapshot.device
        return cls(
            user_id=user_id,
            email=email,
            action=action,
            is_active=action == "login",
            ip=snapshot.ip,
            country=geo.country if geo else "Unknown",
            region=geo.region if geo else "Unknown",
            city=geo.city if geo else "Unknown",
            timezone=geo.timezone if geo else "Unknown",
            isp=geo.isp if geo else "Unknown",
            latitude=geo.latitude if geo else 0,
            longitude=geo.longitude if geo else 0,
            browser=device.browser,
            browser_version=device.browser_version,
            os=device.os,
            os_version=device.os_version,
            device=device.device,
            screen_resolution=device.screen_resolution,
            color_depth=device.color_depth,
            language=device.language,
            platform=device.platform,
            hardware_concurrency=device.hardware_concurrency,
            device_fingerprint=snapshot.fingerprint,
            user_agent=device.user_agent,
        )


class FraudAlert(BaseModel):
    user_id: str
    email: str
    risk_level: RiskLevel
    reason: str
    details: dict[str, Any]
    timestamp: datetime


class SessionLogRequest(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=128)
    email: str = Field(..., min_length=3, max_length=320)
    action: SessionAction
    environment: ClientEnvironment

    model_config = ConfigDict(extra="forbid")


class SessionLogResponse(BaseModel):
    logged: bool
    ip: str
    fingerprint_id: str
    risk_level: RiskLevel | None = None


class FraudAlertResponse(BaseModel):
    id: int
    user_id: str
    email: str
    risk_level: RiskLevel
    reason: str
    details: dict[str, Any]
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)


class FraudAlertPaginationParams(PaginationParams):
    risk_level: RiskLevel | None = None
    user_id: str | None = None
