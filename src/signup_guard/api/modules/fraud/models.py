from sqlalchemy import JSON, Boolean, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from signup_guard.database.base import Base, TimestampMixin


class UserSession(Base, TimestampMixin):
    __tablename__ = "user_sessions"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[str] = mapped_column(String(128), index=True)
    email: Mapped[str] = mapped_column(String(320))
    action: Mapped[str] = mapped_column(String(16), index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=False)

    ip: Mapped[str] = mapped_column(String(64), index=True)
    country: Mapped[str] = mapped_column(String(128), default="Unknown")
    region: Mapped[str] = mapped_column(String(128), default="Unknown")
    city: Mapped[str] = mapped_column(String(128), default="Unknown")
    timezone: Mapped[str] = mapped_column(String(128), default="Unknown")
    isp: Mapped[str] = mapped_column(String(256), default="Unknown")
    latitude: Mapped[float] = mapped_column(Float, default=0)
    longitude: Mapped[float] = mapped_column(Float, default=0)

    browser: Mapped[str] = mapped_column(String(64))
    browser_version: Mapped[str] = mapped_column(String(64))
    os: Mapped[str] = mapped_column(String(64))
    os_version: Mapped[str] = mapped_column(String(64))
    device: Mapped[str] = mapped_column(String(16))
    screen_resolution: Mapped[str] = mapped_column(String(32))
    color_depth: Mapped[str] = mapped_column(String(16))
    language: Mapped[str] = mapped_column(String(32))
    platform: Mapped[str] = mapped_column(String(128))
    hardware_concurrency: Mapped[int] = mapped_column(Integer, default=0)

    device_fingerprint: Mapped[str] = mapped_column(String(128), index=True)
    user_agent: Mapped[str] = mapped_column(String(2048))


class FraudAlertRecord(Base, TimestampMixin):
    __tablename__ = "fraud_alerts"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[str] = mapped_column(String(128), index=True)
    email: Mapped[str] = mapped_column(String(320))
    risk_level: Mapped[str] = mapped_column(String(16), index=True)
    reason: Mapped[str] = mapped_column(String(1024))
    details: Mapped[dict] = mapped_column(JSON, default=dict)
