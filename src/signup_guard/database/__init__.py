from signup_guard.database.base import Base, TimestampMixin
from signup_guard.database.engine import build_engine, build_session_factory

__all__ = ["Base", "TimestampMixin", "build_engine", "build_session_factory"]
