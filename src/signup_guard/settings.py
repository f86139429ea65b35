from functools import lru_cache
from typing import Literal, final

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from yarl import URL

DEFAULT_DISPOSABLE_DOMAINS = (
    "tempmail.com",
    "guerrillamail.com",
    "10minutemail.com",
    "throwaway.email",
    "mailinator.com",
    "trashmail.com",
    "fakeinbox.com",
    "temp-mail.org",
    "yopmail.com",
    "maildrop.cc",
    "getnada.com",
    "getairmail.com",
)


class PostgresConfig(BaseModel):
    user: str = "postgres"
    password: str = "postgres"
    host: str = "localhost"
    port: int = 5432
    db: str = "signup_guard"


class APIConfig(BaseModel):
    title: str = "Signup Guard API"
    version: str = "1.0.0"
    port: int = 8000
    host: str = "0.0.0.0"
    allowed_hosts: list[str] = Field(default_factory=lambda: ["*"])

    page_max_size: int = 100
    page_default_size: int = 10


class IpLookupProviderConfig(BaseModel):
    url: str
    key: str = "ip"


class ResolverConfig(BaseModel):
    ip_lookup_timeout_seconds: float = 3.0
    geolocation_timeout_seconds: float = 5.0
    ip_lookup_providers: list[IpLookupProviderConfig] = Field(
        default_factory=lambda: [
            IpLookupProviderConfig(url="https://api.ipify.org?format=json"),
            IpLookupProviderConfig(url="https://api64.ipify.org?format=json"),
            IpLookupProviderConfig(url="https://ipapi.co/json/"),
            IpLookupProviderConfig(url="https://api.ipapi.is/"),
        ]
    )
    ipapi_co_base_url: str = "https://ipapi.co"
    ipapi_is_base_url: str = "https://ipapi.is"


class FraudConfig(BaseModel):
    ip_account_limit: int = Field(default=3, ge=1)
    device_account_limit: int = Field(default=3, ge=1)
    velocity_threshold: int = Field(default=5, ge=1)
    velocity_window_hours: int = Field(default=24, ge=1)

    ip_limit_weight: int = 40
    device_limit_weight: int = 40
    velocity_weight: int = 30
    disposable_email_weight: int = 20

    critical_score_threshold: int = 80
    high_score_threshold: int = 60
    alert_score_threshold: int = 30

    fail_open: bool = True
    disposable_domains: list[str] = Field(
        default_factory=lambda: list(DEFAULT_DISPOSABLE_DOMAINS)
    )
    trust_forwarded_ip: bool = False


@final
class Config(BaseSettings):
    model_config: SettingsConfigDict = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="APP__",
        env_nested_delimiter="__",
        extra="ignore",
    )

    env: Literal["local", "dev", "prod"] = "local"

    api: APIConfig = Field(default_factory=APIConfig)
    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    fraud: FraudConfig = Field(default_factory=FraudConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)

    database_url_override: str | None = None

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        host = "localhost" if self.env == "local" else self.postgres.host
        return URL.build(
            scheme="postgresql+asyncpg",
            user=self.postgres.user,
            password=self.postgres.password,
            host=host,
            port=self.postgres.port,
            path=f"/{self.postgres.db}",
        ).human_repr()


@lru_cache
def get_config() -> Config:
    return Config()
