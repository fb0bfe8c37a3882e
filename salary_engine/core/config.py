"""Environment-driven configuration for the salary engine."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

_FALSE_VALUES = {"0", "false", "False", "no", ""}


@dataclass(frozen=True, slots=True)
class DatabaseSettings:
    """Connection details for the relational store."""

    driver: str
    host: str
    port: int
    user: str
    password: str
    name: str
    url_override: str | None = None

    @property
    def sqlalchemy_url(self) -> str:
        """Return ``DATABASE_URL`` when set, otherwise build one from the parts."""

        if self.url_override:
            return self.url_override
        if self.password:
            credentials = f"{self.user}:{self.password}"
        else:
            credentials = self.user
        return f"{self.driver}://{credentials}@{self.host}:{self.port}/{self.name}"

    @property
    def masked_url(self) -> str:
        if self.url_override:
            return self.url_override.split("@")[-1]
        pwd = "***" if self.password else ""
        return f"{self.driver}://{self.user}:{pwd}@{self.host}:{self.port}/{self.name}"


@dataclass(frozen=True, slots=True)
class AdminSettings:
    """Shared-secret gate for admin-triggered operations."""

    key: str | None
    session_secret: str

    @property
    def enabled(self) -> bool:
        return bool(self.key)


@dataclass(frozen=True, slots=True)
class ExternalSourceSettings:
    """Credentials and pacing for the external estimation API and scraper."""

    api_key: str | None
    api_host: str
    request_delay_seconds: float
    api_timeout_seconds: float
    scrape_timeout_seconds: float
    usd_to_ils_rate: float

    @property
    def api_enabled(self) -> bool:
        return bool(self.api_key)


@dataclass(frozen=True, slots=True)
class EstimationSettings:
    """Defaults shared by the resolver, report pipeline and client cache."""

    default_location: str
    currency: str
    api_base_url: str
    cache_ttl_seconds: float


@dataclass(frozen=True, slots=True)
class Settings:
    """Top-level application configuration container."""

    database: DatabaseSettings
    admin: AdminSettings
    external: ExternalSourceSettings
    estimation: EstimationSettings
    sqlalchemy_echo: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Load configuration values from environment variables."""

        def _get_env(name: str, default: str) -> str:
            return os.getenv(name, default)

        def _get_float(name: str, default: str) -> float:
            raw = _get_env(name, default)
            try:
                value = float(raw)
            except ValueError as exc:
                raise ValueError(f"{name} must be a number, got {raw!r}") from exc
            if value < 0:
                raise ValueError(f"{name} must not be negative")
            return value

        db = DatabaseSettings(
            driver=_get_env("DB_DRIVER", "mysql+pymysql"),
            host=_get_env("DB_HOST", "127.0.0.1"),
            port=int(_get_env("DB_PORT", "3306")),
            user=_get_env("DB_USER", "salaries"),
            password=_get_env("DB_PASSWORD", "salaries"),
            name=_get_env("DB_NAME", "salaries"),
            url_override=os.getenv("DATABASE_URL") or None,
        )
        admin = AdminSettings(
            key=os.getenv("ADMIN_KEY") or None,
            session_secret=_get_env("SESSION_SECRET", ""),
        )
        external = ExternalSourceSettings(
            api_key=os.getenv("RAPIDAPI_KEY") or None,
            api_host=_get_env("RAPIDAPI_HOST", "real-time-glassdoor-data.p.rapidapi.com"),
            request_delay_seconds=_get_float("SALARY_FETCH_DELAY_SECONDS", "1.5"),
            api_timeout_seconds=_get_float("SALARY_API_TIMEOUT_SECONDS", "15"),
            scrape_timeout_seconds=_get_float("SALARY_SCRAPE_TIMEOUT_SECONDS", "10"),
            usd_to_ils_rate=_get_float("USD_TO_ILS_RATE", "3.7"),
        )
        estimation = EstimationSettings(
            default_location=_get_env("SALARY_DEFAULT_LOCATION", "Israel"),
            currency=_get_env("SALARY_CURRENCY", "ILS"),
            api_base_url=_get_env("SALARY_API_BASE_URL", "http://127.0.0.1:8000"),
            cache_ttl_seconds=_get_float("ESTIMATE_CACHE_TTL_SECONDS", "600"),
        )
        return cls(
            database=db,
            admin=admin,
            external=external,
            estimation=estimation,
            sqlalchemy_echo=_get_env("SQLALCHEMY_ECHO", "0") not in _FALSE_VALUES,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    settings = Settings.from_env()

    # Import locally to avoid circular dependencies during module import time.
    from .log import get_logger

    get_logger(__name__).debug(
        "Settings initialised: db=%s admin_enabled=%s external_api=%s delay=%.1fs",
        settings.database.masked_url,
        settings.admin.enabled,
        settings.external.api_enabled,
        settings.external.request_delay_seconds,
    )
    return settings
