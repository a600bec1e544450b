"""Application configuration management."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def _as_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass(frozen=True)
class Settings:
    """Application settings, built once at startup and passed to components."""

    # Application
    app_name: str = "Transit Incident Analytics"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./transit.db"
    db_pool_size: int = 5
    db_max_overflow: int = 20
    db_pool_timeout: float = 5.0
    db_echo: bool = False

    # Request handling
    request_timeout_seconds: float = 10.0
    seed_reference_data: bool = False

    # CORS
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])
    cors_allow_credentials: bool = True

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        dotenv_path: Optional[Path] = None,
    ) -> "Settings":
        """Build settings from environment variables (and the project .env)."""
        if environ is None:
            load_dotenv(dotenv_path=dotenv_path or PROJECT_ROOT / ".env")
            environ = os.environ
        env = environ

        return cls(
            app_name=env.get("APP_NAME", cls.app_name),
            app_version=env.get("APP_VERSION", cls.app_version),
            environment=env.get("ENVIRONMENT", cls.environment),
            debug=_as_bool(env.get("DEBUG", "False")),
            host=env.get("HOST", cls.host),
            port=int(env.get("PORT", str(cls.port))),
            reload=_as_bool(env.get("RELOAD", "False")),
            database_url=env.get("DATABASE_URL", cls.database_url),
            db_pool_size=int(env.get("DB_POOL_SIZE", str(cls.db_pool_size))),
            db_max_overflow=int(env.get("DB_MAX_OVERFLOW", str(cls.db_max_overflow))),
            db_pool_timeout=float(env.get("DB_POOL_TIMEOUT", str(cls.db_pool_timeout))),
            db_echo=_as_bool(env.get("DB_ECHO", "False")),
            request_timeout_seconds=float(
                env.get("REQUEST_TIMEOUT_SECONDS", str(cls.request_timeout_seconds))
            ),
            seed_reference_data=_as_bool(env.get("SEED_REFERENCE_DATA", "False")),
            cors_origins=_split_origins(env.get("CORS_ALLOW_ORIGINS", "http://localhost:3000")),
            log_level=env.get("LOG_LEVEL", cls.log_level),
            log_format=env.get("LOG_FORMAT", cls.log_format),
        )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    @property
    def is_sqlite(self) -> bool:
        """True when the configured store is SQLite."""
        return self.database_url.startswith("sqlite")
