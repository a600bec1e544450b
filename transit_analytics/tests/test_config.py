"""Tests for environment-driven settings."""

from transit_analytics.config import Settings


def test_defaults_when_environment_is_empty():
    settings = Settings.from_env({})

    assert settings.database_url == "sqlite+aiosqlite:///./transit.db"
    assert settings.db_pool_size == 5
    assert settings.db_max_overflow == 20
    assert settings.db_pool_timeout == 5.0
    assert settings.request_timeout_seconds == 10.0
    assert settings.cors_origins == ["http://localhost:3000"]
    assert settings.seed_reference_data is False
    assert settings.is_development
    assert settings.is_sqlite


def test_values_read_from_environment():
    settings = Settings.from_env(
        {
            "ENVIRONMENT": "Production",
            "DEBUG": "true",
            "PORT": "9091",
            "DATABASE_URL": "postgresql+asyncpg://transit:secret@db:5432/transit",
            "DB_POOL_SIZE": "10",
            "REQUEST_TIMEOUT_SECONDS": "2.5",
            "SEED_REFERENCE_DATA": "yes",
            "CORS_ALLOW_ORIGINS": "http://a.example, http://b.example,,",
            "LOG_FORMAT": "text",
        }
    )

    assert settings.is_production
    assert settings.debug is True
    assert settings.port == 9091
    assert settings.db_pool_size == 10
    assert settings.request_timeout_seconds == 2.5
    assert settings.seed_reference_data is True
    assert settings.cors_origins == ["http://a.example", "http://b.example"]
    assert settings.log_format == "text"
    assert not settings.is_sqlite
