"""Tests for application configuration."""
import pytest
from pydantic import ValidationError

from core.config import Settings


def _settings(**kwargs: object) -> Settings:
    return Settings(_env_file=None, database_url="postgresql+asyncpg://test", **kwargs)


class TestDefaults:
    """Tests for default values."""

    def test_defaults(self) -> None:
        settings = _settings()
        assert settings.rate_limit_requests == 5
        assert settings.rate_limit_window_seconds == 1
        assert settings.port == 8080
        assert settings.shutdown_timeout_seconds == 5
        assert settings.redis_enabled is False
        assert settings.cors_origins == ["*"]
        assert settings.log_level == "INFO"

    def test_database_url_required(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("DATABASE_URL", raising=False)
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://env")
        monkeypatch.setenv("RATE_LIMIT_REQUESTS", "10")
        settings = Settings(_env_file=None)
        assert settings.database_url == "postgresql+asyncpg://env"
        assert settings.rate_limit_requests == 10


class TestCorsOriginsParsing:
    """Tests for CORS origins parsing."""

    def test_parse_multiple_origins_comma_separated(self) -> None:
        settings = _settings(cors_origins="http://localhost:5173,https://example.com")
        assert settings.cors_origins == ["http://localhost:5173", "https://example.com"]

    def test_parse_origins_with_whitespace_and_trailing_comma(self) -> None:
        settings = _settings(cors_origins="  http://localhost:5173 , https://example.com, ")
        assert settings.cors_origins == ["http://localhost:5173", "https://example.com"]

    def test_parse_origins_list_passthrough(self) -> None:
        origins = ["http://localhost:5173", "https://example.com"]
        assert _settings(cors_origins=origins).cors_origins == origins

    def test_parse_origins_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CORS_ORIGINS", "https://a.example.com,https://b.example.com")
        assert _settings().cors_origins == ["https://a.example.com", "https://b.example.com"]


class TestValidation:
    """Tests for rejected values."""

    @pytest.mark.parametrize("port", [0, 65536])
    def test_port_out_of_range(self, port: int) -> None:
        with pytest.raises(ValidationError):
            _settings(port=port)

    def test_rate_limit_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            _settings(rate_limit_requests=0)

    def test_log_level_normalized(self) -> None:
        assert _settings(log_level="debug").log_level == "DEBUG"

    def test_log_level_unknown(self) -> None:
        with pytest.raises(ValidationError):
            _settings(log_level="chatty")
