"""
Tests for configuration validation
"""
import pytest
from pydantic import ValidationError

from app.core.config import Settings


def _settings(**overrides):
    values = {
        "DATABASE_URL": "postgresql://test",
        "JWT_SECRET_KEY": "a" * 32,
        "APP_ENV": "prod",
        "ALLOWED_ORIGINS": "https://example.com",
    }
    values.update(overrides)
    return Settings(**values)


def test_prod_settings_rejects_wildcard_origins():
    settings = _settings(ALLOWED_ORIGINS="*")
    with pytest.raises(ValueError, match="ALLOWED_ORIGINS"):
        settings.validate_production()


def test_prod_settings_rejects_short_jwt_secret():
    settings = _settings(JWT_SECRET_KEY="short")
    with pytest.raises(ValueError, match="JWT_SECRET_KEY"):
        settings.validate_production()


def test_valid_prod_settings():
    settings = _settings()
    settings.validate_production()
    assert settings.get_allowed_origins_list() == ["https://example.com"]


def test_token_lifetimes_default():
    settings = _settings(APP_ENV="local")
    assert settings.JWT_ACCESS_TTL_MINUTES == 60
    assert settings.JWT_REFRESH_TTL_MINUTES == 480


def test_invalid_app_env_rejected():
    with pytest.raises(ValidationError):
        _settings(APP_ENV="production")


def test_log_level_normalised():
    assert _settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"


def test_origins_list_splits_and_trims():
    settings = _settings(ALLOWED_ORIGINS="https://a.example.com, https://b.example.com ,")
    assert settings.get_allowed_origins_list() == ["https://a.example.com", "https://b.example.com"]
