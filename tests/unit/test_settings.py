"""Tests for settings loaded from the environment."""

import httpx
import pytest
from pydantic import ValidationError

from cclib import __version__
from cclib.config.settings import Settings, get_settings, reload_settings


@pytest.mark.unit
def test_defaults():
    settings = Settings()

    assert settings.api_url == "https://api.cloudcontrolled.com"
    assert settings.token_source_url == "https://api.cloudcontrolled.com/token/"
    assert settings.version == __version__
    assert settings.cache == ""
    assert settings.ssl_check is True
    assert settings.ca_certs is None
    assert settings.debug is False
    assert settings.effective_log_level == "WARNING"


@pytest.mark.unit
def test_env_overrides(monkeypatch):
    monkeypatch.setenv("CCLIB_TOKEN_SOURCE_URL", "https://auth.example.com/token/")
    monkeypatch.setenv("CCLIB_LOG_LEVEL", "info")
    monkeypatch.setenv("CCLIB_TIMEOUT_READ", "2.5")

    settings = Settings()

    assert settings.token_source_url == "https://auth.example.com/token/"
    assert settings.log_level == "INFO"
    assert settings.timeout == httpx.Timeout(connect=5.0, read=2.5, write=10.0, pool=5.0)


@pytest.mark.unit
def test_debug_forces_debug_level(monkeypatch):
    monkeypatch.setenv("CCLIB_DEBUG", "true")
    monkeypatch.setenv("CCLIB_LOG_LEVEL", "ERROR")

    assert Settings().effective_log_level == "DEBUG"


@pytest.mark.unit
def test_invalid_timeout_rejected(monkeypatch):
    monkeypatch.setenv("CCLIB_TIMEOUT_CONNECT", "0")

    with pytest.raises(ValidationError):
        Settings()


@pytest.mark.unit
def test_get_settings_is_cached_until_reload(monkeypatch):
    first = get_settings()
    assert get_settings() is first

    monkeypatch.setenv("CCLIB_CACHE", "x")
    second = reload_settings()

    assert second is not first
    assert get_settings() is second
    assert second.cache == "x"
