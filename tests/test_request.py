"""Tests for the request context: construction defaults and setters."""

import ssl

import pytest

from cclib import Request, Token
from cclib.config.settings import get_settings, reload_settings

EMAIL = "user@example.com"
PASSWORD = "password"
URL = "https://api.com"
TOKEN_SOURCE_URL = "https://api.com/token/"

FIELDS = (
    "email",
    "password",
    "token",
    "token_source_url",
    "version",
    "cache",
    "url",
    "ssl_check",
    "ca_certs",
)


def snapshot(req: Request) -> dict:
    return {name: getattr(req, name) for name in FIELDS}


@pytest.fixture
def req(sample_token):
    return Request(EMAIL, PASSWORD, URL, sample_token, TOKEN_SOURCE_URL)


def test_new_request_keeps_inputs_and_applies_defaults(req, sample_token):
    settings = get_settings()

    assert req.email == EMAIL
    assert req.password == PASSWORD
    assert req.token is sample_token
    assert req.token_source_url == TOKEN_SOURCE_URL
    assert req.url == URL
    assert req.version == settings.version
    assert req.cache == settings.cache
    assert req.ssl_check is settings.ssl_check
    assert req.ca_certs is settings.ca_certs


def test_defaults_follow_environment(monkeypatch):
    monkeypatch.setenv("CCLIB_CACHE", "off")
    monkeypatch.setenv("CCLIB_SSL_CHECK", "false")
    monkeypatch.setenv("CCLIB_API_URL", "https://env.example.com")
    reload_settings()

    req = Request(EMAIL, PASSWORD)

    assert req.cache == "off"
    assert req.ssl_check is False
    assert req.url == "https://env.example.com"
    assert req.token is None
    assert req.token_source_url == get_settings().token_source_url


def test_defaults_are_read_at_construction_time(monkeypatch):
    before = Request(EMAIL, PASSWORD, URL)
    monkeypatch.setenv("CCLIB_CACHE", "later")
    reload_settings()
    after = Request(EMAIL, PASSWORD, URL)

    assert before.cache == ""
    assert after.cache == "later"


@pytest.mark.parametrize(
    "setter, field, value",
    [
        ("set_email", "email", "other@example.com"),
        ("set_password", "password", "other"),
        ("set_token", "token", Token({"token": "abc"})),
        ("set_token", "token", None),
        ("set_cache", "cache", "aggressive"),
        ("set_url", "url", "https://other.example.com"),
        ("set_ca_certs", "ca_certs", ssl.create_default_context()),
        ("set_ca_certs", "ca_certs", None),
        ("set_email", "email", ""),
    ],
)
def test_setter_changes_only_its_field(req, setter, field, value):
    before = snapshot(req)

    getattr(req, setter)(value)

    after = snapshot(req)
    assert after[field] is value or after[field] == value
    for name in FIELDS:
        if name != field:
            assert after[name] is before[name] or after[name] == before[name], name


def test_ssl_check_toggles(req):
    before = snapshot(req)

    req.disable_ssl_check()
    assert req.ssl_check is False
    req.disable_ssl_check()
    assert req.ssl_check is False
    req.enable_ssl_check()
    assert req.ssl_check is True

    after = snapshot(req)
    for name in FIELDS:
        if name != "ssl_check":
            assert after[name] is before[name]


def test_repr_does_not_leak_credentials(req):
    text = repr(req)
    assert PASSWORD not in text
    assert "1234567890" not in text
    assert EMAIL in text
