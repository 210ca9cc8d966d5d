import os
import sys
from pathlib import Path
from typing import List, Optional

import httpx
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cclib.config.settings import reload_settings  # noqa: E402


def pytest_configure(config):
    # Add custom markers for test organization
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "auth: mark test as testing authentication")
    config.addinivalue_line("markers", "integration: mark test as using a local server")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test from the built-in defaults.

    Removes any CCLIB_* variables from the environment and reloads the
    process-wide settings before and after the test.
    """
    for name in list(os.environ):
        if name.upper().startswith("CCLIB_"):
            monkeypatch.delenv(name, raising=False)
    reload_settings()
    yield
    monkeypatch.undo()
    reload_settings()


class FakeServer:
    """Records requests reaching the httpx transport and answers them."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.body = b""
        self.error: Optional[Exception] = None
        self.stream: Optional[httpx.SyncByteStream] = None

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]

    def respond(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.stream is not None:
            return httpx.Response(self.status_code, stream=self.stream, request=request)
        return httpx.Response(self.status_code, content=self.body, request=request)


@pytest.fixture
def fake_server(monkeypatch):
    """Replace the httpx transport with a FakeServer.

    The client still runs its own send path, so auth flows have already
    been applied to the recorded requests.
    """
    server = FakeServer()

    def fake_handle_request(self, request: httpx.Request) -> httpx.Response:
        return server.respond(request)

    monkeypatch.setattr(
        httpx.HTTPTransport, "handle_request", fake_handle_request, raising=True
    )
    return server


@pytest.fixture
def sample_token():
    """Token as returned by the token source URL."""
    from cclib.models import Token

    return Token({"token": "1234567890"})
