"""cclib: client-side request builder for the cloudControl API.

This package assembles authenticated HTTP requests (HTTP Basic or the
``cc_auth_token`` scheme), sends them over TLS with configurable
certificate verification and returns the decoded response body.

:var __version__: Current package version
:type __version__: str
"""

import logging

from .exceptions import (
    BodyReadError,
    CCLibError,
    ConfigurationError,
    HTTPStatusError,
    NotFoundError,
    RequestConstructionError,
    RequestTimeoutError,
    TokenError,
    TransportError,
    UnauthorizedError,
    URLParseError,
)
from .models import Token
from .request import Request
from .utils.security import setup_logging
from .version import __version__, version

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "version",
    "Request",
    "Token",
    "setup_logging",
    "CCLibError",
    "URLParseError",
    "RequestConstructionError",
    "TransportError",
    "RequestTimeoutError",
    "HTTPStatusError",
    "NotFoundError",
    "UnauthorizedError",
    "BodyReadError",
    "TokenError",
    "ConfigurationError",
]
