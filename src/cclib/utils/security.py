"""Sanitization helpers and secure logging setup.

Request tracing must never leak credentials: Authorization headers,
``cc_auth_token`` values, Basic credentials and passwords embedded in
URLs are redacted before they reach a log handler.
"""

import copy
import logging
import re
import sys
from typing import Any, Dict, Optional

from ..config.settings import get_settings

# Patterns for sensitive data detection
SENSITIVE_PATTERNS = {
    "cc_auth_token": re.compile(r"cc_auth_token=\"?[^\"\s]*\"?", re.IGNORECASE),
    "bearer_token": re.compile(r"Bearer\s+[A-Za-z0-9._~+/=-]+", re.IGNORECASE),
    "basic_auth": re.compile(r"Basic\s+[A-Za-z0-9+/=]+", re.IGNORECASE),
}

# Headers that should never be logged
SENSITIVE_HEADERS = {
    "authorization",
    "proxy-authorization",
    "cookie",
    "set-cookie",
    "x-auth-token",
}

SENSITIVE_PARAMS = ("token", "password", "secret", "key", "auth")


def sanitize_string(value: str) -> str:
    """Redact credentials found in a free-form string.

    :param value: String to sanitize
    :type value: str
    :return: String with sensitive matches replaced by a marker
    :rtype: str
    """
    if not value:
        return value
    for pattern_name, pattern in SENSITIVE_PATTERNS.items():
        value = pattern.sub(f"<{pattern_name}:REDACTED>", value)
    return value


def sanitize_headers(headers: Dict[str, Any]) -> Dict[str, Any]:
    """Sanitize HTTP headers for logging.

    :param headers: Mapping of HTTP headers
    :type headers: Dict[str, Any]
    :return: Copy of the headers with sensitive values redacted
    :rtype: Dict[str, Any]
    """
    if not headers:
        return headers
    sanitized = copy.deepcopy(dict(headers))
    for key, value in sanitized.items():
        if key.lower() in SENSITIVE_HEADERS:
            if isinstance(value, str) and value:
                sanitized[key] = f"<REDACTED:length={len(value)}>"
            else:
                sanitized[key] = "<REDACTED>"
        elif isinstance(value, str):
            sanitized[key] = sanitize_string(value)
    return sanitized


def sanitize_url(url: str) -> str:
    """Sanitize URLs that might carry credentials.

    Removes userinfo passwords and redacts sensitive query parameters.

    :param url: URL to sanitize
    :type url: str
    :return: Sanitized URL
    :rtype: str
    """
    if not url:
        return url
    url = re.sub(r"(//[^/:@\s]+):[^@/\s]*@", r"\1:<REDACTED>@", url)
    for param in SENSITIVE_PARAMS:
        url = re.sub(
            rf"([?&][^=&]*{param}[^=&]*=)[^&\s]+",
            r"\1<REDACTED>",
            url,
            flags=re.IGNORECASE,
        )
    return url


class SanitizingFormatter(logging.Formatter):
    """Formatter that sanitizes the rendered log message."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the record, then redact credentials from the result.

        :param record: Log record to format
        :type record: logging.LogRecord
        :return: Sanitized log line
        :rtype: str
        """
        return sanitize_string(super().format(record))


_LOGGING_CONFIGURED = False
_HANDLER: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None, stream=None) -> logging.Logger:
    """Attach a sanitizing handler to the ``cclib`` logger.

    Calling it again only updates the level; no duplicate handler is
    installed.

    :param level: Logging level name; defaults to the configured level
    :type level: Optional[str]
    :param stream: Stream for the handler (defaults to stderr)
    :return: The configured ``cclib`` logger
    :rtype: logging.Logger
    """
    global _LOGGING_CONFIGURED, _HANDLER

    level_name = (level or get_settings().effective_log_level).upper()
    logger = logging.getLogger("cclib")
    logger.setLevel(getattr(logging, level_name))

    if _LOGGING_CONFIGURED:
        logger.debug("Logging already configured, level set to %s", level_name)
        return logger

    _HANDLER = logging.StreamHandler(stream or sys.stderr)
    _HANDLER.setFormatter(
        SanitizingFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(_HANDLER)
    _LOGGING_CONFIGURED = True
    return logger


def reset_logging() -> None:
    """Remove the handler installed by :func:`setup_logging`."""
    global _LOGGING_CONFIGURED, _HANDLER
    if _HANDLER is not None:
        logging.getLogger("cclib").removeHandler(_HANDLER)
    _HANDLER = None
    _LOGGING_CONFIGURED = False
