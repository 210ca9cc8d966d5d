"""Structured exception classes for cclib."""

import json
from typing import Any, Dict, Optional

import httpx

# Longest response body excerpt placed in an HTTPStatusError message
MAX_BODY_IN_MESSAGE = 500


class CCLibError(Exception):
    """Base exception for all cclib errors.

    This exception serves as the parent class for all cclib specific
    exceptions, providing a consistent interface for error handling
    across the library.

    :param message: Human-readable error message
    :param code: Optional error code for programmatic handling
    :param details: Optional dictionary containing additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize the exception with message, code, and details."""
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format.

        :return: Dictionary containing error code, message, and details
        """
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def to_json(self) -> str:
        """Convert exception to JSON string.

        :return: JSON-encoded string representation of the exception
        """
        return json.dumps(self.to_dict())


class URLParseError(CCLibError):
    """Raised when a base URL or token source URL cannot be parsed.

    No network I/O has happened when this is raised.

    :param message: Description of the parse failure
    :param url: The offending URL
    """

    def __init__(self, message: str, url: Optional[str] = None):
        """Initialize URL parse error with message and optional URL."""
        details = {}
        if url is not None:
            details["url"] = url
        super().__init__(message=message, code="URL_PARSE_ERROR", details=details)
        self.url = url


class RequestConstructionError(CCLibError):
    """Raised when an HTTP request cannot be built.

    :param message: Description of the construction failure
    :param method: Optional HTTP method that was requested
    """

    def __init__(self, message: str, method: Optional[str] = None):
        """Initialize request construction error with message and method."""
        details = {}
        if method is not None:
            details["method"] = method
        super().__init__(
            message=message, code="REQUEST_CONSTRUCTION_ERROR", details=details
        )
        self.method = method


class TransportError(CCLibError):
    """Raised when no response could be obtained.

    Covers DNS failures, refused connections, TLS handshake failures
    and other network level errors raised by the HTTP client.

    :param message: Description of the transport failure
    :param url: Optional URL that was being requested
    :param original_error: Optional original exception from httpx
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """Initialize transport error with message and optional context."""
        details = {}
        if url:
            details["url"] = url
        if original_error:
            details["error_type"] = type(original_error).__name__
        super().__init__(message=message, code="TRANSPORT_ERROR", details=details)
        self.url = url
        self.original_error = original_error


class RequestTimeoutError(TransportError):
    """Raised when the HTTP client gives up waiting on the server."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """Initialize timeout error with message and optional context."""
        super().__init__(message=message, url=url, original_error=original_error)
        self.code = "TIMEOUT_ERROR"


class HTTPStatusError(CCLibError):
    """Raised when the server answers with a status outside 2xx.

    The full response body is kept on the exception; the message only
    carries a truncated excerpt.

    :param status_code: HTTP status code from the response
    :param response_body: Decoded response body
    :param message: Optional message, built from code and body if omitted
    """

    def __init__(
        self,
        status_code: int,
        response_body: str = "",
        message: Optional[str] = None,
    ):
        """Initialize HTTP status error with code and body."""
        if message is None:
            message = f"HTTP {status_code}"
            excerpt = response_body[:MAX_BODY_IN_MESSAGE]
            if excerpt:
                message = f"{message}: {excerpt}"
        details: Dict[str, Any] = {"status_code": status_code}
        if response_body:
            details["response_body"] = response_body
        super().__init__(message=message, code="HTTP_STATUS_ERROR", details=details)
        self.status_code = status_code
        self.response_body = response_body


class BadRequestError(HTTPStatusError):
    """Raised for HTTP 400 responses."""


class UnauthorizedError(HTTPStatusError):
    """Raised for HTTP 401 responses."""


class ForbiddenError(HTTPStatusError):
    """Raised for HTTP 403 responses."""


class NotFoundError(HTTPStatusError):
    """Raised for HTTP 404 responses."""


class ConflictError(HTTPStatusError):
    """Raised for HTTP 409 responses."""


class GoneError(HTTPStatusError):
    """Raised for HTTP 410 responses."""


class InternalServerError(HTTPStatusError):
    """Raised for HTTP 500 responses."""


class ServiceUnavailableError(HTTPStatusError):
    """Raised for HTTP 503 responses."""


STATUS_ERRORS = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    410: GoneError,
    500: InternalServerError,
    503: ServiceUnavailableError,
}


class BodyReadError(CCLibError):
    """Raised when a response arrived but its body could not be read.

    :param message: Description of the read failure
    :param status_code: Optional status code of the response
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        """Initialize body read error with message and optional status."""
        details = {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message=message, code="BODY_READ_ERROR", details=details)
        self.status_code = status_code


class TokenError(CCLibError):
    """Raised when a token payload cannot be parsed.

    :param message: Description of the token error
    """

    def __init__(self, message: str):
        """Initialize token error with message."""
        super().__init__(message=message, code="TOKEN_ERROR")


class ConfigurationError(CCLibError):
    """Raised for configuration-related errors.

    This exception is raised when a configured value cannot be used,
    such as a CA bundle path that does not point to a readable file.

    :param message: Description of the configuration error
    :param setting: Optional name of the problematic setting
    """

    def __init__(self, message: str, setting: Optional[str] = None):
        """Initialize configuration error with message and optional setting."""
        details = {}
        if setting:
            details["setting"] = setting
        super().__init__(message=message, code="CONFIGURATION_ERROR", details=details)


def error_for_status(status_code: int, response_body: str = "") -> HTTPStatusError:
    """Build the exception matching an HTTP status code.

    :param status_code: HTTP status code of the response
    :type status_code: int
    :param response_body: Decoded response body
    :type response_body: str
    :return: Status-specific exception, or HTTPStatusError for other codes
    :rtype: HTTPStatusError
    """
    error_class = STATUS_ERRORS.get(status_code, HTTPStatusError)
    return error_class(status_code, response_body)


def transport_error_from(exc: httpx.TransportError, url: str) -> TransportError:
    """Wrap an httpx transport exception.

    :param exc: Exception raised by httpx while sending
    :type exc: httpx.TransportError
    :param url: Sanitized URL of the request
    :type url: str
    :return: TransportError, or RequestTimeoutError for timeouts
    :rtype: TransportError
    """
    if isinstance(exc, httpx.TimeoutException):
        return RequestTimeoutError(
            f"Request to {url} timed out: {exc}", url=url, original_error=exc
        )
    return TransportError(
        f"Request to {url} failed: {exc}", url=url, original_error=exc
    )
