"""Authenticated request context and dispatcher.

A :class:`Request` holds the caller's credentials, target URLs and TLS
policy. The verb methods (``get``, ``post``, ``put``, ``delete`` and
``post_token``) all go through one dispatch routine which:

1. Resolves the target URL (base URL or token source URL, path
   replaced by the resource)
2. Builds the TLS configuration
3. Encodes the form payload and attaches exactly one auth mechanism
4. Sends the call on a dedicated client and buffers the whole body
5. Turns non-2xx responses and transport failures into exceptions

The context has no internal locking. Mutating it while another thread
has a call in flight is not supported.

Examples:
    >>> req = Request("user@example.com", "secret", "https://api.example.com")
    >>> body = req.get("/app/")
    >>> req.set_token(Token.from_response(req.post_token()))
"""

import logging
import re
from typing import Dict, Mapping, Optional, Sequence, Union
from urllib.parse import quote, urlencode, urlsplit, urlunsplit

import httpx

from .config.settings import get_settings
from .exceptions import (
    BodyReadError,
    RequestConstructionError,
    URLParseError,
    transport_error_from,
)
from .models import Token
from .utils.http import build_client, build_verify, check_response
from .utils.http.client import CACerts
from .utils.security import sanitize_headers, sanitize_url
from .version import version

logger = logging.getLogger(__name__)

FormData = Mapping[str, Union[str, Sequence[str]]]

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
ACCEPT_ENCODING = "compress, gzip"
USER_AGENT_NAME = "cclib"

# Sub-delimiters left unescaped in a path; "?" and "#" are always escaped
_PATH_SAFE = "/$&+,:;=@"

# RFC 7230 token characters
_METHOD_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


def encode_form(data: Optional[FormData]) -> str:
    """Encode a payload as ``application/x-www-form-urlencoded``.

    Keys are sorted; sequence values produce one pair per element.

    :param data: Mapping of field names to a value or list of values
    :type data: Optional[FormData]
    :return: Encoded body, empty when there is no data
    :rtype: str
    """
    if not data:
        return ""
    return urlencode(sorted(data.items()), doseq=True)


def token_auth_header(token: Token) -> str:
    """Build the ``cc_auth_token`` ``Authorization`` header value."""
    return f'cc_auth_token="{token.key}"'


class Request:
    """Authenticated request context for the API.

    Fields are public and may also be changed through the setters.
    ``version``, ``cache``, ``ssl_check`` and ``ca_certs`` start from the
    process-wide settings in effect at construction time.

    :param email: Account email for Basic authentication
    :type email: str
    :param password: Account password for Basic authentication
    :type password: str
    :param url: API base URL, defaults to the configured API URL
    :type url: Optional[str]
    :param token: Token used instead of Basic authentication
    :type token: Optional[Token]
    :param token_source_url: URL ``post_token`` posts to
    :type token_source_url: Optional[str]
    :param timeout: Client timeout, defaults to the configured timeout
    :type timeout: Optional[httpx.Timeout]
    :param logger: Logger used to trace requests and responses
    :type logger: Optional[logging.Logger]
    """

    def __init__(
        self,
        email: str = "",
        password: str = "",
        url: Optional[str] = None,
        token: Optional[Token] = None,
        token_source_url: Optional[str] = None,
        *,
        timeout: Optional[httpx.Timeout] = None,
        logger: Optional[logging.Logger] = None,
    ):
        settings = get_settings()
        self.email = email
        self.password = password
        self.token = token
        self.token_source_url = (
            token_source_url
            if token_source_url is not None
            else settings.token_source_url
        )
        self.version = settings.version
        self.cache = settings.cache
        self.url = url if url is not None else settings.api_url
        self.ssl_check = settings.ssl_check
        self.ca_certs: Optional[CACerts] = settings.ca_certs
        self.timeout = timeout if timeout is not None else settings.timeout
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def __repr__(self) -> str:
        return (
            f"Request(email={self.email!r}, url={self.url!r}, "
            f"token={'set' if self.token is not None else None}, "
            f"ssl_check={self.ssl_check})"
        )

    # Setters

    def set_email(self, email: str) -> None:
        """Set the account email."""
        self.email = email

    def set_password(self, password: str) -> None:
        """Set the account password."""
        self.password = password

    def set_token(self, token: Optional[Token]) -> None:
        """Set or clear the token."""
        self.token = token

    def set_cache(self, cache: str) -> None:
        """Set the cache tag."""
        self.cache = cache

    def set_url(self, url: str) -> None:
        """Set the API base URL."""
        self.url = url

    def enable_ssl_check(self) -> None:
        """Enable TLS certificate verification."""
        self.ssl_check = True

    def disable_ssl_check(self) -> None:
        """Disable TLS certificate verification."""
        self.ssl_check = False

    def set_ca_certs(self, ca_certs: Optional[CACerts]) -> None:
        """Set the trusted root certificates (PEM bundle path or SSL context)."""
        self.ca_certs = ca_certs

    # Verbs

    def get(self, resource: str) -> bytes:
        """Make a GET request.

        The body is returned after content decoding, so a gzip-compressed
        response comes back decompressed.

        :param resource: Path on the API base URL
        :type resource: str
        :return: Response body
        :rtype: bytes
        """
        return self._do(resource, "GET", None, False)

    def post(self, resource: str, data: Optional[FormData] = None) -> bytes:
        """Make a POST request with a form-encoded body.

        :param resource: Path on the API base URL
        :type resource: str
        :param data: Form fields
        :type data: Optional[FormData]
        :return: Response body
        :rtype: bytes
        """
        return self._do(resource, "POST", data, False)

    def put(self, resource: str, data: Optional[FormData] = None) -> bytes:
        """Make a PUT request with a form-encoded body.

        :param resource: Path on the API base URL
        :type resource: str
        :param data: Form fields
        :type data: Optional[FormData]
        :return: Response body
        :rtype: bytes
        """
        return self._do(resource, "PUT", data, False)

    def delete(self, resource: str) -> bytes:
        """Make a DELETE request.

        :param resource: Path on the API base URL
        :type resource: str
        :return: Response body
        :rtype: bytes
        """
        return self._do(resource, "DELETE", None, False)

    def post_token(self) -> bytes:
        """POST to the token source URL with an empty body.

        The body is typically passed to :meth:`Token.from_response`.

        :return: Response body
        :rtype: bytes
        """
        return self._do("", "POST", None, True)

    # Dispatch

    def _resolve_url(self, base_url: str, resource: str) -> httpx.URL:
        try:
            parts = urlsplit(base_url)
            parts.port  # raises ValueError on a malformed port
        except ValueError as e:
            raise URLParseError(f"Invalid URL {base_url!r}: {e}", url=base_url) from e
        if parts.scheme not in ("http", "https") or not parts.hostname:
            raise URLParseError(
                f"Invalid URL {base_url!r}: an absolute http(s) URL is required",
                url=base_url,
            )
        if resource:
            parts = parts._replace(path=quote(resource, safe=_PATH_SAFE))
        try:
            return httpx.URL(urlunsplit(parts))
        except httpx.InvalidURL as e:
            raise URLParseError(f"Invalid URL {base_url!r}: {e}", url=base_url) from e

    def _basic_auth(self) -> Optional[httpx.BasicAuth]:
        # A token always wins over account credentials
        if self.token is None and self.email and self.password:
            return httpx.BasicAuth(self.email, self.password)
        return None

    def _build_headers(self, method: str, url: httpx.URL, body: str) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if self.token is not None:
            headers["Authorization"] = token_auth_header(self.token)
        headers["Host"] = url.netloc.decode("ascii")
        headers["User-Agent"] = f"{USER_AGENT_NAME}/{version()}"
        if method.upper() in ("POST", "PUT"):
            headers["Content-Type"] = FORM_CONTENT_TYPE
        headers["Content-Length"] = str(len(body.encode("utf-8")))
        headers["Accept-Encoding"] = ACCEPT_ENCODING
        return headers

    def _do(
        self,
        resource: str,
        method: str,
        data: Optional[FormData],
        is_token_request: bool,
    ) -> bytes:
        """Send one request and return the whole response body.

        The resource is percent-encoded and replaces only the path of the
        base URL. The returned bytes are content-decoded by httpx
        (``gzip`` and ``deflate`` bodies are decompressed), not the raw
        bytes from the wire.
        """
        base_url = self.token_source_url if is_token_request else self.url
        url = self._resolve_url(base_url, resource)
        safe_url = sanitize_url(str(url))

        if not _METHOD_RE.fullmatch(method or ""):
            raise RequestConstructionError(
                f"Invalid HTTP method {method!r}", method=method
            )

        verify = build_verify(self.ssl_check, self.ca_certs)

        with build_client(verify, self.timeout) as client:
            try:
                body = encode_form(data)
                headers = self._build_headers(method, url, body)
                auth = self._basic_auth()
                if (auth is not None or "Authorization" in headers) and url.userinfo:
                    # httpx would otherwise authenticate with URL credentials
                    url = url.copy_with(userinfo=b"")
                request = client.build_request(
                    method, url, content=body.encode("utf-8"), headers=headers
                )
            except (httpx.InvalidURL, TypeError, ValueError) as e:
                raise RequestConstructionError(
                    f"Cannot build {method} request for {safe_url}: {e}",
                    method=method,
                ) from e

            self.logger.debug(
                "Request >>> %s %s headers=%s",
                request.method,
                safe_url,
                sanitize_headers(dict(request.headers)),
            )

            try:
                response = client.send(request, auth=auth, stream=True)
            except httpx.TransportError as e:
                self.logger.debug("Request error >>> %s %s: %s", method, safe_url, e)
                raise transport_error_from(e, safe_url) from e

            try:
                try:
                    content = response.read()
                except (httpx.HTTPError, httpx.StreamError) as e:
                    raise BodyReadError(
                        f"Failed to read response body from {safe_url}: {e}",
                        status_code=response.status_code,
                    ) from e
                self.logger.debug(
                    "Response >>> %s %s status=%d bytes=%d",
                    request.method,
                    safe_url,
                    response.status_code,
                    len(content),
                )
                check_response(response)
            finally:
                response.close()

        return content
