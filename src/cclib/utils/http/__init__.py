"""HTTP utilities public API.

Client construction and response classification used by the request
dispatcher:
    from cclib.utils.http import build_client, build_verify, check_response
"""

from .client import build_client, build_verify, create_timeout
from .response import check_response, is_success

__all__ = [
    "build_client",
    "build_verify",
    "create_timeout",
    "check_response",
    "is_success",
]
