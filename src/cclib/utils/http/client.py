"""HTTP client construction.

Every dispatched call gets its own ``httpx.Client`` configured from the
request context's TLS policy. Connection reuse is whatever a single
client offers for the lifetime of one call.
"""

import logging
import os
import ssl
from typing import Optional, Union

import httpx

from ...exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CACerts = Union[str, os.PathLike, ssl.SSLContext]
VerifyTypes = Union[bool, ssl.SSLContext]


def build_verify(ssl_check: bool, ca_certs: Optional[CACerts] = None) -> VerifyTypes:
    """Build the ``verify`` argument for an httpx client.

    :param ssl_check: Whether certificates are verified at all
    :type ssl_check: bool
    :param ca_certs: Trusted roots, as a PEM bundle path or an SSL context
    :type ca_certs: Optional[CACerts]
    :return: False when verification is off, the CA context when roots are
             configured, True (platform defaults) otherwise
    :rtype: VerifyTypes
    :raises ConfigurationError: If the CA bundle cannot be loaded
    """
    if not ssl_check:
        return False
    if ca_certs is None:
        return True
    if isinstance(ca_certs, ssl.SSLContext):
        return ca_certs
    try:
        return ssl.create_default_context(cafile=os.fspath(ca_certs))
    except (OSError, ssl.SSLError) as e:
        raise ConfigurationError(
            f"Cannot load CA certificates from {ca_certs}: {e}", setting="ca_certs"
        ) from e


def create_timeout(
    connect: float = 5.0,
    read: float = 30.0,
    write: float = 10.0,
    pool: float = 5.0,
) -> httpx.Timeout:
    """Create a timeout configuration object.

    :param connect: Connection timeout in seconds
    :type connect: float
    :param read: Read timeout in seconds
    :type read: float
    :param write: Write timeout in seconds
    :type write: float
    :param pool: Pool timeout in seconds
    :type pool: float
    :return: Configured timeout object
    :rtype: httpx.Timeout
    """
    return httpx.Timeout(connect=connect, read=read, write=write, pool=pool)


def build_client(
    verify: VerifyTypes, timeout: Optional[httpx.Timeout] = None
) -> httpx.Client:
    """Create a dedicated client for a single call.

    Redirects are not followed and no default headers are added beyond
    the ones each request sets explicitly.

    :param verify: TLS verification setting from :func:`build_verify`
    :type verify: VerifyTypes
    :param timeout: Optional timeout, httpx defaults otherwise
    :type timeout: Optional[httpx.Timeout]
    :return: New HTTP client
    :rtype: httpx.Client
    """
    logger.debug(
        "Creating HTTP client (verify=%s)",
        "custom-ca" if isinstance(verify, ssl.SSLContext) else verify,
    )
    return httpx.Client(
        verify=verify,
        timeout=timeout if timeout is not None else httpx.Timeout(5.0),
        follow_redirects=False,
    )
