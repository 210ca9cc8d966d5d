"""Library version information."""

__version__ = "0.2.2"


def version() -> str:
    """Return the library version string.

    :return: Version of this client library
    :rtype: str
    """
    return __version__
