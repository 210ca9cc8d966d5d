"""Configuration settings for cclib.

This module defines the process-wide defaults applied to every new
request context: API endpoints, client version tag, cache tag, TLS
policy, timeouts and logging. Settings are loaded from environment
variables (prefixed with ``CCLIB_``) and ``.env`` files.
"""

from pathlib import Path
from typing import Literal, Optional

import httpx
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..utils.http.client import create_timeout
from ..version import __version__


class Settings(BaseSettings):
    """Library settings loaded from environment variables.

    :param api_url: Default base URL of the API
    :type api_url: str
    :param token_source_url: Default URL used to obtain a new token
    :type token_source_url: str
    :param version: Client/protocol version tag stored on each request
    :type version: str
    :param cache: Cache mode tag stored on each request
    :type cache: str
    :param ssl_check: Whether TLS certificates are verified by default
    :type ssl_check: bool
    :param ca_certs: Optional PEM bundle of trusted root certificates
    :type ca_certs: Optional[Path]
    :param debug: Log outgoing requests and responses at DEBUG level
    :type debug: bool
    :param log_level: Logging level for the ``cclib`` logger
    :type log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    """

    model_config = SettingsConfigDict(
        env_prefix="CCLIB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Endpoints
    api_url: str = Field(
        "https://api.cloudcontrolled.com", description="API base URL"
    )
    token_source_url: str = Field(
        "https://api.cloudcontrolled.com/token/",
        description="URL used to obtain a new token",
    )

    # Request defaults
    version: str = Field(__version__, description="Client version tag")
    cache: str = Field("", description="Cache mode tag")
    ssl_check: bool = Field(True, description="Verify TLS certificates")
    ca_certs: Optional[Path] = Field(
        None, description="PEM bundle of trusted root certificates"
    )

    # Timeouts (seconds)
    timeout_connect: float = Field(5.0, gt=0)
    timeout_read: float = Field(30.0, gt=0)
    timeout_write: float = Field(10.0, gt=0)
    timeout_pool: float = Field(5.0, gt=0)

    # Logging
    debug: bool = Field(False, description="Trace requests and responses")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "WARNING", description="Logging level"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept lower-case level names from the environment.

        :param v: Raw log level value
        :return: Upper-cased log level
        """
        if isinstance(v, str):
            return v.upper()
        return v

    @property
    def effective_log_level(self) -> str:
        """Get the log level, forced to DEBUG when tracing is enabled.

        :return: Logging level name
        :rtype: str
        """
        return "DEBUG" if self.debug else self.log_level

    @property
    def timeout(self) -> httpx.Timeout:
        """Get the configured client timeout.

        :return: Timeout configuration for httpx clients
        :rtype: httpx.Timeout
        """
        return create_timeout(
            connect=self.timeout_connect,
            read=self.timeout_read,
            write=self.timeout_write,
            pool=self.timeout_pool,
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use.

    :return: Shared settings instance
    :rtype: Settings
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Re-read settings from the environment.

    :return: Freshly loaded settings instance
    :rtype: Settings
    """
    global _settings
    _settings = Settings()
    return _settings
