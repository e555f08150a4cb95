"""
Configuration for the federation resolver.

Settings are loaded from environment variables prefixed with ``FEDERATION_``
(for example ``FEDERATION_HTTP_TIMEOUT=5``), with defaults suitable for
interactive use.
"""

import logging
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Resolver settings.

    Only transport and process concerns are configurable; the protocol itself
    (well-known path, query parameters) is fixed.
    """

    model_config = SettingsConfigDict(env_prefix="FEDERATION_")

    http_timeout: float = Field(default=10.0, gt=0)
    """
    Total timeout in seconds for each outbound request.
    Set with FEDERATION_HTTP_TIMEOUT environment variable.
    """

    user_agent: str = "stellar-federation"
    """
    User-Agent header sent with every request.
    Set with FEDERATION_USER_AGENT environment variable.
    """

    log_level: str = "INFO"
    """
    Root log level used by the command line interface.
    Set with FEDERATION_LOG_LEVEL environment variable.
    """

    sentry_dsn: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("federation_sentry_dsn", "sentry_dsn"),
    )
    """
    Sentry DSN for error reporting. Optional, no error reporting if not set.
    Set with FEDERATION_SENTRY_DSN or SENTRY_DSN environment variables.
    """

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level {v!r}")
        return level
