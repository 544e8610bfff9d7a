"""
Connection configuration for the NetStorage SDK

Settings are supplied by the caller; ``NetStorageConfig.from_env`` is a
convenience for reading them from environment variables.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Union

from .exceptions import ValidationError, ErrorCodes
from .signing.types import DEFAULT_SIGN_VERSION, SignVersion, resolve_sign_version

DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_READ_TIMEOUT = 30.0

ENV_HOST = "NETSTORAGE_HOST"
ENV_USE_SSL = "NETSTORAGE_USE_SSL"
ENV_CONNECT_TIMEOUT = "NETSTORAGE_CONNECT_TIMEOUT"
ENV_READ_TIMEOUT = "NETSTORAGE_READ_TIMEOUT"
ENV_SIGN_VERSION = "NETSTORAGE_SIGN_VERSION"

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class NetStorageConfig:
    """Configuration for a NetStorage host connection."""
    hostname: str
    use_ssl: bool = False
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    read_timeout: float = DEFAULT_READ_TIMEOUT
    sign_version: Union[SignVersion, int, str] = DEFAULT_SIGN_VERSION

    def __post_init__(self):
        """Validate connection configuration."""
        if not self.hostname:
            raise ValidationError("hostname cannot be empty", ErrorCodes.INVALID_CONFIG)

        if "/" in self.hostname or "://" in self.hostname:
            raise ValidationError(
                f"hostname must not include a protocol or path: {self.hostname}",
                ErrorCodes.INVALID_CONFIG
            )

        if self.connect_timeout <= 0 or self.read_timeout <= 0:
            raise ValidationError("Timeouts must be positive", ErrorCodes.INVALID_CONFIG)

        self.sign_version = resolve_sign_version(self.sign_version)

    @property
    def scheme(self) -> str:
        return "https" if self.use_ssl else "http"

    @property
    def timeout(self):
        """Timeout tuple in the form requests expects."""
        return (self.connect_timeout, self.read_timeout)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "NetStorageConfig":
        """
        Build a configuration from NETSTORAGE_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ
            **overrides: Explicit values that win over the environment

        Raises:
            ValidationError: If a value is missing or malformed
        """
        env = os.environ if environ is None else environ
        values = {}

        if ENV_HOST in env:
            values["hostname"] = env[ENV_HOST]
        if ENV_USE_SSL in env:
            values["use_ssl"] = env[ENV_USE_SSL].strip().lower() in _TRUE_VALUES
        if ENV_SIGN_VERSION in env:
            values["sign_version"] = env[ENV_SIGN_VERSION]

        for key, name in ((ENV_CONNECT_TIMEOUT, "connect_timeout"), (ENV_READ_TIMEOUT, "read_timeout")):
            if key in env:
                try:
                    values[name] = float(env[key])
                except ValueError:
                    raise ValidationError(f"{key} must be a number", ErrorCodes.INVALID_CONFIG)

        values.update({k: v for k, v in overrides.items() if v is not None})
        if not values.get("hostname"):
            raise ValidationError(f"{ENV_HOST} is not set", ErrorCodes.INVALID_CONFIG)

        return cls(**values)
