"""
Tests for connection configuration
"""

import pytest

from netstorage_sdk.config import (
    NetStorageConfig,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_READ_TIMEOUT,
)
from netstorage_sdk.exceptions import ValidationError, ErrorCodes
from netstorage_sdk.signing import SignVersion


class TestNetStorageConfig:
    """Test NetStorageConfig validation and functionality."""

    def test_defaults(self):
        config = NetStorageConfig(hostname="example.akamaihd.net")
        assert config.use_ssl is False
        assert config.scheme == "http"
        assert config.timeout == (DEFAULT_CONNECT_TIMEOUT, DEFAULT_READ_TIMEOUT) == (10.0, 30.0)
        assert config.sign_version is SignVersion.HMAC_SHA256

    def test_ssl(self):
        assert NetStorageConfig(hostname="example.akamaihd.net", use_ssl=True).scheme == "https"

    def test_sign_version_coerced(self):
        assert NetStorageConfig(hostname="h", sign_version="3").sign_version is SignVersion.HMAC_MD5

    @pytest.mark.parametrize("hostname", ["", "http://example.akamaihd.net", "example.akamaihd.net/1234"])
    def test_invalid_hostname(self, hostname):
        with pytest.raises(ValidationError) as exc_info:
            NetStorageConfig(hostname=hostname)
        assert exc_info.value.error_code == ErrorCodes.INVALID_CONFIG

    def test_invalid_timeout(self):
        with pytest.raises(ValidationError, match="Timeouts must be positive"):
            NetStorageConfig(hostname="h", connect_timeout=0)
        with pytest.raises(ValidationError):
            NetStorageConfig(hostname="h", read_timeout=-1)

    def test_invalid_sign_version(self):
        with pytest.raises(ValidationError, match="Unknown sign version"):
            NetStorageConfig(hostname="h", sign_version=7)


class TestConfigFromEnv:
    """Test reading configuration from the environment."""

    def test_from_env(self):
        config = NetStorageConfig.from_env({
            "NETSTORAGE_HOST": "example.akamaihd.net",
            "NETSTORAGE_USE_SSL": "true",
            "NETSTORAGE_CONNECT_TIMEOUT": "2.5",
            "NETSTORAGE_READ_TIMEOUT": "60",
            "NETSTORAGE_SIGN_VERSION": "4",
        })
        assert config.hostname == "example.akamaihd.net"
        assert config.use_ssl is True
        assert config.timeout == (2.5, 60.0)
        assert config.sign_version is SignVersion.HMAC_SHA1

    def test_overrides_win(self):
        config = NetStorageConfig.from_env(
            {"NETSTORAGE_HOST": "a.akamaihd.net", "NETSTORAGE_USE_SSL": "0"},
            hostname="b.akamaihd.net",
            read_timeout=None
        )
        assert config.hostname == "b.akamaihd.net"
        assert config.use_ssl is False
        assert config.read_timeout == DEFAULT_READ_TIMEOUT

    def test_missing_host(self):
        with pytest.raises(ValidationError, match="NETSTORAGE_HOST is not set"):
            NetStorageConfig.from_env({})

    def test_bad_timeout(self):
        with pytest.raises(ValidationError, match="NETSTORAGE_READ_TIMEOUT must be a number"):
            NetStorageConfig.from_env({"NETSTORAGE_HOST": "h", "NETSTORAGE_READ_TIMEOUT": "soon"})

    def test_os_environ(self, monkeypatch):
        monkeypatch.setenv("NETSTORAGE_HOST", "env.akamaihd.net")
        assert NetStorageConfig.from_env().hostname == "env.akamaihd.net"
