"""
Type definitions for request signing functionality

This module provides the enums, data classes and header constants shared by
the action model, the canonical serializer and the CMS v3.5 request signer.
"""

from typing import Callable, Dict, Mapping
from dataclasses import dataclass, field
from enum import Enum

from ..exceptions import ValidationError, ErrorCodes
from ..version import __version__


# Header names used for communication with the API
KIT_VERSION_HEADER = "X-Akamai-NSKit"
ACTION_HEADER = "X-Akamai-ACS-Action"
AUTH_DATA_HEADER = "X-Akamai-ACS-Auth-Data"
AUTH_SIGN_HEADER = "X-Akamai-ACS-Auth-Sign"

KIT_VERSION = f"Python/{__version__}"

# Placeholder for the client and server addresses in the auth data header.
# The server derives the real client address from the connection.
UNRESOLVED_ADDRESS = "0.0.0.0"


class HttpMethod(str, Enum):
    """HTTP methods used by the storage API"""
    GET = "GET"
    HEAD = "HEAD"
    PUT = "PUT"
    POST = "POST"


class HashAlgorithm(str, Enum):
    """Plain digest algorithms used for upload checksums"""
    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"


class KeyedHashAlgorithm(str, Enum):
    """Keyed hash (HMAC) algorithms used for request signatures"""
    HMAC_MD5 = "hmac-md5"
    HMAC_SHA1 = "hmac-sha1"
    HMAC_SHA256 = "hmac-sha256"


class SignVersion(int, Enum):
    """
    Signature version tag sent in the auth data header.

    The tag selects the keyed hash the server uses to recompute the
    signature, so it must always match the algorithm used to sign.
    """
    HMAC_MD5 = 3
    HMAC_SHA1 = 4
    HMAC_SHA256 = 5

    @property
    def algorithm(self) -> KeyedHashAlgorithm:
        return _SIGN_VERSION_ALGORITHMS[self]


_SIGN_VERSION_ALGORITHMS = {
    SignVersion.HMAC_MD5: KeyedHashAlgorithm.HMAC_MD5,
    SignVersion.HMAC_SHA1: KeyedHashAlgorithm.HMAC_SHA1,
    SignVersion.HMAC_SHA256: KeyedHashAlgorithm.HMAC_SHA256,
}

DEFAULT_SIGN_VERSION = SignVersion.HMAC_SHA256


@dataclass(frozen=True)
class Credential:
    """
    Credential used to sign requests

    Attributes:
        hostname: Storage hostname (without port or protocol)
        username: Upload account name (the client token)
        key: Secret key associated with the upload account
    """
    hostname: str
    username: str
    key: str = field(repr=False)

    def __post_init__(self):
        """Validate credential fields"""
        for name in ("hostname", "username", "key"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ValidationError(
                    f"{name} cannot be empty.",
                    ErrorCodes.INVALID_CREDENTIAL,
                    {"field": name}
                )


@dataclass(frozen=True)
class SignedHeaders:
    """
    Headers computed for a single request attempt

    Attributes:
        action: Canonical action query string
        auth_data: Auth data header (version, addresses, time, nonce, user)
        auth_sign: Base64 keyed-hash signature
        kit_version: Client identifier, informational only
    """
    action: str
    auth_data: str
    auth_sign: str
    kit_version: str = KIT_VERSION

    def as_dict(self) -> Dict[str, str]:
        """Return the headers keyed by their wire names."""
        return {
            KIT_VERSION_HEADER: self.kit_version,
            ACTION_HEADER: self.action,
            AUTH_DATA_HEADER: self.auth_data,
            AUTH_SIGN_HEADER: self.auth_sign,
        }


def resolve_sign_version(value) -> SignVersion:
    """
    Coerce an int, name or SignVersion into a SignVersion.

    Raises:
        ValidationError: If the value does not name a known sign version
    """
    if isinstance(value, SignVersion):
        return value
    try:
        if isinstance(value, str) and not value.isdigit():
            return SignVersion[value.upper().replace("-", "_")]
        return SignVersion(int(value))
    except (KeyError, ValueError, TypeError):
        raise ValidationError(
            f"Unknown sign version: {value}",
            ErrorCodes.INVALID_CONFIG,
            {"available_versions": [v.value for v in SignVersion]}
        )


# Type aliases for convenience
NonceGenerator = Callable[[], int]
TimestampGenerator = Callable[[], int]
HeaderDict = Dict[str, str]
ParamMap = Mapping[str, str]
