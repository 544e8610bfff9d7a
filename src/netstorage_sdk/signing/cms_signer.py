"""
CMS v3.5 request signer

This module computes the authentication headers of the storage API: the
canonical action header, the auth data header (sign version, placeholder
addresses, time, nonce and user) and the keyed-hash signature over both.
"""

import logging
from typing import Optional, Union

from ..exceptions import ValidationError, ErrorCodes
from .action import Action
from .canonical import serialize_action
from .types import (
    ACTION_HEADER,
    DEFAULT_SIGN_VERSION,
    UNRESOLVED_ADDRESS,
    Credential,
    NonceGenerator,
    SignedHeaders,
    SignVersion,
    TimestampGenerator,
    resolve_sign_version,
)
from .utils import (
    compute_keyed_hash,
    encode_base64,
    generate_nonce,
    generate_timestamp,
)

logger = logging.getLogger(__name__)


class CMSRequestSigner:
    """
    Signer for the NetStorage CMS v3.5 authentication scheme.

    The signer holds no per-request state: every call to compute_headers
    draws a fresh timestamp and nonce, so one instance may be shared across
    threads.
    """

    def __init__(
        self,
        sign_version: Union[SignVersion, int, str] = DEFAULT_SIGN_VERSION,
        nonce_generator: Optional[NonceGenerator] = None,
        timestamp_generator: Optional[TimestampGenerator] = None
    ):
        """
        Initialize the signer.

        Args:
            sign_version: Keyed hash strength (3 = MD5, 4 = SHA-1, 5 = SHA-256)
            nonce_generator: Optional custom nonce generator function
            timestamp_generator: Optional custom timestamp generator function

        Raises:
            ValidationError: If the sign version is unknown
        """
        self.sign_version = resolve_sign_version(sign_version)
        self.nonce_generator = nonce_generator or generate_nonce
        self.timestamp_generator = timestamp_generator or generate_timestamp

    def get_action_header_value(self, action: Action) -> str:
        """Canonical query string for the action header."""
        return serialize_action(action)

    def get_auth_data_header_value(self, credential: Credential) -> str:
        """
        Build the auth data header for one request attempt.

        Args:
            credential: Credential supplying the username

        Returns:
            str: ``"<version>, 0.0.0.0, 0.0.0.0, <time>, <nonce>, <username>"``
        """
        timestamp = self.timestamp_generator()
        nonce = self.nonce_generator()

        if not isinstance(nonce, int) or nonce < 0:
            raise ValidationError(
                f"Invalid nonce: {nonce}",
                ErrorCodes.INVALID_PARAMETER,
                {"nonce": nonce}
            )

        return (
            f"{self.sign_version.value}, {UNRESOLVED_ADDRESS}, {UNRESOLVED_ADDRESS}, "
            f"{int(timestamp)}, {nonce}, {credential.username}"
        )

    def get_auth_sign_header_value(
        self,
        action: str,
        auth_data: str,
        credential: Credential,
        url_path: str
    ) -> str:
        """
        Compute the base64 keyed-hash signature.

        Args:
            action: Action header value exactly as sent
            auth_data: Auth data header value exactly as sent
            credential: Credential supplying the secret key
            url_path: Request path exactly as sent (URL-encoded)

        Returns:
            str: Base64 encoded HMAC using the sign version's algorithm
        """
        sign_data = f"{auth_data}{url_path}\n{ACTION_HEADER.lower()}:{action}\n"
        signature = compute_keyed_hash(
            sign_data.encode("utf-8"),
            credential.key,
            self.sign_version.algorithm
        )
        return encode_base64(signature)

    def compute_headers(self, action: Action, credential: Credential, url_path: str) -> SignedHeaders:
        """
        Compute all request headers for one attempt.

        Args:
            action: Action to sign (sealed as a side effect)
            credential: Signing credential
            url_path: Request path exactly as sent

        Returns:
            SignedHeaders: Kit, action, auth data and auth sign headers
        """
        action_value = self.get_action_header_value(action)
        auth_data = self.get_auth_data_header_value(credential)
        auth_sign = self.get_auth_sign_header_value(action_value, auth_data, credential, url_path)

        logger.debug(f"Signed '{action.action}' for {url_path} (sign version {self.sign_version.value})")

        return SignedHeaders(action=action_value, auth_data=auth_data, auth_sign=auth_sign)


def create_signer(sign_version: Union[SignVersion, int, str] = DEFAULT_SIGN_VERSION) -> CMSRequestSigner:
    """
    Create a new CMS request signer.

    Args:
        sign_version: Keyed hash strength

    Returns:
        CMSRequestSigner: Configured signer instance
    """
    return CMSRequestSigner(sign_version)


def compute_headers(
    action: Action,
    credential: Credential,
    url_path: str,
    sign_version: Union[SignVersion, int, str] = DEFAULT_SIGN_VERSION
) -> SignedHeaders:
    """
    Sign one request with a throwaway signer.

    Args:
        action: Action to sign
        credential: Signing credential
        url_path: Request path exactly as sent
        sign_version: Keyed hash strength

    Returns:
        SignedHeaders: Freshly computed headers
    """
    return create_signer(sign_version).compute_headers(action, credential, url_path)
