"""
Utility functions for request signing

This module provides nonce and timestamp generation, plain and keyed hash
computation, and the hex/base64 encodings used by the action formatters and
the request signer.
"""

import base64
import secrets
import time
from typing import BinaryIO, Optional, Union

from cryptography.hazmat.primitives import hashes, hmac

from .types import HashAlgorithm, KeyedHashAlgorithm

# Read/write buffer used for checksums, uploads and draining responses
BUFFER_SIZE = 1024 * 1024

# Nonces are non-negative and fit a signed 32 bit integer
NONCE_UPPER_BOUND = 2 ** 31 - 1

_HASHES = {
    HashAlgorithm.MD5: hashes.MD5,
    HashAlgorithm.SHA1: hashes.SHA1,
    HashAlgorithm.SHA256: hashes.SHA256,
}

_KEYED_HASHES = {
    KeyedHashAlgorithm.HMAC_MD5: hashes.MD5,
    KeyedHashAlgorithm.HMAC_SHA1: hashes.SHA1,
    KeyedHashAlgorithm.HMAC_SHA256: hashes.SHA256,
}


def generate_nonce() -> int:
    """
    Generate a fresh non-negative nonce for the auth data header.

    The nonce only has to keep near-simultaneous requests issued in the same
    second from producing identical signatures.

    Returns:
        int: Random integer in [0, 2**31 - 1)
    """
    return secrets.randbelow(NONCE_UPPER_BOUND)


def generate_timestamp() -> int:
    """
    Generate current Unix timestamp.

    Returns:
        int: Current Unix timestamp (seconds since epoch)
    """
    return int(time.time())


def compute_hash(stream: Optional[BinaryIO], algorithm: HashAlgorithm = HashAlgorithm.SHA256) -> Optional[bytes]:
    """
    Compute a plain digest over everything readable from a stream.

    Args:
        stream: Binary stream to consume (None yields None)
        algorithm: Digest algorithm

    Returns:
        bytes: Raw digest, or None when no stream was given
    """
    if stream is None:
        return None

    digest = hashes.Hash(_HASHES[HashAlgorithm(algorithm)]())
    while True:
        chunk = stream.read(BUFFER_SIZE)
        if not chunk:
            break
        digest.update(chunk)
    return digest.finalize()


def compute_keyed_hash(
    data: Optional[bytes],
    key: Optional[str],
    algorithm: KeyedHashAlgorithm = KeyedHashAlgorithm.HMAC_SHA256
) -> Optional[bytes]:
    """
    Compute an HMAC over data with a UTF-8 encoded secret key.

    Args:
        data: Message bytes
        key: Secret key
        algorithm: Keyed hash algorithm

    Returns:
        bytes: Raw HMAC, or None when data or key is missing
    """
    if data is None or key is None:
        return None

    mac = hmac.HMAC(key.encode("utf-8"), _KEYED_HASHES[KeyedHashAlgorithm(algorithm)]())
    mac.update(data)
    return mac.finalize()


def encode_hex(value: Optional[Union[bytes, bytearray]]) -> Optional[str]:
    """Lower-case hex, two digits per byte, no separators."""
    if value is None:
        return None
    return bytes(value).hex()


def encode_base64(value: Optional[bytes]) -> Optional[str]:
    """Standard base64 with padding."""
    if value is None:
        return None
    return base64.b64encode(value).decode("ascii")


def read_to_end(stream) -> None:
    """
    Drain a readable stream without keeping its content.

    Args:
        stream: Object with a read(size) method; None is ignored
    """
    if stream is None:
        return
    while stream.read(BUFFER_SIZE):
        pass
