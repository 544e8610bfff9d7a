"""
NetStorage Python SDK - Request Signing Module

Action model, canonical action serialization and the CMS v3.5 keyed-hash
request signer used to authenticate with the storage API.
"""

from .types import (
    KIT_VERSION,
    KIT_VERSION_HEADER,
    ACTION_HEADER,
    AUTH_DATA_HEADER,
    AUTH_SIGN_HEADER,
    DEFAULT_SIGN_VERSION,
    Credential,
    SignedHeaders,
    SignVersion,
    HashAlgorithm,
    KeyedHashAlgorithm,
    HttpMethod,
    resolve_sign_version,
)

from .formatters import (
    format_default,
    format_timestamp,
    format_bytes,
    format_flag,
)

from .action import (
    Action,
    ParameterSpec,
    ACTION_PARAMETERS,
    PROTOCOL_VERSION,
    QUICK_DELETE_CONFIRMATION,
)

from .canonical import (
    serialize_action,
    convert_map_as_query_params,
)

from .cms_signer import (
    CMSRequestSigner,
    create_signer,
    compute_headers,
)

from .utils import (
    BUFFER_SIZE,
    generate_nonce,
    generate_timestamp,
    compute_hash,
    compute_keyed_hash,
    encode_hex,
    encode_base64,
    read_to_end,
)

from . import builders

# Public API exports
__all__ = [
    # Core signing functionality
    'CMSRequestSigner',
    'create_signer',
    'compute_headers',
    # Types
    'Credential',
    'SignedHeaders',
    'SignVersion',
    'HashAlgorithm',
    'KeyedHashAlgorithm',
    'HttpMethod',
    'resolve_sign_version',
    'KIT_VERSION',
    'KIT_VERSION_HEADER',
    'ACTION_HEADER',
    'AUTH_DATA_HEADER',
    'AUTH_SIGN_HEADER',
    'DEFAULT_SIGN_VERSION',
    # Action model
    'Action',
    'ParameterSpec',
    'ACTION_PARAMETERS',
    'PROTOCOL_VERSION',
    'QUICK_DELETE_CONFIRMATION',
    'builders',
    # Serialization
    'serialize_action',
    'convert_map_as_query_params',
    'format_default',
    'format_timestamp',
    'format_bytes',
    'format_flag',
    # Utilities
    'BUFFER_SIZE',
    'generate_nonce',
    'generate_timestamp',
    'compute_hash',
    'compute_keyed_hash',
    'encode_hex',
    'encode_base64',
    'read_to_end',
]
