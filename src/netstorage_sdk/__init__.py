"""
NetStorage Python SDK
Request signing and transport for the NetStorage CMS v3.5 API
"""

from .version import __version__
from .exceptions import (
    ErrorCodes,
    NetStorageSDKError,
    ValidationError,
    ClockSkewError,
    NetStorageAPIError,
    CommunicationError,
    CommunicationTimeoutError,
)
from .config import (
    NetStorageConfig,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_READ_TIMEOUT,
)
from .signing import (
    # Core signing functionality
    CMSRequestSigner,
    create_signer,
    compute_headers,
    # Types
    Credential,
    SignedHeaders,
    SignVersion,
    HashAlgorithm,
    KeyedHashAlgorithm,
    HttpMethod,
    # Action model
    Action,
    ParameterSpec,
    ACTION_PARAMETERS,
    builders,
    # Serialization
    serialize_action,
    convert_map_as_query_params,
    # Utilities
    compute_hash,
    compute_keyed_hash,
    read_to_end,
)
from .transport import (
    RequestExecutor,
    ResponseStream,
    UploadBody,
    ExecutorState,
    CHUNK_SIZE,
    CLOCK_SKEW_TOLERANCE,
)
from .http_client import (
    NetStorageClient,
    create_client,
)

# Public API exports
__all__ = [
    '__version__',
    # Exceptions
    'ErrorCodes',
    'NetStorageSDKError',
    'ValidationError',
    'ClockSkewError',
    'NetStorageAPIError',
    'CommunicationError',
    'CommunicationTimeoutError',
    # Configuration
    'NetStorageConfig',
    'DEFAULT_CONNECT_TIMEOUT',
    'DEFAULT_READ_TIMEOUT',
    # Request Signing
    'CMSRequestSigner',
    'create_signer',
    'compute_headers',
    'Credential',
    'SignedHeaders',
    'SignVersion',
    'HashAlgorithm',
    'KeyedHashAlgorithm',
    'HttpMethod',
    'Action',
    'ParameterSpec',
    'ACTION_PARAMETERS',
    'builders',
    'serialize_action',
    'convert_map_as_query_params',
    'compute_hash',
    'compute_keyed_hash',
    'read_to_end',
    # Transport
    'RequestExecutor',
    'ResponseStream',
    'UploadBody',
    'ExecutorState',
    'CHUNK_SIZE',
    'CLOCK_SKEW_TOLERANCE',
    # Client
    'NetStorageClient',
    'create_client',
]
