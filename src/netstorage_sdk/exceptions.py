"""
Exception classes for NetStorage Python SDK
"""

from typing import Optional, Dict, Any, Mapping


class ErrorCodes:
    """Standard error codes carried by SDK exceptions"""

    # Construction errors
    INVALID_CREDENTIAL = "INVALID_CREDENTIAL"
    INVALID_CONFIG = "INVALID_CONFIG"
    INVALID_PARAMETER = "INVALID_PARAMETER"
    ACTION_SEALED = "ACTION_SEALED"

    # Response errors
    CLOCK_SKEW = "CLOCK_SKEW"
    UNEXPECTED_RESPONSE = "UNEXPECTED_RESPONSE"

    # Transport errors
    COMMUNICATION_ERROR = "COMMUNICATION_ERROR"
    TIMEOUT = "TIMEOUT"


class NetStorageSDKError(Exception):
    """Base exception for all NetStorage SDK errors"""

    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ValidationError(NetStorageSDKError):
    """Exception raised for invalid credentials, configuration or action parameters"""

    def __init__(self, message: str, error_code: str = ErrorCodes.INVALID_PARAMETER,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class ClockSkewError(NetStorageSDKError):
    """
    Exception raised when a failed response carries a Date header too far
    from the local clock.

    Signatures are time-bound, so the fix is to synchronise the system clock
    rather than to inspect the server response.
    """

    def __init__(self, message: str, http_status: int = 0, skew_seconds: float = 0.0,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCodes.CLOCK_SKEW, details)
        self.http_status = http_status
        self.skew_seconds = skew_seconds


class NetStorageAPIError(NetStorageSDKError):
    """Exception raised for any non-200 response from the API"""

    def __init__(self, message: str, http_status: int = 0, reason: str = "",
                 headers: Optional[Mapping[str, str]] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCodes.UNEXPECTED_RESPONSE, details)
        self.http_status = http_status
        self.reason = reason
        self.headers = dict(headers or {})


class CommunicationError(NetStorageSDKError):
    """Exception raised for I/O failures while signing, connecting, streaming or reading"""

    def __init__(self, message: str = "Communication Error", cause: Optional[BaseException] = None,
                 error_code: str = ErrorCodes.COMMUNICATION_ERROR,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
        self.cause = cause


class CommunicationTimeoutError(CommunicationError):
    """Exception raised when a connect or read timeout expires"""

    def __init__(self, message: str = "Communication Timeout", cause: Optional[BaseException] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, cause, ErrorCodes.TIMEOUT, details)
