"""Core components."""

from .enums import AssertionTokenType, AuthType, MediaType
from .exceptions import (
    AuthConnectionError,
    AuthError,
    ConfigurationError,
    ConnectionFailedError,
    ErrorDetail,
    ExtractError,
    InvalidRangeError,
    RetryExhaustedError,
    ServiceError,
    ServiceErrorBody,
    TransportError,
)

__all__ = [
    "AuthType",
    "AssertionTokenType",
    "MediaType",
    "ExtractError",
    "InvalidRangeError",
    "ConfigurationError",
    "TransportError",
    "AuthError",
    "AuthConnectionError",
    "ConnectionFailedError",
    "RetryExhaustedError",
    "ServiceError",
    "ServiceErrorBody",
    "ErrorDetail",
]
