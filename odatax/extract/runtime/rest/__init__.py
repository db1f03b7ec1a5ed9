"""REST runtime abstractions."""

from ...core.exceptions import ConnectionFailedError
from .auth import AuthScheme, BasicAuthScheme, BearerAuthScheme
from .errors import parse_service_error, raise_for_service_error
from .http_client import CONNECTION_TIMEOUT, HTTPClient
from .response import ResponseContainer
from .retry import RetryingTransport, RetryPolicy
from .token import (
    IdpAssertionProvider,
    InMemoryTokenCache,
    StaticAssertionProvider,
    TokenCache,
    TokenManager,
    default_token_cache,
)
from .transport import ODataTransport
from .urls import ODataUrlBuilder

__all__ = [
    "CONNECTION_TIMEOUT",
    "HTTPClient",
    "ResponseContainer",
    "AuthScheme",
    "BasicAuthScheme",
    "BearerAuthScheme",
    "TokenCache",
    "InMemoryTokenCache",
    "default_token_cache",
    "TokenManager",
    "StaticAssertionProvider",
    "IdpAssertionProvider",
    "ODataTransport",
    "ConnectionFailedError",
    "RetryingTransport",
    "RetryPolicy",
    "ODataUrlBuilder",
    "parse_service_error",
    "raise_for_service_error",
]
