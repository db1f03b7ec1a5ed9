"""odatax-extract - Parallel batch extraction from paginated OData services."""

from .api import ODataService
from .config import ConnectorConfig, ExtractionConfig
from .core import (
    AssertionTokenType,
    AuthConnectionError,
    AuthError,
    AuthType,
    ConfigurationError,
    ConnectionFailedError,
    ErrorDetail,
    ExtractError,
    InvalidRangeError,
    MediaType,
    RetryExhaustedError,
    ServiceError,
    ServiceErrorBody,
    TransportError,
)
from .runtime.extraction import ExtractionExecutor, SplitReader, SplitResult
from .runtime.partitioning import (
    PartitionPlan,
    PartitionPlanner,
    PartitionPolicy,
    PlanRequest,
    Split,
    plan_splits,
)
from .runtime.rest import (
    BasicAuthScheme,
    BearerAuthScheme,
    HTTPClient,
    InMemoryTokenCache,
    ODataTransport,
    ODataUrlBuilder,
    ResponseContainer,
    RetryingTransport,
    RetryPolicy,
    TokenCache,
    TokenManager,
)

__version__ = "0.1.0"

__all__ = [
    # Facade
    "ODataService",
    # Config
    "ConnectorConfig",
    "ExtractionConfig",
    # Enums
    "AuthType",
    "AssertionTokenType",
    "MediaType",
    # Exceptions
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
    # Partitioning
    "PartitionPlanner",
    "PartitionPolicy",
    "PartitionPlan",
    "PlanRequest",
    "Split",
    "plan_splits",
    # Transport
    "HTTPClient",
    "ResponseContainer",
    "ODataTransport",
    "RetryingTransport",
    "RetryPolicy",
    "BasicAuthScheme",
    "BearerAuthScheme",
    "TokenManager",
    "TokenCache",
    "InMemoryTokenCache",
    "ODataUrlBuilder",
    # Extraction
    "ExtractionExecutor",
    "SplitReader",
    "SplitResult",
]
