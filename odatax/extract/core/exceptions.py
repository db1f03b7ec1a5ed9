"""Custom exception hierarchy."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..runtime.rest.response import ResponseContainer


class ExtractError(Exception):
    """Base exception for all library errors."""

    pass


class InvalidRangeError(ExtractError, ValueError):
    """Skip/fetch settings leave no records to extract.

    Raised by the partition planner when, after applying the skip and fetch
    row counts to the available record count, nothing remains to read.
    """

    def __init__(
        self,
        message: str,
        available_record_count: int | None = None,
        skip_row_count: int | None = None,
        fetch_row_count: int | None = None,
    ) -> None:
        super().__init__(message)
        self.available_record_count = available_record_count
        self.skip_row_count = skip_row_count
        self.fetch_row_count = fetch_row_count


class ConfigurationError(ExtractError, ValueError):
    """Connector or extraction settings are missing or inconsistent."""

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []


class TransportError(ExtractError):
    """A call to the remote service failed.

    Wraps connection, timeout, invalid-URL and protocol errors. The original
    exception is kept as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: ResponseContainer | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class ConnectionFailedError(TransportError):
    """The request never produced a response (connection, timeout, I/O)."""

    pass


class AuthError(TransportError):
    """Access token could not be obtained."""

    pass


class AuthConnectionError(AuthError, ConnectionFailedError):
    """The token or assertion endpoint could not be reached."""

    pass


class RetryExhaustedError(TransportError):
    """Every retry attempt ended in a retryable failure."""

    def __init__(
        self,
        message: str,
        attempts: int,
        status_code: int | None = None,
        response: ResponseContainer | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code, response=response)
        self.attempts = attempts


@dataclass(frozen=True)
class ErrorDetail:
    """One entry of an OData ``innererror.errordetails`` list."""

    code: str | None = None
    message: str | None = None
    property_ref: str | None = None
    severity: str | None = None
    target: str | None = None


@dataclass(frozen=True)
class ServiceErrorBody:
    """Parsed OData error payload."""

    code: str | None = None
    message: str | None = None
    details: list[ErrorDetail] = field(default_factory=list)


class ServiceError(TransportError):
    """The service answered, but not with a success status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: ResponseContainer | None = None,
        error: ServiceErrorBody | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code, response=response)
        self.error = error
