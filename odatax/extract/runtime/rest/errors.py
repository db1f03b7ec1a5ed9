"""Turning non-success service replies into ServiceError."""

from __future__ import annotations

from typing import Any

from ...core.exceptions import ErrorDetail, ServiceError, ServiceErrorBody
from .response import ResponseContainer


def parse_service_error(response: ResponseContainer) -> ServiceErrorBody | None:
    """Parse an OData JSON error payload.

    Returns None when the body is empty, not JSON, or not an error object.
    XML error documents are not parsed.
    """
    if not response.body:
        return None
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict) or not isinstance(payload.get("error"), dict):
        return None

    error = payload["error"]
    inner = error.get("innererror")
    raw_details = inner.get("errordetails", []) if isinstance(inner, dict) else []
    # Some gateways wrap the list in {"errordetail": [...]}
    if isinstance(raw_details, dict):
        raw_details = raw_details.get("errordetail", [])
    if isinstance(raw_details, dict):
        raw_details = [raw_details]

    details = [
        ErrorDetail(
            code=item.get("code"),
            message=_message_text(item.get("message")),
            property_ref=item.get("propertyref"),
            severity=item.get("severity"),
            target=item.get("target"),
        )
        for item in raw_details
        if isinstance(item, dict)
    ]
    return ServiceErrorBody(
        code=error.get("code"),
        message=_message_text(error.get("message")),
        details=details,
    )


def raise_for_service_error(response: ResponseContainer, action: str) -> ResponseContainer:
    """Return the response if it succeeded, else raise ServiceError.

    Args:
        response: Response to check
        action: What was being done, for the error message (e.g. "fetch record count")

    Raises:
        ServiceError: On any non-2xx status
    """
    if response.is_success:
        return response

    error = parse_service_error(response)
    message = f"Failed to {action}: {response.status_code} {response.status_message}".rstrip()
    if error and error.message:
        message = f"{message} - {error.message}"
    raise ServiceError(
        message,
        status_code=response.status_code,
        response=response,
        error=error,
    )


def _message_text(message: Any) -> str | None:
    """OData v2 nests the text as ``{"lang": ..., "value": ...}``."""
    if isinstance(message, dict):
        return message.get("value")
    return message
