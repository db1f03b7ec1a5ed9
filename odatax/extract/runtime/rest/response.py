"""Normalized response of a single service call."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ResponseContainer:
    """Status, version header and fully-read body of one HTTP response.

    The body is read eagerly so the connection can go back to the pool before
    the caller starts processing data.

    Attributes:
        status_code: HTTP status code
        status_message: HTTP reason phrase
        service_version: ``DataServiceVersion`` header value, if sent
        body: Response body (empty when the service sent none)
    """

    status_code: int
    status_message: str = ""
    service_version: str | None = None
    body: bytes = b""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def text(self, encoding: str = "utf-8") -> str:
        return self.body.decode(encoding, errors="replace")

    def json(self) -> Any:
        return json.loads(self.body)
