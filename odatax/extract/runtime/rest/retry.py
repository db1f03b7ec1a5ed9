"""Retry policy layered over the single-call transport.

Only transient failures are retried: responses with a 5xx status and calls
that never got a response. Anything else, 4xx included, is handed back
immediately so configuration problems are not hidden behind retries.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from ...core.enums import MediaType
from ...core.exceptions import ConnectionFailedError, RetryExhaustedError
from ...utils.retry import RetryError, retry_async
from .response import ResponseContainer
from .transport import ODataTransport

logger = logging.getLogger(__name__)

DEFAULT_INITIAL_RETRY_DURATION = 2.0
DEFAULT_MAX_RETRY_DURATION = 10.0
DEFAULT_RETRY_MULTIPLIER = 2.0
DEFAULT_MAX_RETRY_COUNT = 3


@dataclass(frozen=True)
class RetryPolicy:
    """Backoff settings for one call.

    Attributes:
        initial_delay: Wait before the first retry, in seconds
        max_delay: Upper bound on any wait, in seconds
        multiplier: Growth factor between consecutive waits
        max_attempts: Maximum number of retries after the first call
    """

    initial_delay: float = DEFAULT_INITIAL_RETRY_DURATION
    max_delay: float = DEFAULT_MAX_RETRY_DURATION
    multiplier: float = DEFAULT_RETRY_MULTIPLIER
    max_attempts: int = DEFAULT_MAX_RETRY_COUNT

    def __post_init__(self) -> None:
        if self.initial_delay <= 0:
            raise ValueError("Initial retry duration must be greater than 0.")
        if self.max_delay <= 0:
            raise ValueError("Max retry duration must be greater than 0.")
        if self.multiplier < 1:
            raise ValueError("Retry multiplier must be at least 1.")
        if self.max_attempts <= 0:
            raise ValueError("Max retry count must be greater than 0.")


def is_retryable_response(response: ResponseContainer) -> bool:
    return response.status_code >= 500


def is_retryable_error(error: BaseException) -> bool:
    """Connection failures, including an unreachable token endpoint."""
    return isinstance(error, ConnectionFailedError)


class RetryingTransport:
    """Wraps an ODataTransport with a backoff-retry policy."""

    def __init__(
        self,
        transport: ODataTransport,
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._transport = transport
        self._policy = policy or RetryPolicy()
        self._sleep = sleep

    @property
    def transport(self) -> ODataTransport:
        return self._transport

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    async def call(
        self,
        endpoint: str,
        accept_media_type: MediaType | str = MediaType.JSON,
        policy: RetryPolicy | None = None,
    ) -> ResponseContainer:
        """Call with the transport's default policy, or the one given."""
        policy = policy or self._policy
        return await self.call_with_retry(
            endpoint,
            accept_media_type,
            initial_delay=policy.initial_delay,
            max_delay=policy.max_delay,
            multiplier=policy.multiplier,
            max_attempts=policy.max_attempts,
        )

    async def call_with_retry(
        self,
        endpoint: str,
        accept_media_type: MediaType | str,
        initial_delay: float,
        max_delay: float,
        multiplier: float,
        max_attempts: int,
    ) -> ResponseContainer:
        """Call the endpoint, retrying transient failures.

        Args:
            endpoint: Absolute URL
            accept_media_type: Value of the Accept header
            initial_delay: Wait before the first retry, in seconds
            max_delay: Upper bound on any wait, in seconds
            multiplier: Growth factor between consecutive waits
            max_attempts: Maximum number of retries after the first call

        Returns:
            The first non-retryable response

        Raises:
            RetryExhaustedError: If the last allowed attempt was still retryable
            TransportError: On a non-retryable transport failure
        """
        policy = RetryPolicy(initial_delay, max_delay, multiplier, max_attempts)

        def on_retry(
            attempt: int,
            delay: float,
            response: ResponseContainer | None,
            error: BaseException | None,
        ) -> None:
            logger.warning(
                "transport_retry_scheduled",
                extra={
                    "endpoint": endpoint,
                    "attempt": attempt,
                    "delay_seconds": delay,
                    "status_code": response.status_code if response else None,
                    "error_type": type(error).__name__ if error else None,
                },
            )

        try:
            return await retry_async(
                lambda: self._transport.call(endpoint, accept_media_type),
                retries=policy.max_attempts,
                initial_delay=policy.initial_delay,
                max_delay=policy.max_delay,
                multiplier=policy.multiplier,
                retry_on_exception=is_retryable_error,
                retry_on_result=is_retryable_response,
                sleep=self._sleep,
                on_retry=on_retry,
            )
        except RetryError as e:
            last: ResponseContainer | None = e.last_result
            logger.error(
                "transport_retries_exhausted",
                extra={"endpoint": endpoint, "attempts": e.attempts},
            )
            raise RetryExhaustedError(
                f"Retry limit reached for {endpoint} after {e.attempts} attempts",
                attempts=e.attempts,
                status_code=last.status_code if last else None,
                response=last,
            ) from (e.last_exception or e)
