"""Async retry with capped exponential backoff."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterator
from typing import Any, TypeVar

T = TypeVar("T")


def backoff_delays(
    initial_delay: float,
    max_delay: float,
    multiplier: float,
    retries: int,
) -> Iterator[float]:
    """Yield the wait before each retry.

    Starts at ``initial_delay``, grows by ``multiplier`` after every retry and
    never exceeds ``max_delay``.

    Examples:
        >>> list(backoff_delays(2, 10, 2, 4))
        [2, 4, 8, 10]
    """
    delay = min(initial_delay, max_delay)
    for _ in range(retries):
        yield delay
        delay = min(delay * multiplier, max_delay)


class RetryError(Exception):
    """Raised by ``retry_async`` when every attempt was retryable."""

    def __init__(
        self,
        attempts: int,
        last_result: Any = None,
        last_exception: BaseException | None = None,
    ) -> None:
        super().__init__(f"Gave up after {attempts} attempts")
        self.attempts = attempts
        self.last_result = last_result
        self.last_exception = last_exception


async def retry_async(
    func: Callable[[], Awaitable[T]],
    *,
    retries: int,
    initial_delay: float,
    max_delay: float,
    multiplier: float,
    retry_on_exception: Callable[[BaseException], bool] = lambda e: False,
    retry_on_result: Callable[[T], bool] = lambda r: False,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    on_retry: Callable[[int, float, T | None, BaseException | None], None] | None = None,
) -> T:
    """Call ``func`` until it succeeds or ``retries`` retries are used up.

    Exceptions not accepted by ``retry_on_exception`` and results not
    accepted by ``retry_on_result`` are returned/raised immediately.

    Args:
        func: Zero-argument coroutine function
        retries: Maximum number of retries after the first attempt
        initial_delay: Wait before the first retry, in seconds
        max_delay: Upper bound on any wait, in seconds
        multiplier: Growth factor between consecutive waits
        retry_on_exception: Whether a raised exception is retryable
        retry_on_result: Whether a returned value is retryable
        sleep: Awaitable sleep, injectable for tests
        on_retry: Called as ``(attempt, delay, result, exception)`` before each wait

    Returns:
        The first non-retryable result

    Raises:
        RetryError: When the last attempt was still retryable
    """
    delays = backoff_delays(initial_delay, max_delay, multiplier, retries)
    attempt = 0

    while True:
        attempt += 1
        result: T | None = None
        error: BaseException | None = None
        try:
            result = await func()
        except Exception as e:
            if not retry_on_exception(e):
                raise
            error = e
        else:
            if not retry_on_result(result):
                return result

        delay = next(delays, None)
        if delay is None:
            raise RetryError(attempt, last_result=result, last_exception=error) from error

        if on_retry is not None:
            on_retry(attempt, delay, result, error)
        await sleep(delay)
