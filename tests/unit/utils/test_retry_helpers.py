"""Unit tests for the generic async retry helper."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from odatax.extract.utils import RetryError, backoff_delays, retry_async


class FakeSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def test_backoff_delays_grow_and_cap():
    """Test delays are multiplied and capped."""
    assert list(backoff_delays(2, 10, 2, 5)) == [2, 4, 8, 10, 10]


def test_backoff_initial_above_max_is_capped():
    """Test an initial delay above the maximum starts at the maximum."""
    assert list(backoff_delays(30, 10, 2, 2)) == [10, 10]


def test_backoff_zero_retries():
    assert list(backoff_delays(1, 10, 2, 0)) == []


class TestRetryAsync:
    """Test retry_async behavior."""

    @pytest.mark.asyncio
    async def test_returns_first_non_retryable_result(self):
        """Test retryable results are retried until a good one arrives."""
        func = AsyncMock(side_effect=[500, 500, 200])
        sleep = FakeSleep()

        result = await retry_async(
            func,
            retries=3,
            initial_delay=1,
            max_delay=5,
            multiplier=2,
            retry_on_result=lambda r: r >= 500,
            sleep=sleep,
        )

        assert result == 200
        assert func.await_count == 3
        assert sleep.delays == [1, 2]

    @pytest.mark.asyncio
    async def test_non_retryable_exception_propagates(self):
        """Test exceptions not marked retryable are raised at once."""
        func = AsyncMock(side_effect=KeyError("boom"))
        sleep = FakeSleep()

        with pytest.raises(KeyError):
            await retry_async(
                func, retries=3, initial_delay=1, max_delay=5, multiplier=2, sleep=sleep
            )

        assert func.await_count == 1
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_exhaustion_raises_retry_error(self):
        """Test RetryError carries the attempts and last exception."""
        error = ConnectionError("down")
        func = AsyncMock(side_effect=error)
        sleep = FakeSleep()

        with pytest.raises(RetryError) as exc_info:
            await retry_async(
                func,
                retries=2,
                initial_delay=1,
                max_delay=5,
                multiplier=3,
                retry_on_exception=lambda e: isinstance(e, ConnectionError),
                sleep=sleep,
            )

        assert exc_info.value.attempts == 3
        assert exc_info.value.last_exception is error
        assert exc_info.value.__cause__ is error
        assert sleep.delays == [1, 3]

    @pytest.mark.asyncio
    async def test_on_retry_callback(self):
        """Test on_retry sees each scheduled retry."""
        func = AsyncMock(side_effect=[503, 200])
        calls = []

        await retry_async(
            func,
            retries=1,
            initial_delay=0.5,
            max_delay=5,
            multiplier=2,
            retry_on_result=lambda r: r >= 500,
            sleep=FakeSleep(),
            on_retry=lambda *args: calls.append(args),
        )

        assert calls == [(1, 0.5, 503, None)]
