"""Concurrent execution of split reads.

This module provides the ExtractionExecutor class that reads every split of
a plan concurrently, hands each page to a consumer and reports per-split
results.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from time import perf_counter

from ..partitioning import Split
from ..rest import ResponseContainer
from .definitions import SplitResult
from .reader import FetchPage, SplitReader
from .telemetry import log_extraction_complete, log_split_completed, log_split_error

PageConsumer = Callable[[Split, ResponseContainer], Awaitable[None] | None]


class ExtractionExecutor:
    """Reads splits concurrently.

    Splits are independent: ranges are disjoint and offsets absolute, so
    they may finish in any order.
    """

    def __init__(
        self,
        fetch_page: FetchPage,
        *,
        max_concurrency: int | None = None,
        fail_fast: bool = True,
    ) -> None:
        """Initialize extraction executor.

        Args:
            fetch_page: Coroutine function taking ``(skip, top)``
            max_concurrency: Splits read at the same time (None = all)
            fail_fast: Re-raise the first split failure and cancel the rest;
                otherwise record failures in the results and keep going
        """
        if max_concurrency is not None and max_concurrency <= 0:
            raise ValueError("max_concurrency must be greater than 0")
        self._fetch_page = fetch_page
        self._max_concurrency = max_concurrency
        self._fail_fast = fail_fast

    async def execute(
        self,
        splits: list[Split],
        consume: PageConsumer | None = None,
    ) -> list[SplitResult]:
        """Read every split.

        Args:
            splits: Splits to read
            consume: Called with ``(split, page)`` for every page read; may be
                a plain function or a coroutine function

        Returns:
            One result per split, in the order of ``splits``
        """
        if not splits:
            raise ValueError("Cannot execute: no splits provided")

        semaphore = asyncio.Semaphore(self._max_concurrency or len(splits))

        async def run(split: Split) -> SplitResult:
            async with semaphore:
                return await self._read_split(split, consume)

        started = perf_counter()
        tasks = [asyncio.create_task(run(split)) for split in splits]
        try:
            results = list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        log_extraction_complete(
            results=results,
            total_latency_ms=(perf_counter() - started) * 1000.0,
        )
        return results

    async def _read_split(self, split: Split, consume: PageConsumer | None) -> SplitResult:
        result = SplitResult(split=split)
        started = perf_counter()
        try:
            async for page in SplitReader(split, self._fetch_page):
                result.pages_read += 1
                result.bytes_read += len(page.body)
                if consume is not None:
                    outcome = consume(split, page)
                    if inspect.isawaitable(outcome):
                        await outcome
        except Exception as e:
            result.error = e
            result.latency_ms = (perf_counter() - started) * 1000.0
            log_split_error(result=result)
            if self._fail_fast:
                raise
            return result

        result.latency_ms = (perf_counter() - started) * 1000.0
        log_split_completed(result=result)
        return result
