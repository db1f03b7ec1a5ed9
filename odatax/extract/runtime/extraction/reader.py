"""Paged reading of a single split."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable

from ..partitioning import Split
from ..rest import ResponseContainer

FetchPage = Callable[[int, int], Awaitable[ResponseContainer]]


class SplitReader:
    """Reads a split page by page.

    Pages start at the split's absolute offset and are ``split.batch_size``
    records long; the last page is shortened so the reader never requests a
    record outside the split.
    """

    def __init__(self, split: Split, fetch_page: FetchPage) -> None:
        """Initialize split reader.

        Args:
            split: Range to read
            fetch_page: Coroutine function taking ``(skip, top)``
        """
        self._split = split
        self._fetch_page = fetch_page

    @property
    def split(self) -> Split:
        return self._split

    def pages(self) -> list[tuple[int, int]]:
        """``(skip, top)`` of every page, in read order."""
        pages: list[tuple[int, int]] = []
        skip = self._split.skip
        remaining = self._split.size
        while remaining > 0:
            top = min(self._split.batch_size, remaining)
            pages.append((skip, top))
            skip += top
            remaining -= top
        return pages

    async def __aiter__(self) -> AsyncIterator[ResponseContainer]:
        for skip, top in self.pages():
            yield await self._fetch_page(skip, top)
