"""Extraction result structures."""

from __future__ import annotations

from dataclasses import dataclass

from ..partitioning import Split


@dataclass
class SplitResult:
    """Outcome of reading one split.

    Attributes:
        split: The split that was read
        pages_read: Pages fetched successfully
        bytes_read: Total body bytes across those pages
        latency_ms: Wall time spent on the split
        error: Failure that stopped the split, if any
    """

    split: Split
    pages_read: int = 0
    bytes_read: int = 0
    latency_ms: float | None = None
    error: BaseException | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None
