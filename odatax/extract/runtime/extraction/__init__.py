"""Split extraction layer.

Architecture:
    - definitions.py: SplitResult
    - reader.py: SplitReader (pages one split)
    - executors.py: ExtractionExecutor (reads splits concurrently)
    - telemetry.py: Structured logging
"""

from __future__ import annotations

from .definitions import SplitResult
from .executors import ExtractionExecutor, PageConsumer
from .reader import FetchPage, SplitReader

__all__ = [
    "SplitResult",
    "SplitReader",
    "FetchPage",
    "ExtractionExecutor",
    "PageConsumer",
]
