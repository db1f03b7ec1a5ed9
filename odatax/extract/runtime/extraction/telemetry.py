"""Structured logging for split extraction."""

from __future__ import annotations

import logging

from .definitions import SplitResult

logger = logging.getLogger(__name__)


def log_split_completed(*, result: SplitResult) -> None:
    """Log completion of a single split."""
    logger.info(
        "split_completed",
        extra={
            "split_index": result.split.split_index,
            "start": result.split.start,
            "end": result.split.end,
            "pages_read": result.pages_read,
            "bytes_read": result.bytes_read,
            "latency_ms": result.latency_ms,
        },
    )


def log_split_error(*, result: SplitResult) -> None:
    """Log a split that stopped on an error."""
    error = result.error
    logger.error(
        "split_error",
        extra={
            "split_index": result.split.split_index,
            "start": result.split.start,
            "end": result.split.end,
            "pages_read": result.pages_read,
            "error_type": type(error).__name__ if error else None,
            "error_message": str(error) if error else None,
        },
    )


def log_extraction_complete(
    *,
    results: list[SplitResult],
    total_latency_ms: float | None = None,
) -> None:
    """Log completion of a whole extraction.

    Args:
        results: One result per split
        total_latency_ms: Total latency in milliseconds (optional)
    """
    logger.info(
        "extraction_complete",
        extra={
            "splits": len(results),
            "splits_failed": sum(1 for r in results if not r.succeeded),
            "pages_read": sum(r.pages_read for r in results),
            "bytes_read": sum(r.bytes_read for r in results),
            "total_latency_ms": total_latency_ms,
        },
    )
