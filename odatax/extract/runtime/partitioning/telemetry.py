"""Structured logging for partition planning."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def log_partition_plan(
    *,
    available_record_count: int,
    skip_row_count: int,
    actual_records_to_extract: int,
    read_start_index: int,
    read_end_index: int,
    split_count: int,
    load_per_split: int,
    batch_size: int,
) -> None:
    """Log partition plan creation.

    Args:
        available_record_count: Records reported by the count query
        skip_row_count: Records skipped from the start
        actual_records_to_extract: Records the plan covers
        read_start_index: First record index (1-based)
        read_end_index: Last record index
        split_count: Number of splits planned
        load_per_split: Records per split before the leftover is spread
        batch_size: Page size before the leftover is spread
    """
    logger.info(
        "partition_plan_created",
        extra={
            "available_record_count": available_record_count,
            "skip_row_count": skip_row_count,
            "actual_records_to_extract": actual_records_to_extract,
            "read_start_index": read_start_index,
            "read_end_index": read_end_index,
            "split_count": split_count,
            "load_per_split": load_per_split,
            "batch_size": batch_size,
        },
    )
