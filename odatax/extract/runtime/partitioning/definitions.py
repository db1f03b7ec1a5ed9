"""Partition metadata definitions and policy structures.

This module defines the data structures used to describe how a remote record
range is divided into splits: the tunable policy constants, the planning
request and the resulting split values.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_SPLIT_COUNT = 8
MAX_ALLOWED_SPLIT_COUNT = 10
DEFAULT_BATCH_SIZE = 2500
MAX_ALLOWED_BATCH_SIZE = 5000


@dataclass(frozen=True)
class PartitionPolicy:
    """Partitioning limits.

    Attributes:
        default_split_count: Split count used when none is requested
        max_split_count: Upper bound on the number of splits
        default_batch_size: Page size used when none is requested; extractions
            at or below this size are never split
        max_batch_size: Upper bound on the page size

    Examples:
        # Stock limits
        PartitionPolicy()

        # A gateway that tolerates larger pages
        PartitionPolicy(max_batch_size=10000)
    """

    default_split_count: int = DEFAULT_SPLIT_COUNT
    max_split_count: int = MAX_ALLOWED_SPLIT_COUNT
    default_batch_size: int = DEFAULT_BATCH_SIZE
    max_batch_size: int = MAX_ALLOWED_BATCH_SIZE

    def __post_init__(self) -> None:
        """Validate policy limits."""
        for name in (
            "default_split_count",
            "max_split_count",
            "default_batch_size",
            "max_batch_size",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"PartitionPolicy.{name} must be greater than 0")


@dataclass(frozen=True)
class PlanRequest:
    """Inputs to a partition plan.

    Attributes:
        available_record_count: Records reported by the remote count query
        fetch_row_count: Records to extract (0 = all available minus skipped)
        skip_row_count: Records to skip from the start
        requested_split_count: Desired split count (0 = policy default)
        requested_batch_size: Desired page size (0 = policy default)
    """

    available_record_count: int
    fetch_row_count: int = 0
    skip_row_count: int = 0
    requested_split_count: int = 0
    requested_batch_size: int = 0


@dataclass(frozen=True)
class Split:
    """A contiguous record range assigned to one worker.

    Attributes:
        start: First record index (1-based, inclusive)
        end: Last record index (inclusive)
        batch_size: Maximum records requested per page within this split
        split_index: Zero-based index of this split in the overall plan
    """

    start: int
    end: int
    batch_size: int
    split_index: int = 0

    def __post_init__(self) -> None:
        if self.start < 1 or self.start > self.end:
            raise ValueError(f"invalid split range [{self.start}, {self.end}]")
        if self.batch_size < 1 or self.batch_size > self.size:
            raise ValueError(
                f"batch_size {self.batch_size} outside 1..{self.size} for split "
                f"[{self.start}, {self.end}]"
            )

    @property
    def size(self) -> int:
        """Number of records covered by this split."""
        return self.end - self.start + 1

    @property
    def skip(self) -> int:
        """Absolute ``$skip`` value of the split's first record."""
        return self.start - 1


@dataclass(frozen=True)
class PartitionPlan:
    """Result of planning, with the derived values used to build it."""

    splits: list[Split]
    actual_records_to_extract: int
    record_read_start_index: int
    record_read_end_index: int
    batch_size: int
    load_per_split: int
    leftover_load: int

    @property
    def split_count(self) -> int:
        return len(self.splits)
