"""Partition planning logic for dividing a record range into splits.

This module provides the PartitionPlanner class that turns the available
record count and the user's skip/fetch/split/batch settings into an ordered
list of contiguous, non-overlapping splits.
"""

from __future__ import annotations

from ...core.exceptions import InvalidRangeError
from .definitions import PartitionPlan, PartitionPolicy, PlanRequest, Split
from .telemetry import log_partition_plan


class PartitionPlanner:
    """Plans balanced splits for parallel extraction.

    The planner is pure: no I/O, no shared state. The same request always
    yields the same splits in the same order.

    Records that do not divide evenly across splits (the leftover load) are
    given one apiece to the first splits, so split sizes differ by at most
    one record.
    """

    def __init__(self, policy: PartitionPolicy | None = None) -> None:
        """Initialize partition planner.

        Args:
            policy: Partitioning limits (defaults to the stock limits)
        """
        self._policy = policy or PartitionPolicy()

    @property
    def policy(self) -> PartitionPolicy:
        return self._policy

    def plan(
        self,
        available_record_count: int,
        fetch_row_count: int = 0,
        skip_row_count: int = 0,
        requested_split_count: int = 0,
        requested_batch_size: int = 0,
    ) -> list[Split]:
        """Plan splits for an extraction.

        Args:
            available_record_count: Records reported by the remote count query
            fetch_row_count: Records to extract (0 = all available minus skipped)
            skip_row_count: Records to skip from the start
            requested_split_count: Desired split count (0 = policy default)
            requested_batch_size: Desired page size (0 = policy default)

        Returns:
            Ordered list of splits covering exactly the extraction range

        Raises:
            InvalidRangeError: If no records are left to extract
        """
        request = PlanRequest(
            available_record_count=available_record_count,
            fetch_row_count=fetch_row_count,
            skip_row_count=skip_row_count,
            requested_split_count=requested_split_count,
            requested_batch_size=requested_batch_size,
        )
        return self.build(request).splits

    def build(self, request: PlanRequest) -> PartitionPlan:
        """Plan splits and return them together with the derived values."""
        self._validate(request)
        policy = self._policy

        available = request.available_record_count
        skip = request.skip_row_count

        actual = available - skip if request.fetch_row_count == 0 else request.fetch_row_count
        # Fetching past the end is clamped; skipping past the end is an error
        if skip + actual > available:
            actual = available - skip
        if actual <= 0:
            raise InvalidRangeError(
                "As per the provided configuration no records were found for extraction. "
                "Please check the number of rows to skip and the number of rows to fetch.",
                available_record_count=available,
                skip_row_count=skip,
                fetch_row_count=request.fetch_row_count,
            )

        read_start = skip + 1
        read_end = skip + actual

        batch_size = request.requested_batch_size or policy.default_batch_size
        batch_size = min(batch_size, actual, policy.max_batch_size)

        split_count = request.requested_split_count or policy.default_split_count
        # Small extractions never need parallelism
        if batch_size <= policy.default_batch_size and actual <= policy.default_batch_size:
            split_count = 1
        split_count = min(split_count, policy.max_split_count, actual)

        load_per_split = actual if split_count == 1 else actual // split_count
        optimal_batch_size = min(load_per_split, batch_size)
        leftover = actual % split_count

        splits: list[Split] = []
        start = read_start
        for index in range(split_count):
            extra = 1 if index < leftover else 0
            end = start - 1 + load_per_split + extra
            splits.append(
                Split(
                    start=start,
                    end=end,
                    batch_size=optimal_batch_size + extra,
                    split_index=index,
                )
            )
            start = end + 1

        log_partition_plan(
            available_record_count=available,
            skip_row_count=skip,
            actual_records_to_extract=actual,
            read_start_index=read_start,
            read_end_index=read_end,
            split_count=split_count,
            load_per_split=load_per_split,
            batch_size=optimal_batch_size,
        )

        return PartitionPlan(
            splits=splits,
            actual_records_to_extract=actual,
            record_read_start_index=read_start,
            record_read_end_index=read_end,
            batch_size=optimal_batch_size,
            load_per_split=load_per_split,
            leftover_load=leftover,
        )

    @staticmethod
    def _validate(request: PlanRequest) -> None:
        for name in (
            "available_record_count",
            "fetch_row_count",
            "skip_row_count",
            "requested_split_count",
            "requested_batch_size",
        ):
            value = getattr(request, name)
            if value < 0:
                raise InvalidRangeError(
                    f"{name} must not be negative, got {value}",
                    available_record_count=request.available_record_count,
                    skip_row_count=request.skip_row_count,
                    fetch_row_count=request.fetch_row_count,
                )


def plan_splits(
    available_record_count: int,
    fetch_row_count: int = 0,
    skip_row_count: int = 0,
    requested_split_count: int = 0,
    requested_batch_size: int = 0,
    policy: PartitionPolicy | None = None,
) -> list[Split]:
    """Plan splits with a throwaway planner. See ``PartitionPlanner.plan``."""
    return PartitionPlanner(policy).plan(
        available_record_count,
        fetch_row_count=fetch_row_count,
        skip_row_count=skip_row_count,
        requested_split_count=requested_split_count,
        requested_batch_size=requested_batch_size,
    )
