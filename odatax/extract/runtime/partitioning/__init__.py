"""Partitioning layer for parallel extraction.

Architecture:
    - definitions.py: Policy limits, plan request and Split value types
    - planners.py: PartitionPlanner (divides a record range into splits)
    - telemetry.py: Structured logging
"""

from __future__ import annotations

from .definitions import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_SPLIT_COUNT,
    MAX_ALLOWED_BATCH_SIZE,
    MAX_ALLOWED_SPLIT_COUNT,
    PartitionPlan,
    PartitionPolicy,
    PlanRequest,
    Split,
)
from .planners import PartitionPlanner, plan_splits

__all__ = [
    "DEFAULT_SPLIT_COUNT",
    "MAX_ALLOWED_SPLIT_COUNT",
    "DEFAULT_BATCH_SIZE",
    "MAX_ALLOWED_BATCH_SIZE",
    "PartitionPolicy",
    "PlanRequest",
    "PartitionPlan",
    "Split",
    "PartitionPlanner",
    "plan_splits",
]
