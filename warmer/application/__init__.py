from __future__ import annotations

from .aggregator import ResultAggregator
from .base_warmer import BaseWarmer
from .dispatcher import ConcurrencyDispatcher, WarmOperation
from .runner import RunReport, WarmRunner
from .work_set import Cursor, SnapshotState, WorkSet

__all__ = [
    "BaseWarmer",
    "ConcurrencyDispatcher",
    "Cursor",
    "ResultAggregator",
    "RunReport",
    "SnapshotState",
    "WarmOperation",
    "WarmRunner",
    "WorkSet",
]
