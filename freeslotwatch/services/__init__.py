"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .watcher import (
    CalendarClientProtocol,
    CycleResult,
    FreeSlotWatcher,
    ReporterProtocol,
    SnapshotStoreProtocol,
)

__all__ = [
    "CalendarClientProtocol",
    "CycleResult",
    "FreeSlotWatcher",
    "ReporterProtocol",
    "SnapshotStoreProtocol",
]
