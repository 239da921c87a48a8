"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import (
    CalendarAPIError,
    FreeSlotError,
    InvalidInterval,
    InvalidReservation,
    InvalidWindow,
    NotificationError,
    SnapshotStoreError,
)
from .models import CalendarData, FreeSlot, OpeningHours, OpeningWindow, Reservation, TimeInterval
from .slot_resolver import resolve, resolve_calendar
from .snapshot_diff import diff

__all__ = [
    "CalendarAPIError",
    "CalendarData",
    "FreeSlot",
    "FreeSlotError",
    "InvalidInterval",
    "InvalidReservation",
    "InvalidWindow",
    "NotificationError",
    "OpeningHours",
    "OpeningWindow",
    "Reservation",
    "SnapshotStoreError",
    "TimeInterval",
    "diff",
    "resolve",
    "resolve_calendar",
]
