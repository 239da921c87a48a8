"""
Domain-specific exception hierarchy for freeslotwatch.
"""


class FreeSlotError(Exception):
    """Base class for all application-level errors."""


class InvalidInterval(FreeSlotError):
    """Raised when an interval does not start strictly before it ends."""


class InvalidWindow(InvalidInterval):
    """Raised for an opening window with ``start >= end``."""


class InvalidReservation(InvalidInterval):
    """Raised for a reservation with ``start >= end``."""


class CalendarAPIError(FreeSlotError):
    """Raised when calendar data cannot be fetched or parsed."""


class SnapshotStoreError(FreeSlotError):
    """Raised when the persisted snapshot cannot be read or written."""


class NotificationError(FreeSlotError):
    """Raised when a push notification cannot be delivered."""
