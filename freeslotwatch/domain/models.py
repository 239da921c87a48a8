"""
Domain models for opening windows, reservations and free slots.
"""

from dataclasses import dataclass, field
from typing import ClassVar, List, Optional, Tuple, Type

import pendulum
from pendulum import Date, DateTime

from .exceptions import InvalidInterval, InvalidReservation, InvalidWindow


@dataclass(frozen=True)
class TimeInterval:
    """
    Represents an immutable time interval with start and end datetime.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    invalid_error: ClassVar[Type[InvalidInterval]] = InvalidInterval

    def __post_init__(self):
        if self.start >= self.end:
            raise self.invalid_error(
                f"Start time {self.start} must be before end time {self.end}"
            )

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def duration_hours(self) -> float:
        """Return the duration in (possibly fractional) hours."""
        return (self.end - self.start).total_seconds() / 3600

    def overlaps(self, other: "TimeInterval") -> bool:
        """Check if this interval overlaps with another."""
        return self.start < other.end and self.end > other.start

    def intersect(self, other: "TimeInterval") -> "TimeInterval | None":
        """
        Calculate the intersection of two intervals.
        Returns None if there is no overlap.
        """
        if not self.overlaps(other):
            return None

        return TimeInterval(start=max(self.start, other.start), end=min(self.end, other.end))

    def __str__(self) -> str:
        return f"{self.start.format('YYYY-MM-DD HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class OpeningWindow(TimeInterval):
    """The span of a single date during which the resource may be reserved."""
    date: Date

    invalid_error: ClassVar[Type[InvalidInterval]] = InvalidWindow


@dataclass(frozen=True)
class Reservation(TimeInterval):
    """An existing booking. May overlap other reservations or the window edges."""

    invalid_error: ClassVar[Type[InvalidInterval]] = InvalidReservation


@dataclass(frozen=True)
class FreeSlot(TimeInterval):
    """
    A maximal gap inside one opening window.

    ``date`` is the date of the originating window and is informational only:
    two slots are equal when their start and end instants are equal.
    """
    date: Date = field(compare=False)

    @property
    def key(self) -> Tuple[str, str]:
        """Offset-independent identity of the slot."""
        return (_utc_iso(self.start), _utc_iso(self.end))

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: YYYY-MM-DD HH:mm-HH:mm (Nh)
        """
        hours = f"{round(self.duration_hours(), 2):g}"
        return (
            f"{self.date.isoformat()} "
            f"{self.start.format('HH:mm')}-{self.end.format('HH:mm')} ({hours}h)"
        )


@dataclass(frozen=True)
class OpeningHours:
    """
    Raw opening-hours record for one date.

    Upstream reports closed days with null ``opens``/``closes``.
    """
    date: Date
    opens: Optional[DateTime] = None
    closes: Optional[DateTime] = None

    @property
    def window(self) -> Optional[OpeningWindow]:
        """The opening window, or None when the resource is closed that day."""
        if self.opens is None or self.closes is None:
            return None
        return OpeningWindow(start=self.opens, end=self.closes, date=self.date)


@dataclass
class CalendarData:
    """Opening hours and reservations fetched for a date range."""
    opening_hours: List[OpeningHours] = field(default_factory=list)
    reservations: List[Reservation] = field(default_factory=list)


def _utc_iso(value: DateTime) -> str:
    return pendulum.instance(value).in_timezone("UTC").to_iso8601_string()
