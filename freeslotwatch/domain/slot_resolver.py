"""
Core business logic for turning opening hours and reservations into free slots.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no files, no I/O).
"""

from typing import Iterable, List

from .exceptions import InvalidReservation, InvalidWindow
from .models import FreeSlot, OpeningHours, OpeningWindow, Reservation, TimeInterval


def resolve(window: OpeningWindow, reservations: Iterable[Reservation]) -> List[FreeSlot]:
    """
    Subtract reservations from an opening window, yielding the free slots.

    Reservations may arrive in any order, overlap each other, or reach past
    the window edges. Only reservations intersecting the window are used and
    they are clamped to its bounds.

    Example:
    Window: 16:00 - 19:00
    Reserved: [17:00-18:00]
    Result: [16:00-17:00, 18:00-19:00]

    Raises:
        InvalidWindow: If the window does not start before it ends
        InvalidReservation: If any reservation does not start before it ends
    """
    if window.start >= window.end:
        raise InvalidWindow(f"Opening window {window} must start before it ends")

    busy: List[TimeInterval] = []
    for reservation in reservations:
        if reservation.start >= reservation.end:
            raise InvalidReservation(f"Reservation {reservation} must start before it ends")
        clamped = window.intersect(reservation)
        if clamped is not None:
            busy.append(clamped)

    # Sorting by (start, end) keeps the output independent of input order
    busy.sort(key=lambda r: (r.start, r.end))

    free_slots: List[FreeSlot] = []
    cursor = window.start

    for interval in busy:
        if cursor < interval.start:
            free_slots.append(FreeSlot(start=cursor, end=interval.start, date=window.date))

        # Nested or overlapping reservations must never move the cursor back
        cursor = max(cursor, interval.end)

    if cursor < window.end:
        free_slots.append(FreeSlot(start=cursor, end=window.end, date=window.date))

    return free_slots


def resolve_calendar(
    opening_hours: Iterable[OpeningHours],
    reservations: Iterable[Reservation]
) -> List[FreeSlot]:
    """
    Resolve every open day of a calendar and return all free slots by start time.

    Closed days (no opening window) contribute nothing.
    """
    reservation_list = list(reservations)
    free_slots: List[FreeSlot] = []

    for day in opening_hours:
        window = day.window
        if window is None:
            continue
        free_slots.extend(resolve(window, reservation_list))

    return sorted(free_slots, key=lambda s: (s.start, s.end))
