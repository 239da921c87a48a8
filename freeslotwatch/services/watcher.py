"""
Application service that polls a calendar and reports newly freed slots.

The service coordinates the calendar client, the snapshot store and the
reporters, and delegates the actual computation to the domain-level
``resolve_calendar`` and ``diff`` functions. Collaborators are described by
small protocols so they can be replaced by stubs in tests.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, Sequence

import pendulum
from pendulum import DateTime

from ..domain.exceptions import FreeSlotError, NotificationError, SnapshotStoreError
from ..domain.models import CalendarData, FreeSlot, OpeningHours
from ..domain.slot_resolver import resolve_calendar
from ..domain.snapshot_diff import diff

logger = logging.getLogger(__name__)


class CalendarClientProtocol(Protocol):
    """Protocol describing the calendar client behaviour needed by the service."""

    def get_calendar(
        self,
        resource_id: str,
        start_time: DateTime,
        end_time: DateTime,
    ) -> CalendarData:
        """Return opening hours and reservations for the range."""


class SnapshotStoreProtocol(Protocol):
    """Whole-document storage of the previous cycle's slots."""

    def load(self) -> List[FreeSlot]:
        """Return the stored slots, or an empty list."""

    def save(self, slots: Sequence[FreeSlot]) -> None:
        """Replace the stored slots."""


class ReporterProtocol(Protocol):
    """Receives the new and the full slot lists of a cycle."""

    def report(self, new_slots: Sequence[FreeSlot], current_slots: Sequence[FreeSlot]) -> None:
        """Render or deliver the cycle result."""


@dataclass
class CycleResult:
    """Outcome of one polling cycle."""
    new_slots: List[FreeSlot] = field(default_factory=list)
    current_slots: List[FreeSlot] = field(default_factory=list)


class FreeSlotWatcher:
    """
    Orchestrates fetching, slot resolution, snapshot comparison and reporting.
    """

    def __init__(
        self,
        calendar_client: CalendarClientProtocol,
        snapshot_store: SnapshotStoreProtocol,
        reporters: Sequence[ReporterProtocol],
        *,
        resource_id: str,
        timezone: str = "Europe/Helsinki",
        lookahead_days: int = 14,
        min_duration_minutes: int = 0,
    ) -> None:
        self._calendar_client = calendar_client
        self._snapshot_store = snapshot_store
        self._reporters = list(reporters)
        self.resource_id = resource_id
        self.timezone = timezone
        self.lookahead_days = lookahead_days
        self.min_duration_minutes = min_duration_minutes

    def run_cycle(self, start: Optional[DateTime] = None) -> CycleResult:
        """
        Run one fetch-compare-persist-report cycle.

        Args:
            start: Current time, defaults to now. The calendar is fetched
                from the start of that day so earlier reservations still
                count, and slots that have already ended are dropped.

        Returns:
            CycleResult with the new and the current slots

        Raises:
            FreeSlotError: If fetching, resolving or persisting fails
        """
        start_time = start or pendulum.now(self.timezone)
        end_time = start_time.add(days=self.lookahead_days)

        calendar = self._calendar_client.get_calendar(
            resource_id=self.resource_id,
            start_time=start_time.start_of("day"),
            end_time=end_time,
        )

        current_slots = self.calculate_slots(
            calendar=calendar,
            start_time=start_time,
            end_time=end_time,
        )

        previous_slots = self._load_previous()
        new_slots = diff(current_slots, previous_slots)

        # The snapshot is replaced every cycle, changed or not
        self._snapshot_store.save(current_slots)

        logger.info(
            "Found %d free slot(s), %d new since last check",
            len(current_slots),
            len(new_slots),
        )

        self._report(new_slots, current_slots)

        return CycleResult(new_slots=new_slots, current_slots=current_slots)

    def calculate_slots(
        self,
        *,
        calendar: CalendarData,
        start_time: DateTime,
        end_time: DateTime,
    ) -> List[FreeSlot]:
        """
        Resolve free slots of the days within the range.

        Slots that ended by ``start_time`` or are shorter than the minimum
        duration are dropped. Slots already under way keep their original
        start so they stay equal to the stored ones.
        """
        opening_hours = self._days_in_range(calendar.opening_hours, start_time, end_time)
        slots = resolve_calendar(opening_hours, calendar.reservations)

        return [
            slot for slot in slots
            if slot.end > start_time
            and slot.duration_minutes() >= self.min_duration_minutes
        ]

    def run_forever(
        self,
        *,
        interval_seconds: float,
        retry_delay_seconds: float,
        max_cycles: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Poll until interrupted, or until ``max_cycles`` cycles have run.

        A failed cycle is logged and retried after ``retry_delay_seconds``;
        it never ends the loop.
        """
        cycles = 0

        while max_cycles is None or cycles < max_cycles:
            cycles += 1

            try:
                self.run_cycle()
            except FreeSlotError as exc:
                logger.error("Polling cycle failed: %s", exc)
                delay = retry_delay_seconds
            except Exception:
                logger.exception("Unexpected error during polling cycle")
                delay = retry_delay_seconds
            else:
                delay = interval_seconds

            if max_cycles is not None and cycles >= max_cycles:
                break

            logger.debug("Next check in %s seconds", delay)
            sleep(delay)

    def _load_previous(self) -> List[FreeSlot]:
        # An unreadable snapshot is replaced by this cycle's save
        try:
            return self._snapshot_store.load()
        except SnapshotStoreError as exc:
            logger.warning("Ignoring unusable snapshot, treating as empty: %s", exc)
            return []

    def _report(self, new_slots: List[FreeSlot], current_slots: List[FreeSlot]) -> None:
        for reporter in self._reporters:
            try:
                reporter.report(new_slots, current_slots)
            except NotificationError as exc:
                logger.warning("Reporter %s failed: %s", type(reporter).__name__, exc)

    @staticmethod
    def _days_in_range(
        opening_hours: Sequence[OpeningHours],
        start_time: DateTime,
        end_time: DateTime,
    ) -> List[OpeningHours]:
        first_day = start_time.date()
        last_day = end_time.date()
        return [day for day in opening_hours if first_day <= day.date <= last_day]
