"""
Mock Respa client for running without network access.
"""

import json
from pathlib import Path
from typing import Optional

from pendulum import DateTime

from ..domain.models import CalendarData
from .respa_client import parse_calendar_response


class MockRespaClient:
    """
    Mock client that serves a Respa payload from a JSON file.

    By default the bundled mock_calendar_data.json (first two weeks of
    December 2023) is used.
    """

    DEFAULT_DATA_FILE = Path(__file__).parent / "mock_calendar_data.json"

    def __init__(self, data_file: Optional[Path] = None):
        """
        Initialize the mock client.

        Args:
            data_file: Optional path to a Respa-shaped JSON document
        """
        self.data_file = data_file or self.DEFAULT_DATA_FILE
        self._load_calendar_data()

    def _load_calendar_data(self):
        """Load mock calendar data from JSON file."""
        if self.data_file.exists():
            with open(self.data_file, "r", encoding="utf-8") as f:
                self.payload = json.load(f)
        else:
            self.payload = {"opening_hours": [], "reservations": []}

    def get_calendar(
        self,
        resource_id: str,
        start_time: DateTime,
        end_time: DateTime
    ) -> CalendarData:
        """
        Return the records of the mock payload that fall into the query range.

        ``resource_id`` is ignored; the file describes a single resource.
        """
        calendar = parse_calendar_response(self.payload)

        first_day = start_time.date()
        last_day = end_time.date()

        return CalendarData(
            opening_hours=[
                day for day in calendar.opening_hours
                if first_day <= day.date <= last_day
            ],
            reservations=[
                reservation for reservation in calendar.reservations
                if reservation.start < end_time and reservation.end > start_time
            ],
        )
