"""
Tests for the Respa API client and payload parsing.
"""

import logging

import pendulum
import pytest
import requests

from freeslotwatch.adapters.mock_respa_client import MockRespaClient
from freeslotwatch.adapters.respa_client import RespaClient, parse_calendar_response
from freeslotwatch.domain.exceptions import CalendarAPIError, InvalidReservation

TZ = "Europe/Helsinki"

SAMPLE_PAYLOAD = {
    "opening_hours": [
        {"date": "2023-12-01", "opens": "2023-12-01T10:00:00+02:00", "closes": "2023-12-01T14:00:00+02:00"},
        {"date": "2024-01-01", "opens": None, "closes": None},
    ],
    "reservations": [
        {"begin": "2023-12-01T10:00:00+02:00", "end": "2023-12-01T11:00:00+02:00"},
        {"begin": "2023-12-01T11:00:00+02:00", "end": "2023-12-01T14:00:00+02:00"},
    ],
}


class FakeResponse:
    def __init__(self, payload=None, status_code=200, json_error=None):
        self._payload = payload
        self.status_code = status_code
        self._json_error = json_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self._json_error:
            raise self._json_error
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.headers = {}
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response


class TestParseCalendarResponse:
    """Tests for parse_calendar_response()."""

    def test_parses_opening_hours_and_reservations(self):
        """Both record types are turned into domain objects."""
        calendar = parse_calendar_response(SAMPLE_PAYLOAD)

        assert len(calendar.opening_hours) == 2
        assert len(calendar.reservations) == 2

        first = calendar.opening_hours[0]
        assert first.date == pendulum.date(2023, 12, 1)
        assert first.opens == pendulum.parse("2023-12-01T08:00:00+00:00")
        assert first.window is not None

        closed = calendar.opening_hours[1]
        assert closed.opens is None
        assert closed.window is None

        assert calendar.reservations[0].start == pendulum.parse("2023-12-01 10:00", tz=TZ)

    def test_keeps_feed_offsets(self):
        """Timestamps are not converted to another timezone."""
        calendar = parse_calendar_response(SAMPLE_PAYLOAD)

        assert calendar.opening_hours[0].opens.format("HH:mm") == "10:00"

    def test_null_reservations_mean_none(self):
        """A resource without bookings may report null reservations."""
        calendar = parse_calendar_response({"opening_hours": [], "reservations": None})

        assert calendar.reservations == []

    def test_unparseable_records_are_skipped(self, caplog):
        """Broken records are logged and ignored."""
        payload = {
            "opening_hours": [{"opens": "2023-12-01T10:00:00+02:00"}],
            "reservations": [
                {"begin": "not a date", "end": "2023-12-01T11:00:00+02:00"},
                {"begin": "2023-12-01T12:00:00+02:00"},
                {"begin": "2023-12-01T12:00:00+02:00", "end": "2023-12-01T13:00:00+02:00"},
            ],
        }

        with caplog.at_level(logging.WARNING):
            calendar = parse_calendar_response(payload)

        assert calendar.opening_hours == []
        assert len(calendar.reservations) == 1
        assert "Could not parse reservation" in caplog.text

    def test_inverted_reservation_is_fatal(self):
        """A reservation ending before it begins aborts parsing."""
        payload = {
            "opening_hours": [],
            "reservations": [{"begin": "2023-12-01T13:00:00+02:00", "end": "2023-12-01T12:00:00+02:00"}],
        }

        with pytest.raises(InvalidReservation):
            parse_calendar_response(payload)

    def test_rejects_non_object_payload(self):
        """The payload root must be an object."""
        with pytest.raises(CalendarAPIError):
            parse_calendar_response(["opening_hours"])

    def test_rejects_non_list_opening_hours(self):
        """opening_hours must be a list."""
        with pytest.raises(CalendarAPIError):
            parse_calendar_response({"opening_hours": {"date": "2023-12-01"}})


class TestRespaClient:
    """Tests for RespaClient."""

    def test_get_calendar_queries_resource(self):
        """The resource endpoint is called with the date range."""
        session = FakeSession(response=FakeResponse(SAMPLE_PAYLOAD))
        client = RespaClient(base_url="https://respa.example/v1/", timeout=5, session=session)

        calendar = client.get_calendar(
            resource_id="axwzr3i57yba",
            start_time=pendulum.parse("2023-12-01 08:30", tz=TZ),
            end_time=pendulum.parse("2023-12-15 08:30", tz=TZ),
        )

        assert len(calendar.reservations) == 2
        assert session.calls == [{
            "url": "https://respa.example/v1/resource/axwzr3i57yba/",
            "params": {"start": "2023-12-01T08:30:00", "end": "2023-12-15T08:30:00", "format": "json"},
            "timeout": 5,
        }]

    def test_transport_error_raises_calendar_api_error(self):
        """Network failures are wrapped."""
        session = FakeSession(error=requests.exceptions.ConnectionError("unreachable"))
        client = RespaClient(session=session)

        with pytest.raises(CalendarAPIError, match="unreachable"):
            client.get_calendar("x", pendulum.now(TZ), pendulum.now(TZ).add(days=1))

    def test_http_error_raises_calendar_api_error(self):
        """Non-2xx responses are wrapped."""
        client = RespaClient(session=FakeSession(response=FakeResponse(status_code=503)))

        with pytest.raises(CalendarAPIError, match="503"):
            client.get_calendar("x", pendulum.now(TZ), pendulum.now(TZ).add(days=1))

    def test_invalid_json_raises_calendar_api_error(self):
        """Bodies that are not JSON are wrapped."""
        response = FakeResponse(json_error=ValueError("Expecting value"))
        client = RespaClient(session=FakeSession(response=response))

        with pytest.raises(CalendarAPIError, match="non-JSON"):
            client.get_calendar("x", pendulum.now(TZ), pendulum.now(TZ).add(days=1))


class TestMockRespaClient:
    """Tests for MockRespaClient."""

    def test_bundled_data_is_filtered_to_range(self):
        """Only days and reservations inside the range are returned."""
        client = MockRespaClient()

        calendar = client.get_calendar(
            resource_id="ignored",
            start_time=pendulum.parse("2023-12-01 00:00", tz=TZ),
            end_time=pendulum.parse("2023-12-02 23:59", tz=TZ),
        )

        assert [day.date for day in calendar.opening_hours] == [
            pendulum.date(2023, 12, 1),
            pendulum.date(2023, 12, 2),
        ]
        assert len(calendar.reservations) == 3

    def test_missing_data_file_yields_empty_calendar(self, tmp_path):
        """A missing file behaves like an empty calendar."""
        client = MockRespaClient(data_file=tmp_path / "missing.json")

        calendar = client.get_calendar(
            "ignored",
            pendulum.parse("2023-12-01", tz=TZ),
            pendulum.parse("2023-12-14", tz=TZ),
        )

        assert calendar.opening_hours == []
        assert calendar.reservations == []
