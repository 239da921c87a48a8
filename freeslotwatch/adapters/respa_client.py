"""
Respa API client for fetching a resource's opening hours and reservations.
"""

import logging
from typing import Any, Dict, List, Optional

import pendulum
import requests
from pendulum import DateTime

from ..domain.exceptions import CalendarAPIError
from ..domain.models import CalendarData, OpeningHours, Reservation

logger = logging.getLogger(__name__)


class RespaClient:
    """
    Client for the Respa resource reservation API.

    Uses the /resource/{id}/ endpoint, which embeds the opening hours and the
    reservations for the requested date range.
    """

    API_ENDPOINT = "https://api.hel.fi/respa/v1"

    def __init__(
        self,
        base_url: str = API_ENDPOINT,
        timeout: float = 30,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the Respa API client.

        Args:
            base_url: API root, without trailing slash
            timeout: Request timeout in seconds
            session: Optional requests session to reuse
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def get_calendar(
        self,
        resource_id: str,
        start_time: DateTime,
        end_time: DateTime
    ) -> CalendarData:
        """
        Get opening hours and reservations of a resource.

        Args:
            resource_id: Respa resource identifier
            start_time: Start of the query range
            end_time: End of the query range

        Returns:
            CalendarData with the parsed records

        Raises:
            CalendarAPIError: If the API call fails or returns malformed data
        """
        url = f"{self.base_url}/resource/{resource_id}/"
        params = {
            "start": start_time.format("YYYY-MM-DD[T]HH:mm:ss"),
            "end": end_time.format("YYYY-MM-DD[T]HH:mm:ss"),
            "format": "json",
        }

        logger.debug("Fetching calendar for %s from %s", resource_id, url)

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as exc:
            raise CalendarAPIError(f"Failed to fetch calendar from Respa: {exc}") from exc
        except ValueError as exc:
            raise CalendarAPIError(f"Respa returned a non-JSON response: {exc}") from exc

        return parse_calendar_response(data)


def parse_calendar_response(response_data: Any) -> CalendarData:
    """
    Parse a Respa resource payload into our domain model.

    Response format:
    {
        "opening_hours": [
            {
                "date": "2023-12-01",
                "opens": "2023-12-01T10:00:00+02:00",
                "closes": "2023-12-01T14:00:00+02:00"
            },
            {"date": "2024-01-01", "opens": null, "closes": null}
        ],
        "reservations": [
            {"begin": "2023-12-01T10:00:00+02:00", "end": "2023-12-01T11:00:00+02:00"}
        ]
    }

    Records that cannot be parsed are skipped with a warning. A reservation
    that parses but ends before it begins raises InvalidReservation.
    """
    if not isinstance(response_data, dict):
        raise CalendarAPIError("Respa response must be a JSON object")

    raw_hours = response_data.get("opening_hours") or []
    if not isinstance(raw_hours, list):
        raise CalendarAPIError("Respa response field 'opening_hours' must be a list")

    # Resources without bookings report null here
    raw_reservations = response_data.get("reservations") or []
    if not isinstance(raw_reservations, list):
        raise CalendarAPIError("Respa response field 'reservations' must be a list")

    opening_hours: List[OpeningHours] = []
    for item in raw_hours:
        try:
            opening_hours.append(
                OpeningHours(
                    date=_parse_date(item["date"]),
                    opens=_parse_optional_datetime(item.get("opens")),
                    closes=_parse_optional_datetime(item.get("closes")),
                )
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Could not parse opening hours %r: %s", item, e)
            continue

    reservations: List[Reservation] = []
    for item in raw_reservations:
        try:
            begin = _parse_datetime(item["begin"])
            end = _parse_datetime(item["end"])
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Could not parse reservation %r: %s", item, e)
            continue

        reservations.append(Reservation(start=begin, end=end))

    return CalendarData(opening_hours=opening_hours, reservations=reservations)


def _parse_date(value: str):
    return pendulum.parse(value).date()


def _parse_datetime(value: str) -> DateTime:
    """Parse an ISO 8601 timestamp, keeping the offset the feed supplied."""
    dt = pendulum.parse(value)
    if isinstance(dt, DateTime):
        return dt
    raise ValueError(f"Could not parse datetime: {value}")


def _parse_optional_datetime(value: Optional[str]) -> Optional[DateTime]:
    if value is None:
        return None
    return _parse_datetime(value)
