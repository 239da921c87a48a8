"""
Push notifications for newly appeared free slots.
"""

import logging
from typing import Optional, Sequence

import requests

from ..domain.exceptions import NotificationError
from ..domain.models import FreeSlot

logger = logging.getLogger(__name__)


class PushNotifier:
    """
    Posts new slots to an ntfy-style HTTP topic.

    The message body holds one line per new slot. Nothing is sent when no
    new slots appeared.
    """

    def __init__(
        self,
        topic_url: str,
        token: Optional[str] = None,
        title: str = "New free slots",
        timeout: float = 10,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the notifier.

        Args:
            topic_url: Full URL of the topic, e.g. https://ntfy.sh/my-topic
            token: Optional bearer token for protected topics
            title: Notification title
            timeout: Request timeout in seconds
            session: Optional requests session to reuse
        """
        self.topic_url = topic_url
        self.title = title
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {"Title": title}
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    def report(self, new_slots: Sequence[FreeSlot], current_slots: Sequence[FreeSlot]) -> None:
        """
        Send a notification listing ``new_slots``.

        Raises:
            NotificationError: If the notification could not be delivered
        """
        if not new_slots:
            logger.debug("No new slots, skipping push notification")
            return

        self.send("\n".join(slot.format_display() for slot in new_slots))
        logger.info("Sent push notification for %d new slot(s)", len(new_slots))

    def send(self, message: str) -> None:
        """Post a raw message to the topic."""
        try:
            response = self.session.post(
                self.topic_url,
                data=message.encode("utf-8"),
                headers=self.headers,
                timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as exc:
            raise NotificationError(f"Failed to send push notification: {exc}") from exc
