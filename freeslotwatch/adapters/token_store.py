"""
Push token storage in the operating system keyring.
"""

import logging
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

logger = logging.getLogger(__name__)


KEYRING_SERVICE_NAME = "freeslotwatch"


class PushTokenStore:
    """
    Stores the push notification access token per topic in the keyring.

    Keyring failures are logged and reported as a missing token, so the
    watcher keeps running with unauthenticated notifications.
    """

    def __init__(self, service_name: str = KEYRING_SERVICE_NAME):
        self.service_name = service_name

    def get_token(self, topic: str) -> Optional[str]:
        """Return the stored token for ``topic``, if any."""
        try:
            return keyring.get_password(self.service_name, topic)
        except KeyringError as exc:  # pragma: no cover - environment dependent
            logger.warning("Reading push token from keyring failed: %s", exc)
            return None

    def set_token(self, topic: str, token: str) -> None:
        """
        Store ``token`` for ``topic``.

        Raises:
            KeyringError: If no usable keyring backend is available
        """
        keyring.set_password(self.service_name, topic, token)

    def delete_token(self, topic: str) -> bool:
        """Remove the token for ``topic``. Returns False if none was stored."""
        try:
            keyring.delete_password(self.service_name, topic)
        except PasswordDeleteError:
            return False
        return True
