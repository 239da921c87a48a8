"""
Adapters layer - External integrations (Respa API, files, console, push).
"""

from .console_reporter import ConsoleReporter
from .mock_respa_client import MockRespaClient
from .push_notifier import PushNotifier
from .respa_client import RespaClient, parse_calendar_response
from .snapshot_store import JsonSnapshotStore
from .token_store import PushTokenStore

__all__ = [
    "ConsoleReporter",
    "JsonSnapshotStore",
    "MockRespaClient",
    "PushNotifier",
    "PushTokenStore",
    "RespaClient",
    "parse_calendar_response",
]
