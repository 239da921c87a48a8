"""
JSON file persistence for the most recent set of free slots.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Sequence

import pendulum

from ..domain.exceptions import InvalidInterval, SnapshotStoreError
from ..domain.models import FreeSlot

logger = logging.getLogger(__name__)


class JsonSnapshotStore:
    """
    Keeps a single snapshot of free slots in a JSON document.

    The document is replaced as a whole on every save; no history is kept.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> List[FreeSlot]:
        """
        Read the previously saved slots.

        Returns:
            The stored slots, or an empty list if nothing was saved yet

        Raises:
            SnapshotStoreError: If the file cannot be read or is malformed
        """
        if not self.path.exists():
            logger.info("No snapshot at %s yet, treating as empty", self.path)
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as file_handle:
                data = json.load(file_handle)
        except (OSError, ValueError) as exc:
            raise SnapshotStoreError(f"Could not read snapshot {self.path}: {exc}") from exc

        if not isinstance(data, list):
            raise SnapshotStoreError(f"Snapshot {self.path} must contain a JSON list")

        try:
            return [self._slot_from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError, AttributeError, InvalidInterval) as exc:
            raise SnapshotStoreError(f"Malformed entry in snapshot {self.path}: {exc}") from exc

    def save(self, slots: Sequence[FreeSlot]) -> None:
        """
        Overwrite the snapshot with ``slots``.

        Raises:
            SnapshotStoreError: If the file cannot be written
        """
        ordered = sorted(slots, key=lambda s: (s.start, s.end))
        payload = json.dumps([self._slot_to_dict(slot) for slot in ordered], indent=2)
        tmp_path = self.path.with_name(self.path.name + ".tmp")

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as file_handle:
                file_handle.write(payload)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise SnapshotStoreError(f"Could not write snapshot {self.path}: {exc}") from exc

        logger.debug("Saved %d slot(s) to %s", len(ordered), self.path)

    @staticmethod
    def _slot_to_dict(slot: FreeSlot) -> Dict[str, str]:
        return {
            "date": slot.date.isoformat(),
            "start": slot.start.to_iso8601_string(),
            "end": slot.end.to_iso8601_string(),
        }

    @staticmethod
    def _slot_from_dict(item: Dict[str, Any]) -> FreeSlot:
        return FreeSlot(
            start=pendulum.parse(item["start"]),
            end=pendulum.parse(item["end"]),
            date=pendulum.parse(item["date"]).date(),
        )
