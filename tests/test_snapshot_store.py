"""
Tests for the JSON snapshot store.
"""

import json

import pendulum
import pytest

from freeslotwatch.adapters.snapshot_store import JsonSnapshotStore
from freeslotwatch.domain.exceptions import SnapshotStoreError
from freeslotwatch.domain.models import FreeSlot

TZ = "Europe/Helsinki"


def _slot(day: str, start: str, end: str) -> FreeSlot:
    return FreeSlot(
        start=pendulum.parse(f"{day} {start}", tz=TZ),
        end=pendulum.parse(f"{day} {end}", tz=TZ),
        date=pendulum.parse(day).date()
    )


class TestJsonSnapshotStore:
    """Tests for JsonSnapshotStore."""

    def test_missing_file_loads_as_empty(self, tmp_path):
        """No snapshot yet means an empty previous set."""
        store = JsonSnapshotStore(tmp_path / "available_times.json")

        assert store.load() == []

    def test_save_then_load_preserves_slots(self, tmp_path):
        """Saved slots come back equal, with their dates."""
        store = JsonSnapshotStore(tmp_path / "available_times.json")
        slots = [_slot("2023-12-04", "11:00", "14:00"), _slot("2023-12-01", "10:00", "11:00")]

        store.save(slots)
        loaded = store.load()

        assert loaded == sorted(slots, key=lambda s: s.start)
        assert [s.date for s in loaded] == [pendulum.date(2023, 12, 1), pendulum.date(2023, 12, 4)]

    def test_document_layout(self, tmp_path):
        """The file is a start-ordered JSON list of date/start/end records."""
        path = tmp_path / "available_times.json"
        JsonSnapshotStore(path).save([_slot("2023-12-01", "10:00", "11:00")])

        data = json.loads(path.read_text(encoding="utf-8"))

        assert data == [{
            "date": "2023-12-01",
            "start": "2023-12-01T10:00:00+02:00",
            "end": "2023-12-01T11:00:00+02:00",
        }]

    def test_save_replaces_whole_document(self, tmp_path):
        """Saving an empty list clears the previous content."""
        store = JsonSnapshotStore(tmp_path / "available_times.json")
        store.save([_slot("2023-12-01", "10:00", "11:00")])

        store.save([])

        assert store.load() == []
        assert not (tmp_path / "available_times.json.tmp").exists()

    def test_save_creates_parent_directories(self, tmp_path):
        """The snapshot directory is created on demand."""
        store = JsonSnapshotStore(tmp_path / "state" / "slots.json")

        store.save([_slot("2023-12-01", "10:00", "11:00")])

        assert len(store.load()) == 1

    def test_invalid_json_raises(self, tmp_path):
        """Corrupt files are reported, not silently treated as empty."""
        path = tmp_path / "available_times.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(SnapshotStoreError):
            JsonSnapshotStore(path).load()

    def test_non_list_document_raises(self, tmp_path):
        """The document root must be a list."""
        path = tmp_path / "available_times.json"
        path.write_text('{"date": "2023-12-01"}', encoding="utf-8")

        with pytest.raises(SnapshotStoreError):
            JsonSnapshotStore(path).load()

    def test_malformed_entry_raises(self, tmp_path):
        """Entries missing fields are reported."""
        path = tmp_path / "available_times.json"
        path.write_text('[{"date": "2023-12-01", "start": "2023-12-01T10:00:00+02:00"}]', encoding="utf-8")

        with pytest.raises(SnapshotStoreError):
            JsonSnapshotStore(path).load()
