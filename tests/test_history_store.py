"""Tests for audit history persistence."""

import json

import pytest

from vola.history import AuditHistoryStore, serialize_history
from vola.models.audit import HistoryEntry
from vola.models.events import AppEventType
from vola.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorageInterface,
    StorageError,
)


class FailingStorage(KeyValueStorageInterface):
    """Storage whose every operation fails."""

    def read(self, key):
        raise StorageError("disk unavailable")

    def write(self, key, value):
        raise StorageError("disk full")

    def remove(self, key):
        raise StorageError("read-only filesystem")


def result_with_score(sample_result, score):
    return sample_result.model_copy(update={"vola_verdict_score": float(score)})


class TestRecord:
    """Tests for AuditHistoryStore.record."""

    def test_newest_entry_first(self, history, sample_result):
        first = history.record(sample_result, "csv one")
        second = history.record(sample_result, "csv two")

        assert history.entries == (second, first)
        assert history.latest is second

    def test_entry_keeps_raw_csv_verbatim(self, history, sample_result):
        raw = "  date,amount\n2026-01-01,-5\n"
        entry = history.record(sample_result, raw)

        assert entry.raw_csv == raw

    def test_cap_evicts_oldest(self, history, sample_result):
        """51 audits leave the most recent 50."""
        entries = [history.record(sample_result, f"csv {i}") for i in range(51)]

        assert len(history) == 50
        assert history.latest is entries[-1]
        assert entries[0] not in history.entries
        assert history.entries[-1] is entries[1]

    def test_custom_cap(self, storage, sample_result):
        store = AuditHistoryStore(storage, max_entries=2)
        for i in range(5):
            store.record(sample_result, f"csv {i}")

        assert [e.raw_csv for e in store.entries] == ["csv 4", "csv 3"]

    def test_cap_must_be_positive(self, storage):
        with pytest.raises(ValueError):
            AuditHistoryStore(storage, max_entries=0)

    def test_write_failure_leaves_list_unchanged(self, sample_result):
        store = AuditHistoryStore(FailingStorage())

        with pytest.raises(StorageError):
            store.record(sample_result, "csv")
        assert len(store) == 0

    def test_record_is_logged(self, history, event_logger, sample_result):
        history.record(sample_result, "csv")

        event = event_logger.recent_events[-1]
        assert event.event_type == AppEventType.HISTORY_RECORDED
        assert event.details["entry_count"] == 1
        assert event.details["evicted"] == 0


class TestPersistence:
    """Tests for the stored JSON and reloading it."""

    def test_reload_restores_entries(self, storage, sample_result):
        writer = AuditHistoryStore(storage)
        for score in (10, 20, 30):
            writer.record(result_with_score(sample_result, score), f"csv {score}")

        reader = AuditHistoryStore(storage)
        loaded = reader.load()

        assert loaded == list(writer.entries)
        assert [e.result.vola_verdict_score for e in reader.entries] == [30, 20, 10]

    def test_wire_shape(self, history, storage, sample_result):
        """Entries are stored as {id, timestamp, data, rawCsv} with camelCase data."""
        entry = history.record(sample_result, "csv")

        stored = json.loads(storage.read("vola_audit_history"))

        assert len(stored) == 1
        assert set(stored[0]) == {"id", "timestamp", "data", "rawCsv"}
        assert stored[0]["id"] == str(entry.id)
        assert stored[0]["data"]["volaVerdictScore"] == 41
        assert stored[0]["data"]["leakageItems"][0]["alternative"]

    def test_custom_storage_key(self, storage, sample_result):
        store = AuditHistoryStore(storage, storage_key="other_key")
        store.record(sample_result, "csv")

        assert storage.read("other_key") is not None
        assert storage.read("vola_audit_history") is None

    def test_absent_key_loads_empty(self, history):
        assert history.load() == []

    def test_load_truncates_to_cap(self, storage, sample_result):
        entries = [HistoryEntry(result=sample_result, raw_csv=f"csv {i}") for i in range(5)]
        storage.write("vola_audit_history", serialize_history(entries))

        store = AuditHistoryStore(storage, max_entries=3)
        store.load()

        assert [e.raw_csv for e in store.entries] == ["csv 0", "csv 1", "csv 2"]

    def test_corrupt_json_loads_empty(self, event_logger):
        storage = InMemoryStorage({"vola_audit_history": "{not json"})
        store = AuditHistoryStore(storage, event_logger=event_logger)

        assert store.load() == []
        assert event_logger.recent_events[-1].event_type == AppEventType.HISTORY_CORRUPT

    def test_wrong_shape_loads_empty(self):
        storage = InMemoryStorage({"vola_audit_history": '[{"id": "x"}]'})
        store = AuditHistoryStore(storage)

        assert store.load() == []

    def test_unreadable_storage_loads_empty(self, event_logger):
        store = AuditHistoryStore(FailingStorage(), event_logger=event_logger)

        assert store.load() == []
        assert event_logger.recent_events[-1].event_type == AppEventType.HISTORY_CORRUPT

    def test_record_after_corrupt_load_overwrites(self, sample_result):
        storage = InMemoryStorage({"vola_audit_history": "garbage"})
        store = AuditHistoryStore(storage)
        store.load()

        store.record(sample_result, "csv")

        assert len(json.loads(storage.read("vola_audit_history"))) == 1


class TestClear:
    """Tests for AuditHistoryStore.clear."""

    def test_clear_removes_key(self, history, storage, sample_result):
        history.record(sample_result, "csv")

        history.clear()

        assert len(history) == 0
        assert storage.read("vola_audit_history") is None
        assert AuditHistoryStore(storage).load() == []

    def test_clear_is_logged(self, history, event_logger, sample_result):
        history.record(sample_result, "csv")
        history.clear()

        event = event_logger.recent_events[-1]
        assert event.event_type == AppEventType.HISTORY_CLEARED
        assert event.details["removed"] == 1

    def test_clear_failure_keeps_entries(self, sample_result):
        storage = InMemoryStorage()
        store = AuditHistoryStore(storage)
        store.record(sample_result, "csv")
        store._storage = FailingStorage()

        with pytest.raises(StorageError):
            store.clear()
        assert len(store) == 1


class TestTrend:
    """Tests for AuditHistoryStore.trend."""

    def test_oldest_to_newest(self, history, sample_result):
        for score in (30, 50, 70):
            history.record(result_with_score(sample_result, score), "csv")

        assert [p.score for p in history.trend()] == [30, 50, 70]

    def test_burn_follows_entries(self, history, sample_result):
        history.record(sample_result, "csv")

        assert history.trend()[0].burn == 62.4

    def test_empty(self, history):
        assert history.trend() == []


class TestJsonFileStorage:
    """Tests for the file-backed storage."""

    def test_read_missing_key(self, tmp_path):
        assert JsonFileStorage(tmp_path).read("nothing") is None

    def test_write_then_read(self, tmp_path):
        storage = JsonFileStorage(tmp_path)
        storage.write("key", '["value"]')

        assert storage.read("key") == '["value"]'
        assert (tmp_path / "key.json").exists()

    def test_overwrite_leaves_no_temp_files(self, tmp_path):
        storage = JsonFileStorage(tmp_path)
        storage.write("key", "1")
        storage.write("key", "2")

        assert storage.read("key") == "2"
        assert [p.name for p in tmp_path.iterdir()] == ["key.json"]

    def test_remove(self, tmp_path):
        storage = JsonFileStorage(tmp_path)
        storage.write("key", "1")

        storage.remove("key")
        storage.remove("key")

        assert storage.read("key") is None

    def test_creates_missing_directory(self, tmp_path):
        directory = tmp_path / "nested" / "data"
        JsonFileStorage(directory)

        assert directory.is_dir()

    def test_directory_blocked_by_file(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")

        with pytest.raises(StorageError):
            JsonFileStorage(blocker / "data")

    def test_history_survives_restart(self, tmp_path, sample_result):
        """A new store on the same directory sees earlier audits."""
        first = AuditHistoryStore(JsonFileStorage(tmp_path))
        entry = first.record(sample_result, "csv")

        second = AuditHistoryStore(JsonFileStorage(tmp_path))
        second.load()

        assert second.latest == entry
