"""
Audit History Store

Keeps a capped, most-recent-first list of past audits and mirrors it
to durable storage under one fixed key.

DESIGN DECISION: The store owns its list exclusively. ``load``,
``record`` and ``clear`` are the only mutators, and each one persists
synchronously before returning. Nothing else reads or writes the key.

KNOWN GAP: There is no version field and no migration. If the
AuditResult shape changes, older stored lists fail validation on
load and are discarded like any other corrupt value.
"""

from typing import Optional
from uuid import UUID

from pydantic import TypeAdapter, ValidationError

from vola.events import EventLogger
from vola.models.audit import AuditResult, HistoryEntry, TrendPoint
from vola.services.storage import KeyValueStorageInterface, StorageError


DEFAULT_STORAGE_KEY = "vola_audit_history"
DEFAULT_MAX_ENTRIES = 50

_entries_adapter = TypeAdapter(list[HistoryEntry])


def serialize_history(entries: list[HistoryEntry]) -> str:
    """Serialize entries to the persisted JSON array."""
    return _entries_adapter.dump_json(entries, by_alias=True).decode("utf-8")


def deserialize_history(raw: str) -> list[HistoryEntry]:
    """
    Parse a persisted JSON array.

    Raises:
        ValidationError: If the text is not JSON or not a list of entries
    """
    return _entries_adapter.validate_json(raw)


class AuditHistoryStore:
    """
    Capped history of audits, newest first.

    Usage:
        store = AuditHistoryStore(JsonFileStorage(path))
        store.load()
        store.record(result, raw_csv)
    """

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        storage_key: str = DEFAULT_STORAGE_KEY,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        event_logger: Optional[EventLogger] = None,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._storage = storage
        self._storage_key = storage_key
        self._max_entries = max_entries
        self._event_logger = event_logger
        self._entries: list[HistoryEntry] = []

    @property
    def storage_key(self) -> str:
        return self._storage_key

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        """All entries, most recent first."""
        return tuple(self._entries)

    @property
    def latest(self) -> Optional[HistoryEntry]:
        return self._entries[0] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)

    def load(self) -> list[HistoryEntry]:
        """
        Replace the in-memory list with the persisted one.

        An absent key yields an empty history. An unreadable or invalid
        stored value is discarded (history starts empty) and logged,
        never raised.
        """
        try:
            raw = self._storage.read(self._storage_key)
        except StorageError as e:
            self._entries = []
            self._log_corrupt(str(e))
            return []

        if raw is None:
            self._entries = []
        else:
            try:
                # Truncate in case the cap was lowered since the last write
                self._entries = deserialize_history(raw)[:self._max_entries]
            except ValidationError as e:
                self._entries = []
                self._log_corrupt(str(e))
                return []

        if self._event_logger:
            self._event_logger.log_history_loaded(len(self._entries))
        return list(self._entries)

    def record(
        self,
        result: AuditResult,
        raw_csv: str,
        correlation_id: Optional[UUID] = None,
    ) -> HistoryEntry:
        """
        Save a new audit at the front of the history.

        The oldest entries beyond ``max_entries`` are evicted. The
        in-memory list only changes once the write has succeeded.

        Raises:
            StorageError: If the history cannot be persisted
        """
        entry = HistoryEntry(result=result, raw_csv=raw_csv)
        updated = [entry, *self._entries]
        evicted = max(0, len(updated) - self._max_entries)
        updated = updated[:self._max_entries]

        self._storage.write(self._storage_key, serialize_history(updated))
        self._entries = updated

        if self._event_logger:
            self._event_logger.log_history_recorded(
                entry_id=entry.id,
                entry_count=len(updated),
                evicted=evicted,
                correlation_id=correlation_id,
            )
        return entry

    def clear(self) -> None:
        """
        Empty the history and remove the persisted key.

        Callers must get explicit user confirmation first.

        Raises:
            StorageError: If the key cannot be removed
        """
        removed = len(self._entries)
        self._storage.remove(self._storage_key)
        self._entries = []

        if self._event_logger:
            self._event_logger.log_history_cleared(removed)

    def trend(self) -> list[TrendPoint]:
        """Verdict score and burn rate per entry, oldest to newest."""
        return [
            TrendPoint(
                timestamp=entry.timestamp,
                score=entry.result.vola_verdict_score,
                burn=entry.result.burn_rate_percentage,
            )
            for entry in reversed(self._entries)
        ]

    def _log_corrupt(self, error_message: str) -> None:
        if self._event_logger:
            self._event_logger.log_history_corrupt(
                storage_key=self._storage_key,
                error_message=error_message,
            )
