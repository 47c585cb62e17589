"""Audit history package."""

from vola.history.store import (
    DEFAULT_MAX_ENTRIES,
    DEFAULT_STORAGE_KEY,
    AuditHistoryStore,
    deserialize_history,
    serialize_history,
)

__all__ = [
    "DEFAULT_MAX_ENTRIES",
    "DEFAULT_STORAGE_KEY",
    "AuditHistoryStore",
    "deserialize_history",
    "serialize_history",
]
