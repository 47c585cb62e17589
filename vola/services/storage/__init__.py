"""
Storage Services Package

Provides the key/value storage interface and its local implementations.
"""

from vola.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
)
from vola.services.storage.local import (
    InMemoryStorage,
    JsonFileStorage,
)

__all__ = [
    # Interface
    "KeyValueStorageInterface",
    "StorageError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
]
