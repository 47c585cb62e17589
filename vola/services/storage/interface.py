"""
Abstract Storage Interface

DESIGN DECISION: History persistence goes through a tiny key/value
interface rather than touching files directly. This allows us to:
1. Use a JSON file per key in production
2. Use in-memory storage for testing
3. Keep the history store decoupled from where bytes live

Values are whole serialized documents. There are no partial updates:
every write replaces the previous value for the key.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for durable key/value storage.

    Reads and writes are synchronous.
    """

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored text, or None if the key is absent

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any prior value.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """
        Remove a key entirely. Removing an absent key is a no-op.

        Raises:
            StorageError: If the removal fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass
