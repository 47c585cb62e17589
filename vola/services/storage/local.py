"""
Local Storage Implementations

JsonFileStorage keeps one ``<key>.json`` file per key in a data
directory, so history survives application restarts on the same
machine. InMemoryStorage is used by tests and as a fallback when the
data directory cannot be created.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

from vola.services.storage.interface import KeyValueStorageInterface, StorageError


class JsonFileStorage(KeyValueStorageInterface):
    """
    File-backed key/value storage.

    Writes go to a temp file in the same directory and are moved into
    place, so a crash mid-write never leaves a half-written value.
    """

    def __init__(self, directory: Path):
        self._directory = Path(directory)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create data directory {self._directory}: {e}")

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        return self._directory / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read {path}: {e}")

    def write(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self._directory,
                prefix=f".{key}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                    tmp.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}")

    def remove(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to remove {path}: {e}")


class InMemoryStorage(KeyValueStorageInterface):
    """Dict-backed storage. Contents vanish with the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)
