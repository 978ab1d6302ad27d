"""
Key-value storage for persisted client state.

Values are strings (serialized JSON), mirroring browser local storage.
"""

import re
from abc import ABC, abstractmethod
from pathlib import Path

from notestream.utils.exceptions import StorageError
from notestream.utils.logger import get_logger

logger = get_logger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStorage(ABC):
    """Abstract string key-value store."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value under a key, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""


class InMemoryStorage(KeyValueStorage):
    """Dict-backed storage, used for tests and ephemeral sessions."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage(KeyValueStorage):
    """
    Directory-backed storage: one `<key>.json` file per key.

    Writes go to a temporary file that is then renamed over the target,
    so a crash never leaves a half-written value.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}", context={"key": key}) from e

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(value, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}", context={"key": key}) from e
        logger.bind(key=key, bytes=len(value)).debug("Stored key {}", key)

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to delete key {key}: {e}", context={"key": key}) from e

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise StorageError(f"Invalid storage key: {key!r}", context={"key": key})
        return self.directory / f"{key}.json"
