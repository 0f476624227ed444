"""Local key-value persistence.

Every record (profile, story list, generation config, ...) is stored under
its own key as a serialized JSON string. Stores only move strings around;
encoding and decoding belong to the services.
"""

import logging
import re
from enum import StrEnum
from pathlib import Path
from typing import Protocol

from softdreams.utils.atomic_io import atomic_write_text
from softdreams.utils.exceptions import DataCorruptionError, SaveFailedError

logger = logging.getLogger(__name__)

_VALID_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class StorageKeys(StrEnum):
    """Keys of the records persisted by the services."""

    USER_PROFILE = "user_profile"
    SAVED_STORIES = "saved_stories"
    STORY_GENERATION_CONFIG = "story_generation_config"
    PENDING_NOTIFICATIONS = "pending_notifications"
    NOTIFICATION_AUTHORIZATION = "notification_authorization"


class KeyValueStore(Protocol):
    """Protocol for string key-value stores."""

    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value."""
        ...

    def remove(self, key: str) -> None:
        """Delete *key*. Missing keys are ignored."""
        ...

    def contains(self, key: str) -> bool:
        """Check whether *key* is stored."""
        ...

    def keys(self) -> list[str]:
        """Return all stored keys."""
        ...


class InMemoryKeyValueStore:
    """Dict-backed store used for tests and previews."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def contains(self, key: str) -> bool:
        return key in self._data

    def keys(self) -> list[str]:
        return sorted(self._data)


class JsonFileKeyValueStore:
    """Store each key in its own ``<key>.json`` file inside a directory.

    Writes go through a temp file + rename so a crash never leaves a
    half-written record behind.
    """

    def __init__(self, directory: Path | str):
        """Initialize the store.

        Args:
            directory: Directory holding the record files. Created on first write.
        """
        self.directory = Path(directory)
        logger.debug("JsonFileKeyValueStore using %s", self.directory)

    def _path_for(self, key: str) -> Path:
        """Map a key to its file path.

        Raises:
            ValueError: If the key contains characters unsafe for file names.
        """
        if not _VALID_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        """Read the raw value for *key*.

        Raises:
            DataCorruptionError: If the file exists but cannot be read.
        """
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read %s: %s", path, e)
            raise DataCorruptionError(f"Cannot read stored record '{key}': {e}") from e

    def set(self, key: str, value: str) -> None:
        """Write *value* for *key* atomically.

        Raises:
            SaveFailedError: If the file cannot be written.
        """
        path = self._path_for(key)
        try:
            atomic_write_text(path, value)
        except OSError as e:
            logger.error("Failed to write %s: %s", path, e)
            raise SaveFailedError(f"Cannot write record '{key}': {e}") from e
        logger.debug("Stored %s (%d chars)", key, len(value))

    def remove(self, key: str) -> None:
        """Delete the file for *key* if it exists.

        Raises:
            SaveFailedError: If the file exists but cannot be deleted.
        """
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error("Failed to delete %s: %s", path, e)
            raise SaveFailedError(f"Cannot delete record '{key}': {e}") from e
        logger.debug("Removed %s", key)

    def contains(self, key: str) -> bool:
        return self._path_for(key).exists()

    def keys(self) -> list[str]:
        if not self.directory.exists():
            return []
        return sorted(p.stem for p in self.directory.glob("*.json"))
