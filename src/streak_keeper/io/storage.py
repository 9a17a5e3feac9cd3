"""
Keyed string storage.

The progress layer only needs get/set/remove of string values under string
keys. JsonFileStorage keeps every key in one JSON object on disk;
MemoryStorage is the in-process equivalent used by tests.
"""

import json
import logging
import os
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the backing store cannot be read or written."""

    pass


class KeyValueStorage(Protocol):
    """Minimal keyed string storage contract."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...


class MemoryStorage:
    """Dict-backed storage."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStorage:
    """
    Storage backed by a single JSON object file.

    The whole file is re-read on every access so that separate processes
    (two CLI invocations) see each other's writes. Writes go to a temporary
    file that replaces the original, so a crash never leaves half a file.

    A file that exists but does not hold a JSON object is treated as empty
    and logged; it is overwritten on the next write.
    """

    def __init__(self, path: str | Path):
        """
        Initialize the file storage.

        Args:
            path: Path to the JSON file (created on first write)
        """
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Corrupt storage file {self.path}: {e}; treating as empty")
            return {}
        except OSError as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e

        if not isinstance(data, dict):
            logger.warning(f"Storage file {self.path} is not a JSON object; treating as empty")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, data: dict[str, str]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def keys(self) -> list[str]:
        return list(self._read())
