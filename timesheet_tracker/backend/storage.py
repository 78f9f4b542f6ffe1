"""Key-value slots that hold the serialized schedule between sessions."""

from __future__ import annotations

import json
import os
import tempfile
from typing import Protocol

from loguru import logger

STORAGE_KEY = "timesheet_schedule"


class StorageUnavailableError(RuntimeError):
    """The backing store could not be read or written."""


class CorruptStorageError(StorageUnavailableError):
    """The backing file exists but does not hold a JSON object."""


class KeyValueBackend(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryBackend:
    """In-process backend, mostly for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileBackend:
    """Stores string values in a single JSON object on disk.

    Writes go through a temporary file in the same folder and are moved into
    place, so a crash mid-write leaves the previous file intact.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    def get(self, key: str) -> str | None:
        data = self._read_all()
        value = data.get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except CorruptStorageError as exc:
            # Start a fresh map; the unreadable file is kept aside for inspection.
            backup = self.path + ".corrupt"
            logger.warning("{}; moving it to {} and starting over", exc, backup)
            try:
                os.replace(self.path, backup)
            except OSError as move_exc:
                raise StorageUnavailableError(f"Cannot move aside {self.path}: {move_exc}") from move_exc
            data = {}
        data[key] = value
        folder = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(folder, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".timesheet-", suffix=".json", dir=folder)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as exc:
            raise StorageUnavailableError(f"Cannot write {self.path}: {exc}") from exc
        logger.debug("Wrote key {} to {}", key, self.path)

    def _read_all(self) -> dict[str, object]:
        if not os.path.isfile(self.path):
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except OSError as exc:
            raise StorageUnavailableError(f"Cannot read {self.path}: {exc}") from exc
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise CorruptStorageError(f"Corrupt storage file {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise CorruptStorageError(f"Corrupt storage file {self.path}: not an object")
        return data
