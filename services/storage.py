import json
import os
import tempfile
import threading
from typing import ContextManager, Dict, Optional, Protocol

from env import STACK_STORAGE_PATH
from logger_manager import log_debug, log_error


class StorageBackend(Protocol):
    """Named string slots, the same shape as browser localStorage."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def lock(self) -> ContextManager: ...


_path_locks: Dict[str, ContextManager] = {}
_path_locks_guard = threading.Lock()


def lock_for_path(path: str) -> ContextManager:
    """One lock per storage file, shared by every JsonFileStorage on that path."""
    key = os.path.abspath(path)
    with _path_locks_guard:
        if key not in _path_locks:
            _path_locks[key] = threading.RLock()
        return _path_locks[key]


class InMemoryStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})
        self._lock = threading.RLock()

    def lock(self) -> ContextManager:
        return self._lock

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage:
    """Key/value slots kept in one JSON file.

    The file is read on every access so writes made by another process are
    seen on the next read. Writes go to a temp file and are moved into place.
    Hold lock() around a read-modify-write so concurrent requests on the same
    file do not overwrite each other.
    """

    def __init__(self, path: str):
        self.path = path
        self._lock = lock_for_path(path)

    def lock(self) -> ContextManager:
        return self._lock

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            log_error(f"Failed to read storage file {self.path}: {e}", e)
            return {}
        if not isinstance(data, dict):
            log_error(f"Storage file {self.path} does not hold an object, ignoring it")
            return {}
        return data

    def _save(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        log_debug(f"Storage file {self.path} written")

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._save(data)

    def remove_item(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if key in data:
                del data[key]
                self._save(data)


def get_storage() -> StorageBackend:
    return JsonFileStorage(STACK_STORAGE_PATH)
