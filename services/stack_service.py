import json
from datetime import datetime
from typing import List

import pytz
from pydantic import ValidationError

from env import RECENT_SEARCHES_LIMIT, TIMEZONE
from interfaces.stackModels import StackEntry, StackSummary
from logger_manager import log_error, log_info
from services.storage import StorageBackend

STACK_KEY = "userStack"
RECENT_SEARCHES_KEY = "recentSearches"


def _load_list(storage: StorageBackend, key: str) -> list:
    saved = storage.get_item(key)
    if not saved:
        return []
    try:
        data = json.loads(saved)
    except json.JSONDecodeError as e:
        log_error(f"Failed to load {key}: {e}", e)
        return []
    if not isinstance(data, list):
        log_error(f"Stored {key} is not a list, ignoring it")
        return []
    return data


class StackRepository:
    """The user's saved products.

    Adding a product that is already present and removing one that is absent
    leave the stack unchanged.
    """

    def __init__(self, storage: StorageBackend, key: str = STACK_KEY):
        self.storage = storage
        self.key = key

    def list_entries(self) -> List[StackEntry]:
        entries = []
        for item in _load_list(self.storage, self.key):
            try:
                entries.append(StackEntry.model_validate(item))
            except ValidationError as e:
                log_error(f"Skipping malformed stack entry: {e}")
        return entries

    def _write(self, entries: List[StackEntry]):
        self.storage.set_item(self.key, json.dumps([entry.model_dump(mode="json") for entry in entries]))

    def contains(self, product_id: int) -> bool:
        return any(entry.id == product_id for entry in self.list_entries())

    def add(self, entry: StackEntry) -> bool:
        with self.storage.lock():
            entries = self.list_entries()
            if any(existing.id == entry.id for existing in entries):
                return False
            if entry.added_at is None:
                entry = entry.model_copy(update={"added_at": datetime.now(tz=pytz.timezone(TIMEZONE))})
            entries.append(entry)
            self._write(entries)
        log_info(f"Added product {entry.id} to stack")
        return True

    def remove(self, product_id: int) -> bool:
        with self.storage.lock():
            entries = self.list_entries()
            updated = [entry for entry in entries if entry.id != product_id]
            if len(updated) == len(entries):
                return False
            self._write(updated)
        log_info(f"Removed product {product_id} from stack")
        return True

    def clear(self):
        self.storage.remove_item(self.key)
        log_info("Stack cleared")

    def summary(self) -> StackSummary:
        entries = self.list_entries()
        if not entries:
            return StackSummary()
        average = sum(entry.trust_score for entry in entries) / len(entries)
        return StackSummary(count=len(entries), average_trust_score=int(average + 0.5))


class RecentSearches:
    """Most-recent-first search history, deduplicated and bounded."""

    def __init__(self, storage: StorageBackend, key: str = RECENT_SEARCHES_KEY, limit: int = RECENT_SEARCHES_LIMIT):
        self.storage = storage
        self.key = key
        self.limit = limit

    def list(self) -> List[str]:
        return [str(term) for term in _load_list(self.storage, self.key)]

    def record(self, term: str) -> List[str]:
        with self.storage.lock():
            updated = [term] + [s for s in self.list() if s != term]
            updated = updated[:self.limit]
            self.storage.set_item(self.key, json.dumps(updated))
        return updated

    def clear(self):
        self.storage.remove_item(self.key)
