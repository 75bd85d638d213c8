"""
In-process implementation of the key/prefix store.

Selected with VITALS_SVC_STORE_BACKEND=memory for local runs; tests use it as
a drop-in double for SQLiteKeyValueStore. Values are deep-copied on the way
in and out so callers can never mutate stored state by reference.
"""
import copy
import threading
from typing import Any, Dict, List

from repositories.base import KeyNotFoundError


class InMemoryKeyValueStore:
    """Dict-backed store; a lock makes each single-key operation atomic."""

    def __init__(self) -> None:
        self._data: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(value)

    def get(self, key: str) -> Any:
        with self._lock:
            if key not in self._data:
                raise KeyNotFoundError(key)
            return copy.deepcopy(self._data[key])

    def get_by_prefix(self, prefix: str) -> List[Any]:
        with self._lock:
            return [
                copy.deepcopy(value)
                for key, value in self._data.items()
                if key.startswith(prefix)
            ]

    def ping(self) -> None:
        return None
