"""
Process-wide cache of spreadsheet sheet metadata.
"""

from __future__ import annotations

import threading
from typing import Callable, Dict, List, TypeVar

T = TypeVar("T")


class SheetMetadataCache:
    """
    Holds the last fetched sheet list per spreadsheet id.

    Entries never expire on their own. Anything that adds, renames, removes
    or reorders sheets must call ``invalidate``. There is no cross-process
    invalidation: two workers sharing one spreadsheet each keep their own copy.

    Loaders run outside the lock. Each key carries a generation that
    ``invalidate`` and ``clear`` bump, and a load that started before the bump
    is returned to its caller but never stored.
    """

    def __init__(self):
        self._entries: Dict[str, List] = {}
        self._generations: Dict[str, int] = {}
        self._epoch = 0
        self._lock = threading.Lock()

    def _generation(self, key: str) -> tuple:
        return (self._epoch, self._generations.get(key, 0))

    def get_or_populate(self, key: str, loader: Callable[[], List[T]]) -> List[T]:
        with self._lock:
            if key in self._entries:
                return self._entries[key]
            started = self._generation(key)
        value = loader()
        with self._lock:
            if self._generation(key) == started:
                self._entries[key] = value
        return value

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)
            self._generations[key] = self._generations.get(key, 0) + 1

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._epoch += 1

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries
