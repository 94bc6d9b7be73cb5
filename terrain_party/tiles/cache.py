"""Bounded in-memory tile cache."""

from collections import OrderedDict
from threading import Lock
from typing import Optional, Tuple

TileKey = Tuple[int, int, int]


class TileCache:
    """
    LRU mapping from (z, x, y) to tile image bytes.

    The least recently used entry is evicted once ``max_entries`` is exceeded.
    A cache with ``max_entries == 0`` stores nothing.
    """

    def __init__(self, max_entries: int = 512):
        if max_entries < 0:
            raise ValueError(f"max_entries must be non-negative, got {max_entries}")
        self.max_entries = max_entries
        self._entries: "OrderedDict[TileKey, bytes]" = OrderedDict()
        self._lock = Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: TileKey) -> Optional[bytes]:
        with self._lock:
            data = self._entries.get(key)
            if data is None:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return data

    def put(self, key: TileKey, data: bytes) -> None:
        if self.max_entries == 0:
            return
        with self._lock:
            self._entries[key] = data
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __contains__(self, key: TileKey) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
