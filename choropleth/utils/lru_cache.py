"""Bounded LRU store used to hold binding sessions."""

import threading
from collections import OrderedDict
from typing import Generic, List, Optional, TypeVar

T = TypeVar('T')


class LRUCache(Generic[T]):
    """LRU mapping with a size limit and thread safety.

    Values are replaced whole; there is no in-place mutation through the cache.
    """

    def __init__(self, max_size: int = 256):
        """
        Initialize LRU cache.

        Args:
            max_size: Maximum number of items to keep
        """
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self._items: "OrderedDict[str, T]" = OrderedDict()
        self.max_size = max_size
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[T]:
        """Return the item for ``key`` (marking it recently used) or None."""
        with self._lock:
            if key in self._items:
                self._items.move_to_end(key)
                return self._items[key]
        return None

    def set(self, key: str, value: T) -> Optional[str]:
        """
        Store ``value`` under ``key``, evicting the oldest item when full.

        Returns:
            The evicted key, if any
        """
        with self._lock:
            if key in self._items:
                self._items.move_to_end(key)
            self._items[key] = value

            if len(self._items) > self.max_size:
                evicted, _ = self._items.popitem(last=False)
                return evicted
        return None

    def pop(self, key: str) -> Optional[T]:
        """Remove and return the item for ``key``, or None if absent."""
        with self._lock:
            return self._items.pop(key, None)

    def keys(self) -> List[str]:
        """Keys ordered from least to most recently used."""
        with self._lock:
            return list(self._items.keys())

    def values(self) -> List[T]:
        """Values ordered from least to most recently used, without touching recency."""
        with self._lock:
            return list(self._items.values())

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._items
