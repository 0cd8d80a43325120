"""In-process cache driver with per-key expiry."""

from __future__ import annotations

import threading
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from snowcore.cache import DRIVER_TYPE_MEMORY, Cache, get_ttl_or_default, register

MAX_PERSISTENCE_TIME = 86400 * 365 * 10


class WrongDataTypeError(ValueError):
    """Raised when a counter operation meets a value that is not an integer."""

    def __init__(self, message: str = "wrong data type") -> None:
        super().__init__(message)


@dataclass
class _Item:
    data: Any
    expire_at: float

    def alive(self) -> bool:
        return time.monotonic() < self.expire_at


def _expire_at(ttl: int) -> float:
    return time.monotonic() + ttl


def _persistent_ttl(args: tuple[int, ...]) -> int:
    ttl = get_ttl_or_default(*args)
    return MAX_PERSISTENCE_TIME if ttl == 0 else ttl


def _to_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise WrongDataTypeError()
    return value


class MemoryCache(Cache):
    """Cache kept in a dictionary; a ttl of zero means ten years."""

    def __init__(self) -> None:
        self._items: dict[str, _Item] = {}
        self._lock = threading.RLock()

    def get(self, key: str) -> Any:
        """Return the value of ``key``, or an empty string when absent or expired."""
        with self._lock:
            item = self._items.get(key)
        return item.data if item is not None and item.alive() else ""

    def get_multi(self, *args: str) -> dict[str, Any]:
        with self._lock:
            return {
                key: item.data if (item := self._items.get(key)) and item.alive() else ""
                for key in args
            }

    def set(self, key: str, value: Any, *args: int) -> bool:
        item = _Item(value, _expire_at(_persistent_ttl(args)))
        with self._lock:
            self._items[key] = item
        return True

    def set_multi(self, items: Mapping[str, Any], *args: int) -> bool:
        expire_at = _expire_at(_persistent_ttl(args))
        with self._lock:
            for key, value in items.items():
                self._items[key] = _Item(value, expire_at)
        return True

    def delete(self, key: str) -> bool:
        with self._lock:
            self._items.pop(key, None)
        return True

    def delete_multi(self, *args: str) -> bool:
        with self._lock:
            for key in args:
                self._items.pop(key, None)
        return True

    def expire(self, key: str, *args: int) -> bool:
        """Reset the ttl of a live key; an expired key is dropped."""
        expire_at = _expire_at(get_ttl_or_default(*args))
        with self._lock:
            item = self._items.get(key)
            if item is not None:
                if item.alive():
                    item.expire_at = expire_at
                else:
                    del self._items[key]
        return True

    def is_exist(self, key: str) -> bool:
        with self._lock:
            item = self._items.get(key)
        return item is not None and item.alive()

    def incr_by(self, key: str, value: int) -> int:
        """Add ``value`` to an integer; a missing key starts from zero and never expires."""
        with self._lock:
            item = self._items.get(key)
            if item is None:
                self._items[key] = _Item(value, _expire_at(MAX_PERSISTENCE_TIME))
                return value
            new_value = _to_int(item.data) + value
            item.data = new_value
            return new_value

    def decr_by(self, key: str, value: int) -> int:
        return self.incr_by(key, -value)


_lock = threading.RLock()
_instances: dict[str, MemoryCache] = {}


def get_memory_cache(di_name: str) -> MemoryCache:
    """Return the memory cache for an injection name, creating it once."""
    with _lock:
        cache = _instances.get(di_name)
        if cache is None:
            cache = _instances[di_name] = MemoryCache()
        return cache


register(DRIVER_TYPE_MEMORY, get_memory_cache)