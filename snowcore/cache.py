"""Cache interface, driver registry and a prefixing base cache."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any

from snowcore.redis_client import SINGLETON_MAIN
from snowcore.utils import substr

DRIVER_TYPE_REDIS = "redis"
DRIVER_TYPE_MEMORY = "memory"

DEFAULT_DI_NAME = SINGLETON_MAIN
DEFAULT_DRIVER_TYPE = DRIVER_TYPE_REDIS
DEFAULT_PREFIX = ""
DEFAULT_TTL = 86400


class Cache(ABC):
    """Interface every cache driver implements; ttl arguments are in seconds."""

    @abstractmethod
    def get(self, key: str) -> Any:
        """Return the value of ``key``, or an empty string when it is absent."""

    @abstractmethod
    def get_multi(self, *args: str) -> dict[str, Any]:
        """Return the values of several keys."""

    @abstractmethod
    def set(self, key: str, value: Any, *args: int) -> bool:
        """Store a value, with an optional ttl."""

    @abstractmethod
    def set_multi(self, items: Mapping[str, Any], *args: int) -> bool:
        """Store several values, with an optional ttl."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a key."""

    @abstractmethod
    def delete_multi(self, *args: str) -> bool:
        """Delete several keys."""

    @abstractmethod
    def expire(self, key: str, *args: int) -> bool:
        """Set the ttl of a key."""

    @abstractmethod
    def is_exist(self, key: str) -> bool:
        """Tell whether a key exists."""

    @abstractmethod
    def incr_by(self, key: str, value: int) -> int:
        """Add to the integer under a key and return the result."""

    @abstractmethod
    def decr_by(self, key: str, value: int) -> int:
        """Subtract from the integer under a key and return the result."""


Instance = Callable[[str], "Cache | None"]

_lock = threading.RLock()
_drivers: dict[str, Instance] = {}


def register(driver_type: str, driver: Instance | None) -> None:
    """Register a function returning the cache for an injection name."""
    if driver is None:
        raise ValueError("cache.Register driver is nil")
    with _lock:
        if driver_type in _drivers:
            raise ValueError(f"cache.Register called twice for driver {driver_type}")
        _drivers[driver_type] = driver


def get_cache(di_name: str, driver_type: str) -> Cache:
    """Return the cache of a driver for an injection name."""
    with _lock:
        instance_func = _drivers.get(driver_type)
    if instance_func is None:
        raise LookupError(f"cache.GetCache unknown driver {driver_type}")
    cache = instance_func(di_name)
    if cache is None:
        raise LookupError(f"cache.GetCache unknown diName {di_name}")
    return cache


def get_ttl_or_default(*args: int) -> int:
    """Return the ttl given, or the default ttl."""
    return args[0] if args else DEFAULT_TTL


class BaseCache:
    """Cache that prefixes its keys and delegates to a registered driver."""

    def __init__(self, di_name: str = "", prefix: str = "", driver_type: str = "") -> None:
        self.di_name = di_name
        self.prefix = prefix
        self.driver_type = driver_type
        self._ttl = 0
        self._ttl_is_set = False

    def _key(self, key: str) -> str:
        return self.prefix + key

    def _keys(self, keys: tuple[str, ...]) -> list[str]:
        return [self._key(k) for k in keys]

    def _remove_prefix(self, key: str) -> str:
        size = len(self.prefix)
        return substr(key, size, len(key) - size)

    def get_prefix_or_default(self) -> str:
        return self.prefix or DEFAULT_PREFIX

    def get_di_name_or_default(self) -> str:
        return self.di_name or DEFAULT_DI_NAME

    def get_driver_type_or_default(self) -> str:
        return self.driver_type or DEFAULT_DRIVER_TYPE

    def set_ttl(self, ttl: int) -> None:
        """Set the ttl used when none is given; zero is kept as zero."""
        self._ttl_is_set = True
        self._ttl = ttl

    def get_ttl_or_default(self) -> int:
        return self._ttl if self._ttl_is_set else DEFAULT_TTL

    def _get_ttl(self, args: tuple[int, ...]) -> int:
        return args[0] if args else self.get_ttl_or_default()

    def get(self, key: str) -> Any:
        return self.get_cache().get(self._key(key))

    def set(self, key: str, value: Any, *args: int) -> bool:
        return self.get_cache().set(self._key(key), value, self._get_ttl(args))

    def get_multi(self, *args: str) -> dict[str, Any]:
        items = self.get_cache().get_multi(*self._keys(args))
        return {self._remove_prefix(k): v for k, v in items.items()}

    def set_multi(self, items: Mapping[str, Any], *args: int) -> bool:
        prefixed = {self._key(k): v for k, v in items.items()}
        return self.get_cache().set_multi(prefixed, self._get_ttl(args))

    def delete(self, key: str) -> bool:
        return self.get_cache().delete(self._key(key))

    def delete_multi(self, *args: str) -> bool:
        return self.get_cache().delete_multi(*self._keys(args))

    def expire(self, key: str, *args: int) -> bool:
        return self.get_cache().expire(self._key(key), self._get_ttl(args))

    def is_exist(self, key: str) -> bool:
        return self.get_cache().is_exist(self._key(key))

    def incr_by(self, key: str, value: int) -> int:
        return self.get_cache().incr_by(self._key(key), value)

    def decr_by(self, key: str, value: int) -> int:
        return self.get_cache().decr_by(self._key(key), value)

    def get_cache(self) -> Cache:
        """Return the driver cache this base cache delegates to."""
        return get_cache(self.get_di_name_or_default(), self.get_driver_type_or_default())