"""Cache driver backed by a redis replica pool."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import Any

from snowcore.cache import DRIVER_TYPE_REDIS, Cache, get_ttl_or_default, register
from snowcore.redis_client import ReplicaPool, get_redis


class RedisCache(Cache):
    """Cache stored in redis; missing keys read as an empty string."""

    def __init__(self, client: ReplicaPool) -> None:
        self.client = client

    def get(self, key: str) -> Any:
        """Return the value of ``key``, or an empty string when it does not exist."""
        value = self.client.get(key)
        return "" if value is None else value

    def get_multi(self, *args: str) -> dict[str, Any]:
        values = self.client.mget(*args)
        return {key: "" if value is None else value for key, value in zip(args, values)}

    def set(self, key: str, value: Any, *args: int) -> bool:
        return self.client.setex(key, value, get_ttl_or_default(*args))

    def set_multi(self, items: Mapping[str, Any], *args: int) -> bool:
        """Store several values; a positive ttl is applied to each key afterwards."""
        pairs = [part for pair in items.items() for part in pair]
        self.client.mset(*pairs)
        ttl = get_ttl_or_default(*args)
        if ttl > 0:
            for key in items:
                self.client.expire(key, ttl)
        return True

    def delete(self, key: str) -> bool:
        return self.client.delete(key) > 0

    def delete_multi(self, *args: str) -> bool:
        return self.client.delete(*args) > 0

    def expire(self, key: str, *args: int) -> bool:
        return self.client.expire(key, get_ttl_or_default(*args))

    def is_exist(self, key: str) -> bool:
        return self.client.exists(key) == 1

    def incr_by(self, key: str, value: int) -> int:
        return self.client.incr_by(key, value)

    def decr_by(self, key: str, value: int) -> int:
        return self.client.decr_by(key, value)


_lock = threading.RLock()
_instances: dict[str, RedisCache] = {}


def get_redis_cache(di_name: str) -> RedisCache:
    """Return the redis cache for an injection name, creating it once."""
    with _lock:
        cache = _instances.get(di_name)
        if cache is None:
            cache = _instances[di_name] = RedisCache(get_redis(di_name))
        return cache


register(DRIVER_TYPE_REDIS, get_redis_cache)