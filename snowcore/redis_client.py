"""Redis connection pools with read replicas, and the provider that hands them out."""

from __future__ import annotations

import random
from typing import Any

import redis

from snowcore.config import RedisBaseConfig, RedisConfig, RedisOptionConfig
from snowcore.provider import SingletonProvider

SINGLETON_MAIN = "redis"

_DEFAULT_PORT = 6379
_DEFAULT_BLOCKING_CONNECTIONS = 50


class ReplicaPool:
    """A redis master for writes and optional replicas for reads."""

    def __init__(self, master: Any, slaves: list[Any] | tuple[Any, ...] = ()) -> None:
        self.master = master
        self.slaves = list(slaves)

    def _reader(self) -> Any:
        return random.choice(self.slaves) if self.slaves else self.master

    def get(self, key: str) -> str | None:
        """Return the value of ``key``, or None when it does not exist."""
        return self._reader().get(key)

    def mget(self, *args: str) -> list[str | None]:
        """Return the values of several keys, None for the missing ones."""
        return list(self._reader().mget(list(args)))

    def set(self, key: str, value: Any) -> bool:
        """Store ``value`` under ``key`` without expiry."""
        return bool(self.master.set(key, value))

    def setex(self, key: str, value: Any, ttl: int) -> bool:
        """Store ``value`` under ``key`` for ``ttl`` seconds."""
        return bool(self.master.setex(key, ttl, value))

    def mset(self, *args: Any) -> bool:
        """Store several values given as alternating keys and values."""
        if len(args) % 2:
            raise ValueError("mset needs key value pairs")
        return bool(self.master.mset(dict(zip(args[::2], args[1::2]))))

    def expire(self, key: str, ttl: int) -> bool:
        """Let ``key`` expire after ``ttl`` seconds."""
        return bool(self.master.expire(key, ttl))

    def delete(self, *args: str) -> int:
        """Delete keys; return how many existed."""
        return int(self.master.delete(*args))

    def exists(self, key: str) -> int:
        """Return 1 when ``key`` exists, otherwise 0."""
        return int(self._reader().exists(key))

    def incr_by(self, key: str, value: int) -> int:
        """Add ``value`` to the integer under ``key`` and return the result."""
        return int(self.master.incrby(key, value))

    def decr_by(self, key: str, value: int) -> int:
        """Subtract ``value`` from the integer under ``key`` and return the result."""
        return int(self.master.decrby(key, value))

    def rpush(self, key: str, *args: Any) -> int:
        """Append values to the list under ``key``; return its new length."""
        return int(self.master.rpush(key, *args))

    def lpop(self, key: str) -> str | None:
        """Pop the first element of the list under ``key``, or None when empty."""
        return self.master.lpop(key)

    def close(self) -> None:
        """Release the connections of every server."""
        for client in [self.master, *self.slaves]:
            client.close()


def gen_redis_config(conf: RedisBaseConfig) -> dict[str, Any]:
    """Return the server address settings of one redis server."""
    return {
        "host": conf.host,
        "port": conf.port,
        "password": conf.password,
        "db": conf.db,
    }


def gen_options(conf: RedisOptionConfig) -> dict[str, Any]:
    """Return pool options; timeouts are in seconds."""
    return {
        "max_idle": conf.max_idle,
        "max_active": conf.max_conns,
        "wait": conf.wait,
        "idle_timeout": float(conf.idle_timeout),
        "connect_timeout": float(conf.connect_timeout),
        "read_timeout": float(conf.read_timeout),
        "write_timeout": float(conf.write_timeout),
    }


def _build_client(server: dict[str, Any], options: dict[str, Any]) -> redis.Redis:
    socket_timeout = options["read_timeout"] or options["write_timeout"] or None
    kwargs: dict[str, Any] = {
        "host": server["host"],
        "port": server["port"] or _DEFAULT_PORT,
        "password": server["password"] or None,
        "db": server["db"],
        "socket_connect_timeout": options["connect_timeout"] or None,
        "socket_timeout": socket_timeout,
        "decode_responses": True,
    }
    if options["wait"]:
        pool: redis.ConnectionPool = redis.BlockingConnectionPool(
            max_connections=options["max_active"] or _DEFAULT_BLOCKING_CONNECTIONS,
            timeout=None,
            **kwargs,
        )
    else:
        pool = redis.ConnectionPool(max_connections=options["max_active"] or None, **kwargs)
    return redis.Redis(connection_pool=pool)


def new_redis_client(conf: RedisConfig) -> ReplicaPool:
    """Build a replica pool from a configuration; connections open on first use."""
    if not conf.master.host:
        raise ValueError("redis config is empty")
    options = gen_options(conf.option)
    master = _build_client(gen_redis_config(conf.master), options)
    slaves = [_build_client(gen_redis_config(s), options) for s in conf.slaves]
    return ReplicaPool(master, slaves)


pr = SingletonProvider(SINGLETON_MAIN, RedisConfig, new_redis_client, closer=ReplicaPool.close)


def get_redis(*args: str) -> ReplicaPool:
    """Return the pool registered under a name, or the default one."""
    return pr.get(*args)