import pytest
import redis

from snowcore.config import RedisBaseConfig, RedisConfig, RedisOptionConfig
from snowcore.container import app
from snowcore.redis_client import (
    ReplicaPool,
    gen_options,
    gen_redis_config,
    get_redis,
    new_redis_client,
    pr,
)


class FakeRedis:
    def __init__(self):
        self.data = {}
        self.lists = {}
        self.ttls = {}
        self.closed = False

    def get(self, key):
        return self.data.get(key)

    def mget(self, keys):
        return [self.data.get(k) for k in keys]

    def set(self, key, value):
        self.data[key] = str(value)
        return True

    def setex(self, key, ttl, value):
        self.data[key] = str(value)
        self.ttls[key] = ttl
        return True

    def mset(self, mapping):
        for k, v in mapping.items():
            self.data[k] = str(v)
        return True

    def expire(self, key, ttl):
        if key in self.data:
            self.ttls[key] = ttl
            return True
        return False

    def delete(self, *keys):
        return sum(1 for k in keys if self.data.pop(k, None) is not None)

    def exists(self, key):
        return 1 if key in self.data else 0

    def incrby(self, key, amount):
        value = int(self.data.get(key, "0")) + amount
        self.data[key] = str(value)
        return value

    def decrby(self, key, amount):
        return self.incrby(key, -amount)

    def rpush(self, key, *values):
        self.lists.setdefault(key, []).extend(str(v) for v in values)
        return len(self.lists[key])

    def lpop(self, key):
        items = self.lists.get(key)
        return items.pop(0) if items else None

    def close(self):
        self.closed = True


LOCAL = RedisConfig(master=RedisBaseConfig(host="127.0.0.1", port=6379))


def test_get_singleton_not_lazy_returns_none():
    assert pr.get_singleton("", False) is None


def test_provider():
    with pytest.raises(ValueError, match="redis config is empty"):
        pr.register("redis", RedisConfig())

    pr.register("redis", LOCAL, True)
    assert pr.provides() == ["redis"]

    pr.register("redis1", LOCAL)
    assert pr.provides() == ["redis", "redis1"]
    assert app.get_singleton("redis1") is get_redis("redis1")

    default = get_redis()
    assert default is get_redis("redis")
    assert default is app.get_singleton("redis")

    with pytest.raises(LookupError, match="redis di_name:redis2 not exist"):
        get_redis("redis2")

    pr.close()
    assert app.get_singleton("redis") is default


def test_new_redis_client_rejects_empty_config():
    with pytest.raises(ValueError, match="redis config is empty"):
        new_redis_client(RedisConfig())


def test_new_redis_client_builds_master_and_slaves():
    conf = RedisConfig(
        master=RedisBaseConfig(host="127.0.0.1", port=6379, db=2),
        slaves=[RedisBaseConfig(host="127.0.0.2", port=6380)],
    )
    pool = new_redis_client(conf)
    master_kwargs = pool.master.connection_pool.connection_kwargs
    assert master_kwargs["host"] == "127.0.0.1"
    assert master_kwargs["port"] == 6379
    assert master_kwargs["db"] == 2
    assert len(pool.slaves) == 1
    assert pool.slaves[0].connection_pool.connection_kwargs["port"] == 6380


def test_new_redis_client_blocking_pool_when_waiting():
    conf = RedisConfig(
        master=RedisBaseConfig(host="127.0.0.1"),
        option=RedisOptionConfig(max_conns=64, wait=True),
    )
    pool = new_redis_client(conf)
    connection_pool = pool.master.connection_pool
    assert isinstance(connection_pool, redis.BlockingConnectionPool)
    assert connection_pool.max_connections == 64
    assert connection_pool.connection_kwargs["port"] == 6379


def test_gen_redis_config():
    conf = RedisBaseConfig(host="127.0.0.1", port=6379)
    new_conf = gen_redis_config(conf)
    assert new_conf["host"] == conf.host
    assert new_conf["port"] == conf.port
    assert new_conf["db"] == conf.db


def test_gen_options():
    conf = RedisOptionConfig(max_conns=64, wait=True, idle_timeout=3)
    new_conf = gen_options(conf)
    assert new_conf["max_idle"] == 0
    assert new_conf["wait"] is True
    assert new_conf["max_active"] == 64
    assert new_conf["idle_timeout"] == 3
    assert new_conf["connect_timeout"] == 0


def test_replica_pool_get_set():
    pool = ReplicaPool(FakeRedis())
    assert pool.set("hts", 11) is True
    assert pool.get("hts") == "11"
    assert pool.get("missing") is None


def test_replica_pool_reads_from_slave():
    master, slave = FakeRedis(), FakeRedis()
    pool = ReplicaPool(master, [slave])
    pool.set("k", "v")
    assert master.data["k"] == "v"
    assert pool.get("k") is None
    assert pool.exists("k") == 0
    slave.data["k"] = "v"
    assert pool.get("k") == "v"
    assert pool.mget("k", "x") == ["v", None]


def test_replica_pool_multi_and_counters():
    pool = ReplicaPool(FakeRedis())
    assert pool.mset("a", 1, "b", 2) is True
    assert pool.mget("a", "b") == ["1", "2"]
    assert pool.setex("c", "3", 10) is True
    assert pool.master.ttls["c"] == 10
    assert pool.expire("a", 5) is True
    assert pool.delete("a", "b", "nope") == 2
    assert pool.incr_by("n", 5) == 5
    assert pool.decr_by("n", 2) == 3


def test_replica_pool_mset_needs_pairs():
    pool = ReplicaPool(FakeRedis())
    with pytest.raises(ValueError):
        pool.mset("a", 1, "b")


def test_replica_pool_list_and_close():
    master, slave = FakeRedis(), FakeRedis()
    pool = ReplicaPool(master, [slave])
    assert pool.rpush("q", "11", "21") == 2
    assert pool.lpop("q") == "11"
    assert pool.lpop("q") == "21"
    assert pool.lpop("q") is None
    pool.close()
    assert master.closed and slave.closed