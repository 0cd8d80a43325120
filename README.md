# snowcore

Building blocks for Python services:

- `snowcore.container` – a dependency container of named singletons and prototype factories, with field injection.
- `snowcore.provider` – `SingletonProvider`, which registers configurations under a name and builds one resource per name, eagerly or lazily.
- `snowcore.closer` – a registry of resources to close when the application stops.
- `snowcore.command` – named one-off commands.
- `snowcore.config` – configuration dataclasses for Redis, databases, logging and an HTTP address.
- `snowcore.redis_client` – Redis pools with read replicas (`ReplicaPool`) and their provider.
- `snowcore.cache`, `snowcore.memory_cache`, `snowcore.redis_cache` – a pluggable cache with an in-memory driver and a Redis driver.
- `snowcore.queues`, `snowcore.redis_queue` – a pluggable message queue with a Redis list driver.
- `snowcore.ctxkit` – trace id, client and server addresses and host carried in a request context.
- `snowcore.logger` – JSON logging to stdout, to a daily rolling file or to per-level files, with context fields.
- `snowcore.server` – pid files, stop signalling, shutdown and stop/restart commands sent to a running process.
- `snowcore.db` – connection strings for mysql, postgres, sqlite3 and mssql.
- `snowcore.httputil` – HTTP request builders and a client that forwards the trace id.
- `snowcore.utils`, `snowcore.iputil`, `snowcore.helper` – small helpers.

## Installation

```
pip install snowcore
pip install "snowcore[test]"    # with the test tools
```

## Caching in memory

Drivers register themselves when their module is imported.

```python
from snowcore import cache, memory_cache  # importing memory_cache registers "memory"

store = cache.get_cache("memory", cache.DRIVER_TYPE_MEMORY)
store.set("greeting", "hello", 60)
assert store.get("greeting") == "hello"
assert store.get("missing") == ""       # absent or expired keys read as an empty string

store.set("counter", 400)
assert store.incr_by("counter", 3) == 403
```

A TTL of zero in the memory driver means ten years. Counting on a value that
is not an integer raises `memory_cache.WrongDataTypeError`.

`cache.BaseCache` adds a key prefix and a default TTL (86400 seconds, or the
value given to `set_ttl`) on top of any registered driver; the default driver
is `redis` under the name `redis`:

```python
from snowcore.cache import BaseCache

users = BaseCache(prefix="user:", driver_type="memory")
users.set("42", {"name": "example"})
users.get_multi("42", "43")   # {"42": {"name": "example"}, "43": ""}
```

Registering a driver twice, or asking for an unknown driver or name, raises.

## Redis resources

```python
from snowcore import redis_client
from snowcore.config import RedisBaseConfig, RedisConfig

redis_client.pr.register(
    "redis", RedisConfig(master=RedisBaseConfig(host="127.0.0.1", port=6379)), True
)
pool = redis_client.get_redis()         # built on first use; the first name is the default
```

The third argument asks for lazy creation. Reads go to a random replica when
there are any, writes to the master. `redis_client.pr.close()` closes every
pool it built.

The Redis cache and queue drivers look pools up by name:

```python
from snowcore import queues, redis_queue  # importing redis_queue registers "redis"

q = queues.get_queue("redis", queues.DRIVER_TYPE_REDIS)
q.enqueue("jobs", "payload")
result = q.dequeue("jobs")   # DequeueResult(message="payload", tag="", token="", dequeue_count=0)
```

## Dependency container

```python
from dataclasses import dataclass, field
from snowcore.container import Container

box = Container()
box.set_singleton("db", object())
box.set_prototype("conn", lambda: object())

@dataclass
class Service:
    db: object = field(default=None, metadata={"di": "db"})
    conn: object = field(default=None, metadata={"di": "conn,prototype"})

svc = Service()
box.ensure(svc)    # raises DependencyNotFoundError or FactoryNotFoundError when missing
```

A `__di__` mapping of attribute name to tag on a plain class works as well.
`snowcore.container.app` is the shared container the providers use.

## Logging

```python
from snowcore import logger
from snowcore.config import LogConfig
from snowcore.ctxkit import RequestContext, set_client_id

logger.pr.register("logger", LogConfig(handler="stdout", level="debug"))

ctx = RequestContext()
set_client_id(ctx, "10.0.0.1")
logger.info(ctx, "orders.create", "created", logger.new_with_field("order", 7))
```

Each entry is one JSON object with `type`, `host`, `trace_id` (generated
when the context has none), `cip`, `sip` and `domain` when set, the extra
fields, `time`, `msg` and `level`. With `handler="file"` records go to
`<dir>/<file_name>.<YYYYMMDD>.log`; with `segment=True` they are split into
INFO, WARN and ERROR files. `logger.fatal` exits with status 1 after logging;
`logger.panic` raises `RuntimeError`.

## Process control

```python
from snowcore import server

server.write_pid_file("app.pid")
server.register_signal()      # SIGINT and SIGTERM call server.stop()
server.wait_stop()            # blocks until stop()
server.close_service()        # closes everything registered with snowcore.closer
```

`server.handle_user_cmd("stop", "app.pid")` sends SIGTERM to the process in the
pid file, `"restart"` sends SIGHUP; any other command raises `ValueError`.

## Databases and HTTP

```python
from snowcore.config import DbBaseConfig, DbOptionConfig
from snowcore.db import format_dsn

password = "password"
base = DbBaseConfig(host="localhost", user="user", password=password, db_name="app")
format_dsn("mysql", base, DbOptionConfig())
# 'user:password@tcp(localhost:3306)/app?timeout=10s&charset=utf8mb4&parseTime=true&loc=Local'
```

```python
from snowcore import httputil

response = httputil.get(ctx, "http://localhost:8080/hello", {"q": "1"}, ["Accept: text/plain"], {"timeout": 5})
body = httputil.deal_response(response)
```

The client copies the context's trace id into `X-TRACE-ID`. A failed request
or any status other than 200 raises `httputil.HttpStatusError`.

## Helpers

```python
from snowcore import utils

utils.encode62(1122)                        # base62 text, decoded by utils.decode62
utils.substr("1234567890", 1, 2)            # "23"
utils.http_build_query({"a": ["b", "c"]})   # "a%5B0%5D=b&a%5B1%5D=c"
```

## What the package does not do

- It does not run an HTTP server, a scheduled-task console or a job worker;
  `snowcore.server` only manages pid files, signals and shutdown.
- `snowcore.db` builds connection strings; it does not open database
  connections or provide a model layer.
- `snowcore.queues` names driver types for other message services, but the
  only queue driver shipped is the Redis one.
- There is no access-log middleware for web frameworks.