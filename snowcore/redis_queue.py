"""Queue driver backed by redis lists."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from typing import Any

from snowcore.queues import DRIVER_TYPE_REDIS, DequeueResult, Queue, register
from snowcore.redis_client import ReplicaPool, get_redis


class RedisQueue(Queue):
    """FIFO queue on a redis list; delay and priority are not supported."""

    def __init__(self, client: ReplicaPool) -> None:
        self.client = client
        self.acked = 0

    def enqueue(self, key: str, message: str, *args: Any) -> bool:
        self.client.rpush(key, message)
        return True

    def dequeue(self, key: str, *args: Any) -> DequeueResult:
        """Pop the oldest message; the message is empty when the list is empty."""
        message = self.client.lpop(key)
        return DequeueResult(message="" if message is None else message)

    def ack_msg(self, key: str, token: str, *args: Any) -> bool:
        """Count the acknowledgement; popped messages are already gone from redis."""
        self.acked += 1
        return True

    def batch_enqueue(self, key: str, messages: Sequence[str], *args: Any) -> bool:
        if not messages:
            raise ValueError("messages is empty")
        self.client.rpush(key, *messages)
        return True


_lock = threading.RLock()
_instances: dict[str, RedisQueue] = {}


def get_redis_queue(di_name: str) -> RedisQueue:
    """Return the redis queue for an injection name, creating it once."""
    with _lock:
        queue = _instances.get(di_name)
        if queue is None:
            queue = _instances[di_name] = RedisQueue(get_redis(di_name))
        return queue


register(DRIVER_TYPE_REDIS, get_redis_queue)