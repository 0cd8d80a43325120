"""Queue interface and driver registry."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any, NamedTuple

DRIVER_TYPE_REDIS = "redis"
DRIVER_TYPE_ALI_MNS = "ali_mns"
DRIVER_TYPE_ALIYUN_MQ = "aliyun_mq"
DRIVER_TYPE_ROCKET_MQ = "rocket_mq"


class DequeueResult(NamedTuple):
    """A dequeued message; an empty message means the queue was empty."""

    message: str = ""
    tag: str = ""
    token: str = ""
    dequeue_count: int = 0


class Queue(ABC):
    """Interface every queue driver implements."""

    @abstractmethod
    def enqueue(self, key: str, message: str, *args: Any) -> bool:
        """Push one message onto the queue ``key``."""

    @abstractmethod
    def dequeue(self, key: str, *args: Any) -> DequeueResult:
        """Pop one message; the message is empty when none is waiting."""

    @abstractmethod
    def ack_msg(self, key: str, token: str, *args: Any) -> bool:
        """Confirm that a message was handled."""

    @abstractmethod
    def batch_enqueue(self, key: str, messages: Sequence[str], *args: Any) -> bool:
        """Push several messages onto the queue ``key``."""


Instance = Callable[[str], "Queue | None"]

_lock = threading.RLock()
_drivers: dict[str, Instance] = {}


def register(driver_type: str, driver: Instance | None) -> None:
    """Register a function returning the queue for an injection name."""
    if driver is None:
        raise ValueError("queue.Register driver is nil")
    with _lock:
        if driver_type in _drivers:
            raise ValueError(f"queue.Register called twice for driver {driver_type}")
        _drivers[driver_type] = driver


def get_queue(di_name: str, driver_type: str) -> Queue:
    """Return the queue of a driver for an injection name."""
    with _lock:
        instance_func = _drivers.get(driver_type)
    if instance_func is None:
        raise LookupError(f"queue.GetQueue unknown driver {driver_type}")
    queue = instance_func(di_name)
    if queue is None:
        raise LookupError(f"queue.GetQueue unknown diName {di_name}")
    return queue