import uuid

import pytest

from snowcore.queues import DequeueResult, Queue, get_queue, register


class ListQueue(Queue):
    def __init__(self):
        self.items = {}

    def enqueue(self, key, message, *args):
        self.items.setdefault(key, []).append(message)
        return True

    def dequeue(self, key, *args):
        items = self.items.get(key) or []
        return DequeueResult(items.pop(0)) if items else DequeueResult()

    def ack_msg(self, key, token, *args):
        return True

    def batch_enqueue(self, key, messages, *args):
        for message in messages:
            self.enqueue(key, message)
        return True


def _mock_queue(di_name):
    return None


def _driver_name():
    return f"mock-{uuid.uuid4().hex}"


def test_register_twice_raises():
    name = _driver_name()
    register(name, _mock_queue)
    with pytest.raises(ValueError, match="called twice"):
        register(name, _mock_queue)


def test_register_nil_driver_raises():
    with pytest.raises(ValueError, match="driver is nil"):
        register(_driver_name(), None)


def test_get_queue_unknown_driver_raises():
    with pytest.raises(LookupError, match="unknown driver empty"):
        get_queue("redis", "empty")


def test_get_queue_unknown_di_name_raises():
    name = _driver_name()
    register(name, _mock_queue)
    with pytest.raises(LookupError, match="unknown diName unknown"):
        get_queue("unknown", name)


def test_get_queue_returns_driver_instance():
    name = _driver_name()
    queue = ListQueue()
    register(name, lambda di_name: queue)
    found = get_queue("any", name)
    assert found is queue
    found.enqueue("t", "m")
    assert found.dequeue("t") == DequeueResult("m", "", "", 0)


def test_dequeue_result_unpacks():
    message, tag, token, count = DequeueResult("x", "tag", "tok", 3)
    assert (message, tag, token, count) == ("x", "tag", "tok", 3)
    assert DequeueResult().message == ""