import time

import pytest

from snowcore.cache import DRIVER_TYPE_MEMORY, get_cache
from snowcore.memory_cache import MemoryCache, WrongDataTypeError, get_memory_cache

c = get_cache("memory", DRIVER_TYPE_MEMORY)


def test_driver_returns_memory_singleton():
    assert c is get_memory_cache("memory")
    assert get_memory_cache("other") is not c
    assert isinstance(get_memory_cache("other"), MemoryCache)


def test_get_set_delete():
    key, value = "test-cache", "111"
    assert c.set(key, value) is True
    assert c.get(key) == value
    assert c.delete(key) is True
    assert c.get(key) == ""


def test_set_multi_and_get_multi():
    items = {"test-key1": "111", "test-key2": "222"}
    c.set_multi(items, 1)
    m = c.get_multi("test-key1", "test-key2")
    assert m == items

    time.sleep(1.1)
    m = c.get_multi("test-key1", "test-key2")
    assert m == {"test-key1": "", "test-key2": ""}


def test_delete_multi():
    items = {"test-key3": "111", "test-key4": "222"}
    c.set_multi(items)
    assert c.get_multi("test-key3", "test-key4") == items
    assert c.delete_multi("test-key3", "test-key4") is True
    assert c.get_multi("test-key3", "test-key4") == {"test-key3": "", "test-key4": ""}


def test_expire_exist():
    key = "test-expire"
    c.set(key, "222")
    assert c.is_exist(key) is True
    c.expire(key, 1)
    time.sleep(1.1)
    assert c.is_exist(key) is False


def test_expire_does_not_revive_expired_key():
    key = "test-expired-already"
    c.set(key, "v", -1)
    assert c.is_exist(key) is False
    c.expire(key, 100)
    assert c.is_exist(key) is False
    assert c.get(key) == ""


def test_zero_ttl_persists():
    key = "test-zero-ttl"
    c.set(key, "v", 0)
    assert c.is_exist(key) is True
    assert c.get(key) == "v"


def test_incr_by():
    key = "test-incr"
    c.set(key, "ab")
    with pytest.raises(WrongDataTypeError, match="wrong data type"):
        c.incr_by(key, 3)

    c.set(key, 400)
    assert c.incr_by(key, 3) == 403

    c.delete(key)
    assert c.incr_by(key, -30) == -30
    assert c.get(key) == -30


def test_decr_by():
    key = "test-desc"
    c.set(key, "ab")
    with pytest.raises(WrongDataTypeError):
        c.decr_by(key, 10)

    c.set(key, 400)
    assert c.decr_by(key, 10) == 390

    c.delete(key)
    assert c.decr_by(key, -30) == 30


def test_incr_by_rejects_numeric_text_and_bool():
    key = "test-incr-types"
    c.set(key, "10")
    with pytest.raises(WrongDataTypeError):
        c.incr_by(key, 1)
    c.set(key, True)
    with pytest.raises(WrongDataTypeError):
        c.incr_by(key, 1)
    assert c.get(key) is True