"""Registry of resources to release when the application stops."""

from __future__ import annotations

import contextlib
import threading
from typing import Protocol


class _Closeable(Protocol):
    def close(self) -> object: ...


_lock = threading.RLock()
_close_set: list[_Closeable | None] = []


def register(closeable: _Closeable | None) -> None:
    """Register a resource to close when the application stops."""
    with _lock:
        _close_set.append(closeable)


def multi_register(*args: _Closeable | None) -> None:
    """Register several resources at once."""
    with _lock:
        _close_set.extend(args)


def free() -> None:
    """Close every registered resource, ignoring their failures."""
    with _lock:
        items = list(_close_set)
    for item in items:
        if item is not None:
            with contextlib.suppress(Exception):
                item.close()