"""Named one-off commands."""

from __future__ import annotations

import threading
from collections.abc import Callable


class UnknownNameError(LookupError):
    """Raised when no command is registered under a name."""

    def __init__(self, name: str = "") -> None:
        super().__init__("unknown name")
        self.name = name


class Command:
    """Registry binding names to one-off functions."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._container: dict[str, Callable[[], object]] = {}

    def add_func(self, name: str, func: Callable[[], object]) -> None:
        """Bind ``name`` to ``func``."""
        with self._lock:
            self._container[name] = func

    def execute(self, name: str) -> None:
        """Run the function bound to ``name``."""
        with self._lock:
            func = self._container.get(name)
        if func is None:
            raise UnknownNameError(name)
        func()


def execute_command(name: str, register_command: Callable[[Command], object]) -> None:
    """Build a command registry, fill it with ``register_command`` and run ``name``."""
    command = Command()
    register_command(command)
    command.execute(name)