"""Process control: pid files, stop signalling, service shutdown and user commands."""

from __future__ import annotations

import os
import queue
import signal
from typing import Any

from snowcore import closer

VERSION = "1.0"
BUILD_COMMIT = ""
BUILD_DATE = ""

_WATCHED_SIGNALS = ("SIGHUP", "SIGUSR1", "SIGUSR2", "SIGINT", "SIGTERM")
_USER_COMMANDS = {"stop": "SIGTERM", "restart": "SIGHUP"}


class _ServerState:
    def __init__(self) -> None:
        self.stop: queue.Queue[bool] = queue.Queue()
        self.debug = False


_srv = _ServerState()


def write_pid_file(path: str, *args: int) -> None:
    """Write the given pid, or the current process id, followed by a newline."""
    pid = args[0] if args else os.getpid()
    with open(path, "w", encoding="ascii") as fd:
        fd.write(f"{pid}\n")


def read_pid_file(path: str) -> int:
    """Read the pid stored on the first line of ``path``."""
    with open(path, encoding="ascii") as fd:
        line = fd.readline()
    if not line.endswith("\n"):
        raise ValueError(f"pid file {path} has no complete line")
    return int(line.strip())


def wait_stop() -> None:
    """Block until :func:`stop` is called."""
    _srv.stop.get()


def close_service() -> None:
    """Release every resource registered for shutdown."""
    if _srv.debug:
        print("close service")
    closer.free()


def handle_signal(sig: int) -> None:
    """Stop on SIGINT or SIGTERM; other signals are ignored."""
    if sig in (signal.SIGINT, signal.SIGTERM):
        stop()


def _on_signal(signum: int, _frame: Any) -> None:
    handle_signal(signum)


def register_signal() -> None:
    """Install handlers for the hang-up, user and termination signals.

    Must be called from the main thread.
    """
    for name in _WATCHED_SIGNALS:
        sig = getattr(signal, name, None)
        if sig is not None:
            signal.signal(sig, _on_signal)


def handle_user_cmd(cmd: str, pid_file: str) -> None:
    """Send the signal for ``stop`` or ``restart`` to the process in ``pid_file``."""
    signal_name = _USER_COMMANDS.get(cmd)
    if signal_name is None:
        raise ValueError(f"unknown user command {cmd}")
    sig = getattr(signal, signal_name)
    pid = read_pid_file(pid_file)
    if _srv.debug:
        print(f"send {sig.name} to pid {pid} ")
    os.kill(pid, sig)


def stop() -> None:
    """Wake up one caller of :func:`wait_stop`."""
    _srv.stop.put(True)


def set_debug(debug: bool) -> None:
    _srv.debug = debug


def get_debug() -> bool:
    return _srv.debug