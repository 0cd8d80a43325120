"""JSON loggers with daily rolling files, their provider and request-aware log helpers."""

from __future__ import annotations

import contextlib
import json
import logging
import os
import socket
import sys
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from itertools import pairwise
from typing import IO, Any

from snowcore.config import LogConfig
from snowcore.ctxkit import (
    generate_trace_id,
    get_client_id,
    get_host,
    get_server_id,
    get_trace_id,
)
from snowcore.provider import SingletonProvider
from snowcore.utils import to_str

HANDLER_FILE = "file"
HANDLER_STDOUT = "stdout"
SINGLETON_MAIN = "logger"

TRACE = 5
FATAL = logging.CRITICAL
PANIC = 60

ROLL_DAY = 0
ROLL_HOUR = 1
_PATTERNS = {ROLL_DAY: "%Y%m%d", ROLL_HOUR: "%Y%m%d-%H"}

_DEFAULT_FILE_NAME = "snow"
_FIELDS_ATTR = "snow_fields"

_LEVELS = {
    "panic": PANIC,
    "fatal": FATAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}

_LEVEL_NAMES = {
    TRACE: "trace",
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    FATAL: "fatal",
    PANIC: "panic",
}

_RESERVED_KEYS = ("time", "msg", "level")


def _fields(record: logging.LogRecord) -> dict[str, Any]:
    return dict(getattr(record, _FIELDS_ATTR, None) or {})


class JsonFormatter(logging.Formatter):
    """Render a record as one JSON object with its fields, time, msg and level."""

    def format(self, record: logging.LogRecord) -> str:
        data = _fields(record)
        for key in _RESERVED_KEYS:
            if key in data:
                data["fields." + key] = data.pop(key)
        created = datetime.fromtimestamp(record.created).astimezone()
        data["time"] = created.isoformat(timespec="seconds")
        data["msg"] = record.getMessage()
        data["level"] = _LEVEL_NAMES.get(record.levelno, record.levelname.lower())
        return json.dumps(data, sort_keys=True, ensure_ascii=False, default=to_str)


class RollingFileHandler(logging.Handler):
    """Write records to ``<dir>/<name>.<time>.log``, opening a new file when the time changes."""

    def __init__(
        self,
        directory: str,
        name: str,
        roll_type: int = ROLL_DAY,
        *,
        link_name: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        super().__init__()
        self.directory = directory
        self.file_name = name
        self.link_name = link_name
        self._clock = clock or datetime.now
        self._pattern = _PATTERNS.get(roll_type, _PATTERNS[ROLL_DAY])
        self.current_time = ""
        self.path = ""
        self.stream: IO[str] | None = None
        self.setFormatter(JsonFormatter())
        self.stream = self._open()

    def _stamp(self) -> str:
        return self._clock().strftime(self._pattern)

    def _open(self) -> IO[str]:
        if not os.path.isdir(self.directory):
            os.makedirs(self.directory, 0o755)
        stamp = self._stamp()
        path = f"{self.directory}/{self.file_name}.{stamp}.log"
        stream = open(path, "a", encoding="utf-8")
        self.current_time = stamp
        self.path = path
        if self.link_name:
            self._link(path)
        return stream

    def _link(self, path: str) -> None:
        link = self.link_name or ""
        with contextlib.suppress(OSError):
            if os.path.lexists(link):
                os.remove(link)
            os.symlink(os.path.basename(path), link)

    def _needs_roll(self) -> bool:
        return self.current_time != self._stamp()

    def _roll(self) -> None:
        old = self.stream
        self.stream = self._open()
        if old is not None:
            old.close()

    def set_roll_type(self, roll_type: int) -> None:
        """Switch between daily and hourly files; unknown types are ignored."""
        pattern = _PATTERNS.get(roll_type)
        if pattern is not None:
            self._pattern = pattern

    def emit(self, record: logging.LogRecord) -> None:
        try:
            text = self.format(record)
            if self._needs_roll():
                self._roll()
            if self.stream is None:
                raise ValueError("write to closed log file")
            self.stream.write(text + "\n")
            self.stream.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        self.acquire()
        try:
            if self.stream is not None:
                self.stream.flush()
                self.stream.close()
                self.stream = None
        finally:
            self.release()
        super().close()


class SourceFilter(logging.Filter):
    """Add a ``caller`` field (``file:line:function``) to records at or above a level."""

    def __init__(self, level: int = TRACE) -> None:
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno >= self.level:
            fields = _fields(record)
            fields["caller"] = (
                f"{os.path.basename(record.pathname)}:{record.lineno}:{record.funcName}"
            )
            setattr(record, _FIELDS_ATTR, fields)
        return True


def new_segment_handlers(log_dir: str, name: str) -> list[RollingFileHandler]:
    """Return daily handlers that split records into INFO, WARN and ERROR files."""
    groups: list[tuple[str, frozenset[int]]] = [
        ("INFO", frozenset({TRACE, logging.DEBUG, logging.INFO})),
        ("WARN", frozenset({logging.WARNING})),
        ("ERROR", frozenset({logging.ERROR, FATAL, PANIC})),
    ]
    handlers = []
    for suffix, levels in groups:
        handler = RollingFileHandler(
            log_dir,
            f"{name}.{suffix}",
            ROLL_DAY,
            link_name=f"{log_dir}/{name}.{suffix}.log",
        )
        handler.addFilter(lambda record, levels=levels: record.levelno in levels)
        handlers.append(handler)
    return handlers


def get_stdout_writer(path: str) -> IO[str] | None:
    """Open ``path`` (typically a named pipe) for writing; None when it cannot be opened."""
    try:
        fd = os.open(path, os.O_WRONLY)
    except OSError as exc:
        print(f"Failed to open file, {exc}", file=sys.stderr)
        return None
    return os.fdopen(fd, "w", encoding="utf-8")


def init_log(
    file_name: str, handler: str, log_dir: str, level: str, segment: bool
) -> logging.Logger:
    """Build a JSON logger writing to stdout, to one rolling file or to per-level files."""
    name = file_name or _DEFAULT_FILE_NAME
    logger = logging.Logger(name)
    parsed = _LEVELS.get((level or "").lower())
    logger.setLevel(parsed if parsed is not None else logging.INFO)

    if handler == HANDLER_STDOUT:
        stream = logging.StreamHandler(sys.stdout)
        stream.setFormatter(JsonFormatter())
        logger.addHandler(stream)
        return logger

    if segment:
        handlers: list[logging.Handler] = list(new_segment_handlers(log_dir, name))
        stderr = logging.StreamHandler(sys.stderr)
        stderr.setFormatter(JsonFormatter())
        handlers.append(stderr)
    else:
        handlers = [RollingFileHandler(log_dir, name)]
    for item in handlers:
        logger.addHandler(item)
    return logger


def _new_logger(conf: LogConfig) -> logging.Logger:
    return init_log(conf.file_name, conf.handler, conf.dir, conf.level, conf.segment)


def _close_logger(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.flush()
        handler.close()


pr = SingletonProvider(SINGLETON_MAIN, LogConfig, _new_logger, closer=_close_logger)


def get_logger(*args: str) -> logging.Logger:
    """Return the logger registered under a name, or the default one."""
    return pr.get(*args)


@dataclass
class WithField:
    """A key and value placed at the top level of a log entry."""

    key: str
    value: Any


def new_with_field(key: str, value: Any) -> WithField:
    """Return a field to attach to a log entry."""
    return WithField(key, value)


def batch_new_with_field(data: Mapping[str, Any]) -> list[WithField]:
    """Return one field for each item of ``data``."""
    return [WithField(k, v) for k, v in data.items()]


_hostname = ""


def get_host_name() -> str:
    """Return the host name, or ``unknown`` when it cannot be found."""
    global _hostname
    if not _hostname:
        try:
            _hostname = socket.gethostname()
        except OSError:
            _hostname = ""
        _hostname = _hostname or "unknown"
    return _hostname


def _format_log(ctx: Any, log_type: str, fields: Iterable[WithField]) -> dict[str, Any]:
    data: dict[str, Any] = {"type": log_type, "host": get_host_name()}
    if ctx is not None:
        trace_id = get_trace_id(ctx)
        if not trace_id:
            trace_id, _ = generate_trace_id(ctx)
        data["trace_id"] = trace_id
        extras = (
            ("domain", get_host(ctx)),
            ("sip", get_server_id(ctx)),
            ("cip", get_client_id(ctx)),
        )
        data.update((key, value) for key, value in extras if value)
    for item in fields:
        data.setdefault(item.key, item.value)
    return data


def _is_field_list(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple))
        and len(value) > 0
        and all(isinstance(v, WithField) for v in value)
    )


def _split_msg(args: tuple[Any, ...]) -> tuple[list[WithField], list[Any]]:
    fields: list[WithField] = []
    message: list[Any] = []
    for arg in args:
        if isinstance(arg, WithField):
            fields.append(arg)
        elif _is_field_list(arg):
            fields.extend(arg)
        else:
            message.append(arg)
    return fields, message


def _sprint(args: list[Any]) -> str:
    if not args:
        return ""
    parts = [to_str(args[0])]
    for prev, cur in pairwise(args):
        if not isinstance(prev, str) and not isinstance(cur, str):
            parts.append(" ")
        parts.append(to_str(cur))
    return "".join(parts)


def _emit(level: int, ctx: Any, log_type: str, args: tuple[Any, ...]) -> str:
    fields, message = _split_msg(args)
    data = _format_log(ctx, log_type, fields)
    text = _sprint(message)
    get_logger().log(level, text, extra={_FIELDS_ATTR: data}, stacklevel=3)
    return text


def trace(ctx: Any, log_type: str, *args: Any) -> None:
    _emit(TRACE, ctx, log_type, args)


def debug(ctx: Any, log_type: str, *args: Any) -> None:
    _emit(logging.DEBUG, ctx, log_type, args)


def info(ctx: Any, log_type: str, *args: Any) -> None:
    _emit(logging.INFO, ctx, log_type, args)


def warn(ctx: Any, log_type: str, *args: Any) -> None:
    _emit(logging.WARNING, ctx, log_type, args)


def error(ctx: Any, log_type: str, *args: Any) -> None:
    _emit(logging.ERROR, ctx, log_type, args)


def fatal(ctx: Any, log_type: str, *args: Any) -> None:
    """Log at fatal level, then exit with status 1."""
    _emit(FATAL, ctx, log_type, args)
    raise SystemExit(1)


def panic(ctx: Any, log_type: str, *args: Any) -> None:
    """Log at panic level, then raise RuntimeError with the message."""
    text = _emit(PANIC, ctx, log_type, args)
    raise RuntimeError(text)