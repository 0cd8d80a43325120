"""Request-scoped values: trace id, client and server addresses, host."""

from __future__ import annotations

import hashlib
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Union

from snowcore.utils import gen_uuid

TRACE_ID = "x-trace-id"
CLIENT_IP = "x-cip"
SERVER_IP = "x-sip"
HOST = "x-host"


class Context:
    """Immutable bag of values; ``with_value`` returns a derived context."""

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[Any, Any] | None = None) -> None:
        self._values = MappingProxyType(dict(values or {}))

    def with_value(self, key: Any, value: Any) -> Context:
        """Return a new context that also holds ``key``."""
        return Context({**self._values, key: value})

    def value(self, key: Any) -> Any:
        """Return the value stored under ``key``, or None."""
        return self._values.get(key)


@dataclass
class RequestContext:
    """Mutable per-request holder whose context is replaced on every update."""

    context: Context = field(default_factory=Context)


AnyContext = Union[Context, RequestContext]


def _set(ctx: AnyContext, key: str, value: str) -> Context:
    if isinstance(ctx, RequestContext):
        ctx.context = ctx.context.with_value(key, value)
        return ctx.context
    return ctx.with_value(key, value)


def _get(ctx: AnyContext, key: str) -> str:
    if isinstance(ctx, RequestContext):
        ctx = ctx.context
    value = ctx.value(key)
    return value if isinstance(value, str) else ""


def set_trace_id(ctx: AnyContext, value: str) -> Context:
    return _set(ctx, TRACE_ID, value)


def get_trace_id(ctx: AnyContext) -> str:
    return _get(ctx, TRACE_ID)


def set_client_id(ctx: AnyContext, value: str) -> Context:
    return _set(ctx, CLIENT_IP, value)


def get_client_id(ctx: AnyContext) -> str:
    return _get(ctx, CLIENT_IP)


def set_server_id(ctx: AnyContext, value: str) -> Context:
    return _set(ctx, SERVER_IP, value)


def get_server_id(ctx: AnyContext) -> str:
    return _get(ctx, SERVER_IP)


def set_host(ctx: AnyContext, value: str) -> Context:
    return _set(ctx, HOST, value)


def get_host(ctx: AnyContext) -> str:
    return _get(ctx, HOST)


def generate_trace_id(ctx: AnyContext) -> tuple[str, Context]:
    """Create an upper-case hex trace id in 8-4-4-4-12 form and store it."""
    digest = hashlib.md5(gen_uuid().encode("utf-8")).hexdigest().upper()
    trace_id = "-".join(
        (digest[0:8], digest[8:12], digest[12:16], digest[16:20], digest[20:32])
    )
    return trace_id, set_trace_id(ctx, trace_id)