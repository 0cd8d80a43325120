"""General helpers: base62, conversions, hashing, JSON, strings, time, queries, ids."""

from __future__ import annotations

import hashlib
import json
import math
import time
import uuid
from collections.abc import Iterator, Mapping
from decimal import Decimal
from urllib.parse import quote_plus

_CODE62 = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
_CODE_LEN = len(_CODE62)
_CODE_MAP = {ch: i for i, ch in enumerate(_CODE62)}


def encode62(number: int) -> str:
    """Encode a non-negative integer as base62, least significant digit first."""
    if number == 0:
        return "0"
    digits = []
    while number > 0:
        number, remain = divmod(number, _CODE_LEN)
        digits.append(_CODE62[remain])
    return "".join(digits)


def decode62(text: str) -> int:
    """Decode a string produced by :func:`encode62`; unknown characters count as 0."""
    return sum(
        _CODE_MAP.get(ch, 0) * _CODE_LEN**index
        for index, ch in enumerate(text.strip())
    )


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    dec = Decimal(repr(value)).normalize()
    sign, digits, _ = dec.as_tuple()
    exp = dec.adjusted()
    prefix = "-" if sign else ""
    if exp < -4 or exp >= 6:
        text = "".join(map(str, digits))
        mantissa = text[0] + ("." + text[1:] if len(text) > 1 else "")
        return f"{prefix}{mantissa}e{exp:+03d}"
    return format(dec, "f")


def to_str(value: object) -> str:
    """Render a value as text the way the default formatter of the framework does."""
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(to_str(v) for v in value) + "]"
    if isinstance(value, Mapping):
        items = sorted(value.items(), key=lambda kv: to_str(kv[0]))
        return "map[" + " ".join(f"{to_str(k)}:{to_str(v)}" for k, v in items) + "]"
    return str(value)


def map_values_to_str(mapping: Mapping[str, object]) -> dict[str, str]:
    """Return a copy of ``mapping`` with every value rendered by :func:`to_str`."""
    return {key: to_str(value) for key, value in mapping.items()}


def num_to_str(number: int) -> str:
    """Render an integer in decimal."""
    if isinstance(number, bool) or not isinstance(number, int):
        raise TypeError(f"not an integer: {number!r}")
    return str(number)


def get_md5_hash(text: str) -> str:
    """Return the hexadecimal MD5 digest of ``text``."""
    return hashlib.md5(text.encode("utf-8")).hexdigest()


_JSON_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def json_encode(value: object) -> str:
    """Encode ``value`` as compact JSON with sorted keys and HTML-safe escapes."""
    text = json.dumps(
        value,
        separators=(",", ":"),
        ensure_ascii=False,
        sort_keys=True,
        allow_nan=False,
    )
    return "".join(_JSON_ESCAPES.get(ch, ch) for ch in text)


def substr(text: str, start: int, length: int) -> str:
    """Cut ``length`` characters from ``start``; a negative start counts from the end."""
    size = len(text)
    if start < 0:
        start = size - 1 + start
    end = start + length
    if start > end:
        start, end = end, start
    start = min(max(start, 0), size)
    end = min(max(end, 0), size)
    return text[start:end]


def join(*args: str) -> str:
    """Concatenate strings."""
    return "".join(args)


def get_current_time() -> int:
    """Return the current Unix time in seconds."""
    return int(time.time())


def get_current_milli_time() -> int:
    """Return the current Unix time in milliseconds."""
    return time.time_ns() // 1_000_000


def _query_pairs(params: Mapping[str, object], parent: str) -> Iterator[str]:
    for key, value in params.items():
        node = f"{parent}[{key}]" if parent else str(key)
        if isinstance(value, Mapping):
            yield from _query_pairs(value, node)
        elif isinstance(value, (list, tuple)):
            yield from _query_pairs({str(i): v for i, v in enumerate(value)}, node)
        else:
            yield quote_plus(node) + "=" + quote_plus(to_str(value))


def http_build_query(params: Mapping[str, object]) -> str:
    """Build a URL query string; nested maps and lists use ``a[b][0]`` keys."""
    return "&".join(_query_pairs(params, ""))


def gen_uuid() -> str:
    """Return a random UUID as text."""
    return str(uuid.uuid4())