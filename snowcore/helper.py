"""Small helpers shared by the resource providers."""

from __future__ import annotations

from collections.abc import Mapping


def get_di_name(default_name: str, *args: str) -> str:
    """Return the first name given, or ``default_name`` when it is absent or empty."""
    name = args[0] if args else ""
    return name or default_name


def transform_args(*args: object) -> tuple[str, bool]:
    """Split provider registration arguments into ``(di_name, lazy)``.

    The first argument is the injection name, the second the configuration
    and the optional third a lazy-loading flag.
    """
    if len(args) < 2:
        raise ValueError("args is not enough")
    di_name = args[0]
    if not isinstance(di_name, str):
        raise TypeError("args[0] is not string")
    lazy = len(args) > 2 and isinstance(args[2], bool) and args[2]
    return di_name, lazy


def map_to_array(mp: Mapping[str, object]) -> list[str]:
    """Return the keys of a mapping as a list."""
    return list(mp)