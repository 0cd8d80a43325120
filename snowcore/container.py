"""A small dependency-injection container holding singletons and factories."""

from __future__ import annotations

import dataclasses
import threading
from collections.abc import Callable, Iterator
from typing import Any

Factory = Callable[[], Any]


class FactoryNotFoundError(LookupError):
    """Raised when no prototype factory is registered under a name."""

    def __init__(self, name: str = "") -> None:
        super().__init__("factory not found")
        self.name = name


class DependencyNotFoundError(LookupError):
    """Raised when a dependency to inject resolves to nothing."""

    def __init__(self, name: str) -> None:
        super().__init__(f"{name} dependency not found")
        self.name = name


class Container:
    """Registry of named singletons and prototype factories."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._singletons: dict[str, Any] = {}
        self._factories: dict[str, Factory | None] = {}

    def set_singleton(self, name: str, singleton: Any) -> None:
        """Store a singleton object under ``name``."""
        with self._lock:
            self._singletons[name] = singleton

    def get_singleton(self, name: str) -> Any:
        """Return the singleton stored under ``name``, or None."""
        with self._lock:
            return self._singletons.get(name)

    def get_prototype(self, name: str) -> Any:
        """Build a new object with the factory registered under ``name``."""
        with self._lock:
            factory = self._factories.get(name)
            known = name in self._factories
        if not known or factory is None:
            raise FactoryNotFoundError(name)
        return factory()

    def set_prototype(self, name: str, factory: Factory) -> None:
        """Register a factory that builds a fresh object on every request."""
        with self._lock:
            self._factories[name] = factory

    def ensure(self, instance: Any) -> None:
        """Inject dependencies into the fields of ``instance``.

        Fields are described by the ``"di"`` entry of dataclass field
        metadata, or by a ``__di__`` mapping of attribute name to tag on the
        class. A tag is ``"name"`` for a singleton or ``"name,prototype"``.
        """
        for attr, tag in self._tags(instance):
            di_name = self.inject_name(tag)
            if not di_name:
                continue
            dependency = None
            if self.is_singleton(tag):
                dependency = self.get_singleton(di_name)
            if self.is_prototype(tag):
                dependency = self.get_prototype(di_name)
            if dependency is None:
                raise DependencyNotFoundError(di_name)
            setattr(instance, attr, dependency)

    @staticmethod
    def _tags(instance: Any) -> Iterator[tuple[str, str]]:
        if dataclasses.is_dataclass(instance):
            for f in dataclasses.fields(instance):
                tag = f.metadata.get("di", "")
                if tag:
                    yield f.name, tag
        yield from getattr(type(instance), "__di__", {}).items()

    def inject_name(self, tag: str) -> str:
        """Return the dependency name part of a tag."""
        return tag.split(",")[0]

    def is_singleton(self, tag: str) -> bool:
        """Tell whether a tag asks for a singleton."""
        return "prototype" not in tag.split(",")

    def is_prototype(self, tag: str) -> bool:
        """Tell whether a tag asks for a prototype."""
        return "prototype" in tag.split(",")

    @staticmethod
    def _describe(name: str, item: Any) -> str:
        if item is None:
            return f"  {name}: <nil> <nil>"
        return f"  {name}: {hex(id(item))} {type(item).__qualname__}"

    def __str__(self) -> str:
        with self._lock:
            lines = ["singletons:"]
            lines.extend(self._describe(n, i) for n, i in self._singletons.items())
            lines.append("factories:")
            lines.extend(self._describe(n, f) for n, f in self._factories.items())
        return "\n".join(lines)


app = Container()