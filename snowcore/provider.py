"""Providers that register configurations and hand out named resources."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from snowcore.container import Container, app
from snowcore.helper import get_di_name, map_to_array, transform_args


class Provider(ABC):
    """Interface of a resource provider."""

    @abstractmethod
    def register(self, *args: Any) -> None:
        """Register a configuration: name, config and an optional lazy flag."""

    @abstractmethod
    def provides(self) -> list[str]:
        """Return the registered names."""

    @abstractmethod
    def close(self) -> None:
        """Release the resources built by this provider."""


class SingletonProvider(Provider):
    """Provider that builds one resource per name and keeps it in a container.

    ``factory`` turns a configuration into a resource; ``closer`` releases it.
    The first registered name becomes the default name.
    """

    def __init__(
        self,
        name: str,
        config_type: type,
        factory: Callable[[Any], Any],
        closer: Callable[[Any], Any] | None = None,
        container: Container | None = None,
    ) -> None:
        self.name = name
        self.config_type = config_type
        self._factory = factory
        self._closer = closer
        self._container = container if container is not None else app
        self._lock = threading.RLock()
        self._configs: dict[str, Any] = {}
        self._default_name = ""

    def register(self, *args: Any) -> None:
        di_name, lazy = transform_args(*args)
        conf = args[1]
        if not isinstance(conf, self.config_type):
            raise TypeError(f"args[1] is not {self.config_type.__name__}")
        with self._lock:
            self._configs[di_name] = conf
            if len(self._configs) == 1:
                self._default_name = di_name
        if not lazy:
            self._set_singleton(di_name, conf)

    def provides(self) -> list[str]:
        with self._lock:
            return map_to_array(self._configs)

    def close(self) -> None:
        if self._closer is None:
            return
        for di_name in self.provides():
            instance = self.get_singleton(di_name, False)
            if instance is not None:
                self._closer(instance)

    def _set_singleton(self, di_name: str, conf: Any) -> Any:
        instance = self._factory(conf)
        self._container.set_singleton(di_name, instance)
        return instance

    def get_singleton(self, di_name: str, lazy: bool) -> Any:
        """Return the resource for ``di_name``, building it when ``lazy``."""
        instance = self._container.get_singleton(di_name)
        if instance is not None:
            return instance
        if not lazy:
            return None
        with self._lock:
            conf = self._configs.get(di_name)
        if not isinstance(conf, self.config_type):
            raise LookupError(f"{self.name} di_name:{di_name} not exist")
        try:
            return self._set_singleton(di_name, conf)
        except Exception as exc:
            raise RuntimeError(f"{self.name} di_name:{di_name} err:{exc}") from exc

    def get(self, *args: str) -> Any:
        """Return the resource by name, or the default one."""
        return self.get_singleton(get_di_name(self._default_name, *args), True)