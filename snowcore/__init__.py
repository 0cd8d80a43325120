"""Building blocks for services: dependency container, providers, cache and queue drivers, JSON logging, process control and HTTP helpers."""

__version__ = "0.1.0"