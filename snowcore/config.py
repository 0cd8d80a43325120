"""Configuration records for the resources the framework manages."""

from __future__ import annotations

from dataclasses import dataclass, field

_PASSWORD = ""


@dataclass
class RedisBaseConfig:
    """Address of one redis server."""

    host: str = ""
    port: int = 0
    password: str = _PASSWORD
    db: int = 0


@dataclass
class RedisOptionConfig:
    """Pool options; timeouts are in seconds."""

    max_idle: int = 0
    max_conns: int = 0
    wait: bool = False
    idle_timeout: float = 0
    connect_timeout: float = 0
    read_timeout: float = 0
    write_timeout: float = 0


@dataclass
class RedisConfig:
    """A redis master with optional read replicas."""

    master: RedisBaseConfig = field(default_factory=RedisBaseConfig)
    slaves: list[RedisBaseConfig] = field(default_factory=list)
    option: RedisOptionConfig = field(default_factory=RedisOptionConfig)


@dataclass
class DbBaseConfig:
    """Address and credentials of one database server."""

    host: str = ""
    port: int = 0
    user: str = ""
    password: str = _PASSWORD
    db_name: str = ""


@dataclass
class DbOptionConfig:
    """Database pool options; timeouts are in seconds."""

    max_idle: int = 0
    max_conns: int = 0
    idle_timeout: float = 0
    connect_timeout: float = 0
    charset: str = ""


@dataclass
class DbConfig:
    """A database master with optional replicas; driver is mysql, postgres, mssql or sqlite3."""

    driver: str = ""
    master: DbBaseConfig = field(default_factory=DbBaseConfig)
    slaves: list[DbBaseConfig] = field(default_factory=list)
    option: DbOptionConfig = field(default_factory=DbOptionConfig)


@dataclass
class LogConfig:
    """Logger settings."""

    handler: str = ""
    level: str = ""
    segment: bool = False
    dir: str = ""
    file_name: str = ""


@dataclass
class ApiConfig:
    """Address an HTTP server listens on."""

    host: str = ""
    port: int = 0