"""Connection strings for the supported database drivers."""

from __future__ import annotations

from collections.abc import Callable

from snowcore.config import DbBaseConfig, DbOptionConfig

DEFAULT_TIMEOUT = 10
DEFAULT_CHARSET = "utf8mb4"


def get_port_or_default(port: int, default_port: int) -> int:
    """Return ``port``, or ``default_port`` when it is zero."""
    return default_port if port == 0 else port


def _whole(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _mysql(base: DbBaseConfig, option: DbOptionConfig) -> str:
    port = get_port_or_default(base.port, 3306)
    charset = option.charset or DEFAULT_CHARSET
    timeout = option.connect_timeout if option.connect_timeout > 0 else DEFAULT_TIMEOUT
    return (
        f"{base.user}:{base.password}@tcp({base.host}:{port})/{base.db_name}"
        f"?timeout={_whole(timeout)}s&charset={charset}&parseTime=true&loc=Local"
    )


def _postgres(base: DbBaseConfig, option: DbOptionConfig) -> str:
    port = get_port_or_default(base.port, 5432)
    return (
        f"host={base.host} port={port} user={base.user} "
        f"dbname={base.db_name} password={base.password}"
    )


def _sqlite3(base: DbBaseConfig, option: DbOptionConfig) -> str:
    return base.db_name


def _mssql(base: DbBaseConfig, option: DbOptionConfig) -> str:
    port = get_port_or_default(base.port, 1433)
    return (
        f"sqlserver://{base.user}:{base.password}@{base.host}:{port}"
        f"?database={base.db_name}"
    )


_FORMATTERS: dict[str, Callable[[DbBaseConfig, DbOptionConfig], str]] = {
    "mysql": _mysql,
    "postgres": _postgres,
    "sqlite3": _sqlite3,
    "mssql": _mssql,
}


def format_dsn(driver: str, base: DbBaseConfig, option: DbOptionConfig) -> str:
    """Return the data source name of a server for ``driver``."""
    formatter = _FORMATTERS.get(driver)
    dsn = formatter(base, option) if formatter is not None else ""
    if not dsn:
        raise ValueError(f"missing db driver {driver} or db config")
    return dsn