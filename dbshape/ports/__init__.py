"""Public port exports for concrete adapter implementations."""

from .db_api import (
    Database,
    Driver,
    MySQLDriver,
    PostgresDriver,
    SQLiteDriver,
    detect_driver,
    get_driver,
    open_reader,
    run_with_connection,
)

__all__ = [
    "Database",
    "Driver",
    "SQLiteDriver",
    "PostgresDriver",
    "MySQLDriver",
    "detect_driver",
    "get_driver",
    "open_reader",
    "run_with_connection",
]
