"""DB-API adapter and driver exports."""

from .database import Database, open_reader, run_with_connection
from .drivers import (
    Driver,
    MySQLDriver,
    PostgresDriver,
    SQLiteDriver,
    detect_driver,
    get_driver,
)

__all__ = [
    "Database",
    "Driver",
    "MySQLDriver",
    "PostgresDriver",
    "SQLiteDriver",
    "detect_driver",
    "get_driver",
    "open_reader",
    "run_with_connection",
]
