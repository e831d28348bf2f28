"""Result shaping strategies: single value, single row, single column.

Each strategy owns the cursor it is given and closes it before returning,
whether the result matched the requested shape or not.
"""

from __future__ import annotations

from typing import Any

from .commands import execute_reader
from .cursor import ResultCursor
from .errors import duplicate_column_name, multiple_columns, multiple_rows, no_rows
from .resources import releasing
from .types import ColumnValues, MaybeScalar, ParameterInput, RowMapping


def single_value(cursor: ResultCursor) -> MaybeScalar:
    """Return the only cell of a one-row, one-column result (may be None)."""

    with releasing(cursor):
        if not cursor.read():
            raise no_rows()
        if cursor.column_count != 1:
            raise multiple_columns(cursor.column_count)
        result = None if cursor.is_null(0) else cursor.value(0)
        if cursor.read():
            raise multiple_rows()
        return result


def single_row(cursor: ResultCursor) -> RowMapping:
    """Return the only row keyed by lower-cased, trimmed column name."""

    with releasing(cursor):
        if not cursor.read():
            raise no_rows()
        positions: dict[str, int] = {}
        for index in range(cursor.column_count):
            key = cursor.column_name(index).lower().strip()
            if key in positions:
                raise duplicate_column_name(key, positions[key], index)
            positions[key] = index
        result = {
            key: None if cursor.is_null(index) else cursor.value(index)
            for key, index in positions.items()
        }
        if cursor.read():
            raise multiple_rows()
        return result


def single_column(cursor: ResultCursor) -> ColumnValues:
    """Return every value of a one-column result, in cursor order."""

    with releasing(cursor):
        if cursor.column_count != 1:
            raise multiple_columns(cursor.column_count)
        values: ColumnValues = []
        while cursor.read():
            values.append(None if cursor.is_null(0) else cursor.value(0))
        if not values:
            raise no_rows()
        return values


def read_single_value(
    connection: Any,
    command_text: str,
    parameters: ParameterInput = None,
    **options: Any,
) -> MaybeScalar:
    """Execute a command and return its single scalar.

    `options` are the keyword options of `execute_reader()` (driver, kind,
    transaction, prepare, timeout_seconds).
    """

    return single_value(execute_reader(connection, command_text, parameters, **options))


def read_single_row(
    connection: Any,
    command_text: str,
    parameters: ParameterInput = None,
    **options: Any,
) -> RowMapping:
    return single_row(execute_reader(connection, command_text, parameters, **options))


def read_single_column(
    connection: Any,
    command_text: str,
    parameters: ParameterInput = None,
    **options: Any,
) -> ColumnValues:
    return single_column(execute_reader(connection, command_text, parameters, **options))
