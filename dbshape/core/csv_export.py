"""CSV export of a result cursor."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ..utils.logging import get_logger
from .commands import execute_reader
from .cursor import ResultCursor
from .errors import invalid_output_path, no_result_set
from .rendering import CSV_DELIMITER, LINE_TERMINATOR, render_csv_cell, to_csv_safe
from .resources import releasing
from .types import ParameterInput, Sink

logger = get_logger(__name__)


def write_csv(cursor: ResultCursor, sink: Sink, include_header: bool = True) -> int:
    """Write the cursor's rows to `sink` as CSV and return the row count.

    Lines are separated by `LINE_TERMINATOR`; nothing follows the last line.
    The cursor is closed on every path. Sink write errors propagate unchanged.
    """

    with releasing(cursor):
        if cursor.column_count == 0:
            raise no_result_set()

        started = False
        if include_header:
            sink.write(CSV_DELIMITER.join(to_csv_safe(name) for name in cursor.columns))
            started = True

        rows = 0
        while cursor.read():
            if started:
                sink.write(LINE_TERMINATOR)
            sink.write(CSV_DELIMITER.join(render_csv_cell(v) for v in cursor.values()))
            started = True
            rows += 1
        return rows


def write_to_csv(
    connection: Any,
    command_text: str,
    output_path: str | Path,
    include_header: bool = True,
    parameters: ParameterInput = None,
    **options: Any,
) -> int:
    """Execute a command and write its result to a UTF-8 CSV file.

    `options` are the keyword options of `execute_reader()`.
    """

    if output_path is None or not str(output_path).strip():
        raise invalid_output_path(output_path)

    path = Path(output_path)
    with path.open("w", encoding="utf-8", newline="") as sink:
        cursor = execute_reader(connection, command_text, parameters, **options)
        rows = write_csv(cursor, sink, include_header)
    logger.debug("Wrote {} rows to {}", rows, path)
    return rows
