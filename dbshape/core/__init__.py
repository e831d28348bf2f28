"""Public core API for command building, result shaping, and export."""

from .batch import execute_non_query_batch, split_batch_statements
from .commands import (
    CommandDescriptor,
    CommandKind,
    ExecutableCommand,
    build_command,
    command_has_rows,
    execute_non_query,
    execute_reader,
    procedure_outputs,
)
from .csv_export import write_csv, write_to_csv
from .cursor import ResultCursor
from .errors import (
    DbShapeError,
    DriverFault,
    ErrorKind,
    PreconditionError,
    ShapeViolation,
)
from .html_export import read_html_table, to_html
from .outcome import Err, Ok, Outcome, attempt
from .parameters import (
    DB_NULL,
    DbType,
    Parameter,
    ParameterDirection,
    create_parameter,
    validate_parameter_name,
)
from .rendering import DateTimeKind, format_datetime, render_csv_cell, to_bit, to_csv_safe
from .shaping import (
    read_single_column,
    read_single_row,
    read_single_value,
    single_column,
    single_row,
    single_value,
)
from .transactions import Transaction, TransactionState, begin_transaction, rollback_transaction

__all__ = [
    "CommandDescriptor",
    "CommandKind",
    "ExecutableCommand",
    "build_command",
    "command_has_rows",
    "execute_non_query",
    "execute_reader",
    "procedure_outputs",
    "ResultCursor",
    "single_value",
    "single_row",
    "single_column",
    "read_single_value",
    "read_single_row",
    "read_single_column",
    "write_csv",
    "write_to_csv",
    "to_html",
    "read_html_table",
    "split_batch_statements",
    "execute_non_query_batch",
    "Transaction",
    "TransactionState",
    "begin_transaction",
    "rollback_transaction",
    "DB_NULL",
    "DbType",
    "Parameter",
    "ParameterDirection",
    "create_parameter",
    "validate_parameter_name",
    "DateTimeKind",
    "format_datetime",
    "render_csv_cell",
    "to_bit",
    "to_csv_safe",
    "DbShapeError",
    "PreconditionError",
    "ShapeViolation",
    "DriverFault",
    "ErrorKind",
    "Ok",
    "Err",
    "Outcome",
    "attempt",
]
