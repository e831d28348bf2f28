"""Validated command execution and result shaping over DB-API drivers."""

from loguru import logger

from .core import (
    DB_NULL,
    CommandDescriptor,
    CommandKind,
    DateTimeKind,
    DbShapeError,
    DbType,
    DriverFault,
    Err,
    ErrorKind,
    ExecutableCommand,
    Ok,
    Outcome,
    Parameter,
    ParameterDirection,
    PreconditionError,
    ResultCursor,
    ShapeViolation,
    Transaction,
    TransactionState,
    attempt,
    begin_transaction,
    build_command,
    command_has_rows,
    create_parameter,
    execute_non_query,
    execute_non_query_batch,
    execute_reader,
    format_datetime,
    procedure_outputs,
    read_html_table,
    read_single_column,
    read_single_row,
    read_single_value,
    render_csv_cell,
    rollback_transaction,
    single_column,
    single_row,
    single_value,
    split_batch_statements,
    to_bit,
    to_csv_safe,
    to_html,
    validate_parameter_name,
    write_csv,
    write_to_csv,
)
from .ports import (
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

__version__ = "0.1.0"

# Library records stay silent until an application calls configure_logging().
logger.disable("dbshape")

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
    "CommandDescriptor",
    "CommandKind",
    "ExecutableCommand",
    "build_command",
    "execute_reader",
    "execute_non_query",
    "command_has_rows",
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
    "__version__",
]
