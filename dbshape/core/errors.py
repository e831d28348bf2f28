"""Error taxonomy for command building, result shaping, and export.

Every error raised by this package derives from `DbShapeError` and carries an
`ErrorKind` plus structured detail attributes, so callers can branch on the
failure without parsing messages.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Enumerated failure conditions."""

    INVALID_COMMAND_TEXT = "InvalidCommandText"
    INVALID_TIMEOUT = "InvalidTimeout"
    INVALID_CONNECTION_STATE = "InvalidConnectionState"
    INVALID_TRANSACTION = "InvalidTransaction"
    TRANSACTION_CONNECTION_MISMATCH = "TransactionConnectionMismatch"
    INVALID_PARAMETER_NAME = "InvalidParameterName"
    EMPTY_BATCH = "EmptyBatch"
    INVALID_OUTPUT_PATH = "InvalidOutputPath"

    NO_ROWS = "NoRows"
    MULTIPLE_ROWS = "MultipleRows"
    MULTIPLE_COLUMNS = "MultipleColumns"
    DUPLICATE_COLUMN_NAME = "DuplicateColumnName"
    NO_RESULT_SET = "NoResultSet"

    INCOMPATIBLE_PARAMETER_PROVIDER = "IncompatibleParameterProvider"
    COMMAND_PREPARATION_FAILED = "CommandPreparationFailed"
    EXECUTION_FAULT = "ExecutionFault"


class DbShapeError(Exception):
    """Base exception for all dbshape errors."""

    kind: ErrorKind

    def __init__(self, kind: ErrorKind, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.kind = kind
        self.detail = detail
        for key, value in detail.items():
            setattr(self, key, value)


class PreconditionError(DbShapeError, ValueError):
    """Caller supplied malformed input; detected before any driver call."""


class ShapeViolation(DbShapeError, LookupError):
    """Executed result did not match the requested shape."""


class DriverFault(DbShapeError, RuntimeError):
    """Underlying driver rejected the command, a parameter, or execution."""


def invalid_command_text(text: Any) -> PreconditionError:
    return PreconditionError(
        ErrorKind.INVALID_COMMAND_TEXT,
        "command text must be a non-empty, non-whitespace string.",
        text=text,
    )


def invalid_timeout(timeout_seconds: Any) -> PreconditionError:
    return PreconditionError(
        ErrorKind.INVALID_TIMEOUT,
        f"timeout_seconds must be an integer >= 0, got {timeout_seconds!r}.",
        timeout_seconds=timeout_seconds,
    )


def invalid_connection_state(state: str) -> PreconditionError:
    return PreconditionError(
        ErrorKind.INVALID_CONNECTION_STATE,
        f"connection is in an invalid state: {state}. Must be open.",
        state=state,
    )


def invalid_transaction(reason: str) -> PreconditionError:
    return PreconditionError(
        ErrorKind.INVALID_TRANSACTION,
        f"transaction is invalid: {reason}.",
        reason=reason,
    )


def transaction_connection_mismatch() -> PreconditionError:
    return PreconditionError(
        ErrorKind.TRANSACTION_CONNECTION_MISMATCH,
        "transaction is using a different connection than the specified connection.",
    )


def invalid_parameter_name(name: Any, reason: str) -> PreconditionError:
    return PreconditionError(
        ErrorKind.INVALID_PARAMETER_NAME,
        f"parameter name {name!r} is invalid: {reason}.",
        name=name,
        reason=reason,
    )


def empty_batch() -> PreconditionError:
    return PreconditionError(
        ErrorKind.EMPTY_BATCH,
        "no individual statements found in batch.",
    )


def invalid_output_path(path: Any) -> PreconditionError:
    return PreconditionError(
        ErrorKind.INVALID_OUTPUT_PATH,
        "output path must be a non-empty, non-whitespace path.",
        path=path,
    )


def no_rows() -> ShapeViolation:
    return ShapeViolation(ErrorKind.NO_ROWS, "Query results in no rows.", row_count=0)


def multiple_rows() -> ShapeViolation:
    return ShapeViolation(
        ErrorKind.MULTIPLE_ROWS,
        "Query results in more than one row.",
        expected_rows=1,
    )


def multiple_columns(column_count: int) -> ShapeViolation:
    return ShapeViolation(
        ErrorKind.MULTIPLE_COLUMNS,
        f"Query results in {column_count} columns, expected exactly one.",
        expected_columns=1,
        column_count=column_count,
    )


def duplicate_column_name(column_name: str, first_index: int, index: int) -> ShapeViolation:
    return ShapeViolation(
        ErrorKind.DUPLICATE_COLUMN_NAME,
        f"Query results in two columns with the same name {column_name!r} "
        f"(positions {first_index} and {index}).",
        column_name=column_name,
        first_index=first_index,
        index=index,
    )


def no_result_set() -> ShapeViolation:
    return ShapeViolation(
        ErrorKind.NO_RESULT_SET,
        "A result set wasn't found when executing the command. Command is a non-query.",
        column_count=0,
    )


def incompatible_parameter_provider(
    parameter: Any,
    driver_name: str,
    provider: Optional[str] = None,
) -> DriverFault:
    type_name = type(parameter).__name__
    origin = f" (created for {provider!r})" if provider else ""
    return DriverFault(
        ErrorKind.INCOMPATIBLE_PARAMETER_PROVIDER,
        f"Attempting to set a parameter of type {type_name}{origin} that was designed "
        f"for a data provider other than {driver_name!r}.",
        parameter_type=type_name,
        provider=provider,
        driver=driver_name,
    )


def command_preparation_failed(text: str, driver_name: str) -> DriverFault:
    return DriverFault(
        ErrorKind.COMMAND_PREPARATION_FAILED,
        f"Driver {driver_name!r} failed to prepare command.",
        text=text,
        driver=driver_name,
    )


def execution_fault(text: str, driver_name: str, cause: BaseException) -> DriverFault:
    return DriverFault(
        ErrorKind.EXECUTION_FAULT,
        f"Driver {driver_name!r} failed to execute command: {cause}",
        text=text,
        driver=driver_name,
    )
