"""Command building, validation, and execution.

`build_command()` turns a `CommandDescriptor` into an `ExecutableCommand`
after validating the connection, text, timeout, transaction, and parameters
in that order. The connection-level helpers in this module build, run, and
release a command in one call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from typing import Any, Mapping, Optional, Sequence

from ..utils.logging import get_logger
from .contracts import CursorPort, DriverPort
from .cursor import ResultCursor
from .errors import (
    DbShapeError,
    command_preparation_failed,
    execution_fault,
    incompatible_parameter_provider,
    invalid_command_text,
    invalid_connection_state,
    invalid_timeout,
    invalid_transaction,
    transaction_connection_mismatch,
)
from .parameters import Parameter, ParameterDirection
from .resources import release_quietly, releasing
from .transactions import Transaction
from .types import BoundParams, ParameterInput

logger = get_logger(__name__)


class CommandKind(str, Enum):
    TEXT = "text"
    STORED_PROCEDURE = "stored_procedure"
    TABLE_DIRECT = "table_direct"


@dataclass(frozen=True)
class CommandDescriptor:
    """Everything needed to build one command. Validated by `build_command()`."""

    text: str
    kind: CommandKind = CommandKind.TEXT
    parameters: Sequence[Any] = field(default_factory=tuple)
    timeout_seconds: int = 0
    prepare: bool = False
    transaction: Optional[Transaction] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", CommandKind(self.kind))
        object.__setattr__(self, "parameters", tuple(self.parameters or ()))


class ExecutableCommand:
    """A validated command bound to one DB-API cursor.

    The command owns its cursor, and any timeout applied to the connection,
    until `execute_reader()` hands both to the returned `ResultCursor`.
    """

    def __init__(
        self,
        connection: Any,
        driver: DriverPort,
        descriptor: CommandDescriptor,
        cursor: CursorPort,
        *,
        sql: str,
        parameters: Sequence[Parameter],
        bound: BoundParams,
        prepared: bool = False,
        timeout_applied: bool = False,
    ):
        self.connection = connection
        self.driver = driver
        self.descriptor = descriptor
        self.sql = sql
        self.parameters = tuple(parameters)
        self.bound = bound
        self.prepared = prepared
        self.outputs: dict[str, Any] = {}
        self._cursor: CursorPort | None = cursor
        self._executed = False
        self._timeout_applied = timeout_applied

    @property
    def closed(self) -> bool:
        return self._cursor is None

    def _require_cursor(self) -> CursorPort:
        if self._cursor is None:
            raise RuntimeError("command is closed")
        if self._executed:
            raise RuntimeError("command has already been executed")
        return self._cursor

    def _run(self, cursor: CursorPort) -> None:
        self._executed = True
        kind = self.descriptor.kind
        logger.debug(
            "Executing {} command on {}: {!r}", kind.value, self.driver.name, self.sql
        )
        try:
            if kind is CommandKind.STORED_PROCEDURE:
                args = self.driver.procedure_arguments(self.parameters)
                result = self.driver.call_procedure(cursor, self.sql, args)
                self.outputs = self._collect_outputs(result)
            else:
                self.driver.execute(cursor, self.sql, self.bound, prepared=self.prepared)
        except DbShapeError:
            raise
        except Exception as exc:
            raise execution_fault(self.sql, self.driver.name, exc) from exc

    def _collect_outputs(self, result: Sequence[Any]) -> dict[str, Any]:
        passed = [
            p for p in self.parameters if p.direction is not ParameterDirection.RETURN_VALUE
        ]
        outputs: dict[str, Any] = {}
        for param, value in zip(passed, result):
            if param.direction in (ParameterDirection.OUTPUT, ParameterDirection.INPUT_OUTPUT):
                outputs[param.name] = value
        return outputs

    def execute_reader(self, *, closers: Sequence[Any] = ()) -> ResultCursor:
        """Execute and hand the cursor over to a `ResultCursor`."""

        cursor = self._require_cursor()
        self._run(cursor)
        self._cursor = None
        if self._timeout_applied:
            self._timeout_applied = False
            closers = (partial(self.driver.clear_timeout, self.connection), *closers)
        return ResultCursor(cursor, closers=closers)

    def execute_non_query(self) -> int:
        """Execute and return the affected row count (0 when the driver reports none)."""

        cursor = self._require_cursor()
        self._run(cursor)
        rowcount = getattr(cursor, "rowcount", -1)
        if rowcount is None or rowcount < 0:
            return 0
        return int(rowcount)

    def close(self) -> None:
        cursor = self._cursor
        self._cursor = None
        try:
            if cursor is not None:
                cursor.close()
        finally:
            if self._timeout_applied:
                self._timeout_applied = False
                self.driver.clear_timeout(self.connection)

    def __enter__(self) -> ExecutableCommand:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if exc_type is None:
            self.close()
        else:
            release_quietly(self.close, self)


def _validate_connection(connection: Any, driver: DriverPort) -> None:
    if connection is None:
        raise invalid_connection_state("absent")
    if not driver.is_open(connection):
        raise invalid_connection_state(driver.connection_state(connection))


def _validate_text(text: Any) -> None:
    if not isinstance(text, str) or not text.strip():
        raise invalid_command_text(text)


def _validate_timeout(timeout_seconds: Any) -> None:
    if (
        isinstance(timeout_seconds, bool)
        or not isinstance(timeout_seconds, int)
        or timeout_seconds < 0
    ):
        raise invalid_timeout(timeout_seconds)


def _validate_transaction(transaction: Optional[Transaction], connection: Any) -> None:
    if transaction is None:
        return
    bound = getattr(transaction, "connection", None)
    if bound is None:
        raise invalid_transaction(
            "transaction has no connection; it was committed or rolled back, "
            "or the connection is broken"
        )
    if bound is not connection:
        raise transaction_connection_mismatch()


def _accept_parameters(parameters: Sequence[Any], driver: DriverPort) -> list[Parameter]:
    accepted: list[Parameter] = []
    for parameter in parameters:
        if parameter is None:
            continue
        if not isinstance(parameter, Parameter):
            raise incompatible_parameter_provider(parameter, driver.name)
        if parameter.provider is not None and parameter.provider != driver.name:
            raise incompatible_parameter_provider(parameter, driver.name, parameter.provider)
        accepted.append(parameter)
    return accepted


def build_command(
    connection: Any,
    descriptor: CommandDescriptor,
    driver: DriverPort,
) -> ExecutableCommand:
    """Validate `descriptor` against `connection` and build an executable command.

    Precondition failures are raised before the driver is touched. Once the
    driver cursor exists, any failure closes it before propagating.
    """

    _validate_connection(connection, driver)
    _validate_text(descriptor.text)
    _validate_timeout(descriptor.timeout_seconds)
    _validate_transaction(descriptor.transaction, connection)

    if descriptor.kind is CommandKind.TABLE_DIRECT:
        sql = driver.table_direct_sql(descriptor.text)
    else:
        sql = descriptor.text

    cursor = driver.cursor(connection)
    timeout_applied = False
    try:
        parameters = _accept_parameters(descriptor.parameters, driver)
        bound = driver.bind_parameters(parameters)
        try:
            driver.apply_timeout(connection, cursor, descriptor.timeout_seconds)
        except Exception as exc:
            raise execution_fault(sql, driver.name, exc) from exc
        timeout_applied = descriptor.timeout_seconds > 0

        prepared = False
        if descriptor.prepare:
            if not driver.supports_prepare:
                raise command_preparation_failed(sql, driver.name)
            try:
                prepared = driver.prepare(connection, cursor, sql, bound)
            except Exception as exc:
                raise command_preparation_failed(sql, driver.name) from exc
    except BaseException:
        release_quietly(cursor.close, cursor)
        if timeout_applied:
            release_quietly(partial(driver.clear_timeout, connection), connection)
        raise

    return ExecutableCommand(
        connection,
        driver,
        descriptor,
        cursor,
        sql=sql,
        parameters=parameters,
        bound=bound,
        prepared=prepared,
        timeout_applied=timeout_applied,
    )


def resolve_driver(connection: Any, driver: Optional[DriverPort]) -> DriverPort:
    """Return `driver`, or detect one from the connection's DB-API module."""

    if driver is not None:
        return driver
    if connection is None:
        raise invalid_connection_state("absent")
    from ..ports.db_api.drivers import detect_driver

    return detect_driver(connection)


def describe(
    command_text: str,
    parameters: ParameterInput = None,
    *,
    kind: CommandKind = CommandKind.TEXT,
    transaction: Optional[Transaction] = None,
    prepare: bool = False,
    timeout_seconds: int = 0,
) -> CommandDescriptor:
    return CommandDescriptor(
        text=command_text,
        kind=kind,
        parameters=tuple(parameters or ()),
        timeout_seconds=timeout_seconds,
        prepare=prepare,
        transaction=transaction,
    )


def execute_reader(
    connection: Any,
    command_text: str,
    parameters: ParameterInput = None,
    *,
    driver: Optional[DriverPort] = None,
    kind: CommandKind = CommandKind.TEXT,
    transaction: Optional[Transaction] = None,
    prepare: bool = False,
    timeout_seconds: int = 0,
    closers: Sequence[Any] = (),
) -> ResultCursor:
    """Execute a command and return its open `ResultCursor`.

    The caller owns the returned cursor and must close it.
    """

    driver = resolve_driver(connection, driver)
    descriptor = describe(
        command_text,
        parameters,
        kind=kind,
        transaction=transaction,
        prepare=prepare,
        timeout_seconds=timeout_seconds,
    )
    command = build_command(connection, descriptor, driver)
    with releasing(command):
        return command.execute_reader(closers=closers)


def execute_non_query(
    connection: Any,
    command_text: str,
    parameters: ParameterInput = None,
    *,
    driver: Optional[DriverPort] = None,
    kind: CommandKind = CommandKind.TEXT,
    transaction: Optional[Transaction] = None,
    prepare: bool = False,
    timeout_seconds: int = 0,
) -> int:
    """Execute a command that returns no result set; return affected rows."""

    driver = resolve_driver(connection, driver)
    descriptor = describe(
        command_text,
        parameters,
        kind=kind,
        transaction=transaction,
        prepare=prepare,
        timeout_seconds=timeout_seconds,
    )
    with releasing(build_command(connection, descriptor, driver)) as command:
        return command.execute_non_query()


def command_has_rows(
    connection: Any,
    command_text: str,
    parameters: ParameterInput = None,
    **options: Any,
) -> bool:
    """Return True when the command produces at least one row."""

    with releasing(execute_reader(connection, command_text, parameters, **options)) as cursor:
        return cursor.read()


def procedure_outputs(
    connection: Any,
    procedure: str,
    parameters: ParameterInput = None,
    *,
    driver: Optional[DriverPort] = None,
    transaction: Optional[Transaction] = None,
    timeout_seconds: int = 0,
) -> Mapping[str, Any]:
    """Call a stored procedure and return its output parameter values by name."""

    driver = resolve_driver(connection, driver)
    descriptor = describe(
        procedure,
        parameters,
        kind=CommandKind.STORED_PROCEDURE,
        transaction=transaction,
        timeout_seconds=timeout_seconds,
    )
    with releasing(build_command(connection, descriptor, driver)) as command:
        command.execute_non_query()
        return dict(command.outputs)
