"""DB-API adapter binding one connection to one driver capability."""

from __future__ import annotations

import contextlib
from pathlib import Path
from typing import Any, Callable, Iterator, Mapping, Optional, TypeVar

from ...core.batch import execute_non_query_batch
from ...core.commands import (
    CommandKind,
    command_has_rows,
    execute_non_query,
    execute_reader,
    procedure_outputs,
)
from ...core.contracts import DriverPort
from ...core.csv_export import write_to_csv
from ...core.cursor import ResultCursor
from ...core.errors import invalid_connection_state
from ...core.html_export import read_html_table
from ...core.parameters import DbType, Parameter, ParameterDirection
from ...core.resources import release_quietly
from ...core.shaping import read_single_column, read_single_row, read_single_value
from ...core.transactions import Transaction, begin_transaction
from ...core.types import ColumnValues, MaybeScalar, ParameterInput, RowMapping
from ...utils.logging import get_logger
from .drivers import detect_driver

logger = get_logger(__name__)

T = TypeVar("T")


class Database:
    """Thin wrapper that forwards every operation with its connection and driver.

    Holds no state beyond the connection, the driver, and whether this
    object opened (and therefore closes) the connection.
    """

    def __init__(self, conn: Any, driver: DriverPort | None = None, *, owns_connection: bool = False):
        """Create database adapter.

        Args:
            conn: Open DB-API connection.
            driver: Driver capability; detected from the connection when omitted.
            owns_connection: Close `conn` when this adapter is closed.
        """

        if conn is None:
            raise invalid_connection_state("absent")
        self.conn: Any | None = conn
        self.driver: DriverPort = driver if driver is not None else detect_driver(conn)
        self._owns_connection = owns_connection
        self._closed = False

    @classmethod
    def connect(cls, driver: DriverPort, connection_string: str) -> Database:
        """Open a connection with `driver` and return an adapter that owns it."""

        conn = driver.connect(connection_string)
        logger.debug("Opened {} connection", driver.name)
        return cls(conn, driver, owns_connection=True)

    def _require_open_connection(self) -> Any:
        if self._closed or self.conn is None:
            raise invalid_connection_state("closed")
        return self.conn

    def _options(self, options: Mapping[str, Any]) -> dict[str, Any]:
        merged = dict(options)
        merged.setdefault("driver", self.driver)
        return merged

    @contextlib.contextmanager
    def transaction(self) -> Iterator[Transaction]:
        """Provide commit/rollback transaction scope."""

        with begin_transaction(self._require_open_connection(), self.driver) as tx:
            yield tx

    def begin(self) -> Transaction:
        return begin_transaction(self._require_open_connection(), self.driver)

    def parameter(
        self,
        name: str,
        value: Any,
        db_type: DbType = DbType.OBJECT,
        direction: ParameterDirection = ParameterDirection.INPUT,
        **kwargs: Any,
    ) -> Parameter:
        return self.driver.create_parameter(name, db_type, value, direction, **kwargs)

    def execute_reader(self, sql: str, params: ParameterInput = None, **options: Any) -> ResultCursor:
        return execute_reader(self._require_open_connection(), sql, params, **self._options(options))

    def execute_non_query(self, sql: str, params: ParameterInput = None, **options: Any) -> int:
        return execute_non_query(self._require_open_connection(), sql, params, **self._options(options))

    def command_has_rows(self, sql: str, params: ParameterInput = None, **options: Any) -> bool:
        return command_has_rows(self._require_open_connection(), sql, params, **self._options(options))

    def call_procedure(self, name: str, params: ParameterInput = None, **options: Any) -> Mapping[str, Any]:
        return procedure_outputs(self._require_open_connection(), name, params, **self._options(options))

    def read_table(self, table: str, **options: Any) -> ResultCursor:
        options["kind"] = CommandKind.TABLE_DIRECT
        return self.execute_reader(table, **options)

    def read_single_value(self, sql: str, params: ParameterInput = None, **options: Any) -> MaybeScalar:
        return read_single_value(self._require_open_connection(), sql, params, **self._options(options))

    def read_single_row(self, sql: str, params: ParameterInput = None, **options: Any) -> RowMapping:
        return read_single_row(self._require_open_connection(), sql, params, **self._options(options))

    def read_single_column(self, sql: str, params: ParameterInput = None, **options: Any) -> ColumnValues:
        return read_single_column(self._require_open_connection(), sql, params, **self._options(options))

    def write_to_csv(
        self,
        sql: str,
        output_path: str | Path,
        include_header: bool = True,
        params: ParameterInput = None,
        **options: Any,
    ) -> int:
        return write_to_csv(
            self._require_open_connection(),
            sql,
            output_path,
            include_header,
            params,
            **self._options(options),
        )

    def to_html(self, sql: str, params: ParameterInput = None, **options: Any) -> str:
        return read_html_table(self._require_open_connection(), sql, params, **self._options(options))

    def execute_non_query_batch(
        self,
        batch_sql: str,
        *,
        transaction: Optional[Transaction] = None,
        timeout_seconds: int = 0,
    ) -> int:
        return execute_non_query_batch(
            self._require_open_connection(),
            batch_sql,
            driver=self.driver,
            transaction=transaction,
            timeout_seconds=timeout_seconds,
        )

    def close(self) -> None:
        """Close the connection if this adapter opened it."""

        if self._closed:
            return
        conn = self.conn
        self._closed = True
        self.conn = None
        if conn is None or not self._owns_connection:
            return
        conn.close()
        logger.debug("Closed {} connection", self.driver.name)

    def __enter__(self) -> Database:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if exc_type is None:
            self.close()
        else:
            release_quietly(self.close, self)


def run_with_connection(
    driver: DriverPort,
    connection_string: str,
    operation: Callable[..., T],
    *args: Any,
    **kwargs: Any,
) -> T:
    """Open a connection, run `operation(connection, *args, driver=driver, **kwargs)`, close it.

    Works with every connection-level operation that consumes its result
    (`read_single_value`, `write_to_csv`, `execute_non_query_batch`, ...). A
    successful operation is committed before the connection closes. Readers
    outlive the call, so use `open_reader()` for them.
    """

    with Database.connect(driver, connection_string) as db:
        conn = db._require_open_connection()
        kwargs.setdefault("driver", driver)
        result = operation(conn, *args, **kwargs)
        conn.commit()
        return result


def open_reader(
    driver: DriverPort,
    connection_string: str,
    sql: str,
    params: ParameterInput = None,
    **options: Any,
) -> ResultCursor:
    """Open a connection and return a reader over `sql` that owns it.

    Closing the reader closes the connection. When the command fails, the
    connection is closed before the error propagates.
    """

    conn = driver.connect(connection_string)
    logger.debug("Opened {} connection for a reader", driver.name)
    options.setdefault("driver", driver)
    try:
        return execute_reader(conn, sql, params, closers=(conn.close,), **options)
    except BaseException:
        release_quietly(conn.close, conn)
        raise
