"""Port contracts for the external DB-API driver capability."""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, Tuple

from .parameters import DbType, Parameter, ParameterDirection
from .types import BoundParams


class CursorPort(Protocol):
    """DB-API 2.0 cursor surface consumed by this package."""

    description: Optional[Sequence[Tuple[Any, ...]]]
    rowcount: int

    def execute(self, operation: str, parameters: Any = ...) -> Any: ...

    def fetchone(self) -> Any: ...

    def close(self) -> None: ...


class ConnectionPort(Protocol):
    """DB-API 2.0 connection surface consumed by this package."""

    def cursor(self) -> CursorPort: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def close(self) -> None: ...


class DriverPort(Protocol):
    """Driver capability: connection, parameter and execution behavior."""

    name: str
    paramstyle: str
    supports_nullable: bool
    supports_prepare: bool

    def connect(self, connection_string: str) -> Any: ...

    def connection_state(self, conn: Any) -> str: ...

    def is_open(self, conn: Any) -> bool: ...

    def cursor(self, conn: ConnectionPort) -> CursorPort: ...

    def begin(self, conn: Any) -> None: ...

    def q(self, ident: str) -> str: ...

    def table_direct_sql(self, table: str) -> str: ...

    def create_parameter(
        self,
        name: str,
        db_type: DbType,
        value: Any,
        direction: ParameterDirection = ParameterDirection.INPUT,
        size: Optional[int] = None,
        precision: Optional[int] = None,
        scale: Optional[int] = None,
        nullable: bool = False,
    ) -> Parameter: ...

    def bind_parameters(self, parameters: Sequence[Parameter]) -> BoundParams: ...

    def procedure_arguments(self, parameters: Sequence[Parameter]) -> list[Any]: ...

    def apply_timeout(self, conn: Any, cursor: CursorPort, timeout_seconds: int) -> None: ...

    def clear_timeout(self, conn: Any) -> None: ...

    def prepare(self, conn: Any, cursor: CursorPort, sql: str, params: BoundParams) -> bool: ...

    def execute(
        self,
        cursor: CursorPort,
        sql: str,
        params: BoundParams,
        *,
        prepared: bool = False,
    ) -> None: ...

    def call_procedure(self, cursor: CursorPort, name: str, args: Sequence[Any]) -> Sequence[Any]: ...
