from __future__ import annotations

from typing import Any, Sequence

from dbshape import Driver


class FakeCursor:
    """DB-API cursor double that serves canned rows and records calls."""

    def __init__(
        self,
        columns: Sequence[str] | None = None,
        rows: Sequence[Any] = (),
        *,
        rowcount: int = -1,
        execute_error: Exception | None = None,
        close_error: Exception | None = None,
    ):
        self.description = (
            None if columns is None else [(name, None, None, None, None, None, None) for name in columns]
        )
        self._rows = list(rows)
        self.rowcount = rowcount
        self.execute_error = execute_error
        self.close_error = close_error
        self.executed: list[tuple[str, Any]] = []
        self.fetch_calls = 0
        self.close_calls = 0

    @property
    def closed(self) -> bool:
        return self.close_calls > 0

    def execute(self, sql, params=None):  # noqa: ANN001,ANN201
        self.executed.append((sql, params))
        if self.execute_error is not None:
            raise self.execute_error
        return None

    def fetchone(self):  # noqa: ANN201
        self.fetch_calls += 1
        if not self._rows:
            return None
        return self._rows.pop(0)

    def close(self) -> None:
        self.close_calls += 1
        if self.close_error is not None:
            raise self.close_error


class FakeProcedureCursor(FakeCursor):
    """Cursor whose `callproc` returns canned output values."""

    def __init__(self, outputs: Sequence[Any]):
        super().__init__()
        self.outputs = list(outputs)
        self.called: list[tuple[str, list[Any]]] = []

    def callproc(self, name, args):  # noqa: ANN001,ANN201
        self.called.append((name, list(args)))
        return list(self.outputs)


class FakeConnection:
    """Connection double handing out pre-built cursors in order."""

    def __init__(self, *cursors: FakeCursor, closed: bool = False):
        self._cursors = list(cursors)
        self.closed = closed
        self.cursor_calls = 0
        self.commit_calls = 0
        self.rollback_calls = 0
        self.close_calls = 0

    def cursor(self) -> FakeCursor:
        self.cursor_calls += 1
        if self._cursors:
            return self._cursors.pop(0)
        return FakeCursor()

    def commit(self) -> None:
        self.commit_calls += 1

    def rollback(self) -> None:
        self.rollback_calls += 1

    def close(self) -> None:
        self.close_calls += 1
        self.closed = True


class FakeDriver(Driver):
    name = "fake"
    paramstyle = "named"


class NullableDriver(Driver):
    name = "nullable"
    supports_nullable = True


class TimeoutRecordingDriver(FakeDriver):
    """Driver that records timeout calls instead of sending them anywhere."""

    def __init__(self) -> None:
        super().__init__()
        self.applied: list[int] = []
        self.cleared = 0

    def apply_timeout(self, conn, cursor, timeout_seconds):  # noqa: ANN001,ANN201
        self.applied.append(timeout_seconds)

    def clear_timeout(self, conn):  # noqa: ANN001,ANN201
        self.cleared += 1
