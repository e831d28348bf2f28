"""Forward-only result cursor over a DB-API cursor."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Iterator, Sequence

from ..utils.logging import get_logger
from .contracts import CursorPort
from .resources import release_quietly
from .types import MaybeScalar

logger = get_logger(__name__)


class ResultCursor:
    """Single-pass view of one result set.

    Column names come from `cursor.description`; a cursor without a
    description (a non-query) reports zero columns and no rows. Closing the
    cursor also runs any extra closers handed over by the caller, such as
    closing a connection opened only for this result.
    """

    def __init__(
        self,
        cursor: CursorPort,
        *,
        closers: Sequence[Callable[[], None]] = (),
    ):
        self._cursor = cursor
        desc = getattr(cursor, "description", None)
        self._columns: tuple[str, ...] = tuple(str(d[0]) for d in desc) if desc else ()
        self._closers = tuple(closers)
        self._row: tuple[Any, ...] | None = None
        self._rows_read = 0
        self._closed = False

    @property
    def column_count(self) -> int:
        return len(self._columns)

    @property
    def columns(self) -> tuple[str, ...]:
        return self._columns

    @property
    def rows_read(self) -> int:
        return self._rows_read

    @property
    def closed(self) -> bool:
        return self._closed

    def column_name(self, index: int) -> str:
        return self._columns[index]

    def read(self) -> bool:
        """Advance to the next row; return False when the result is exhausted."""

        if self._closed:
            raise RuntimeError("cursor is closed")
        if not self._columns:
            self._row = None
            return False
        row = self._cursor.fetchone()
        if row is None:
            self._row = None
            return False
        self._row = self._row_to_tuple(row)
        self._rows_read += 1
        return True

    def _row_to_tuple(self, row: Any) -> tuple[Any, ...]:
        """Normalize row object to a positional tuple.

        Supports mapping rows (dict cursors) via column names and any
        sequence-like row (tuples, `sqlite3.Row`).
        """

        if isinstance(row, Mapping):
            return tuple(row[c] for c in self._columns)
        try:
            values = tuple(row)
        except TypeError as exc:
            raise TypeError(f"Unsupported row type: {type(row)}") from exc
        if len(values) != len(self._columns):
            raise TypeError(
                f"Row has {len(values)} values but the result declares "
                f"{len(self._columns)} columns."
            )
        return values

    def _current(self) -> tuple[Any, ...]:
        if self._row is None:
            raise RuntimeError("no current row; call read() first")
        return self._row

    def value(self, index: int) -> MaybeScalar:
        return self._current()[index]

    def is_null(self, index: int) -> bool:
        return self._current()[index] is None

    def values(self) -> tuple[Any, ...]:
        return self._current()

    def __iter__(self) -> Iterator[tuple[Any, ...]]:
        while self.read():
            yield self.values()

    def close(self) -> None:
        """Close the DB-API cursor, then any extra closers.

        Every closer runs even if an earlier one fails; the first failure is
        raised afterwards.
        """

        if self._closed:
            return
        self._closed = True
        self._row = None
        first_error: Exception | None = None
        for close in (self._cursor.close, *self._closers):
            try:
                close()
            except Exception as exc:
                if first_error is None:
                    first_error = exc
                else:
                    logger.warning("Additional close failure suppressed: {!r}", exc)
        if first_error is not None:
            raise first_error

    def __enter__(self) -> ResultCursor:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if exc_type is None:
            self.close()
        else:
            release_quietly(self.close, self)
