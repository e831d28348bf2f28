"""Value-returning wrapper over the dbshape error taxonomy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

from .errors import DbShapeError, ErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    error: DbShapeError

    @property
    def ok(self) -> bool:
        return False

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    def unwrap(self) -> Any:
        raise self.error


Outcome = Union[Ok[T], Err]


def attempt(fn: Callable[..., T], *args: Any, **kwargs: Any) -> Outcome[T]:
    """Call `fn` and return its result as `Ok`, or a dbshape error as `Err`.

    Only `DbShapeError` is converted; sink I/O errors and anything else
    propagate unchanged.
    """

    try:
        return Ok(fn(*args, **kwargs))
    except DbShapeError as exc:
        return Err(exc)
