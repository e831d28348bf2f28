"""Provider-independent command parameters and name validation."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional

from .errors import invalid_parameter_name


class _DbNull:
    """Explicit database NULL, distinct from an absent parameter."""

    _instance: Optional[_DbNull] = None

    def __new__(cls) -> _DbNull:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DB_NULL"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "DB_NULL"


DB_NULL = _DbNull()


class ParameterDirection(str, Enum):
    INPUT = "input"
    OUTPUT = "output"
    INPUT_OUTPUT = "input_output"
    RETURN_VALUE = "return_value"


class DbType(str, Enum):
    """Provider-independent parameter type tag."""

    ANSI_STRING = "ansi_string"
    BINARY = "binary"
    BOOLEAN = "boolean"
    BYTE = "byte"
    CURRENCY = "currency"
    DATE = "date"
    DATETIME = "datetime"
    DATETIME_OFFSET = "datetime_offset"
    DECIMAL = "decimal"
    DOUBLE = "double"
    GUID = "guid"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    OBJECT = "object"
    SINGLE = "single"
    STRING = "string"
    TIME = "time"
    XML = "xml"


@dataclass(frozen=True)
class Parameter:
    """One command parameter.

    `value` is never `None` on a constructed parameter: an unset value is
    stored as `DB_NULL`. `provider` names the driver the parameter was created
    for, or is `None` when the parameter can be bound by any driver.
    """

    name: str
    value: Any = DB_NULL
    db_type: DbType = DbType.OBJECT
    direction: ParameterDirection = ParameterDirection.INPUT
    size: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    nullable: bool = False
    provider: Optional[str] = None

    def __post_init__(self) -> None:
        validate_parameter_name(self.name)
        for attr in ("size", "precision", "scale"):
            number = getattr(self, attr)
            if number is not None and (
                isinstance(number, bool) or not isinstance(number, int) or number < 0
            ):
                raise ValueError(f"Parameter {attr} must be a non-negative integer.")
        if self.value is None:
            object.__setattr__(self, "value", DB_NULL)

    @property
    def key(self) -> str:
        """Name without the leading `@`, as bound to named paramstyles."""

        return self.name[1:]

    @property
    def is_null(self) -> bool:
        return self.value is DB_NULL

    @property
    def is_input(self) -> bool:
        return self.direction in (ParameterDirection.INPUT, ParameterDirection.INPUT_OUTPUT)

    def with_value(self, value: Any) -> Parameter:
        return replace(self, value=DB_NULL if value is None else value)


def validate_parameter_name(name: Any) -> str:
    """Validate `@name` convention: at least two characters, `@` then alphanumerics."""

    if not isinstance(name, str) or not name.strip():
        raise invalid_parameter_name(name, "name must be a non-empty string")
    if len(name) < 2:
        raise invalid_parameter_name(name, "name is not 2 characters in length at a minimum")
    if name[0] != "@":
        raise invalid_parameter_name(name, "name does not begin with '@'")
    rest = name[1:]
    if not (rest.isascii() and rest.isalnum()):
        raise invalid_parameter_name(name, "name is not alphanumeric after '@'")
    return name


def create_parameter(
    name: str,
    db_type: DbType,
    value: Any,
    direction: ParameterDirection = ParameterDirection.INPUT,
    size: Optional[int] = None,
    precision: Optional[int] = None,
    scale: Optional[int] = None,
    nullable: bool = False,
    *,
    provider: Optional[str] = None,
) -> Parameter:
    """Create a validated parameter; `None` values become `DB_NULL`."""

    return Parameter(
        name=name,
        value=value,
        db_type=DbType(db_type),
        direction=ParameterDirection(direction),
        size=size,
        precision=precision,
        scale=scale,
        nullable=nullable,
        provider=provider,
    )
