"""Shared core type aliases used across contracts, shaping, and ports."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, TextIO, Union

Scalar = Any
MaybeScalar = Optional[Scalar]

NamedParams = Dict[str, Any]
PositionalParams = List[Any]
BoundParams = Union[NamedParams, PositionalParams, None]

RowMapping = Dict[str, MaybeScalar]
ColumnValues = List[MaybeScalar]

Sink = TextIO
ParameterInput = Optional[Sequence[Any]]
