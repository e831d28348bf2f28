"""Text rendering rules shared by the CSV and HTML exporters."""

from __future__ import annotations

import json
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import Any

CSV_DELIMITER = ","
CSV_QUOTE = '"'
LINE_TERMINATOR = "\n"

_CSV_SPECIAL = (CSV_DELIMITER, CSV_QUOTE, "\r", "\n")


class DateTimeKind(str, Enum):
    """Time-zone association of a datetime value."""

    UNSPECIFIED = "unspecified"
    LOCAL = "local"
    UTC = "utc"


def to_csv_safe(text: str) -> str:
    """Quote `text` when it holds a delimiter, quote, or line break."""

    if any(ch in text for ch in _CSV_SPECIAL):
        return CSV_QUOTE + text.replace(CSV_QUOTE, CSV_QUOTE * 2) + CSV_QUOTE
    return text


def to_bit(value: bool) -> str:
    return "1" if value else "0"


def datetime_kind(value: datetime) -> DateTimeKind:
    offset = value.utcoffset()
    if offset is None:
        return DateTimeKind.UNSPECIFIED
    if value.tzinfo is timezone.utc:
        return DateTimeKind.UTC
    if offset == timedelta(0) and value.tzname() in ("UTC", "Etc/UTC", "Z"):
        return DateTimeKind.UTC
    return DateTimeKind.LOCAL


def format_utc_offset(offset: timedelta) -> str:
    """Render an offset as `+HH:MM` / `-HH:MM`."""

    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def format_datetime(value: datetime) -> str:
    """Render `yyyy-MM-dd HH:mm:ss.fff` plus a zone suffix by kind.

    Unspecified (naive) values get no suffix, UTC values a trailing `Z`, and
    other aware values their numeric UTC offset.
    """

    text = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d} "
        f"{value.hour:02d}:{value.minute:02d}:{value.second:02d}."
        f"{value.microsecond // 1000:03d}"
    )
    kind = datetime_kind(value)
    if kind is DateTimeKind.UTC:
        return text + "Z"
    if kind is DateTimeKind.LOCAL:
        return text + format_utc_offset(value.utcoffset() or timedelta(0))
    return text


def render_scalar(value: Any) -> str:
    """Canonical, locale-independent text for a non-null value."""

    if isinstance(value, str):
        return value
    if isinstance(value, datetime):
        return format_datetime(value)
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "0x" + bytes(value).hex().upper()
    if isinstance(value, float):
        return repr(value)
    return str(value)


def render_csv_cell(value: Any) -> str:
    """Render one cell for CSV output.

    Null cells are empty; text is made CSV-safe; containers (arrays, JSON
    documents) are serialized to JSON and made CSV-safe. Other scalars use
    their canonical text, quoted only when it holds a delimiter (`timedelta`
    renders as `1 day, 2:00:00`).
    """

    if value is None:
        return ""
    if isinstance(value, str):
        return to_csv_safe(value)
    if isinstance(value, (list, tuple)) and value and all(
        isinstance(item, str) and len(item) == 1 for item in value
    ):
        return to_csv_safe("".join(value))
    if isinstance(value, datetime):
        return format_datetime(value)
    if isinstance(value, (list, tuple, dict)):
        return to_csv_safe(json.dumps(value, default=render_scalar))
    return to_csv_safe(render_scalar(value))
