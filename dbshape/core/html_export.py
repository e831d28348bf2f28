"""HTML table rendering of a result cursor."""

from __future__ import annotations

import html
from typing import Any

from .commands import execute_reader
from .cursor import ResultCursor
from .rendering import render_scalar
from .resources import releasing
from .types import ParameterInput


def to_html(cursor: ResultCursor, include_header: bool = True, html_encode_cells: bool = True) -> str:
    """Render the cursor as a `<table>`; null cells are empty."""

    if cursor.closed:
        raise RuntimeError("cursor is closed")

    with releasing(cursor):
        lines = ["<table>"]
        if include_header:
            lines.append("<tr>")
            lines.extend(f"<th>{html.escape(name)}</th>" for name in cursor.columns)
            lines.append("</tr>")

        while cursor.read():
            lines.append("<tr>")
            for value in cursor.values():
                text = "" if value is None else render_scalar(value)
                if html_encode_cells:
                    text = html.escape(text)
                lines.append(f"<td>{text}</td>")
            lines.append("</tr>")

        lines.append("</table>")
        return "\n".join(lines) + "\n"


def read_html_table(
    connection: Any,
    command_text: str,
    parameters: ParameterInput = None,
    *,
    include_header: bool = True,
    html_encode_cells: bool = True,
    **options: Any,
) -> str:
    cursor = execute_reader(connection, command_text, parameters, **options)
    return to_html(cursor, include_header, html_encode_cells)
