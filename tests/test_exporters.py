from __future__ import annotations

import io
import os
import sqlite3
import tempfile
import unittest
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from dbshape import (
    DateTimeKind,
    ErrorKind,
    PreconditionError,
    ResultCursor,
    ShapeViolation,
    format_datetime,
    read_html_table,
    render_csv_cell,
    to_bit,
    to_csv_safe,
    to_html,
    write_csv,
    write_to_csv,
)
from dbshape.core.rendering import datetime_kind
from tests.db_test_helpers import FakeCursor

_UTC_VALUE = datetime(2024, 1, 2, 3, 4, 5, 678901, tzinfo=timezone.utc)


class CsvSafeTests(unittest.TestCase):
    def test_plain_text_unchanged(self) -> None:
        self.assertEqual(to_csv_safe("plain"), "plain")
        self.assertEqual(to_csv_safe(""), "")

    def test_quotes_doubled_and_wrapped(self) -> None:
        self.assertEqual(to_csv_safe('He said "hi", twice'), '"He said ""hi"", twice"')

    def test_line_breaks_trigger_quoting(self) -> None:
        self.assertEqual(to_csv_safe("a\nb"), '"a\nb"')
        self.assertEqual(to_csv_safe("a\rb"), '"a\rb"')

    def test_to_bit(self) -> None:
        self.assertEqual(to_bit(True), "1")
        self.assertEqual(to_bit(False), "0")


class DateTimeRenderingTests(unittest.TestCase):
    def test_utc_gets_z_suffix(self) -> None:
        self.assertEqual(datetime_kind(_UTC_VALUE), DateTimeKind.UTC)
        self.assertEqual(format_datetime(_UTC_VALUE), "2024-01-02 03:04:05.678Z")

    def test_local_gets_offset(self) -> None:
        local = _UTC_VALUE.astimezone(timezone(timedelta(hours=5, minutes=30)))
        self.assertEqual(datetime_kind(local), DateTimeKind.LOCAL)
        self.assertEqual(format_datetime(local), "2024-01-02 08:34:05.678+05:30")

    def test_negative_offset(self) -> None:
        local = _UTC_VALUE.astimezone(timezone(timedelta(hours=-8)))
        self.assertEqual(format_datetime(local), "2024-01-01 19:04:05.678-08:00")

    def test_unspecified_has_no_suffix(self) -> None:
        naive = _UTC_VALUE.replace(tzinfo=None)
        self.assertEqual(datetime_kind(naive), DateTimeKind.UNSPECIFIED)
        self.assertEqual(format_datetime(naive), "2024-01-02 03:04:05.678")

    def test_named_zero_offset_zone_is_utc(self) -> None:
        named = _UTC_VALUE.replace(tzinfo=timezone(timedelta(0), "UTC"))
        self.assertEqual(datetime_kind(named), DateTimeKind.UTC)

    def test_unnamed_zero_offset_is_local(self) -> None:
        london = _UTC_VALUE.replace(tzinfo=timezone(timedelta(0), "GMT"))
        self.assertEqual(format_datetime(london), "2024-01-02 03:04:05.678+00:00")


class CsvCellTests(unittest.TestCase):
    def test_scalars(self) -> None:
        cases = [
            (None, ""),
            (42, "42"),
            (Decimal("1.50"), "1.50"),
            (1.5, "1.5"),
            (True, "True"),
            (date(2024, 1, 2), "2024-01-02"),
            (b"\x01\xab", "0x01AB"),
            ("a,b", '"a,b"'),
            (timedelta(hours=2), "2:00:00"),
            (timedelta(days=1, hours=2), '"1 day, 2:00:00"'),
            (_UTC_VALUE, "2024-01-02 03:04:05.678Z"),
        ]
        for value, expected in cases:
            with self.subTest(value=value):
                self.assertEqual(render_csv_cell(value), expected)

    def test_char_array_is_text(self) -> None:
        self.assertEqual(render_csv_cell(["h", "i"]), "hi")
        self.assertEqual(render_csv_cell(["a", ",", "b"]), '"a,b"')

    def test_containers_become_json(self) -> None:
        self.assertEqual(render_csv_cell([1, 2]), '"[1, 2]"')
        self.assertEqual(render_csv_cell({"k": "v"}), '"{""k"": ""v""}"')


class WriteCsvTests(unittest.TestCase):
    def test_header_and_rows(self) -> None:
        raw = FakeCursor(["Name", "Note, extra"], [("alpha", None), ("beta", "x\ny")])
        sink = io.StringIO()
        rows = write_csv(ResultCursor(raw), sink)
        self.assertEqual(rows, 2)
        self.assertEqual(sink.getvalue(), 'Name,"Note, extra"\nalpha,\nbeta,"x\ny"')
        self.assertTrue(raw.closed)

    def test_without_header_has_no_leading_break(self) -> None:
        sink = io.StringIO()
        write_csv(ResultCursor(FakeCursor(["n"], [(1,), (2,)])), sink, include_header=False)
        self.assertEqual(sink.getvalue(), "1\n2")

    def test_header_only_for_empty_result(self) -> None:
        sink = io.StringIO()
        self.assertEqual(write_csv(ResultCursor(FakeCursor(["a", "b"], [])), sink), 0)
        self.assertEqual(sink.getvalue(), "a,b")

    def test_quoted_cell(self) -> None:
        sink = io.StringIO()
        write_csv(
            ResultCursor(FakeCursor(["q"], [('He said "hi", twice',)])), sink, include_header=False
        )
        self.assertEqual(sink.getvalue(), '"He said ""hi"", twice"')

    def test_scalar_text_with_delimiter_keeps_column_count(self) -> None:
        sink = io.StringIO()
        write_csv(
            ResultCursor(FakeCursor(["span", "n"], [(timedelta(days=1, hours=2), 5)])),
            sink,
            include_header=False,
        )
        self.assertEqual(sink.getvalue(), '"1 day, 2:00:00",5')

    def test_non_query_writes_nothing(self) -> None:
        raw = FakeCursor(None, [])
        sink = io.StringIO()
        with self.assertRaises(ShapeViolation) as ctx:
            write_csv(ResultCursor(raw), sink)
        self.assertEqual(ctx.exception.kind, ErrorKind.NO_RESULT_SET)
        self.assertEqual(sink.getvalue(), "")
        self.assertTrue(raw.closed)

    def test_sink_error_propagates_and_closes_cursor(self) -> None:
        class _BrokenSink:
            def write(self, _text: str) -> int:
                raise OSError("disk full")

        raw = FakeCursor(["n"], [(1,)])
        with self.assertRaises(OSError):
            write_csv(ResultCursor(raw), _BrokenSink())
        self.assertTrue(raw.closed)


class WriteToCsvTests(unittest.TestCase):
    def setUp(self) -> None:
        self.conn = sqlite3.connect(":memory:")
        self.conn.execute("CREATE TABLE note (id INTEGER, body TEXT)")
        self.conn.executemany(
            "INSERT INTO note (id, body) VALUES (?, ?)",
            [(1, "plain"), (2, 'He said "hi", twice'), (3, None)],
        )
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self) -> None:
        self.conn.close()
        self.tmpdir.cleanup()

    def test_writes_utf8_file(self) -> None:
        path = os.path.join(self.tmpdir.name, "notes.csv")
        rows = write_to_csv(self.conn, "SELECT id, body FROM note ORDER BY id", path)
        self.assertEqual(rows, 3)
        with open(path, encoding="utf-8", newline="") as fh:
            content = fh.read()
        self.assertEqual(content, 'id,body\n1,plain\n2,"He said ""hi"", twice"\n3,')

    def test_blank_path_rejected(self) -> None:
        for path in ("", "   ", None):
            with self.subTest(path=path):
                with self.assertRaises(PreconditionError) as ctx:
                    write_to_csv(self.conn, "SELECT 1", path)
                self.assertEqual(ctx.exception.kind, ErrorKind.INVALID_OUTPUT_PATH)

    def test_non_query_result(self) -> None:
        path = os.path.join(self.tmpdir.name, "empty.csv")
        with self.assertRaises(ShapeViolation) as ctx:
            write_to_csv(self.conn, "UPDATE note SET body = body", path)
        self.assertEqual(ctx.exception.kind, ErrorKind.NO_RESULT_SET)


class HtmlTests(unittest.TestCase):
    def test_table_with_header(self) -> None:
        raw = FakeCursor(["Name", "Qty"], [("<b>bolt</b>", 3), ("nut", None)])
        html = to_html(ResultCursor(raw))
        self.assertEqual(
            html,
            "\n".join(
                [
                    "<table>",
                    "<tr>",
                    "<th>Name</th>",
                    "<th>Qty</th>",
                    "</tr>",
                    "<tr>",
                    "<td>&lt;b&gt;bolt&lt;/b&gt;</td>",
                    "<td>3</td>",
                    "</tr>",
                    "<tr>",
                    "<td>nut</td>",
                    "<td></td>",
                    "</tr>",
                    "</table>",
                ]
            )
            + "\n",
        )
        self.assertTrue(raw.closed)

    def test_raw_cells_without_header(self) -> None:
        raw = FakeCursor(["x"], [("<i>a</i>",)])
        html = to_html(ResultCursor(raw), include_header=False, html_encode_cells=False)
        self.assertEqual(html, "<table>\n<tr>\n<td><i>a</i></td>\n</tr>\n</table>\n")

    def test_closed_cursor_rejected(self) -> None:
        cursor = ResultCursor(FakeCursor(["x"], []))
        cursor.close()
        with self.assertRaises(RuntimeError):
            to_html(cursor)

    def test_read_html_table_from_sqlite(self) -> None:
        conn = sqlite3.connect(":memory:")
        try:
            html = read_html_table(conn, "SELECT 1 AS one", include_header=False)
        finally:
            conn.close()
        self.assertEqual(html, "<table>\n<tr>\n<td>1</td>\n</tr>\n</table>\n")


if __name__ == "__main__":
    unittest.main()
