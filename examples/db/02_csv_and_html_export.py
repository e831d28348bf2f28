"""CSV and HTML export of query results."""

from __future__ import annotations

import io
import sqlite3
import sys
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "dbshape").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dbshape import Database, SQLiteDriver, render_csv_cell, write_csv


def main() -> None:
    conn = sqlite3.connect(":memory:")
    db = Database(conn, SQLiteDriver())

    try:
        db.execute_non_query_batch(
            """
            CREATE TABLE note (id INTEGER, body TEXT)
            GO
            INSERT INTO note VALUES (1, 'plain'), (2, 'He said "hi", twice'), (3, NULL)
            """
        )

        # 1) Stream CSV into any text sink.
        sink = io.StringIO()
        rows = write_csv(db.execute_reader("SELECT id, body FROM note ORDER BY id"), sink)
        print(f"{rows} rows:\n{sink.getvalue()}\n")

        # 2) Or straight to a UTF-8 file.
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "notes.csv"
            db.write_to_csv("SELECT id, body FROM note ORDER BY id", path, include_header=False)
            print("File:", path.read_text(encoding="utf-8").splitlines())

        # 3) Date-times render by their zone association.
        instant = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)
        print("UTC:        ", render_csv_cell(instant))
        print("Offset:     ", render_csv_cell(instant.astimezone(timezone(timedelta(hours=2)))))
        print("Unspecified:", render_csv_cell(instant.replace(tzinfo=None)))

        # 4) HTML table with encoded cells.
        print(db.to_html("SELECT id, body FROM note ORDER BY id"))
    finally:
        conn.close()


if __name__ == "__main__":
    main()
