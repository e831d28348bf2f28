"""GO-delimited batches, transactions, and the error taxonomy."""

from __future__ import annotations

import sqlite3
import sys
from pathlib import Path

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "dbshape").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dbshape import Database, DbShapeError, SQLiteDriver, attempt, split_batch_statements

BATCH = """
CREATE TABLE account (id INTEGER, balance INTEGER)
GO
INSERT INTO account VALUES (1, 100), (2, 50)
go
UPDATE account SET balance = balance - 10 WHERE id = 1
"""


def expect_error(label: str, fn) -> None:  # noqa: ANN001
    try:
        fn()
    except DbShapeError as exc:
        print(f"[OK] {label}: {exc.kind.value}: {exc}")
    else:
        print(f"[UNEXPECTED] {label}: no exception raised")


def main() -> None:
    conn = sqlite3.connect(":memory:")
    db = Database(conn, SQLiteDriver())

    try:
        # 1) Splitting is pure text work.
        for number, statement in enumerate(split_batch_statements(BATCH), start=1):
            print(f"-- statement {number}: {statement}")

        # 2) Run the batch inside one transaction.
        with db.transaction() as tx:
            print("Rows affected:", db.execute_non_query_batch(BATCH, transaction=tx))

        # 3) Precondition and shape failures carry a kind and detail.
        expect_error("blank command", lambda: db.read_single_value("   "))
        expect_error("negative timeout", lambda: db.read_single_value("SELECT 1", timeout_seconds=-1))
        expect_error("finished transaction", lambda: db.execute_non_query("SELECT 1", transaction=tx))
        expect_error("two rows", lambda: db.read_single_value("SELECT id FROM account"))
        expect_error("duplicate column", lambda: db.read_single_row("SELECT 1 AS Id, 2 AS id"))
        expect_error("empty batch", lambda: db.execute_non_query_batch("GO\nGO"))

        # 4) Or receive failures as values.
        outcome = attempt(db.read_single_value, "SELECT balance FROM account WHERE id = 3")
        print("Outcome:", outcome.ok, getattr(outcome, "kind", None))
    finally:
        conn.close()


if __name__ == "__main__":
    main()
