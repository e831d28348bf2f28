"""Single value / single row / single column reads with dbshape."""

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

from dbshape import Database, DbType, SQLiteDriver


def main() -> None:
    # 1) Wrap an open DB-API connection with its driver.
    conn = sqlite3.connect(":memory:")
    db = Database(conn, SQLiteDriver())

    try:
        db.execute_non_query(
            "CREATE TABLE product (id INTEGER PRIMARY KEY, name TEXT, price REAL)"
        )

        # 2) Parameters are named with '@' and bound by the name without it.
        for product_id, name, price in [(1, "Widget", 2.5), (2, "Gadget", None)]:
            db.execute_non_query(
                "INSERT INTO product (id, name, price) VALUES (:id, :name, :price)",
                [
                    db.parameter("@id", product_id, DbType.INT32),
                    db.parameter("@name", name, DbType.STRING),
                    db.parameter("@price", price, DbType.DOUBLE),
                ],
            )

        # 3) Exactly one cell.
        print("Product count:", db.read_single_value("SELECT count(*) FROM product"))

        # 4) Exactly one row, keyed by lower-cased column name.
        print("Row:", db.read_single_row("SELECT id AS Id, name AS Name, price FROM product WHERE id = 2"))

        # 5) Every value of one column.
        print("Names:", db.read_single_column("SELECT name FROM product ORDER BY id"))
    finally:
        conn.close()


if __name__ == "__main__":
    main()
