from __future__ import annotations

import sqlite3
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from dbshape import __version__
from dbshape.cli import main


@patch("dbshape.cli.configure_logging")
class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self.runner = CliRunner()
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.tmp = Path(self.tmpdir.name)
        self.db_path = str(self.tmp / "cli.db")
        conn = sqlite3.connect(self.db_path)
        conn.execute("CREATE TABLE item (id INTEGER, name TEXT)")
        conn.executemany("INSERT INTO item VALUES (?, ?)", [(1, "bolt"), (2, None)])
        conn.commit()
        conn.close()

    def _invoke(self, *args: str):  # noqa: ANN202
        return self.runner.invoke(main, ["--driver", "sqlite", "--connection", self.db_path, *args])

    def test_version(self, _logging: MagicMock) -> None:
        result = self.runner.invoke(main, ["--version"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn(__version__, result.output)

    def test_scalar(self, _logging: MagicMock) -> None:
        result = self._invoke("scalar", "SELECT count(*) FROM item")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.stdout, "2\n")

    def test_scalar_with_parameter(self, _logging: MagicMock) -> None:
        result = self._invoke("scalar", "SELECT id FROM item WHERE name = :name", "-p", "@name=bolt")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.stdout, "1\n")

    def test_row_prints_null(self, _logging: MagicMock) -> None:
        result = self._invoke("row", "SELECT id AS Id, name FROM item WHERE id = 2")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.stdout, "id: 2\nname: NULL\n")

    def test_column(self, _logging: MagicMock) -> None:
        result = self._invoke("column", "SELECT id FROM item ORDER BY id")
        self.assertEqual(result.stdout, "1\n2\n")

    def test_shape_error_exit_code(self, _logging: MagicMock) -> None:
        result = self._invoke("scalar", "SELECT id FROM item")
        self.assertEqual(result.exit_code, 2)
        self.assertIn("Error [MultipleRows]", result.output)

    def test_sql_from_file(self, _logging: MagicMock) -> None:
        sql_file = self.tmp / "q.sql"
        sql_file.write_text("SELECT max(id) FROM item", encoding="utf-8")
        result = self._invoke("scalar", "-f", str(sql_file))
        self.assertEqual(result.stdout, "2\n")

    def test_export_csv_to_stdout(self, _logging: MagicMock) -> None:
        result = self._invoke("export-csv", "SELECT id, name FROM item ORDER BY id")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.stdout, "id,name\n1,bolt\n2,\n")

    def test_export_csv_to_file(self, _logging: MagicMock) -> None:
        out = self.tmp / "items.csv"
        result = self._invoke("export-csv", "SELECT id FROM item ORDER BY id", "-o", str(out), "--no-header")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(out.read_text(encoding="utf-8"), "1\n2")
        self.assertIn("Wrote 2 rows", result.output)

    def test_run_batch(self, _logging: MagicMock) -> None:
        batch = self.tmp / "batch.sql"
        batch.write_text(
            "INSERT INTO item VALUES (3, 'nut')\nGO\nDELETE FROM item WHERE id = 1\n",
            encoding="utf-8",
        )
        result = self._invoke("run-batch", str(batch))
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.stdout, "2 rows affected\n")
        conn = sqlite3.connect(self.db_path)
        try:
            self.assertEqual(conn.execute("SELECT count(*) FROM item").fetchone()[0], 2)
        finally:
            conn.close()

    def test_failing_batch_is_rolled_back(self, _logging: MagicMock) -> None:
        batch = self.tmp / "batch.sql"
        batch.write_text("INSERT INTO item VALUES (3, 'nut')\nGO\nINSERT INTO nowhere VALUES (1)\n", encoding="utf-8")
        result = self._invoke("run-batch", str(batch))
        self.assertEqual(result.exit_code, 2)
        self.assertIn("Error [ExecutionFault]", result.output)
        conn = sqlite3.connect(self.db_path)
        try:
            self.assertEqual(conn.execute("SELECT count(*) FROM item").fetchone()[0], 2)
        finally:
            conn.close()

    def test_split(self, _logging: MagicMock) -> None:
        batch = self.tmp / "batch.sql"
        batch.write_text("SELECT 1\nGO\nSELECT 2\n", encoding="utf-8")
        result = self.runner.invoke(main, ["split", str(batch)])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.stdout, "-- statement 1\nSELECT 1\n-- statement 2\nSELECT 2\n")

    def test_config_file_environment(self, logging_mock: MagicMock) -> None:
        config = self.tmp / "dbshape.config.yml"
        config.write_text(
            "default_env: local\n"
            "environments:\n"
            "  local:\n"
            "    driver: sqlite\n"
            f"    connection_string: {self.db_path}\n"
            "    log_level: info\n",
            encoding="utf-8",
        )
        result = self.runner.invoke(main, ["-c", str(config), "scalar", "SELECT 1"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.stdout, "1\n")
        logging_mock.assert_called_once_with("INFO")

    def test_missing_config(self, _logging: MagicMock) -> None:
        result = self.runner.invoke(main, ["-c", str(self.tmp / "absent.yml"), "scalar", "SELECT 1"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Config error", result.output)

    def test_driver_and_connection_required_together(self, _logging: MagicMock) -> None:
        for args in (["--driver", "sqlite"], ["--connection", self.db_path]):
            with self.subTest(args=args):
                result = self.runner.invoke(main, [*args, "scalar", "SELECT 1"])
                self.assertEqual(result.exit_code, 2)
                self.assertIn("--driver and --connection must be given together", result.output)

    def test_bad_parameter_syntax(self, _logging: MagicMock) -> None:
        result = self._invoke("scalar", "SELECT 1", "-p", "@name")
        self.assertNotEqual(result.exit_code, 0)

    def test_invalid_parameter_name(self, _logging: MagicMock) -> None:
        result = self._invoke("scalar", "SELECT :name", "-p", "name=x")
        self.assertEqual(result.exit_code, 2)
        self.assertIn("Error [InvalidParameterName]", result.output)


if __name__ == "__main__":
    unittest.main()
