"""`dbshape` command line.

Runs shaped queries, CSV exports, and `GO`-delimited batches against a
database described by `--driver/--connection` or a YAML environment file.
"""

from __future__ import annotations

import io
import pathlib
import sys
import typing as t

import click

from . import __version__
from .config import ConfigError, Environment, load
from .core.batch import execute_non_query_batch, split_batch_statements
from .core.csv_export import write_csv
from .core.errors import DbShapeError
from .core.parameters import DbType, Parameter
from .core.rendering import render_scalar
from .ports.db_api.database import Database
from .utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def _resolve_env(ctx: click.Context) -> Environment:
    obj = ctx.obj
    if bool(obj.get("driver")) != bool(obj.get("connection")):
        raise click.UsageError("--driver and --connection must be given together.", ctx=ctx)
    if obj.get("driver"):
        return Environment(
            "cli",
            {
                "driver": obj["driver"],
                "connection_string": obj["connection"],
                "timeout_seconds": obj.get("timeout") or 0,
            },
        )
    try:
        env = load(obj.get("config_path"), obj.get("env"))
    except ConfigError as exc:
        click.echo(f"Config error: {exc}", err=True)
        sys.exit(1)
    if obj.get("timeout") is not None:
        env.timeout_seconds = obj["timeout"]
    return env


def _parse_params(driver_name: str, raw: t.Sequence[str]) -> list[Parameter]:
    params = []
    for item in raw:
        name, sep, value = item.partition("=")
        if not sep:
            raise click.BadParameter(f"expected @name=value, got {item!r}", param_hint="--param")
        params.append(
            Parameter(name=name.strip(), value=value, db_type=DbType.STRING, provider=driver_name)
        )
    return params


def _read_sql(sql: str | None, sql_file: pathlib.Path | None) -> str:
    if sql_file is not None:
        return sql_file.read_text(encoding="utf-8")
    if sql is None:
        raise click.UsageError("Provide SQL text or --file.")
    return sql


def _format(value: t.Any) -> str:
    return "NULL" if value is None else render_scalar(value)


def _run(ctx: click.Context, action: t.Callable[[Database, Environment], None]) -> None:
    env = _resolve_env(ctx)
    if ctx.obj.get("log_level") is None:
        configure_logging(env.log_level)
    try:
        with Database.connect(env.create_driver(), env.connection_string) as db:
            action(db, env)
            db.conn.commit()
    except (ConfigError, ImportError) as exc:
        click.echo(f"Config error: {exc}", err=True)
        sys.exit(1)
    except DbShapeError as exc:
        logger.debug("Command failed in env {}: {}", env.name, exc.kind.value)
        click.echo(f"Error [{exc.kind.value}]: {exc}", err=True)
        sys.exit(2)


def _query_opts(fn: t.Callable[..., t.Any]) -> t.Callable[..., t.Any]:
    opts = [
        click.argument("sql", required=False),
        click.option(
            "-f", "--file", "sql_file",
            type=click.Path(exists=True, dir_okay=False, path_type=pathlib.Path),
            help="Read the command text from a file.",
        ),
        click.option(
            "-p", "--param", "params", multiple=True,
            help="Parameter as @name=value (bound as text). Repeatable.",
        ),
    ]
    for opt in reversed(opts):
        fn = opt(fn)
    return fn


@click.group()
@click.version_option(version=__version__)
@click.option("-c", "--config", "config_path", type=click.Path(path_type=pathlib.Path), help="Environment config YAML.")
@click.option("-e", "--env", help="Environment name from the config file.")
@click.option("--driver", help="Driver name (sqlite, postgres, mysql); overrides the config.")
@click.option("--connection", help="Connection string; used together with --driver.")
@click.option("--timeout", type=click.IntRange(min=0), help="Command timeout in seconds.")
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False))
@click.pass_context
def main(ctx, config_path, env, driver, connection, timeout, log_level):
    """Run shaped queries, CSV exports, and statement batches."""
    ctx.obj = {
        "config_path": config_path,
        "env": env,
        "driver": driver,
        "connection": connection,
        "timeout": timeout,
        "log_level": log_level,
    }
    if log_level:
        configure_logging(log_level.upper())


@main.command()
@_query_opts
@click.pass_context
def scalar(ctx, sql, sql_file, params):
    """Print the single value of a one-row, one-column query."""
    text = _read_sql(sql, sql_file)

    def action(db: Database, env: Environment) -> None:
        value = db.read_single_value(
            text, _parse_params(db.driver.name, params), timeout_seconds=env.timeout_seconds
        )
        click.echo(_format(value))

    _run(ctx, action)


@main.command()
@_query_opts
@click.pass_context
def row(ctx, sql, sql_file, params):
    """Print the single row of a query as name: value lines."""
    text = _read_sql(sql, sql_file)

    def action(db: Database, env: Environment) -> None:
        result = db.read_single_row(
            text, _parse_params(db.driver.name, params), timeout_seconds=env.timeout_seconds
        )
        for name, value in result.items():
            click.echo(f"{name}: {_format(value)}")

    _run(ctx, action)


@main.command()
@_query_opts
@click.pass_context
def column(ctx, sql, sql_file, params):
    """Print every value of a one-column query, one per line."""
    text = _read_sql(sql, sql_file)

    def action(db: Database, env: Environment) -> None:
        values = db.read_single_column(
            text, _parse_params(db.driver.name, params), timeout_seconds=env.timeout_seconds
        )
        for value in values:
            click.echo(_format(value))

    _run(ctx, action)


@main.command("export-csv")
@_query_opts
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=pathlib.Path), help="Output file; stdout when omitted.")
@click.option("--no-header", is_flag=True, help="Omit the column-name line.")
@click.pass_context
def export_csv(ctx, sql, sql_file, params, output, no_header):
    """Export a query result as CSV."""
    text = _read_sql(sql, sql_file)

    def action(db: Database, env: Environment) -> None:
        bound = _parse_params(db.driver.name, params)
        if output is not None:
            rows = db.write_to_csv(
                text, output, not no_header, bound, timeout_seconds=env.timeout_seconds
            )
            click.echo(f"Wrote {rows} rows to {output}", err=True)
            return
        cursor = db.execute_reader(text, bound, timeout_seconds=env.timeout_seconds)
        buffer = io.StringIO()
        write_csv(cursor, buffer, not no_header)
        click.echo(buffer.getvalue())

    _run(ctx, action)


@main.command("run-batch")
@click.argument("batch_file", type=click.Path(exists=True, dir_okay=False, path_type=pathlib.Path))
@click.pass_context
def run_batch(ctx, batch_file):
    """Run a GO-delimited batch file inside one transaction."""
    text = batch_file.read_text(encoding="utf-8")

    def action(db: Database, env: Environment) -> None:
        with db.transaction() as tx:
            total = execute_non_query_batch(
                db.conn,
                text,
                driver=db.driver,
                transaction=tx,
                timeout_seconds=env.timeout_seconds,
            )
        click.echo(f"{total} rows affected")

    _run(ctx, action)


@main.command()
@click.argument("batch_file", type=click.Path(exists=True, dir_okay=False, path_type=pathlib.Path))
def split(batch_file):
    """Print the statements of a GO-delimited batch file."""
    statements = split_batch_statements(batch_file.read_text(encoding="utf-8"))
    for number, statement in enumerate(statements, start=1):
        click.echo(f"-- statement {number}")
        click.echo(statement)


if __name__ == "__main__":
    main()
