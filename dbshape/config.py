"""YAML environment configuration for the `dbshape` command line.

Example `dbshape.config.yml`::

    default_env: local
    environments:
      local:
        driver: sqlite
        connection_string: ./warehouse.db
      reporting:
        driver: postgres
        connection_string: ${REPORTING_DSN}
        timeout_seconds: 30
        log_level: DEBUG
"""

from __future__ import annotations

import os
import pathlib
import typing as t

import yaml

from .core.contracts import DriverPort
from .ports.db_api.drivers import get_driver

DEFAULT_PATH = pathlib.Path("dbshape.config.yml")


class ConfigError(RuntimeError):
    """Raised for any user-visible configuration problem."""


def _expand(raw: t.Any) -> str:
    """Resolve the `${ENV_VAR}` form used for secrets."""

    text = str(raw)
    if text.startswith("${") and text.endswith("}"):
        name = text[2:-1]
        value = os.getenv(name)
        if value is None:
            raise ConfigError(f"Environment variable {name!r} is not set")
        return value
    return text


class Environment:
    """
    Value object holding what is needed to open one database connection.
    Nothing here talks to the database.
    """

    def __init__(self, name: str, d: dict[str, t.Any]) -> None:
        self.name: str = name
        try:
            self.driver_name: str = str(d["driver"])
            self.connection_string: str = _expand(d["connection_string"])
        except KeyError as exc:
            raise ConfigError(f"Environment {name!r} is missing {exc.args[0]!r}") from exc

        timeout = d.get("timeout_seconds", 0)
        if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout < 0:
            raise ConfigError(f"Environment {name!r}: timeout_seconds must be an integer >= 0")
        self.timeout_seconds: int = timeout
        self.log_level: str = str(d.get("log_level", "WARNING")).upper()
        self.connect_options: dict[str, t.Any] = dict(d.get("connect_options") or {})

    def create_driver(self) -> DriverPort:
        try:
            return get_driver(self.driver_name, **self.connect_options)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

    def __repr__(self) -> str:
        return f"Environment(name={self.name!r}, driver={self.driver_name!r})"


def load(path: pathlib.Path | str | None = None, env: str | None = None) -> Environment:
    """
    Parse *path* (or the default YAML) and return an :class:`Environment`.
    """
    cfg_file = pathlib.Path(path) if path else DEFAULT_PATH
    if not cfg_file.exists():
        raise ConfigError(f"Config file {cfg_file} not found.")

    with cfg_file.open(encoding="utf-8") as fh:
        try:
            raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Config file {cfg_file} is not valid YAML: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {cfg_file} must contain a mapping")

    env_name = env or raw.get("default_env")
    if not env_name:
        raise ConfigError("No environment specified and no default_env in config")

    try:
        return Environment(env_name, raw["environments"][env_name])
    except (KeyError, TypeError) as exc:
        raise ConfigError(f"Environment {env_name!r} not found in config") from exc
