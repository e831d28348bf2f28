"""Logging configuration using loguru.

Library modules only emit records through `get_logger()`; sinks are installed
by the application (or the `dbshape` CLI) via `configure_logging()`.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


class _InterceptHandler(logging.Handler):
    """Route standard library logging (DB drivers) through loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore[assignment]
            depth += 1

        logger.bind(name=record.name).opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def configure_logging(
    level: str = "INFO",
    *,
    fmt: str = "console",
    file: str | Path | None = None,
) -> None:
    """
    Configure loguru sinks.

    Console output goes to stderr so CSV or query output on stdout stays
    clean. Standard library logging is intercepted.

    Args:
        level: Minimum level for all sinks.
        fmt: "console" for colored text, "json" for serialized records.
        file: Optional log file path.
    """
    if fmt not in ("console", "json"):
        raise ValueError(f"Unsupported log format: {fmt!r}")

    logger.remove()
    logger.enable("dbshape")
    logger.configure(extra={"name": "dbshape"})

    serialize = fmt == "json"
    line_format = "{message}" if serialize else CONSOLE_FORMAT

    logger.add(
        sys.stderr,
        format=line_format,
        level=level,
        serialize=serialize,
        colorize=not serialize,
    )

    if file:
        logger.add(
            str(file),
            format=line_format,
            level=level,
            serialize=serialize,
        )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)

    logger.debug("Logging configured: level={} format={}", level, fmt)


def get_logger(name: str) -> Any:
    """
    Get a logger bound to a module name.

    Args:
        name: Logger name (typically module name).

    Returns:
        Bound loguru logger.
    """
    return logger.bind(name=name)
