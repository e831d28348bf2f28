"""`GO`-delimited statement batches."""

from __future__ import annotations

import re
from typing import Any, Optional

from ..utils.logging import get_logger
from .commands import execute_non_query, resolve_driver
from .contracts import DriverPort
from .errors import empty_batch
from .transactions import Transaction

logger = get_logger(__name__)

# A separator is a line holding only `GO` (any case) and horizontal whitespace.
_SEPARATOR = re.compile(r"^[ \t]*GO[ \t]*\r?$", re.IGNORECASE | re.MULTILINE)


def split_batch_statements(batch_text: str) -> list[str]:
    """Split a batch on `GO` lines and drop empty or whitespace-only statements.

    `GO` inside a longer line does not split. Statements keep their order and
    are stripped of surrounding whitespace.
    """

    return [
        statement.strip()
        for statement in _SEPARATOR.split(batch_text + "\n")
        if statement.strip()
    ]


def execute_non_query_batch(
    connection: Any,
    batch_text: str,
    *,
    driver: Optional[DriverPort] = None,
    transaction: Optional[Transaction] = None,
    timeout_seconds: int = 0,
) -> int:
    """Run each statement of a batch as a non-query and return total affected rows.

    The first failing statement aborts the batch; its error propagates and no
    partial count is returned.
    """

    if not isinstance(batch_text, str) or not batch_text.strip():
        raise empty_batch()
    statements = split_batch_statements(batch_text)
    if not statements:
        raise empty_batch()

    driver = resolve_driver(connection, driver)
    total = 0
    for number, statement in enumerate(statements, start=1):
        logger.debug("Batch statement {}/{}", number, len(statements))
        total += execute_non_query(
            connection,
            statement,
            driver=driver,
            transaction=transaction,
            timeout_seconds=timeout_seconds,
        )
    return total
