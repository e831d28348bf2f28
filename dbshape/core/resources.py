"""Scoped release of native resources (cursors, commands, connections)."""

from __future__ import annotations

import contextlib
from typing import Any, Callable, Iterator

from ..utils.logging import get_logger

logger = get_logger(__name__)


@contextlib.contextmanager
def releasing(resource: Any, release: Callable[[], None] | None = None) -> Iterator[Any]:
    """Yield `resource` and release it on every exit path.

    When the body raised, a failing release is logged and the original error
    propagates. When the body succeeded, a failing release propagates.
    """

    close = release if release is not None else resource.close
    try:
        yield resource
    except BaseException:
        release_quietly(close, resource)
        raise
    close()


def release_quietly(close: Callable[[], None], resource: Any = None) -> None:
    """Run `close` while another error is in flight; never raise from it."""

    try:
        close()
    except Exception as exc:
        logger.warning(
            "Releasing {} failed while handling another error: {!r}",
            type(resource).__name__ if resource is not None else "resource",
            exc,
        )
