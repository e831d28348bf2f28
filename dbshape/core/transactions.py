"""Transaction handle bound to one DB-API connection."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from ..utils.logging import get_logger
from .contracts import DriverPort
from .errors import DbShapeError, execution_fault, invalid_connection_state, invalid_transaction
from .resources import release_quietly

logger = get_logger(__name__)


class TransactionState(str, Enum):
    ACTIVE = "active"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class Transaction:
    """Commit/rollback scope over one connection.

    `connection` is `None` once the transaction reached a terminal state, so a
    finished transaction can never be attached to a command.
    """

    def __init__(self, connection: Any, driver: DriverPort):
        self._connection: Any | None = connection
        self.driver = driver
        self.state = TransactionState.ACTIVE

    @property
    def connection(self) -> Any | None:
        if self.state is not TransactionState.ACTIVE:
            return None
        return self._connection

    @property
    def is_active(self) -> bool:
        return self.state is TransactionState.ACTIVE

    def _require_active(self) -> Any:
        conn = self.connection
        if conn is None:
            raise invalid_transaction(
                f"transaction has already been {self.state.value.replace('_', ' ')}"
            )
        return conn

    def commit(self) -> None:
        conn = self._require_active()
        conn.commit()
        self.state = TransactionState.COMMITTED
        self._connection = None
        logger.debug("Transaction committed on {}", self.driver.name)

    def rollback(self) -> None:
        conn = self._require_active()
        conn.rollback()
        self.state = TransactionState.ROLLED_BACK
        self._connection = None
        logger.debug("Transaction rolled back on {}", self.driver.name)

    def __enter__(self) -> Transaction:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if not self.is_active:
            return
        if exc_type is None:
            self.commit()
            return
        release_quietly(self.rollback, self)

    def __repr__(self) -> str:
        return f"Transaction(driver={self.driver.name!r}, state={self.state.value!r})"


def begin_transaction(connection: Any, driver: DriverPort) -> Transaction:
    """Start a transaction on an open connection."""

    if connection is None:
        raise invalid_connection_state("absent")
    if not driver.is_open(connection):
        raise invalid_connection_state(driver.connection_state(connection))
    driver.begin(connection)
    return Transaction(connection, driver)


def rollback_transaction(transaction: Optional[Transaction]) -> None:
    """Roll back `transaction`, refusing one that already finished.

    Driver failures during rollback are reported as `ExecutionFault`.
    """

    if transaction is None:
        raise invalid_transaction("transaction is absent")
    if transaction.connection is None:
        raise invalid_transaction(
            "could not roll back because the transaction has already been "
            "committed or rolled back"
        )
    try:
        transaction.rollback()
    except DbShapeError:
        raise
    except Exception as exc:
        raise execution_fault("ROLLBACK", transaction.driver.name, exc) from exc
