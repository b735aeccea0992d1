# ABOUTME: Transaction guard wrapping every mutating store operation.
# ABOUTME: Begins explicitly, commits or rolls back, and restores the connection's isolation level.

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from types import TracebackType

from bookshelf.db.errors import BookshelfError, DuplicateKeyError, StorageError

logger = logging.getLogger(__name__)


class TxState(Enum):
    """Lifecycle of a single guarded transaction."""

    IDLE = "idle"
    TX_STARTED = "tx_started"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    ISOLATION_RESTORED = "isolation_restored"


def translate_driver_error(exc: sqlite3.Error, operation: str, entity: str) -> BookshelfError:
    """Map a sqlite3 exception to the library's error taxonomy.

    Unique-constraint violations become DuplicateKeyError; anything else is a
    StorageError carrying the operation and entity names.
    """
    message = str(exc)
    if isinstance(exc, sqlite3.IntegrityError) and "UNIQUE constraint failed" in message:
        return DuplicateKeyError(
            f"Duplicate {entity} rejected by the store during {operation}: {message}"
        )
    return StorageError(operation, entity, message)


@contextmanager
def reading(operation: str, entity: str) -> Iterator[None]:
    """Wrap driver failures on a read path without opening a transaction."""
    try:
        yield
    except sqlite3.Error as exc:
        logger.error("Error during %s of %s: %s", operation, entity, exc)
        raise StorageError(operation, entity, str(exc)) from exc


class TransactionGuard:
    """Context manager running a block inside one explicit transaction.

    On entry the connection's ``isolation_level`` is captured and the
    connection is switched to manual control before ``BEGIN`` is issued. The
    block's success commits; any exception rolls back. The original
    isolation level is restored on every exit path, and a failure to restore
    it is logged rather than raised.

    sqlite3 exceptions escaping the block (or the commit) are re-raised as
    library errors via ``translate_driver_error``. Library errors and
    unexpected exceptions propagate unchanged after the rollback.

    Usage::

        with TransactionGuard(conn, "insert", "book") as tx:
            cursor = tx.execute("INSERT INTO book ...", params)
    """

    def __init__(self, conn: sqlite3.Connection, operation: str, entity: str) -> None:
        self._conn = conn
        self.operation = operation
        self.entity = entity
        self.state = TxState.IDLE
        self.outcome: TxState | None = None
        self._original_isolation: str | None = None

    def __enter__(self) -> "TransactionGuard":
        try:
            self._original_isolation = self._conn.isolation_level
        except sqlite3.Error as exc:
            raise translate_driver_error(exc, self.operation, self.entity) from exc
        try:
            self._conn.isolation_level = None
            self._conn.execute("BEGIN")
        except sqlite3.Error as exc:
            logger.error("Could not begin %s of %s: %s", self.operation, self.entity, exc)
            self._restore()
            raise translate_driver_error(exc, self.operation, self.entity) from exc
        self.state = TxState.TX_STARTED
        logger.debug("Transaction started for %s of %s", self.operation, self.entity)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        try:
            if exc is None:
                self._commit()
                return False

            self._rollback()
            if isinstance(exc, sqlite3.Error):
                logger.error("Error during %s of %s: %s", self.operation, self.entity, exc)
                raise translate_driver_error(exc, self.operation, self.entity) from exc
            return False
        finally:
            self._restore()

    def execute(self, sql: str, params: tuple | list = ()) -> sqlite3.Cursor:
        """Execute a statement inside the open transaction."""
        if self.state is not TxState.TX_STARTED:
            raise RuntimeError(f"Transaction for {self.operation} of {self.entity} is not open")
        logger.debug("Executing SQL: %s", sql)
        return self._conn.execute(sql, params)

    def _commit(self) -> None:
        try:
            self._conn.commit()
        except sqlite3.Error as exc:
            logger.error("Commit failed for %s of %s: %s", self.operation, self.entity, exc)
            self._rollback()
            raise translate_driver_error(exc, self.operation, self.entity) from exc
        self.state = self.outcome = TxState.COMMITTED

    def _rollback(self) -> None:
        if self.state is not TxState.TX_STARTED:
            logger.debug("Skipping rollback - transaction was not started")
            return
        try:
            self._conn.rollback()
        except sqlite3.Error as exc:
            # The original failure stays the one the caller sees.
            logger.error(
                "Error during transaction rollback for %s of %s: %s",
                self.operation,
                self.entity,
                exc,
            )
        else:
            logger.info("Transaction rolled back for %s of %s", self.operation, self.entity)
        self.state = self.outcome = TxState.ROLLED_BACK

    def _restore(self) -> None:
        try:
            self._conn.isolation_level = self._original_isolation
        except sqlite3.Error as exc:
            logger.warning(
                "Failed to restore isolation level after %s of %s: %s",
                self.operation,
                self.entity,
                exc,
            )
            return
        if self.state is not TxState.IDLE:
            self.state = TxState.ISOLATION_RESTORED
