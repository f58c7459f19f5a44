"""Transactions with SAVEPOINT nesting on an explicit Connection.

The core never opens a transaction on its own; hosts (and the migration CLI)
wrap units of work in ``transaction(connection)``.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from .connection import Connection
from .errors import TransactionError

logger = logging.getLogger("recordmap")


class Transaction:
    """Handle yielded by ``transaction()``; only usable at its own nesting level."""

    def __init__(self, connection: Connection, level: int):
        self._connection = connection
        self._level = level
        self._active = True

    @property
    def level(self) -> int:
        return self._level

    @property
    def active(self) -> bool:
        return self._active

    def execute(self, sql, parameters=(), rows_as_dicts: bool = False):
        """Execute a statement within this transaction.

        Raises:
            TransactionError: If the transaction is over, or if a nested
                transaction is currently open on the same connection.
        """
        if not self._active:
            raise TransactionError("Transaction is no longer active")
        current_level = self._connection.transaction_level
        if current_level > self._level:
            raise TransactionError(
                f"Cannot use transaction level {self._level} from level {current_level}. "
                "Higher-level transactions cannot be accessed from nested transactions."
            )
        return self._connection.execute(sql, parameters, rows_as_dicts=rows_as_dicts)


@contextmanager
def transaction(connection: Connection) -> Iterator[Transaction]:
    """Context manager committing on success and rolling back on error.

    The outermost call begins and commits/rolls back the real transaction;
    nested calls use ``SAVEPOINT sp_<level>``.
    """
    level = connection.transaction_level + 1
    savepoint = f"sp_{level}" if level > 1 else None
    if savepoint:
        connection.execute(f"SAVEPOINT {savepoint}")
    else:
        connection.dialect.begin(connection.raw)
    connection.transaction_level = level
    handle = Transaction(connection, level)
    try:
        yield handle
    except BaseException:
        handle._active = False
        connection.transaction_level = level - 1
        if savepoint:
            connection.execute(f"ROLLBACK TO SAVEPOINT {savepoint}")
        else:
            logger.debug("ROLLBACK")
            connection.rollback()
        raise
    handle._active = False
    connection.transaction_level = level - 1
    if savepoint:
        connection.execute(f"RELEASE SAVEPOINT {savepoint}")
    else:
        logger.debug("COMMIT")
        connection.commit()


__all__ = ["Transaction", "transaction"]
