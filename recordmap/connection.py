"""Connection handle and registry of named database URLs.

The registry only stores configuration: nothing in recordmap reads a global
"current connection". Callers open a ``Connection`` explicitly and hand it to
queries, records and the migration runner.
"""

import logging
import urllib.parse
from typing import Any, Callable, Optional, Union

from .dialects import Dialect, get_dialect_for_scheme
from .errors import ConstraintViolation
from .utils.serialize import serialize

logger = logging.getLogger("recordmap")

DatabaseURL = Union[str, Callable[[], str]]

_urls: dict[str, DatabaseURL] = {}


def connect(database_url: DatabaseURL, name: str = "default") -> None:
    """Register a database URL (or a callable returning one) under ``name``."""
    _urls[name] = database_url


def get_database_url(name: str = "default") -> str:
    """Return the URL registered under ``name``, calling it first if it is a factory."""
    try:
        url = _urls[name]
    except KeyError as error:
        raise ValueError(f"No connection configured with name=`{name}`") from error
    return url() if callable(url) else url


def open_connection(name: str = "default") -> "Connection":
    """Open a new Connection to the database registered under ``name``."""
    return Connection.from_url(get_database_url(name))


class Connection:
    """One DB-API connection plus the dialect that knows how to talk to it.

    SQL handed to ``execute`` always uses ``?`` placeholders; the dialect
    rewrites them for drivers with another paramstyle.
    """

    def __init__(self, raw: Any, dialect: Dialect):
        self.raw = raw
        self.dialect = dialect
        self.last_row_id: Optional[int] = None
        self.row_count: int = -1
        self.transaction_level = 0

    @classmethod
    def from_url(cls, url: str) -> "Connection":
        """Resolve the dialect from the URL scheme and open a driver connection."""
        scheme = urllib.parse.urlparse(url).scheme
        dialect = get_dialect_for_scheme(scheme)
        return cls(dialect.connect(url), dialect)

    def execute(self, sql: str, parameters=(), rows_as_dicts: bool = False) -> list:
        """Run one statement and return its rows.

        Args:
            sql: Statement with ``?`` placeholders.
            parameters: Bound values, in placeholder order.
            rows_as_dicts: If True, return list of dicts; otherwise list of tuples.

        Returns:
            Fetched rows; ``[]`` for statements without a result set.

        Raises:
            ConstraintViolation: The driver reported an integrity error.
        """
        parameters = tuple(serialize(value) for value in parameters or ())
        logger.debug("%s %s", sql, parameters)
        cursor = self.raw.cursor()
        try:
            try:
                if parameters:
                    cursor.execute(self.dialect.convert_placeholders(sql), parameters)
                else:
                    cursor.execute(sql)
            except self.dialect.integrity_error_types() as error:
                column = self.dialect.constraint_column(error)
                raise ConstraintViolation(str(error), column=column) from error
            rows = cursor.fetchall() if cursor.description is not None else []
            self.last_row_id = cursor.lastrowid
            self.row_count = cursor.rowcount
            if rows_as_dicts and rows:
                names = [description[0] for description in cursor.description]
                return [dict(zip(names, row)) for row in rows]
            return [tuple(row) for row in rows]
        finally:
            cursor.close()

    def commit(self) -> None:
        self.raw.commit()

    def rollback(self) -> None:
        self.raw.rollback()

    def close(self) -> None:
        self.raw.close()

    def transaction(self):
        """Shortcut for ``recordmap.transaction.transaction(self)``."""
        from .transaction import transaction
        return transaction(self)

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is None:
            self.commit()
        else:
            self.rollback()
        self.close()


__all__ = ["Connection", "connect", "get_database_url", "open_connection"]
