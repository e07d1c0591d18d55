"""
Statement surface shared by pool-direct and transaction sessions.

Subclasses decide which connection a statement runs on by implementing
``_connection()``; everything else (argument handling, decoding, result
shapes, cardinality checks) lives here.
"""
import logging
from contextlib import closing
from typing import Any

from storepool.cursor import decode_rows, dumpsql
from storepool.exceptions import NotFoundError, TooManyRowsError
from storepool.row import ExecResult, ResultSet, Row
from storepool.types import TYPE_FAMILIES, TypeFamily

logger = logging.getLogger(__name__)


def _params(args: tuple) -> Any:
    """Parameter set for ``cursor.execute``.

    A single list, tuple or dict argument is used as the parameter set
    itself; no arguments means no interpolation.
    """
    if not args:
        return None
    if len(args) == 1 and isinstance(args[0], (list, tuple, dict)):
        return args[0]
    return args


class Session:
    """Base class for objects that issue statements against the store.
    """

    manual_commit = False

    def __init__(self) -> None:
        self.calls = 0
        self.time = 0.0

    @property
    def families(self) -> dict[str, TypeFamily]:
        """Type family table used to decode result columns.
        """
        return TYPE_FAMILIES

    @property
    def null_as_zero(self) -> bool:
        """Decode SQL NULL as the column family's zero value instead of None.
        """
        return False

    def _connection(self):
        """Context manager yielding the pooled connection for one statement.
        """
        raise NotImplementedError

    def addcall(self, elapsed: float) -> None:
        """Track execution statistics
        """
        self.time += elapsed
        self.calls += 1

    @dumpsql
    def select(self, sql: str, *args: Any) -> ResultSet:
        """Execute a query and return its decoded rows.
        """
        with self._connection() as cn, closing(cn.cursor()) as cursor:
            cursor.execute(sql, _params(args))
            return decode_rows(cursor, families=self.families,
                               null_as_zero=self.null_as_zero)

    @dumpsql
    def execute(self, sql: str, *args: Any) -> ExecResult:
        """Execute a mutating statement and return its outcome.
        """
        with self._connection() as cn, closing(cn.cursor()) as cursor:
            cursor.execute(sql, _params(args))
            result = ExecResult(rows_affected=cursor.rowcount,
                                last_insert_id=cursor.lastrowid or 0)
        logger.debug(f'Statement affected {result.rows_affected} rows')
        return result

    def update(self, sql: str, *args: Any) -> int:
        """Execute an UPDATE and return the affected row count.
        """
        return self.execute(sql, *args).rows_affected

    def insert(self, sql: str, *args: Any) -> int:
        """Execute an INSERT and return the generated id.
        """
        return self.execute(sql, *args).last_insert_id

    def delete(self, sql: str, *args: Any) -> int:
        """Execute a DELETE and return the affected row count.
        """
        return self.execute(sql, *args).rows_affected

    def select_row(self, sql: str, *args: Any) -> Row:
        """Execute a query and return its only row.

        Raises NotFoundError on zero rows and TooManyRowsError on several.
        """
        data = self.select(sql, *args)
        if not data:
            raise NotFoundError('Expected one row, got 0')
        if len(data) > 1:
            raise TooManyRowsError(f'Expected one row, got {len(data)}')
        return data[0]

    def select_row_or_none(self, sql: str, *args: Any) -> Row | None:
        """Execute a query and return its only row, or None if there is none.
        """
        try:
            return self.select_row(sql, *args)
        except NotFoundError:
            return None

    def select_scalar(self, sql: str, *args: Any) -> Any:
        """Execute a query and return the first value of its only row.
        """
        row = self.select_row(sql, *args)
        return next(iter(row.values()))

    def select_column(self, sql: str, *args: Any) -> list[Any]:
        """Execute a query and return its first column as a list.
        """
        return [next(iter(row.values())) for row in self.select(sql, *args)]
