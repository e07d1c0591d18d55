"""
Row decoding for DB-API cursors.

Turns an executed cursor of unknown shape into a ResultSet of Rows, using
the column type tags from ``cursor.description`` to coerce every cell.
"""
import logging
import time
from collections.abc import Iterator
from functools import wraps
from typing import Any

from storepool.row import ResultSet, Row
from storepool.types import TYPE_FAMILIES, Column, TypeFamily, coerce

logger = logging.getLogger(__name__)


def dumpsql(func):
    """Decorator for logging SQL statements, arguments and timing."""
    @wraps(func)
    def wrapper(self, sql: str, *args: Any, **kwargs: Any):
        start = time.time()
        logger.debug(f'SQL:\n{sql}\nargs: {args}')
        try:
            return func(self, sql, *args, **kwargs)
        except Exception:
            logger.error(f'Error with query:\nSQL:\n{sql}\nargs: {args}')
            raise
        finally:
            elapsed = time.time() - start
            self.addcall(elapsed)
            logger.debug(f'Query time: {elapsed:.4f}s')
    return wrapper


def describe_columns(cursor: Any) -> list[Column]:
    """Column metadata for the cursor's current result set.
    """
    if cursor.description is None:
        return []
    return [Column.from_description(entry) for entry in cursor.description]


def iter_chunks(cursor: Any, size: int = 5000) -> Iterator[tuple]:
    """Iterate through cursor results fetched in chunks."""
    while True:
        chunk = cursor.fetchmany(size)
        if not chunk:
            break
        yield from chunk


def decode_rows(cursor: Any, columns: list[Column] | None = None,
                families: dict[str, TypeFamily] = TYPE_FAMILIES,
                size: int = 5000, null_as_zero: bool = False) -> ResultSet:
    """Drain an executed cursor into a ResultSet, closing the cursor.

    Any error raised while fetching propagates and the rows decoded so far
    are dropped.
    """
    try:
        if columns is None:
            columns = describe_columns(cursor)
        if not columns:
            return ResultSet()
        names = Column.get_names(columns)
        tags = [c.type_tag for c in columns]
        rows = [
            Row(zip(names, (coerce(raw, tag, families, null_as_zero) for raw, tag in zip(values, tags))))
            for values in iter_chunks(cursor, size)
        ]
        logger.debug(f'Decoded {len(rows)} rows with {len(columns)} columns')
        return ResultSet(rows, columns)
    finally:
        cursor.close()
