"""
Pooled MySQL and Redis access with dynamically typed result rows.

All statement operations can be called either as:
- Module functions: storepool.select(pool, sql, *args)
- Session methods: pool.select(sql, *args) or tx.select(sql, *args)

The module functions are facades over the session methods.
"""
__version__ = '0.1.0'

from typing import Any

from storepool.connection import ConnectionPool, connect
from storepool.exceptions import ConnectionFailure, DatabaseError
from storepool.exceptions import DbConnectionError, IntegrityError
from storepool.exceptions import NotFoundError, OperationalError
from storepool.exceptions import ProgrammingError, QueryError
from storepool.exceptions import TooManyRowsError, TransactionStateError
from storepool.exceptions import ValidationError
from storepool.keyvalue import KeyValuePool, connect_kv
from storepool.options import DatabaseOptions, RedisOptions
from storepool.row import ExecResult, ResultSet, Row
from storepool.session import Session
from storepool.transaction import Transaction
from storepool.types import Column, TypeFamily, coerce


def select(cn: Session, sql: str, *args: Any) -> ResultSet:
    """Execute a query and return its decoded rows.
    """
    return cn.select(sql, *args)


def select_row(cn: Session, sql: str, *args: Any) -> Row:
    """Execute a query and return a single row.

    Raises NotFoundError on zero rows and TooManyRowsError on several.
    """
    return cn.select_row(sql, *args)


def select_row_or_none(cn: Session, sql: str, *args: Any) -> Row | None:
    """Execute a query and return a single row or None if no rows found.
    """
    return cn.select_row_or_none(sql, *args)


def select_scalar(cn: Session, sql: str, *args: Any) -> Any:
    """Execute a query and return a single scalar value.
    """
    return cn.select_scalar(sql, *args)


def select_column(cn: Session, sql: str, *args: Any) -> list[Any]:
    """Execute a query and return a single column as a list.
    """
    return cn.select_column(sql, *args)


def execute(cn: Session, sql: str, *args: Any) -> ExecResult:
    """Execute a statement and return rows affected and last insert id.
    """
    return cn.execute(sql, *args)


def update(cn: Session, sql: str, *args: Any) -> int:
    """Execute an UPDATE and return the affected row count.
    """
    return cn.update(sql, *args)


def insert(cn: Session, sql: str, *args: Any) -> int:
    """Execute an INSERT and return the generated id.
    """
    return cn.insert(sql, *args)


def delete(cn: Session, sql: str, *args: Any) -> int:
    """Execute a DELETE and return the affected row count.
    """
    return cn.delete(sql, *args)


def begin(cn: ConnectionPool) -> Transaction:
    """Start a transaction on the pool.
    """
    return cn.begin()


__all__ = [
    'connect',
    'connect_kv',
    'ConnectionPool',
    'KeyValuePool',
    'Session',
    'Transaction',
    'DatabaseOptions',
    'RedisOptions',
    'begin',
    'execute',
    'delete',
    'insert',
    'update',
    'select',
    'select_column',
    'select_row',
    'select_row_or_none',
    'select_scalar',
    'Column',
    'TypeFamily',
    'coerce',
    'Row',
    'ResultSet',
    'ExecResult',
    'IntegrityError',
    'ProgrammingError',
    'OperationalError',
    'DbConnectionError',
    'ConnectionFailure',
    'ValidationError',
    'NotFoundError',
    'TooManyRowsError',
    'TransactionStateError',
    'DatabaseError',
    'QueryError',
]
