"""
Storepool exception classes and driver exception groups.
"""
import pymysql
import redis


class DatabaseError(Exception):
    """Base class for all storepool errors.
    """


class ConnectionFailure(DatabaseError):
    """Store unreachable, pool exhausted or pool closed.
    """


class QueryError(DatabaseError):
    """Error in query syntax or execution.
    """


class ValidationError(DatabaseError):
    """Error in input validation or result cardinality.
    """


class NotFoundError(ValidationError):
    """A single-row query returned no rows.
    """


class TooManyRowsError(ValidationError):
    """A single-row query returned more than one row.
    """


class TransactionStateError(DatabaseError):
    """Transaction operation not valid in the current state.
    """


DbConnectionError = (
    pymysql.err.OperationalError,
    pymysql.err.InterfaceError,
    redis.exceptions.ConnectionError,
    redis.exceptions.TimeoutError,
    ConnectionFailure,
    )

IntegrityError = (
    pymysql.err.IntegrityError,
    )

ProgrammingError = (
    pymysql.err.ProgrammingError,
    pymysql.err.DataError,
    QueryError,
    )

OperationalError = (
    pymysql.err.OperationalError,
    redis.exceptions.ResponseError,
    )
