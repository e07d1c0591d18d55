"""
Explicit transactions on a pooled connection.
"""
import logging
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from storepool.exceptions import TransactionStateError
from storepool.session import Session
from storepool.types import TypeFamily

if TYPE_CHECKING:
    from sqlalchemy.pool import PoolProxiedConnection
    from storepool.connection import ConnectionPool

logger = logging.getLogger(__name__)


class Transaction(Session):
    """One open transaction bound to a single pooled connection.

    Created by ``ConnectionPool.begin()``. ``commit()`` and ``rollback()``
    end it and hand the connection back to the pool; after that every call
    raises TransactionStateError. Statements run one at a time, in the order
    they are issued.

    Used as a context manager it commits on normal exit and rolls back when
    the block raises.

    Examples
        with pool.begin() as tx:
            tx.execute('delete from ...', args)
            tx.update('update ...', args)
    """

    def __init__(self, pool: 'ConnectionPool', connection: 'PoolProxiedConnection') -> None:
        super().__init__()
        self.pool = pool
        self.connection = connection
        self.manual_commit = True
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        state = 'active' if self.manual_commit else 'closed'
        return f'<Transaction {id(self):#x} {state}>'

    def __enter__(self):
        return self

    def __exit__(self, exc_type: type | None, value: Exception | None, traceback: Any | None) -> None:
        if not self.manual_commit:
            return
        if exc_type is not None:
            logger.warning('Rolling back the current transaction')
            self.rollback()
        else:
            self.commit()

    @property
    def families(self) -> dict[str, TypeFamily]:
        return self.pool.families

    @property
    def null_as_zero(self) -> bool:
        return self.pool.null_as_zero

    @contextmanager
    def _connection(self):
        with self._lock:
            if not self.manual_commit:
                raise TransactionStateError('operation invalid: transaction is closed')
            yield self.connection

    def commit(self) -> None:
        """Commit and release the connection.
        """
        self._finish('commit')

    def rollback(self) -> None:
        """Roll back and release the connection.
        """
        self._finish('rollback')

    def _finish(self, action: str) -> None:
        with self._lock:
            if not self.manual_commit:
                raise TransactionStateError(f'{action} invalid: no open transaction')
            self.manual_commit = False
            try:
                getattr(self.connection.dbapi_connection, action)()
            except BaseException as err:
                logger.warning(f'Transaction {action} failed, discarding connection: {err}')
                self.connection.invalidate(err)
                raise
            else:
                self.connection.close()
                logger.debug(f'Transaction {id(self):#x} {action} complete')
            finally:
                self.pool._forget(self)
