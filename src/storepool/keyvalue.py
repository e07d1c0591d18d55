"""
Pooled Redis access.

`KeyValuePool` wraps a ``redis.Redis`` client built on a blocking
connection pool. `do()` passes any command straight through; the typed
helpers cover the common string, key and hash commands and decode replies
into Python values.
"""
import logging
from collections.abc import Mapping
from typing import Any, Self

import redis
from storepool.exceptions import ConnectionFailure
from storepool.options import RedisOptions, load_options

__all__ = ['KeyValuePool', 'connect_kv', 'create_redis_pool']

logger = logging.getLogger(__name__)


def create_redis_pool(options: RedisOptions) -> redis.BlockingConnectionPool:
    """Blocking pool holding at most ``max_open_conns`` connections.

    Every new connection authenticates and selects ``options.database``;
    a connection idle longer than ``health_check_interval`` is pinged
    before reuse.
    """
    return redis.BlockingConnectionPool(
        host=options.hostname,
        port=options.port,
        db=options.database,
        username=options.username,
        password=options.password,
        max_connections=options.max_open_conns,
        timeout=options.pool_wait_timeout,
        health_check_interval=options.health_check_interval,
        socket_timeout=options.socket_timeout,
    )


def _text(value: bytes | str) -> str:
    if isinstance(value, bytes):
        return value.decode('utf-8', errors='surrogateescape')
    return value


class KeyValuePool:
    """Connection-pooled Redis client.

    Replies are read as bytes and decoded by the typed getters. Missing keys
    read as None, missing hashes as an empty dict.
    """

    def __init__(self, client: redis.Redis, options: RedisOptions | None = None) -> None:
        self.client = client
        self.options = options
        self.closed = False

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None,
                 exc_tb: Any | None) -> None:
        self.close()

    def __repr__(self) -> str:
        if self.options is None:
            return f'<KeyValuePool {self.client!r}>'
        return f'<KeyValuePool redis://{self.options.hostname}:{self.options.port}/{self.options.database}>'

    def ping(self) -> None:
        """Liveness check; raises ConnectionFailure when the server is unreachable.
        """
        try:
            self.client.ping()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as err:
            raise ConnectionFailure(f'Redis server unreachable: {err}') from err

    def close(self) -> None:
        """Close the client and disconnect every pooled connection.
        """
        if self.closed:
            return
        self.closed = True
        self.client.close()
        self.client.connection_pool.disconnect()
        logger.debug(f'Closed {self!r}')

    def do(self, command: str, *args: Any) -> Any:
        """Run any Redis command and return the raw reply.
        """
        logger.debug(f'Redis: {command} {args}')
        return self.client.execute_command(command, *args)

    def set(self, key: str, value: Any) -> bool:
        return bool(self.client.set(key, value))

    def get_string(self, key: str) -> str | None:
        value = self.client.get(key)
        return None if value is None else _text(value)

    def get_bytes(self, key: str) -> bytes | None:
        return self.client.get(key)

    def get_int(self, key: str) -> int | None:
        """Read an integer value; raises ValueError when the value is not one.
        """
        value = self.client.get(key)
        return None if value is None else int(value)

    def delete(self, *keys: str) -> int:
        """Delete keys and return how many existed.
        """
        return self.client.delete(*keys)

    def expire(self, key: str, seconds: int) -> bool:
        """Set a time-to-live; False when the key does not exist.
        """
        return bool(self.client.expire(key, seconds))

    def keys(self, pattern: str = '*') -> list[str]:
        return [_text(k) for k in self.client.keys(pattern)]

    def keys_bytes(self, pattern: str = '*') -> list[bytes]:
        return list(self.client.keys(pattern))

    def set_hash(self, key: str, mapping: Mapping[str, Any]) -> int:
        """Set several hash fields at once; returns the number of new fields.
        """
        return self.client.hset(key, mapping=dict(mapping))

    def get_hash(self, key: str) -> dict[str, str]:
        return {_text(k): _text(v) for k, v in self.client.hgetall(key).items()}

    def get_hash_int(self, key: str) -> dict[str, int]:
        return {_text(k): int(v) for k, v in self.client.hgetall(key).items()}


def connect_kv(options: RedisOptions | dict[str, Any] | str | None = None,
               client: redis.Redis | None = None, **kw: Any) -> KeyValuePool:
    """Create a key-value pool and verify the server answers PING.

    Args:
        options: RedisOptions, a dict, a ``redis://`` URL or None
        client: Pre-built ``redis.Redis`` to use instead of building one
        **kw: Keyword arguments overriding options

    Raises ConnectionFailure when the server is unreachable.
    """
    if client is None:
        options = load_options(RedisOptions, options, **kw)
        client = redis.Redis(connection_pool=create_redis_pool(options))
    elif options is not None or kw:
        options = load_options(RedisOptions, options, **kw)
    kv = KeyValuePool(client, options)
    try:
        kv.ping()
    except ConnectionFailure:
        kv.close()
        raise
    logger.debug(f'Connected to {kv!r}')
    return kv
