"""
Container fixtures for MySQL and Redis integration tests.

Testcontainers assigns random ports, waits for the servers to accept
connections and stops them when the session ends. Every test here is
skipped when Docker is not available.
"""
import logging

import docker
import pytest
import storepool
from storepool import DatabaseOptions, RedisOptions
from testcontainers.mysql import MySqlContainer
from testcontainers.redis import RedisContainer

from tests import config

logger = logging.getLogger(__name__)


def _require_docker():
    try:
        docker.from_env().ping()
    except Exception as e:
        pytest.skip(f'Docker is not available: {e}')


def _stop(container, name):
    def finalizer():
        try:
            container.stop()
            logger.info(f'{name} container stopped')
        except Exception as e:
            logger.warning(f'Error stopping container: {e}')
    return finalizer


@pytest.fixture(scope='session')
def mysql_docker(request):
    """Session-scoped MySQL container; returns options pointing at it."""
    _require_docker()
    container = MySqlContainer(
        image='mysql:8.0',
        username=config.mysql['username'],
        password=config.mysql['password'],
        dbname=config.mysql['database'],
    )
    container.start()
    request.addfinalizer(_stop(container, 'MySQL'))

    options = DatabaseOptions(
        hostname=container.get_container_host_ip(),
        port=int(container.get_exposed_port(3306)),
        **config.mysql,
    )
    logger.info(f'MySQL container started at {options.hostname}:{options.port}')
    return options


@pytest.fixture(scope='session')
def redis_docker(request):
    """Session-scoped Redis container; returns options pointing at it."""
    _require_docker()
    container = RedisContainer(image='redis:7')
    container.start()
    request.addfinalizer(_stop(container, 'Redis'))

    options = RedisOptions(
        hostname=container.get_container_host_ip(),
        port=int(container.get_exposed_port(6379)),
        **config.redis,
    )
    logger.info(f'Redis container started at {options.hostname}:{options.port}')
    return options


def stage_test_data(cn):
    storepool.execute(cn, 'drop table if exists test_table')
    storepool.execute(cn, """
create table test_table (
    id bigint not null auto_increment,
    name varchar(255) not null,
    value integer not null,
    big bigint unsigned null,
    score double null,
    amount decimal(10, 2) null,
    created datetime null,
    payload varbinary(16) null,
    primary key (id)
)
""")
    storepool.execute(cn, """
insert into test_table (name, value) values
('Alice', 10),
('Bob', 20),
('Charlie', 30)
""")


@pytest.fixture
def conn(mysql_docker):
    """Strict pool over freshly staged test data."""
    cn = storepool.connect(mysql_docker)
    stage_test_data(cn)
    yield cn
    cn.close()


@pytest.fixture
def relaxed_conn(mysql_docker, conn):
    cn = storepool.connect(mysql_docker, strict_transactions=False)
    yield cn
    cn.close()


@pytest.fixture
def kv(redis_docker):
    pool = storepool.connect_kv(redis_docker)
    pool.do('FLUSHDB')
    yield pool
    pool.close()
