import pytest
import storepool

from tests.fixtures.store import FakeStore


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def make_pool(store):
    """Factory for pools backed by the fake store, closed after the test.
    """
    pools = []

    def make(**kw):
        kw.setdefault('hostname', 'localhost')
        kw.setdefault('database', 'test')
        pool = storepool.connect(creator=store.connect, **kw)
        pools.append(pool)
        return pool

    yield make
    for pool in pools:
        pool.close()


@pytest.fixture
def pool(make_pool):
    """Strict pool: one transaction at a time."""
    return make_pool()


@pytest.fixture
def relaxed_pool(make_pool):
    return make_pool(strict_transactions=False)
