import pytest
from storepool.options import DatabaseOptions, RedisOptions, load_options


def test_init_defaults():
    """Test default initialization"""
    options = DatabaseOptions(hostname='testhost', database='testdb')

    assert options.port == 3306
    assert options.charset == 'utf8mb4'
    assert options.timeout == 0
    assert options.max_open_conns == 0
    assert options.max_idle_conns == 2
    assert options.pool_max_idle_time == 300
    assert options.pool_wait_timeout == 30
    assert options.strict_transactions is True
    assert options.unsigned_bigint is False
    assert options.null_as_zero is False


def test_validation():
    """Test validation rules"""
    with pytest.raises(ValueError, match='hostname'):
        DatabaseOptions(database='testdb')
    with pytest.raises(ValueError, match='database'):
        DatabaseOptions(hostname='testhost')
    with pytest.raises(ValueError, match='max_open_conns'):
        DatabaseOptions(hostname='testhost', database='testdb', max_open_conns=-1)
    with pytest.raises(ValueError, match='max_idle_conns'):
        DatabaseOptions(hostname='testhost', database='testdb', max_idle_conns=0)


def test_idle_clamped_to_open():
    options = DatabaseOptions(hostname='h', database='d', max_open_conns=1, max_idle_conns=5)
    assert options.max_idle_conns == 1


def test_string_values_converted():
    """Values read from config files arrive as strings"""
    options = DatabaseOptions(hostname='h', database='d', port='3307',
                              max_open_conns='10', strict_transactions='false',
                              unsigned_bigint='yes', null_as_zero='on')
    assert options.port == 3307
    assert options.max_open_conns == 10
    assert options.strict_transactions is False
    assert options.unsigned_bigint is True
    assert options.null_as_zero is True


def test_str_masks_password():
    options = DatabaseOptions(hostname='db', database='app', username='u', password='secret')
    assert 'secret' not in str(options)
    assert 'secret' not in repr(options)
    assert str(options).startswith('mysql+pymysql://u:***@db:3306/app')


def test_from_url():
    options = DatabaseOptions.from_url('mysql://user:pw@dbhost:3307/app?charset=latin1')
    assert options.hostname == 'dbhost'
    assert options.port == 3307
    assert options.username == 'user'
    assert options.password == 'pw'
    assert options.database == 'app'
    assert options.charset == 'latin1'


def test_from_url_query_options():
    options = DatabaseOptions.from_url('mysql://dbhost/app?max_open_conns=4&strict_transactions=0')
    assert options.port == 3306
    assert options.max_open_conns == 4
    assert options.strict_transactions is False


def test_load_options_sources():
    base = DatabaseOptions(hostname='h', database='d')
    assert load_options(DatabaseOptions, base) is base

    derived = load_options(DatabaseOptions, base, port=1234)
    assert derived is not base
    assert derived.port == 1234
    assert base.port == 3306

    from_dict = load_options(DatabaseOptions, {'hostname': 'h', 'database': 'd'}, port=1)
    assert from_dict.port == 1

    from_kw = load_options(DatabaseOptions, hostname='h', database='d')
    assert from_kw.hostname == 'h'


def test_load_options_rejects_unknown():
    with pytest.raises(ValueError, match='Unknown DatabaseOptions fields'):
        load_options(DatabaseOptions, hostname='h', database='d', drivername='postgres')
    with pytest.raises(TypeError):
        load_options(DatabaseOptions, 42)


def test_redis_defaults_and_url():
    options = RedisOptions()
    assert options.hostname == 'localhost'
    assert options.port == 6379
    assert options.database == 0
    assert options.max_open_conns == 10

    options = RedisOptions.from_url('redis://:pw@cache:6380/3')
    assert options.hostname == 'cache'
    assert options.port == 6380
    assert options.password == 'pw'
    assert options.database == 3


def test_redis_validation():
    with pytest.raises(ValueError):
        RedisOptions(database=-1)
    with pytest.raises(ValueError):
        RedisOptions(max_open_conns=0)
    assert RedisOptions(socket_timeout='1.5').socket_timeout == 1.5


if __name__ == '__main__':
    __import__('pytest').main([__file__])
