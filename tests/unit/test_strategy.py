import pytest
from tablemodel.options import DatabaseOptions
from tablemodel.strategy import get_available_dialects, get_strategy


def test_available_dialects():
    assert get_available_dialects() == ['postgresql', 'sqlite']


def test_unknown_dialect():
    with pytest.raises(ValueError, match='Unsupported dialect'):
        get_strategy('oracle')


def test_postgres_url():
    """Test PostgreSQL URL includes timeout and application name"""
    options = DatabaseOptions(hostname='db', username='u', password='p@ss',
                              database='books', port=5432, timeout=10,
                              appname='catalog')
    url = get_strategy('postgresql').url(options)
    assert url.drivername == 'postgresql+psycopg'
    assert (url.username, url.password) == ('u', 'p@ss')
    assert (url.host, url.port, url.database) == ('db', 5432, 'books')
    assert dict(url.query) == {'connect_timeout': '10', 'application_name': 'catalog'}


def test_sqlite_url_and_engine_kwargs():
    options = DatabaseOptions(drivername='sqlite', database='books.db')
    strategy = get_strategy('sqlite')
    assert str(strategy.url(options)) == 'sqlite:///books.db'
    assert 'detect_types' in strategy.engine_kwargs(options)['connect_args']


def test_missing_options():
    """Test that each dialect reports the options it still needs"""
    options = DatabaseOptions(drivername='sqlite', database='books.db')
    options.database = None
    assert get_strategy('sqlite').missing_options(options) == ['database']
    options.hostname = 'db'
    assert 'hostname' not in get_strategy('postgresql').missing_options(options)
    assert 'username' in get_strategy('postgresql').missing_options(options)


def test_postgres_prepare_sets_autocommit():
    class DriverConnection:
        autocommit = False

    conn = DriverConnection()
    get_strategy('postgresql').prepare(conn)
    assert conn.autocommit is True
