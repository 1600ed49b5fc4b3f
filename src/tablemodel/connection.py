"""
Database connection handling with SQLAlchemy.

This module provides:
1. The `connect()` function for creating new database connections
2. The `ConnectionWrapper` class that wraps SQLAlchemy connections and hands
   out statements for the table model
3. Engine creation and management through a thread-safe registry
"""
import atexit
import logging
import threading
from collections.abc import Callable
from typing import Any, Self

import sqlalchemy as sa
from sqlalchemy.engine import Engine
from sqlalchemy.pool import NullPool
from tablemodel.cursor import Statement
from tablemodel.exceptions import ConnectionFailure, DbConnectionError
from tablemodel.options import DatabaseOptions
from tablemodel.strategy import get_strategy

__all__ = [
    'ConnectionWrapper',
    'connect',
    'get_engine_for_options',
    'dispose_all_engines',
]

logger = logging.getLogger(__name__)

_engine_registry: dict[str, Engine] = {}
_engine_registry_lock = threading.RLock()


def get_engine_for_options(options: DatabaseOptions,
                           engine_factory: Callable[..., Engine] = sa.create_engine,
                           **kwargs: Any) -> Engine:
    """Get or create a SQLAlchemy engine for the given options.
    """
    strategy = get_strategy(options.drivername)
    url = strategy.url(options)
    key = url.render_as_string(hide_password=False)

    with _engine_registry_lock:
        if key in _engine_registry:
            logger.debug(f'Using existing engine for {options.drivername}')
            return _engine_registry[key]

        engine_kwargs: dict[str, Any] = {'echo': False, 'poolclass': NullPool}
        engine_kwargs.update(strategy.engine_kwargs(options))
        engine_kwargs.update(kwargs)

        engine = engine_factory(url, **engine_kwargs)

        _engine_registry[key] = engine
        logger.debug(f'Created new engine for {options.drivername}')

        return engine


def dispose_all_engines() -> None:
    """Dispose all engines in the registry.
    """
    with _engine_registry_lock:
        for engine in list(_engine_registry.values()):
            engine.dispose()
        _engine_registry.clear()
        logger.debug('All database engines disposed')


atexit.register(dispose_all_engines)


class ConnectionWrapper:
    """Wraps a SQLAlchemy connection object to track calls and execution time

    This class provides a thin wrapper around SQLAlchemy connection objects that:
    1. Tracks query execution counts and timing
    2. Hands out Statement objects bound to the connection
    3. Supports context manager protocol for explicit resource management
    4. Delegates attribute access to the SQLAlchemy connection object
    """

    def __init__(self, sa_connection: sa.engine.Connection | None = None,
                 options: DatabaseOptions | None = None) -> None:
        """Initialize a connection wrapper
        """
        self.sa_connection = sa_connection
        self.engine = sa_connection.engine if sa_connection else None
        self.options = options
        self.dbapi_connection = sa_connection.connection if sa_connection else None
        self._dialect = sa_connection.dialect.name if sa_connection else None
        self.calls = 0
        self.time = 0
        self.in_transaction = False

    def __enter__(self) -> Self:
        """Support for context manager protocol
        """
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None,
                 exc_tb: Any | None) -> None:
        """Close the connection when exiting the context manager
        """
        try:
            self.close()
            logger.debug('Closed connection via context manager')
        except Exception as e:
            logger.debug(f'Error closing connection in __exit__: {e}')

    def __getattr__(self, name: str) -> Any:
        """Delegate attribute access to the SQLAlchemy connection.
        """
        if name in {'sa_connection', 'dbapi_connection'}:
            raise AttributeError(name)
        return getattr(self.sa_connection, name)

    @property
    def dialect(self) -> str:
        """Return the dialect name ('postgresql' or 'sqlite')."""
        return self._dialect

    @property
    def closed(self) -> bool:
        return self.sa_connection is None or self.sa_connection.closed

    def cursor(self) -> Any:
        """Get a raw DBAPI cursor for this connection.
        """
        if self.closed:
            raise ConnectionFailure('Connection is closed')
        return self.dbapi_connection.cursor()

    def create_statement(self) -> Statement:
        """Create a statement for executing queries and updates.
        """
        return Statement(self)

    def addcall(self, elapsed: float) -> None:
        """Track execution statistics
        """
        self.time += elapsed
        self.calls += 1

    def commit(self) -> None:
        """Commit on the DBAPI connection, regardless of SQLAlchemy's
        transaction bookkeeping.
        """
        self.dbapi_connection.commit()

    def rollback(self) -> None:
        self.dbapi_connection.rollback()

    def close(self) -> None:
        """Close the SQLAlchemy connection, committing first if needed
        """
        if self.closed:
            return

        try:
            if not self.in_transaction:
                self.commit()
        finally:
            self.sa_connection.close()

        logger.debug(f'Connection closed: {self.calls} queries in {self.time:.2f}s '
                     f'(avg: {self.time/max(1, self.calls):.3f}s per query)')


def configure_connection(sa_connection: sa.engine.Connection) -> None:
    """Configure a SQLAlchemy connection with database-specific settings.
    """
    strategy = get_strategy(sa_connection.dialect.name)
    strategy.prepare(sa_connection.connection.driver_connection)


def connect(options: DatabaseOptions | dict[str, Any] | None = None,
            **kw: Any) -> ConnectionWrapper:
    """Connect to a database using SQLAlchemy for connection management

    Args:
        options: Can be:
                - DatabaseOptions object
                - Dictionary of options
                - None, with options specified as keyword arguments
        **kw: Additional keyword arguments to override options

    Returns
        ConnectionWrapper object for connecting to the database
    """
    if isinstance(options, DatabaseOptions):
        if kw:
            logger.debug(f'Ignoring keyword overrides for explicit options: {sorted(kw)}')
    else:
        options = DatabaseOptions(**{**(options or {}), **kw})

    engine = get_engine_for_options(options)

    try:
        sa_connection = engine.connect()
    except sa.exc.OperationalError as err:
        raise ConnectionFailure(f'Could not connect to {options.drivername} '
                                f'database {options.database!r}: {err}') from err
    except DbConnectionError as err:
        raise ConnectionFailure(str(err)) from err
    configure_connection(sa_connection)

    return ConnectionWrapper(sa_connection, options)
