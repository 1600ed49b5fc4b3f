"""
Dialect strategies, looked up by the ``drivername`` of DatabaseOptions.
"""
from tablemodel.strategy.base import _STRATEGIES, DatabaseStrategy
from tablemodel.strategy.base import register_strategy
from tablemodel.strategy.postgres import PostgresStrategy
from tablemodel.strategy.sqlite import SQLiteStrategy

__all__ = [
    'DatabaseStrategy',
    'PostgresStrategy',
    'SQLiteStrategy',
    'get_available_dialects',
    'get_strategy',
    'register_strategy',
]


def get_available_dialects() -> list[str]:
    return sorted(_STRATEGIES)


def get_strategy(dialect: str) -> DatabaseStrategy:
    """Return the strategy for a dialect name.

    Raises ValueError for a dialect with no registered strategy.
    """
    try:
        return _STRATEGIES[dialect]()
    except KeyError:
        raise ValueError(f'Unsupported dialect: {dialect!r}. '
                         f'Available: {get_available_dialects()}') from None
