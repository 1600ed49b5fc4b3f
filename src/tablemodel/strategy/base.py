"""
Dialect strategies: how to reach a database and prepare its connections.

The connection layer asks a strategy for three things: the SQLAlchemy URL
for a set of options, extra ``create_engine`` arguments, and the settings a
freshly opened driver connection needs before statements run on it.
"""
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

import sqlalchemy as sa

if TYPE_CHECKING:
    from tablemodel.options import DatabaseOptions

# dialect name -> strategy class, filled by @register_strategy
_STRATEGIES: dict[str, type['DatabaseStrategy']] = {}


def register_strategy(dialect: str):
    """Class decorator that registers a strategy under a dialect name."""
    def decorator(cls: type['DatabaseStrategy']) -> type['DatabaseStrategy']:
        cls.dialect = dialect
        _STRATEGIES[dialect] = cls
        return cls
    return decorator


class DatabaseStrategy(ABC):
    """Engine URL, engine arguments and connection setup for one dialect."""

    dialect: ClassVar[str]
    # DatabaseOptions fields that must be set (non-empty, non-zero)
    required: ClassVar[tuple[str, ...]] = ()

    @abstractmethod
    def url(self, options: 'DatabaseOptions') -> sa.engine.URL:
        """SQLAlchemy URL for the options."""

    def engine_kwargs(self, options: 'DatabaseOptions') -> dict[str, Any]:
        return {}

    @abstractmethod
    def prepare(self, driver_conn: Any) -> None:
        """Configure a newly opened driver (sqlite3/psycopg) connection."""

    def missing_options(self, options: 'DatabaseOptions') -> list[str]:
        return [name for name in self.required if not getattr(options, name)]
