"""
SQLite through the standard library driver.

Declared DATE and DATETIME columns come back as date objects, and
connections run in autocommit mode.
"""
import logging
import sqlite3
from typing import TYPE_CHECKING, Any

import sqlalchemy as sa
from tablemodel.strategy.base import DatabaseStrategy, register_strategy
from tablemodel.types import convert_date, convert_datetime

if TYPE_CHECKING:
    from tablemodel.options import DatabaseOptions

logger = logging.getLogger(__name__)


@register_strategy('sqlite')
class SQLiteStrategy(DatabaseStrategy):

    required = ('database',)

    def url(self, options: 'DatabaseOptions') -> sa.engine.URL:
        return sa.engine.URL.create('sqlite', database=options.database)

    def engine_kwargs(self, options: 'DatabaseOptions') -> dict[str, Any]:
        return {
            'connect_args': {
                'detect_types': sqlite3.PARSE_DECLTYPES | sqlite3.PARSE_COLNAMES
            }
        }

    def prepare(self, driver_conn: Any) -> None:
        sqlite3.register_converter('date', convert_date)
        sqlite3.register_converter('datetime', convert_datetime)
        driver_conn.isolation_level = None
        logger.debug('SQLite connection set to autocommit')
