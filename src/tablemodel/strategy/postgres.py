"""
PostgreSQL through psycopg 3.
"""
import logging
from typing import TYPE_CHECKING, Any

import sqlalchemy as sa
from tablemodel.strategy.base import DatabaseStrategy, register_strategy

if TYPE_CHECKING:
    from tablemodel.options import DatabaseOptions

logger = logging.getLogger(__name__)


@register_strategy('postgresql')
class PostgresStrategy(DatabaseStrategy):

    required = ('hostname', 'username', 'password', 'database', 'port')

    def url(self, options: 'DatabaseOptions') -> sa.engine.URL:
        """URL with the connect timeout and application name as query
        parameters, when set.
        """
        query = {}
        if options.timeout:
            query['connect_timeout'] = str(options.timeout)
        if options.appname:
            query['application_name'] = options.appname
        return sa.engine.URL.create(
            'postgresql+psycopg',
            username=options.username,
            password=options.password,
            host=options.hostname,
            port=options.port,
            database=options.database,
            query=query,
        )

    def prepare(self, driver_conn: Any) -> None:
        # statements commit as they run; ConnectionWrapper.commit is then a no-op
        driver_conn.autocommit = True
        logger.debug('PostgreSQL connection set to autocommit')
