"""
Statement and scrollable result cursor on top of DB-API 2.0 cursors.

DB-API cursors only move forward. A ResultSet snapshots the rows of one
query so the table model can seek to any row by its one-based ordinal.
"""
import logging
import time
from collections.abc import Iterator
from functools import wraps
from typing import Any

from tablemodel.exceptions import CursorError, QueryError, StatementClosedError
from tablemodel.types import Column, ResultSetMetaData
from tablemodel.types import columns_from_cursor_description, unique_names

logger = logging.getLogger(__name__)


def dumpsql(func):
    """Decorator for logging SQL statements and execution time."""
    @wraps(func)
    def wrapper(self, operation: str, *args: Any, **kwargs: Any):
        start = time.time()
        logger.debug(f'SQL:\n{operation}')
        try:
            return func(self, operation, *args, **kwargs)
        except Exception:
            logger.error(f'Error with query:\nSQL:\n{operation}')
            raise
        finally:
            elapsed = time.time() - start
            self.connwrapper.addcall(elapsed)
            logger.debug(f'Query time: {elapsed:.4f}s')
    return wrapper


class ResultSet:
    """Scroll-insensitive cursor over the rows returned by one query.

    Rows and columns are numbered from 1. Position 0 is before the first
    row and ``len(self) + 1`` is after the last row.
    """

    def __init__(self, rows: list[tuple], metadata: ResultSetMetaData) -> None:
        self._rows = rows
        self._metadata = metadata
        self._position = 0
        self._closed = False

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[tuple]:
        self._check_open()
        return iter(self._rows)

    def __repr__(self) -> str:
        state = 'closed' if self._closed else f'row {self.get_row()}'
        return f'ResultSet({len(self._rows)} rows, {state})'

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise CursorError('ResultSet is closed')

    def _on_row(self) -> bool:
        return 1 <= self._position <= len(self._rows)

    def _move_to(self, row: int) -> bool:
        if row <= 0:
            self._position = 0
        elif row > len(self._rows):
            self._position = len(self._rows) + 1
        else:
            self._position = row
        return self._on_row()

    def next(self) -> bool:
        """Advance one row. Returns False once the cursor is past the last row."""
        self._check_open()
        if self._position <= len(self._rows):
            self._position += 1
        return self._on_row()

    def previous(self) -> bool:
        self._check_open()
        if self._position > 0:
            self._position -= 1
        return self._on_row()

    def absolute(self, row: int) -> bool:
        """Move to the given row.

        A negative row counts back from the end, -1 being the last row.
        Row 0, or a row before the first, parks the cursor before the first
        row; a row past the end parks it after the last row.
        """
        self._check_open()
        if row < 0:
            row = len(self._rows) + row + 1
        return self._move_to(row)

    def relative(self, rows: int) -> bool:
        self._check_open()
        return self._move_to(self._position + rows)

    def first(self) -> bool:
        return self.absolute(1)

    def last(self) -> bool:
        return self.absolute(-1)

    def before_first(self) -> None:
        self._check_open()
        self._position = 0

    def after_last(self) -> None:
        self._check_open()
        self._position = len(self._rows) + 1

    def get_row(self) -> int:
        """Current row number, or 0 when there is no current row."""
        self._check_open()
        return self._position if self._on_row() else 0

    def get_object(self, column: int) -> Any:
        """Value of the one-based column in the current row.
        """
        self._check_open()
        if not self._on_row():
            raise CursorError(f'No current row (position {self._position})')
        count = self._metadata.get_column_count()
        if not 1 <= column <= count:
            raise CursorError(f'Column index {column} out of range 1..{count}')
        return self._rows[self._position - 1][column - 1]

    def find_column(self, name: str) -> int:
        """One-based index of the first column matching name, case-insensitively.
        """
        self._check_open()
        for i, col in enumerate(self._metadata.columns, start=1):
            if col.name is not None and col.name.lower() == name.lower():
                return i
        raise CursorError(f'No column named {name!r}')

    def get_metadata(self) -> ResultSetMetaData:
        self._check_open()
        return self._metadata

    @property
    def columns(self) -> list[Column]:
        return self._metadata.columns

    def to_dicts(self) -> list[dict[str, Any]]:
        """All rows as dicts keyed by column name, independent of cursor position.

        Columns that share a name get distinct keys, see ``unique_names``.
        """
        self._check_open()
        names = unique_names(self._metadata.columns)
        return [dict(zip(names, row)) for row in self._rows]

    def close(self) -> None:
        self._closed = True
        self._rows = []


class Statement:
    """Executes SQL text on a connection and hands back result cursors.

    Only one ResultSet per statement is open at a time: running another
    query closes the previous one.
    """

    def __init__(self, connection_wrapper: Any) -> None:
        self.connwrapper = connection_wrapper
        self.dbapi_cursor = connection_wrapper.cursor()
        self._result: ResultSet | None = None
        self._closed = False

    def __enter__(self) -> 'Statement':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise StatementClosedError('Statement is closed')

    @property
    def dialect(self) -> str:
        return self.connwrapper.dialect

    @dumpsql
    def execute_query(self, sql: str) -> ResultSet:
        """Execute a query and return a cursor over its rows.

        Raises QueryError if the statement does not produce rows.
        """
        self._check_open()
        self.dbapi_cursor.execute(sql)
        if self.dbapi_cursor.description is None:
            raise QueryError('Statement did not return a result set')

        rows = [tuple(row) for row in self.dbapi_cursor.fetchall()]
        columns = columns_from_cursor_description(self.dbapi_cursor.description,
                                                  self.dialect, rows)
        if self._result is not None:
            self._result.close()
        self._result = ResultSet(rows, ResultSetMetaData(columns))
        logger.debug(f'Query returned {len(rows)} rows in {len(columns)} columns')
        return self._result

    @dumpsql
    def execute_update(self, sql: str) -> int:
        """Execute an INSERT, UPDATE, DELETE or DDL statement and return the
        affected row count (0 when the driver does not report one).
        """
        self._check_open()
        self.dbapi_cursor.execute(sql)
        if self.dbapi_cursor.description is not None:
            raise QueryError('Statement returned a result set; use execute_query')

        if not getattr(self.connwrapper, 'in_transaction', False):
            self.connwrapper.commit()

        rowcount = self.dbapi_cursor.rowcount
        logger.debug(f'Update affected {rowcount} rows')
        return max(rowcount, 0)

    def get_result_set(self) -> ResultSet | None:
        return self._result

    def close(self) -> None:
        """Close the current result set and the underlying cursor.
        """
        if self._closed:
            return
        try:
            if self._result is not None:
                self._result.close()
            self.dbapi_cursor.close()
        finally:
            self._closed = True
