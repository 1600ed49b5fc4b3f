"""
Table models: the row/column interface a table display widget reads from.

A widget registers a listener with ``add_table_model_listener`` and asks the
model for its shape (``column_count``, ``column_name``, ``column_class``,
``row_count``) and contents (``value_at``). Rows and columns are numbered
from 0 here, while result cursors number them from 1; ``to_cursor_index``
does the translation.

``ResultSetTableModel`` serves the result of the last query run through
``set_query``. Every accessor also has a ``try_`` form that returns an
``Ok`` or ``Err`` instead of raising or substituting a default, so a
caller can choose its own display fallback.
"""
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from tablemodel.cursor import ResultSet, Statement
from tablemodel.exceptions import CursorError, DbApiError, NotConnectedError
from tablemodel.options import pandas_numpy_data_loader
from tablemodel.result import Err, Ok, Result
from tablemodel.types import ResultSetMetaData, load_class, to_cursor_index

logger = logging.getLogger(__name__)

HEADER_ROW = -1
ALL_COLUMNS = -1

# event types
INSERT = 1
UPDATE = 0
DELETE = -1


@dataclass(frozen=True)
class TableModelEvent:
    """Describes which rows and columns of a model changed.

    ``first_row == HEADER_ROW`` means the structure changed: column count,
    names and types may all differ and the widget should re-read everything.
    """
    source: 'TableModel'
    first_row: int = 0
    last_row: int = sys.maxsize
    column: int = ALL_COLUMNS
    type: int = UPDATE

    @property
    def structure_changed(self) -> bool:
        return self.first_row == HEADER_ROW


TableModelListener = Callable[[TableModelEvent], None]


class TableModel:
    """Base table model with listener management and read-only defaults.

    Subclasses provide ``column_count``, ``row_count`` and ``value_at``.
    """

    def __init__(self) -> None:
        self._listeners: list[TableModelListener] = []

    def add_table_model_listener(self, listener: TableModelListener) -> None:
        self._listeners.append(listener)

    def remove_table_model_listener(self, listener: TableModelListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def table_model_listeners(self) -> list[TableModelListener]:
        return list(self._listeners)

    def fire_table_changed(self, event: TableModelEvent) -> None:
        """Notify listeners in registration order.
        """
        for listener in list(self._listeners):
            listener(event)

    def fire_table_data_changed(self) -> None:
        self.fire_table_changed(TableModelEvent(self))

    def fire_table_structure_changed(self) -> None:
        self.fire_table_changed(TableModelEvent(self, HEADER_ROW))

    def column_count(self) -> int:
        raise NotImplementedError

    def row_count(self) -> int:
        raise NotImplementedError

    def value_at(self, row: int, column: int) -> Any:
        raise NotImplementedError

    def column_name(self, column: int) -> str:
        """Spreadsheet-style default name: A, B, ..., Z, AA, AB, ...
        """
        name = ''
        while column >= 0:
            name = chr(column % 26 + ord('A')) + name
            column = column // 26 - 1
        return name

    def column_class(self, column: int) -> type:
        return object

    def find_column(self, name: str) -> int:
        """Index of the first column called name, or -1.
        """
        for column in range(self.column_count()):
            if self.column_name(column) == name:
                return column
        return -1

    def is_cell_editable(self, row: int, column: int) -> bool:
        return False

    def set_value_at(self, value: Any, row: int, column: int) -> None:
        """Cells are read-only; the value is discarded."""


class ResultSetTableModel(TableModel):
    """Table model over the result cursor of the last query.

    The model must be bound with ``set_connection`` before use. Shape
    accessors raise NotConnectedError when unbound and fall back to a
    default (0, '' or object) when the cursor fails. ``value_at`` returns
    None when unbound rather than raising.

    Args:
        step_before_seek: advance the cursor one row before every absolute
            seek in ``value_at``, for drivers that misreport date values on a
            freshly positioned cursor. None takes the setting from the bound
            connection's options.
    """

    def __init__(self, step_before_seek: bool | None = None) -> None:
        super().__init__()
        self.connection: Any = None
        self.statement: Statement | None = None
        self.result_set: ResultSet | None = None
        self.metadata: ResultSetMetaData | None = None
        self.number_of_rows = 0
        self._connected = False
        self._step_before_seek = step_before_seek
        self.step_before_seek = bool(step_before_seek)

    @property
    def connected(self) -> bool:
        return self._connected

    def set_connection(self, connection: Any, statement: Statement) -> None:
        """Bind the model to a connection and the statement it runs queries on.
        """
        self.connection = connection
        self.statement = statement
        self._connected = True
        if self._step_before_seek is None:
            options = getattr(connection, 'options', None)
            self.step_before_seek = bool(getattr(options, 'step_before_seek', False))
        logger.debug(f'Table model bound (step_before_seek={self.step_before_seek})')

    def _require_connection(self) -> None:
        if not self._connected:
            raise NotConnectedError()

    def _require_result_set(self) -> ResultSet:
        if self.result_set is None:
            raise CursorError('No query has been executed')
        return self.result_set

    def _require_metadata(self) -> ResultSetMetaData:
        if self.metadata is None:
            raise CursorError('No query has been executed')
        return self.metadata

    def _lookup(self, func: Callable[[], Any]) -> Result:
        if not self._connected:
            return Err(NotConnectedError())
        try:
            return Ok(func())
        except DbApiError as err:
            return Err(err)

    @staticmethod
    def _unwrap_or(result: Result, default: Any, what: str) -> Any:
        if result.ok:
            return result.value
        if isinstance(result.error, NotConnectedError):
            raise result.error
        logger.error(f'Could not determine {what}', exc_info=result.error)
        return default

    def try_column_count(self) -> Result:
        return self._lookup(lambda: self._require_metadata().get_column_count())

    def try_column_name(self, column: int) -> Result:
        return self._lookup(
            lambda: self._require_metadata().get_column_name(to_cursor_index(column)))

    def try_column_class(self, column: int) -> Result:
        def column_class():
            metadata = self._require_metadata()
            return load_class(metadata.get_column_class_name(to_cursor_index(column)))
        return self._lookup(column_class)

    def try_row_count(self) -> Result:
        return self._lookup(lambda: self.number_of_rows)

    def try_value_at(self, row: int, column: int) -> Result:
        def value():
            result_set = self._require_result_set()
            if self.step_before_seek:
                result_set.next()
            result_set.absolute(to_cursor_index(row))
            return result_set.get_object(to_cursor_index(column))
        return self._lookup(value)

    def column_count(self) -> int:
        return self._unwrap_or(self.try_column_count(), 0, 'column count')

    def column_name(self, column: int) -> str:
        return self._unwrap_or(self.try_column_name(column), '', f'name of column {column}')

    def column_class(self, column: int) -> type:
        return self._unwrap_or(self.try_column_class(column), object, f'class of column {column}')

    def row_count(self) -> int:
        return self._unwrap_or(self.try_row_count(), 0, 'row count')

    def value_at(self, row: int, column: int) -> Any:
        """Value of the cell, None when unbound, or '' when the cursor fails.
        """
        if not self._connected:
            return None
        return self._unwrap_or(self.try_value_at(row, column), '', f'value at ({row}, {column})')

    def set_query(self, query: str) -> None:
        """Run a query and make its result the model's contents.

        The row count is captured by seeking to the last row. Listeners get
        a structure-changed event. Driver errors propagate.
        """
        self._require_connection()

        result_set = self.statement.execute_query(query)
        self.result_set = result_set
        self.metadata = result_set.get_metadata()

        result_set.last()
        self.number_of_rows = result_set.get_row()

        self.fire_table_structure_changed()

    def set_update(self, query: str) -> int:
        """Run an update statement and return the affected row count.

        The current cursor, metadata and row count are left as they were;
        run ``set_query`` again to see the change. Listeners still get a
        structure-changed event.
        """
        self._require_connection()

        rowcount = self.statement.execute_update(query)

        self.fire_table_structure_changed()
        return rowcount

    def to_frame(self, data_loader: Callable[..., Any] | None = None) -> Any:
        """Materialize the current result through a data loader.

        The loader receives the row tuples in column order and the columns.
        Uses the bound connection's ``options.data_loader`` when none is
        given, else a pandas DataFrame.
        """
        self._require_connection()
        result_set = self._require_result_set()
        if data_loader is None:
            options = getattr(self.connection, 'options', None)
            data_loader = getattr(options, 'data_loader', None) or pandas_numpy_data_loader
        return data_loader(list(result_set), result_set.columns)

    def disconnect(self) -> None:
        """Close the statement and the connection.

        Does nothing when not connected. A failure while closing is logged
        and discarded; the model is disconnected afterwards either way.
        """
        if not self._connected:
            return
        try:
            self.statement.close()
            self.connection.close()
        except DbApiError:
            logger.exception('Error closing database connection')
        finally:
            self._connected = False
