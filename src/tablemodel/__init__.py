"""
Table models over database query results.

Bind a ResultSetTableModel to a connection and a statement, run a query,
and read the result as a zero-based grid of cells:

    cn = tablemodel.connect(drivername='sqlite', database='books.db')
    model = tablemodel.ResultSetTableModel()
    model.set_connection(cn, cn.create_statement())
    model.set_query('select id, title, price from books')
    model.value_at(0, 1)
"""
__version__ = '0.1.0'

from tablemodel.book import Book
from tablemodel.connection import ConnectionWrapper, connect
from tablemodel.cursor import ResultSet, Statement
from tablemodel.exceptions import ConnectionFailure, CursorError, DatabaseError
from tablemodel.exceptions import DbApiError, DbConnectionError
from tablemodel.exceptions import NotConnectedError, OperationalError
from tablemodel.exceptions import ProgrammingError, QueryError
from tablemodel.exceptions import StatementClosedError, TypeConversionError
from tablemodel.model import HEADER_ROW, ResultSetTableModel, TableModel
from tablemodel.model import TableModelEvent
from tablemodel.options import DatabaseOptions
from tablemodel.result import Err, Ok, Result
from tablemodel.types import Column, ResultSetMetaData, to_cursor_index

__all__ = [
    'connect',
    'ConnectionWrapper',
    'DatabaseOptions',
    'Statement',
    'ResultSet',
    'ResultSetMetaData',
    'Column',
    'to_cursor_index',
    'TableModel',
    'TableModelEvent',
    'HEADER_ROW',
    'ResultSetTableModel',
    'Ok',
    'Err',
    'Result',
    'Book',
    'DatabaseError',
    'NotConnectedError',
    'ConnectionFailure',
    'QueryError',
    'CursorError',
    'StatementClosedError',
    'TypeConversionError',
    'DbApiError',
    'DbConnectionError',
    'ProgrammingError',
    'OperationalError',
]
