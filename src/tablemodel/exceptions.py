"""
Exception classes for the table model and its database layer.
"""
import sqlite3

import psycopg
import sqlalchemy as sa


class DatabaseError(Exception):
    """Base class for all tablemodel errors.
    """


class NotConnectedError(DatabaseError, RuntimeError):
    """Operation requires a bound database connection.
    """

    def __init__(self, message: str = 'Not Connected to Database') -> None:
        super().__init__(message)


class ConnectionFailure(DatabaseError):
    """Error establishing or maintaining database connection.
    """


class QueryError(DatabaseError):
    """Error in query syntax or execution.
    """


class CursorError(DatabaseError):
    """Invalid cursor position, column index, or closed result set.
    """


class StatementClosedError(CursorError):
    """Statement was used after it was closed.
    """


class TypeConversionError(DatabaseError):
    """Error resolving a column's Python type.
    """


DbApiError = (
    sqlite3.Error,
    psycopg.Error,
    sa.exc.SQLAlchemyError,
    DatabaseError,
    )

DbConnectionError = (
    psycopg.OperationalError,
    psycopg.InterfaceError,
    sqlite3.OperationalError,
    sqlite3.InterfaceError,
    ConnectionFailure,
    )

ProgrammingError = (
    psycopg.ProgrammingError,
    psycopg.DatabaseError,
    sqlite3.ProgrammingError,
    sqlite3.DatabaseError,
    QueryError,
    )

OperationalError = (
    psycopg.OperationalError,
    sqlite3.OperationalError,
    )
