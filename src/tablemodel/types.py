"""
Column metadata and type handling for result cursors.

This module provides:
- to_cursor_index: Convert zero-based widget indexes to one-based cursor indexes
- Column: Column metadata from cursor descriptions
- unique_names: Distinct keys for result columns that share a name
- resolve_type: Resolve database type codes to Python types
- ResultSetMetaData: One-based column metadata for a result cursor
- load_class: Resolve a fully-qualified class name to a class
"""
import datetime
import decimal
import importlib
import uuid
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import Any, Self

import dateutil.parser
from psycopg.postgres import types as pg_types
from tablemodel.exceptions import CursorError, TypeConversionError


def to_cursor_index(index: int) -> int:
    """Translate a zero-based widget row/column index to the one-based
    cursor convention.

    Widget column 0 is cursor column 1 and widget row 0 is cursor row 1.
    """
    return index + 1


# Type resolution: driver type codes to Python types

_POSTGRES_TYPE_NAMES: dict[type, tuple[str, ...]] = {
    str: ('"char"', 'bpchar', 'varchar', 'text', 'name', 'json'),
    int: ('int2', 'int4', 'int8'),
    float: ('float4', 'float8'),
    decimal.Decimal: ('numeric',),
    bool: ('bool',),
    bytes: ('bytea',),
    uuid.UUID: ('uuid',),
    datetime.date: ('date',),
    datetime.time: ('time', 'timetz'),
    datetime.datetime: ('timestamp', 'timestamptz'),
}


def _postgres_type_map() -> dict[int, type]:
    oids: dict[int, type] = {}
    for python_type, names in _POSTGRES_TYPE_NAMES.items():
        for name in names:
            info = pg_types.get(name)
            oids[info.oid] = python_type
            if info.array_oid:
                oids[info.array_oid] = list
    return oids


# OID -> Python type, array OIDs map to list
postgres_types: dict[int, type] = _postgres_type_map()

# SQLite declared column types, matched without any "(n)" size suffix
sqlite_types: dict[str, type] = {
    'INTEGER': int,
    'REAL': float,
    'TEXT': str,
    'VARCHAR': str,
    'BLOB': bytes,
    'NUMERIC': float,
    'BOOLEAN': bool,
    'DATE': datetime.date,
    'DATETIME': datetime.datetime,
    'TIME': datetime.time,
}

# (type, exact names, suffixes); first match wins
_NAME_RULES: list[tuple[type, tuple[str, ...], tuple[str, ...]]] = [
    (int, ('id',), ('_id',)),
    (datetime.datetime, ('timestamp',), ('_datetime', '_at', '_timestamp')),
    (datetime.date, ('date',), ('_date',)),
    (datetime.time, ('time',), ('_time',)),
    (float, ('price', 'cost', 'amount'), ('_price', '_cost', '_amount')),
]


def _type_from_name(column_name: str) -> type | None:
    lowered = column_name.lower()
    for python_type, names, suffixes in _NAME_RULES:
        if lowered in names or lowered.endswith(suffixes):
            return python_type
    return None


def resolve_type(
    dialect: str,
    type_code: Any,
    column_name: str | None = None,
    sample: Any = None,
) -> type:
    """Pick the Python type for a result column.

    The dialect's type map is consulted first, then the type of a sampled
    non-null value, then a guess from the column name. Anything left
    over is ``str``.

    Args:
        dialect: 'postgresql' or 'sqlite'
        type_code: type code from ``cursor.description``, often None on SQLite
        column_name: column name used for the name-based guess
        sample: first non-null value of the column, if any
    """
    if isinstance(type_code, type):
        return type_code

    if dialect == 'postgresql' and type_code in postgres_types:
        return postgres_types[type_code]
    if dialect == 'sqlite' and isinstance(type_code, str):
        declared = sqlite_types.get(type_code.split('(')[0].strip().upper())
        if declared is not None:
            return declared

    if sample is not None:
        return type(sample)

    return (column_name and _type_from_name(column_name)) or str


def class_name(cls: type) -> str:
    """Return the fully-qualified name of a class, e.g. ``datetime.date``."""
    return f'{cls.__module__}.{cls.__qualname__}'


def load_class(qualified_name: str) -> type:
    """Import and return the class named by a fully-qualified name.

    Raises TypeConversionError when the module or attribute cannot be found
    or does not name a class.
    """
    module_name, _, attr = qualified_name.rpartition('.')
    if not module_name or not attr:
        raise TypeConversionError(f'Not a qualified class name: {qualified_name!r}')
    try:
        obj = importlib.import_module(module_name)
        for part in attr.split('.'):
            obj = getattr(obj, part)
    except (ImportError, AttributeError) as err:
        raise TypeConversionError(f'Cannot load class {qualified_name!r}: {err}') from err
    if not isinstance(obj, type):
        raise TypeConversionError(f'{qualified_name!r} is not a class')
    return obj


@dataclass
class Column:
    """One column of a query result, as the driver describes it."""
    name: str
    type_code: Any = None
    python_type: type | None = None
    display_size: int | None = None
    internal_size: int | None = None
    precision: int | None = None
    scale: int | None = None
    nullable: bool | None = None

    @classmethod
    def from_cursor_description(cls, item: Sequence[Any], dialect: str,
                                sample: Any = None) -> Self:
        """Build a Column from one ``cursor.description`` entry.

        sqlite3 and psycopg both describe a column as a sequence of seven
        fields; missing trailing fields are taken as None.
        """
        fields = list(item)[:7]
        fields += [None] * (7 - len(fields))
        name, type_code, display_size, internal_size, precision, scale, null_ok = fields
        return cls(
            name=name,
            type_code=type_code,
            python_type=resolve_type(dialect, type_code, name, sample),
            display_size=display_size,
            internal_size=internal_size,
            precision=precision,
            scale=scale,
            nullable=None if null_ok is None else bool(null_ok),
        )

    def type_info(self) -> dict[str, Any]:
        """Column metadata with the Python type given by name."""
        info = asdict(self)
        info['python_type'] = self.python_type.__name__ if self.python_type else None
        return info


def unique_names(columns: Sequence[Column]) -> list[str]:
    """Column names in order, with repeats renamed ``name_2``, ``name_3``...

    A self-join such as ``SELECT a.id, b.id`` reports two columns named
    ``id``; keyed containers need a distinct key for each.
    """
    taken: set[str] = set()
    names = []
    for col in columns:
        name, n = col.name, 1
        while name in taken:
            n += 1
            name = f'{col.name}_{n}'
        taken.add(name)
        names.append(name)
    return names


def _first_non_null(rows: Sequence[Sequence[Any]], index: int) -> Any:
    return next((row[index] for row in rows if row[index] is not None), None)


def columns_from_cursor_description(description: Sequence[Any] | None, dialect: str,
                                    rows: Sequence[Sequence[Any]] = ()) -> list[Column]:
    """Create Column objects from a cursor description, sampling rows for
    columns the driver leaves untyped.
    """
    if description is None:
        return []
    return [Column.from_cursor_description(item, dialect, _first_non_null(rows, i))
            for i, item in enumerate(description)]


class ResultSetMetaData:
    """Column metadata for a result cursor.

    Column numbers are one-based, following the cursor convention.
    """

    def __init__(self, columns: list[Column]) -> None:
        self.columns = list(columns)

    def _column(self, column: int) -> Column:
        if not 1 <= column <= len(self.columns):
            raise CursorError(f'Column index {column} out of range 1..{len(self.columns)}')
        return self.columns[column - 1]

    def get_column_count(self) -> int:
        return len(self.columns)

    def get_column_name(self, column: int) -> str:
        return self._column(column).name

    def get_column_label(self, column: int) -> str:
        """Display label; drivers here report the alias as the name."""
        return self._column(column).name

    def get_column_type(self, column: int) -> Any:
        """Driver-specific type code, or None when the driver does not report one."""
        return self._column(column).type_code

    def get_column_class_name(self, column: int) -> str:
        """Fully-qualified name of the Python class values of this column map to.
        """
        python_type = self._column(column).python_type or object
        return class_name(python_type)

    def is_nullable(self, column: int) -> bool | None:
        return self._column(column).nullable

    def __repr__(self) -> str:
        return f'ResultSetMetaData({self.columns!r})'


# SQLite converters for DATE and DATETIME columns

def convert_date(val: bytes) -> datetime.date:
    """Convert ISO 8601 date string to date object."""
    return dateutil.parser.isoparse(val.decode()).date()


def convert_datetime(val: bytes) -> datetime.datetime:
    """Convert ISO 8601 datetime string to datetime object."""
    return dateutil.parser.isoparse(val.decode())
