import datetime
import decimal

import pytest
from tablemodel.exceptions import CursorError, TypeConversionError
from tablemodel.types import Column, ResultSetMetaData, columns_from_cursor_description
from tablemodel.types import load_class, postgres_types, resolve_type, to_cursor_index
from tablemodel.types import unique_names


def test_to_cursor_index():
    """Test zero-based to one-based translation"""
    assert to_cursor_index(0) == 1
    assert to_cursor_index(9) == 10


def test_resolve_type_sqlite_declared():
    """Test SQLite declared type names"""
    assert resolve_type('sqlite', 'INTEGER') is int
    assert resolve_type('sqlite', 'varchar(20)') is str
    assert resolve_type('sqlite', 'DATE') is datetime.date


def test_resolve_type_postgres_codes():
    """Test PostgreSQL type OIDs"""
    int4 = next(k for k, v in postgres_types.items() if v is int)
    assert resolve_type('postgresql', int4) is int
    numeric = next(k for k, v in postgres_types.items() if v is decimal.Decimal)
    assert resolve_type('postgresql', numeric) is decimal.Decimal


def test_resolve_type_prefers_sample_over_name():
    """Test that a sampled value beats column-name heuristics"""
    assert resolve_type('sqlite', None, 'book_id', sample='X-1') is str
    assert resolve_type('sqlite', None, 'published', sample=datetime.date(2020, 1, 1)) is datetime.date


def test_resolve_type_name_heuristics():
    """Test fallbacks on column names when there is nothing to sample"""
    assert resolve_type('sqlite', None, 'id') is int
    assert resolve_type('sqlite', None, 'created_at') is datetime.datetime
    assert resolve_type('sqlite', None, 'price') is float
    assert resolve_type('sqlite', None, 'published_date') is datetime.date
    assert resolve_type('sqlite', None, 'title') is str


def test_columns_from_description_samples_first_non_null():
    """Test that untyped columns are typed from the first non-null value"""
    description = [('title', None, None, None, None, None, None),
                   ('price', None, None, None, None, None, None)]
    rows = [(None, None), ('Java', 49.99)]
    columns = columns_from_cursor_description(description, 'sqlite', rows)
    assert [c.python_type for c in columns] == [str, float]
    assert columns_from_cursor_description(None, 'sqlite') == []


def test_metadata_accessors():
    """Test one-based metadata lookups"""
    metadata = ResultSetMetaData([
        Column('id', None, int),
        Column('published', None, datetime.date, nullable=True),
    ])
    assert metadata.get_column_count() == 2
    assert metadata.get_column_name(1) == 'id'
    assert metadata.get_column_label(2) == 'published'
    assert metadata.get_column_class_name(1) == 'builtins.int'
    assert metadata.get_column_class_name(2) == 'datetime.date'
    assert metadata.is_nullable(2) is True
    assert metadata.get_column_type(1) is None

    with pytest.raises(CursorError):
        metadata.get_column_name(0)
    with pytest.raises(CursorError):
        metadata.get_column_class_name(3)


def test_load_class():
    """Test resolving class names back to classes"""
    assert load_class('builtins.int') is int
    assert load_class('datetime.date') is datetime.date
    assert load_class('decimal.Decimal') is decimal.Decimal


@pytest.mark.parametrize('name', ['int', 'nosuchmodule.Thing', 'datetime.nosuch', 'math.pi'])
def test_load_class_failures(name):
    """Test that unresolvable names raise TypeConversionError"""
    with pytest.raises(TypeConversionError):
        load_class(name)


def test_resolve_type_postgres_arrays():
    """Test that array OIDs of mapped types resolve to list"""
    from psycopg.postgres import types as pg_types
    assert resolve_type('postgresql', pg_types.get('text').oid) is str
    assert resolve_type('postgresql', pg_types.get('int4').array_oid) is list


def test_column_from_short_description():
    """Test that missing description fields default to None"""
    column = Column.from_cursor_description(('title', None), 'sqlite', 'Java')
    assert column.name == 'title'
    assert column.python_type is str
    assert column.nullable is None
    assert column.type_info()['python_type'] == 'str'


def test_unique_names():
    """Test distinct keys for columns sharing a name"""
    columns = [Column('id'), Column('title'), Column('id'), Column('id_2'), Column('id')]
    assert unique_names(columns) == ['id', 'title', 'id_2', 'id_2_2', 'id_3']
