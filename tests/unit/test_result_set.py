"""
Tests for ResultSet cursor positioning and value access.
"""
import pytest
from tablemodel.cursor import ResultSet
from tablemodel.exceptions import CursorError
from tablemodel.types import Column, ResultSetMetaData


@pytest.fixture
def result_set():
    columns = [Column('id', None, int), Column('title', None, str)]
    rows = [(1, 'Java'), (2, 'Python'), (3, 'SQL')]
    return ResultSet(rows, ResultSetMetaData(columns))


@pytest.fixture
def empty_result_set():
    return ResultSet([], ResultSetMetaData([Column('id', None, int)]))


def test_starts_before_first(result_set):
    """Test that a new cursor has no current row"""
    assert result_set.get_row() == 0
    with pytest.raises(CursorError):
        result_set.get_object(1)


def test_next_walks_all_rows(result_set):
    """Test forward iteration with next()"""
    seen = []
    while result_set.next():
        seen.append(result_set.get_object(1))
    assert seen == [1, 2, 3]
    assert result_set.get_row() == 0
    assert result_set.next() is False


def test_previous_walks_back(result_set):
    """Test backward iteration from after the last row"""
    result_set.after_last()
    seen = []
    while result_set.previous():
        seen.append(result_set.get_object(2))
    assert seen == ['SQL', 'Python', 'Java']


def test_last_gives_row_count(result_set):
    """Test that seeking to the last row reports its ordinal"""
    assert result_set.last() is True
    assert result_set.get_row() == 3


def test_last_on_empty_result(empty_result_set):
    """Test that last() on an empty result leaves no current row"""
    assert empty_result_set.last() is False
    assert empty_result_set.get_row() == 0


def test_absolute_positions(result_set):
    """Test absolute positioning including negative and out-of-range rows"""
    assert result_set.absolute(2) is True
    assert result_set.get_object(2) == 'Python'

    assert result_set.absolute(-1) is True
    assert result_set.get_row() == 3

    assert result_set.absolute(-3) is True
    assert result_set.get_row() == 1

    assert result_set.absolute(0) is False
    assert result_set.get_row() == 0

    assert result_set.absolute(4) is False
    assert result_set.get_row() == 0
    assert result_set.previous() is True
    assert result_set.get_row() == 3

    assert result_set.absolute(-4) is False
    assert result_set.next() is True
    assert result_set.get_row() == 1


def test_relative_moves(result_set):
    """Test relative positioning from the current row"""
    result_set.first()
    assert result_set.relative(2) is True
    assert result_set.get_row() == 3
    assert result_set.relative(-1) is True
    assert result_set.get_row() == 2
    assert result_set.relative(5) is False


def test_get_object_column_out_of_range(result_set):
    """Test that bad column indexes raise CursorError"""
    result_set.first()
    with pytest.raises(CursorError):
        result_set.get_object(0)
    with pytest.raises(CursorError):
        result_set.get_object(3)


def test_find_column(result_set):
    """Test case-insensitive column lookup"""
    assert result_set.find_column('title') == 2
    assert result_set.find_column('ID') == 1
    with pytest.raises(CursorError):
        result_set.find_column('price')


def test_to_dicts(result_set):
    """Test conversion of all rows to dictionaries"""
    result_set.absolute(2)
    assert result_set.to_dicts() == [
        {'id': 1, 'title': 'Java'},
        {'id': 2, 'title': 'Python'},
        {'id': 3, 'title': 'SQL'},
    ]
    assert result_set.get_row() == 2


def test_closed_result_set_raises(result_set):
    """Test that every operation on a closed cursor raises CursorError"""
    result_set.close()
    assert result_set.closed is True
    for op in (result_set.next, result_set.last, result_set.get_row,
               result_set.get_metadata):
        with pytest.raises(CursorError):
            op()
    with pytest.raises(CursorError):
        result_set.absolute(1)


def test_to_dicts_repeated_column_names():
    """Test that a column sharing an earlier column's name keeps its value"""
    columns = [Column('id', None, int), Column('id', None, int)]
    result_set = ResultSet([(1, 2), (2, 3)], ResultSetMetaData(columns))
    assert result_set.to_dicts() == [{'id': 1, 'id_2': 2}, {'id': 2, 'id_2': 3}]
