"""Connection options and the loaders that turn query rows into data objects."""
import pathlib
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

import pandas as pd
from tablemodel.strategy import get_strategy
from tablemodel.types import Column, unique_names

__all__ = [
    'DatabaseOptions',
    'pandas_numpy_data_loader',
    'iterdict_data_loader',
]

# Data loaders are called as loader(rows, columns): rows are tuples in
# column order, columns the matching list of Column.


def _column_types(columns: Sequence[Column]) -> dict[str, dict]:
    return {name: col.type_info() for name, col in zip(unique_names(columns), columns)}


def iterdict_data_loader(data, columns, **kwargs) -> list[dict]:
    """Minimal data loader returning one dict per row.

    Columns that share a name get distinct keys (``id``, ``id_2``).
    Accepts additional keyword arguments for compatibility with other data
    loaders, but doesn't use them.
    """
    names = unique_names(columns)
    return [dict(zip(names, row)) for row in data]


def pandas_numpy_data_loader(data, columns, **kwargs) -> pd.DataFrame:
    """Standard pandas DataFrame loader using NumPy.

    Always returns a DataFrame, never None, with columns preserved for empty
    results. Repeated column names are kept as repeated DataFrame columns.
    Includes type information in the DataFrame.attrs attribute.
    """
    names = [col.name for col in columns]
    rows = list(data)
    if rows:
        df = pd.DataFrame.from_records(rows, columns=names)
    else:
        df = pd.DataFrame(columns=names)
    df.attrs['column_types'] = _column_types(columns)
    return df


def _scriptname() -> str | None:
    name = pathlib.Path(sys.argv[0]).stem if sys.argv and sys.argv[0] else ''
    return name or None


@dataclass
class DatabaseOptions:
    """Options

    supported driver names: `postgresql`, `sqlite`

    Table model options:
    - step_before_seek: advance the cursor one row before every absolute
      seek in ResultSetTableModel.value_at (default: False). Some drivers
      mis-render date columns unless the cursor has been stepped first.
    """
    drivername: str = 'postgresql'
    hostname: str = None
    username: str = None
    password: str = None
    database: str = None
    port: int = 0
    timeout: int = 0
    appname: str = None
    data_loader: Callable[..., Any] | None = None
    step_before_seek: bool = False

    def __post_init__(self):
        strategy = get_strategy(self.drivername)
        self.appname = self.appname or _scriptname() or 'python_console'
        missing = strategy.missing_options(self)
        if missing:
            raise ValueError(f'{self.drivername} connections need: {", ".join(missing)}')
        if self.data_loader is None:
            self.data_loader = pandas_numpy_data_loader
