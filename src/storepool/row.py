"""Result containers returned by sessions."""
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

import pandas as pd
from storepool.types import Column


class Row(Mapping):
    """Immutable ordered mapping of column name to decoded value.

    Supports item access (``row['id']``) and attribute access (``row.id``).
    Key order follows the column order of the query.
    """

    __slots__ = ('_data',)

    def __init__(self, items: Iterable[tuple[str, Any]] | Mapping[str, Any] = ()) -> None:
        object.__setattr__(self, '_data', dict(items))

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __getattr__(self, name: str) -> Any:
        if name.startswith('_'):
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(name) from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise TypeError('Row is immutable')

    def __repr__(self) -> str:
        return f'Row({self._data!r})'

    def __hash__(self) -> int:
        return hash(tuple(self._data.items()))

    def __reduce__(self) -> tuple:
        return (Row, (self._data,))

    def to_dict(self) -> dict[str, Any]:
        """Return a mutable copy of the row.
        """
        return dict(self._data)


class ResultSet(tuple):
    """Decoded rows of one query, in cursor order.

    ``columns`` keeps the column metadata so an empty result still knows
    its shape.
    """

    columns: tuple[Column, ...]

    def __new__(cls, rows: Iterable[Row] = (), columns: Iterable[Column] = ()) -> 'ResultSet':
        self = super().__new__(cls, rows)
        self.columns = tuple(columns)
        return self

    def __repr__(self) -> str:
        return f'ResultSet({list(self)!r})'

    def to_dataframe(self) -> pd.DataFrame:
        """Load the rows into a pandas DataFrame.

        Column types are kept in ``df.attrs['column_types']``.
        """
        names = Column.get_names(self.columns) or (list(self[0]) if self else [])
        if not self:
            df = pd.DataFrame(columns=names)
        else:
            df = pd.DataFrame.from_records([r.to_dict() for r in self], columns=names)
        df.attrs['column_types'] = Column.get_column_types_dict(self.columns)
        return df


@dataclass(frozen=True)
class ExecResult:
    """Outcome of a mutating statement.
    """
    rows_affected: int
    last_insert_id: int
