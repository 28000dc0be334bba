"""Materialized query rows with positional and named column access."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any, TypeVar

from stepcursor.errors import ColumnIndexError, UnknownColumnError
from stepcursor.value import Value

T = TypeVar("T")


@dataclass(frozen=True)
class Position:
    """Address a column by zero-based position."""

    index: int

    def resolve(self, row: Row) -> int:
        """Return the position if it lies inside the row."""
        if not 0 <= self.index < row.column_count():
            raise ColumnIndexError(self.index)
        return self.index


@dataclass(frozen=True)
class ColumnName:
    """Address a column by name; the first matching name wins."""

    name: str

    def resolve(self, row: Row) -> int:
        """Return the position of the first column called ``name``."""
        return row.column_index(self.name)


RowIndex = Position | ColumnName


def as_row_index(index: int | str | RowIndex) -> RowIndex:
    """Turn a plain int or str into the matching RowIndex variant."""
    if isinstance(index, (Position, ColumnName)):
        return index
    if isinstance(index, bool):
        raise TypeError("column index must be an int or str, not bool")
    if isinstance(index, int):
        return Position(index)
    if isinstance(index, str):
        return ColumnName(index)
    raise TypeError(f"column index must be an int or str, not {type(index).__name__}")


@dataclass(frozen=True)
class Row:
    """One row of output, fully read out of the engine.

    ``names`` is either empty or the same length as ``values``. Rows built
    with ``from_values`` carry no names, so only positional access works
    on them.
    """

    values: tuple[Value, ...]
    names: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate that names line up with values."""
        if self.names and len(self.names) != len(self.values):
            raise ValueError(
                f"row has {len(self.values)} values but {len(self.names)} column names"
            )

    @classmethod
    def from_values(cls, raw: Iterable[Any]) -> Row:
        """Build a name-less row from engine-native values."""
        return cls(values=tuple(Value.from_native(v) for v in raw))

    def column_count(self) -> int:
        """Number of columns in the row."""
        return len(self.values)

    def column_index(self, name: str) -> int:
        """Position of the first column called ``name``."""
        try:
            idx = self.names.index(name)
        except ValueError:
            raise UnknownColumnError(name) from None
        if idx >= self.column_count():
            raise ColumnIndexError(idx)
        return idx

    def value_at(self, index: int | str | RowIndex) -> Value:
        """Return the Value at a position or column name."""
        idx = as_row_index(index).resolve(self)
        if not 0 <= idx < self.column_count():
            raise ColumnIndexError(idx)
        return self.values[idx]

    def decode_at(self, index: int | str | RowIndex, target: type[T]) -> T:
        """Return the value at ``index`` decoded as ``target``."""
        return self.value_at(index).decode(target)

    def keys(self) -> list[str]:
        """Return column names."""
        return list(self.names)

    def __getitem__(self, key: int | str) -> Any:
        """Get a column's plain payload by name or position."""
        return self.value_at(key).as_python()

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[Any]:
        return (v.as_python() for v in self.values)
