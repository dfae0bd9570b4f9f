"""
Typed, column-metadata-aware tabular container.

A DataFrame owns an ordered schema (a tuple of ColumnMeta) and an append-only
list of Rows. Every cell is a ColumnValue whose type is checked against the
schema when the row is appended, so type problems surface at the point of
insertion rather than later inside an algorithm.

DataFrames are single-owner: there is no locking, and appending while
iterating over the same frame is not allowed.
"""
import abc
import collections.abc
import enum
import numbers
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import ColumnIndexError, ColumnTypeError, RowIndexError, SchemaError


class ColumnType(enum.Enum):
    DOUBLE = "DOUBLE"
    INTEGER = "INTEGER"
    STRING = "STRING"
    BOOLEAN = "BOOLEAN"
    NULL = "NULL"


@dataclass(frozen=True)
class ColumnMeta:
    """Name and declared type of one column."""
    name: str
    column_type: ColumnType


class ColumnValue(abc.ABC):
    """
    A scalar tagged with its ColumnType.

    Typed accessors return the stored value only when the tag matches. The one
    allowed widening is an INTEGER read through `double_value()`.
    """
    column_type: ColumnType

    def __init__(self, value):
        self._value = value

    def get_value(self):
        return self._value

    def is_null(self) -> bool:
        return False

    def double_value(self) -> float:
        raise self._mismatch(ColumnType.DOUBLE)

    def int_value(self) -> int:
        raise self._mismatch(ColumnType.INTEGER)

    def string_value(self) -> str:
        raise self._mismatch(ColumnType.STRING)

    def boolean_value(self) -> bool:
        raise self._mismatch(ColumnType.BOOLEAN)

    def _mismatch(self, requested: ColumnType) -> ColumnTypeError:
        return ColumnTypeError(
            f"Cannot read {self.column_type.name} value {self._value!r} as {requested.name}"
        )

    def __eq__(self, other):
        if not isinstance(other, ColumnValue):
            return NotImplemented
        return self.column_type == other.column_type and self._value == other._value

    def __hash__(self):
        return hash((self.column_type, self._value))

    def __repr__(self):
        return f"{type(self).__name__}({self._value!r})"


class DoubleValue(ColumnValue):
    column_type = ColumnType.DOUBLE

    def __init__(self, value: float):
        super().__init__(float(value))

    def double_value(self) -> float:
        return self._value


class IntValue(ColumnValue):
    column_type = ColumnType.INTEGER

    def __init__(self, value: int):
        super().__init__(int(value))

    def int_value(self) -> int:
        return self._value

    def double_value(self) -> float:
        return float(self._value)


class StringValue(ColumnValue):
    column_type = ColumnType.STRING

    def __init__(self, value: str):
        super().__init__(str(value))

    def string_value(self) -> str:
        return self._value


class BooleanValue(ColumnValue):
    column_type = ColumnType.BOOLEAN

    def __init__(self, value: bool):
        super().__init__(bool(value))

    def boolean_value(self) -> bool:
        return self._value


class NullValue(ColumnValue):
    column_type = ColumnType.NULL

    def __init__(self):
        super().__init__(None)

    def is_null(self) -> bool:
        return True


def _is_bool(value) -> bool:
    return isinstance(value, (bool, np.bool_))


def build_column_value(value: Any, column_type: Optional[ColumnType] = None) -> ColumnValue:
    """
    Wrap a native scalar in a ColumnValue.

    Args:
        value: A Python or numpy scalar, None, or an existing ColumnValue.
        column_type: The declared type to coerce to. When omitted the type is
                     inferred from the Python type of `value`.

    Returns:
        ColumnValue: The wrapped value. None always becomes a NullValue.

    Raises:
        SchemaError: If the value cannot be represented as `column_type`.
    """
    if isinstance(value, ColumnValue):
        if column_type is not None and not _is_compatible(value.column_type, column_type):
            raise SchemaError(f"{value!r} does not fit a {column_type.name} column")
        return value
    if value is None:
        return NullValue()

    if column_type is None:
        column_type = _infer_column_type(value)

    if column_type is ColumnType.DOUBLE:
        if isinstance(value, numbers.Real) and not _is_bool(value):
            return DoubleValue(value)
    elif column_type is ColumnType.INTEGER:
        if isinstance(value, numbers.Integral) and not _is_bool(value):
            return IntValue(value)
    elif column_type is ColumnType.STRING:
        if isinstance(value, str):
            return StringValue(value)
    elif column_type is ColumnType.BOOLEAN:
        if _is_bool(value):
            return BooleanValue(value)
    raise SchemaError(f"{value!r} ({type(value).__name__}) cannot be stored in a {column_type.name} column")


def _infer_column_type(value) -> ColumnType:
    # bool first: bool is a subclass of int
    if _is_bool(value):
        return ColumnType.BOOLEAN
    if isinstance(value, numbers.Integral):
        return ColumnType.INTEGER
    if isinstance(value, numbers.Real):
        return ColumnType.DOUBLE
    if isinstance(value, str):
        return ColumnType.STRING
    raise SchemaError(f"Unsupported value type {type(value).__name__} for {value!r}")


def _is_compatible(value_type: ColumnType, declared: ColumnType) -> bool:
    if value_type is declared or value_type is ColumnType.NULL:
        return True
    return value_type is ColumnType.INTEGER and declared is ColumnType.DOUBLE


class Row:
    """An immutable, ordered tuple of ColumnValues."""

    def __init__(self, values: Sequence[ColumnValue]):
        values = tuple(values)
        for value in values:
            if not isinstance(value, ColumnValue):
                raise SchemaError(f"Row cells must be ColumnValue instances, got {type(value).__name__}")
        self._values = values

    def get_value(self, index: int) -> ColumnValue:
        if not 0 <= index < len(self._values):
            raise ColumnIndexError(f"Column index {index} is out of range for a row of size {len(self._values)}")
        return self._values[index]

    def values(self) -> List[Any]:
        """Raw Python scalars of this row, in column order."""
        return [value.get_value() for value in self._values]

    def size(self) -> int:
        return len(self._values)

    def __len__(self):
        return len(self._values)

    def __iter__(self) -> Iterator[ColumnValue]:
        return iter(self._values)

    def __eq__(self, other):
        if not isinstance(other, Row):
            return NotImplemented
        return self._values == other._values

    def __hash__(self):
        return hash(self._values)

    def __repr__(self):
        return f"Row({list(self._values)!r})"


class DataFrame(abc.ABC):
    """
    Abstract schema-typed table.

    Implementations must keep rows in insertion order, check every appended
    row against the schema, and never drop rows.
    """

    @abc.abstractmethod
    def column_metas(self) -> Tuple[ColumnMeta, ...]:
        raise NotImplementedError("Subclasses must implement this method.")

    @abc.abstractmethod
    def append_row(self, values: Union[Row, Sequence[Any]]) -> None:
        raise NotImplementedError("Subclasses must implement this method.")

    @abc.abstractmethod
    def get_row(self, index: int) -> Row:
        raise NotImplementedError("Subclasses must implement this method.")

    @abc.abstractmethod
    def size(self) -> int:
        raise NotImplementedError("Subclasses must implement this method.")

    @abc.abstractmethod
    def __iter__(self) -> Iterator[Row]:
        raise NotImplementedError("Subclasses must implement this method.")

    @abc.abstractmethod
    def select(self, column_indices: Sequence[int]) -> "DataFrame":
        raise NotImplementedError("Subclasses must implement this method.")

    def remove(self, column_index: int) -> "DataFrame":
        """New frame holding every column except `column_index`."""
        width = len(self.column_metas())
        if not 0 <= column_index < width:
            raise SchemaError(f"Column index {column_index} is out of range for {width} columns")
        return self.select([i for i in range(width) if i != column_index])

    def column_names(self) -> List[str]:
        return [meta.name for meta in self.column_metas()]

    def to_records(self) -> List[Dict[str, Any]]:
        """Rows as plain dicts keyed by column name, for result serialization."""
        names = self.column_names()
        return [dict(zip(names, row.values())) for row in self]

    def __len__(self):
        return self.size()


class DefaultDataFrame(DataFrame):
    """
    List-backed DataFrame.

    Args:
        column_metas: The schema. Column names must be unique.
        rows: Optional initial rows; each one is checked like `append_row`.
    """

    def __init__(self, column_metas: Sequence[ColumnMeta], rows: Optional[Sequence[Row]] = None):
        column_metas = tuple(column_metas)
        if not column_metas:
            raise SchemaError("A DataFrame needs at least one column")
        names = [meta.name for meta in column_metas]
        if len(set(names)) != len(names):
            raise SchemaError(f"Duplicate column names in schema: {names}")
        self._column_metas = column_metas
        self._rows: List[Row] = []
        for row in rows or ():
            self.append_row(row)

    def column_metas(self) -> Tuple[ColumnMeta, ...]:
        return self._column_metas

    def append_row(self, values: Union[Row, Sequence[Any]]) -> None:
        """
        Append a pre-built Row or a raw sequence of scalars.

        Raw scalars are wrapped according to the declared type of their
        column. A length or type mismatch raises SchemaError and leaves the
        frame unchanged.
        """
        if isinstance(values, Row):
            row = values
            self._check_length(row.size())
            for meta, value in zip(self._column_metas, row):
                if not _is_compatible(value.column_type, meta.column_type):
                    raise SchemaError(
                        f"Column '{meta.name}' is {meta.column_type.name} but the row holds {value.column_type.name}"
                    )
        else:
            if isinstance(values, (str, bytes)) or not isinstance(values, (collections.abc.Sequence, np.ndarray)):
                raise SchemaError(f"Expected a Row or a sequence of values, got {type(values).__name__}")
            self._check_length(len(values))
            row = Row([
                build_column_value(value, meta.column_type)
                for meta, value in zip(self._column_metas, values)
            ])
        self._rows.append(row)

    def _check_length(self, length: int) -> None:
        if length != len(self._column_metas):
            raise SchemaError(
                f"Row has {length} values but the schema declares {len(self._column_metas)} columns"
            )

    def get_row(self, index: int) -> Row:
        if not 0 <= index < len(self._rows):
            raise RowIndexError(f"Row index {index} is out of range [0, {len(self._rows)})")
        return self._rows[index]

    def size(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        # Bounded by the size at the time iter() is called.
        size = len(self._rows)
        return (self._rows[i] for i in range(size))

    def select(self, column_indices: Sequence[int]) -> "DefaultDataFrame":
        width = len(self._column_metas)
        for index in column_indices:
            if not 0 <= index < width:
                raise SchemaError(f"Column index {index} is out of range for {width} columns")
        metas = [self._column_metas[i] for i in column_indices]
        rows = [Row([row.get_value(i) for i in column_indices]) for row in self._rows]
        return DefaultDataFrame(metas, rows)

    def __repr__(self):
        return f"DefaultDataFrame(columns={self.column_names()}, size={len(self._rows)})"


def empty_data_frame(column_metas: Sequence[ColumnMeta]) -> DefaultDataFrame:
    return DefaultDataFrame(column_metas)
