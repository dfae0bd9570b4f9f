"""
Conversions between DataFrames and the representations the numerical
libraries and upstream ingestion work with (numpy matrices, pandas frames,
lists of dict records).
"""
from typing import Any, Iterable, List, Mapping

import numpy as np
import pandas as pd

from .dataframe import ColumnMeta, ColumnType, DataFrame, DefaultDataFrame, build_column_value
from .errors import SchemaError

# Feature columns are always read as float64; INTEGER widens to DOUBLE.
NUMERIC_COLUMN_TYPES = (ColumnType.DOUBLE, ColumnType.INTEGER)


def to_feature_matrix(data_frame: DataFrame) -> np.ndarray:
    """
    Convert a DataFrame into the float64 matrix expected by scikit-learn.

    Every column is a feature dimension. Only DOUBLE and INTEGER columns are
    accepted, and null cells are rejected, so problems surface before any
    model is fitted.

    Returns:
        np.ndarray: Shape (n_rows, n_columns), dtype float64.
    """
    metas = data_frame.column_metas()
    non_numeric = [meta.name for meta in metas if meta.column_type not in NUMERIC_COLUMN_TYPES]
    if non_numeric:
        raise SchemaError(f"Feature columns must be DOUBLE or INTEGER, got non-numeric columns: {non_numeric}")

    X = np.empty((data_frame.size(), len(metas)), dtype=np.float64)
    for i, row in enumerate(data_frame):
        for j, value in enumerate(row):
            if value.is_null():
                raise SchemaError(f"Row {i} has a null value in feature column '{metas[j].name}'")
            X[i, j] = value.double_value()
    return X


def load_records(records: Iterable[Mapping[str, Any]]) -> DefaultDataFrame:
    """
    Build a DataFrame from dict-like records.

    The schema (column order and types) is inferred from the first record;
    it cannot contain None values. Later records may omit keys, which become
    nulls, but may not introduce new ones.
    """
    data_frame = None
    names: List[str] = []
    for i, record in enumerate(records):
        if data_frame is None:
            metas = []
            for name, value in record.items():
                if value is None:
                    raise SchemaError(f"Cannot infer the type of column '{name}' from a null value")
                metas.append(ColumnMeta(name, build_column_value(value).column_type))
            data_frame = DefaultDataFrame(metas)
            names = [meta.name for meta in metas]
        extra = set(record) - set(names)
        if extra:
            raise SchemaError(f"Record {i} has columns not in the schema: {sorted(extra)}")
        data_frame.append_row([record.get(name) for name in names])

    if data_frame is None:
        raise SchemaError("Cannot infer a schema from an empty record source")
    return data_frame


def _column_type_for_dtype(series: pd.Series) -> ColumnType:
    if pd.api.types.is_bool_dtype(series):
        return ColumnType.BOOLEAN
    if pd.api.types.is_integer_dtype(series):
        return ColumnType.INTEGER
    if pd.api.types.is_float_dtype(series):
        return ColumnType.DOUBLE
    if pd.api.types.is_string_dtype(series) or pd.api.types.is_object_dtype(series):
        return ColumnType.STRING
    raise SchemaError(f"Unsupported dtype {series.dtype} for column '{series.name}'")


def from_pandas(df: pd.DataFrame) -> DefaultDataFrame:
    """Build a DataFrame from a pandas frame, mapping dtypes to ColumnTypes. NaN becomes null."""
    metas = [ColumnMeta(str(name), _column_type_for_dtype(df[name])) for name in df.columns]
    data_frame = DefaultDataFrame(metas)
    for values in df.itertuples(index=False, name=None):
        data_frame.append_row([None if pd.isna(value) else value for value in values])
    return data_frame


def to_pandas(data_frame: DataFrame) -> pd.DataFrame:
    return pd.DataFrame.from_records(data_frame.to_records(), columns=data_frame.column_names())
