from datetime import datetime
from enum import Enum
from typing import Any, Sequence

import numpy as np
import pandas as pd


class ColumnType(Enum):
    """
    Element kinds a buffer column can hold.
    The value is the name accepted in schema declarations.
    """
    FLOAT64 = "float64"
    FLOAT32 = "float32"
    INT32   = "int32"
    INT64   = "int64"
    BOOLEAN = "boolean"
    STRING  = "string"
    INSTANT = "instant"

    @classmethod
    def of(cls, kind: "ColumnType | str") -> "ColumnType":
        """Accepts either a ColumnType or its declared name."""
        if isinstance(kind, ColumnType):
            return kind
        try:
            return cls(str(kind).lower())
        except ValueError:
            raise ValueError(f"Unsupported column type '{kind}'") from None

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(_DTYPES[self])

    def coerce(self, value: Any) -> Any:
        """
        Converts a record value to the storage representation of this kind.
        """
        if self is ColumnType.INSTANT:
            ts = pd.Timestamp(value)
            if ts.tzinfo is not None:
                ts = ts.tz_convert("UTC").tz_localize(None)
            return ts.to_datetime64()
        if self is ColumnType.STRING:
            return value if value is None else str(value)
        return value


_DTYPES: dict[ColumnType, str] = {
    ColumnType.FLOAT64: "float64",
    ColumnType.FLOAT32: "float32",
    ColumnType.INT32:   "int32",
    ColumnType.INT64:   "int64",
    ColumnType.BOOLEAN: "bool",
    ColumnType.STRING:  "object",
    ColumnType.INSTANT: "datetime64[ns]",
}


def allocate(column_type: ColumnType | str, length: int) -> np.ndarray:
    """
    Allocates a default-filled array for one column.

    Numeric kinds start at 0, booleans at False, strings at "" and
    instants at the epoch.
    """
    column_type = ColumnType.of(column_type)
    if column_type is ColumnType.STRING:
        return np.full(length, "", dtype=object)
    return np.zeros(length, dtype=column_type.dtype)


def get_value(array: np.ndarray, index: int) -> Any:
    value = array[index]
    if isinstance(value, np.datetime64):
        return pd.Timestamp(value)
    if isinstance(value, np.generic):
        return value.item()
    return value


def set_value(array: np.ndarray, index: int, value: Any, column_type: ColumnType | str) -> None:
    array[index] = ColumnType.of(column_type).coerce(value)


def select_rows(storage: dict[str, np.ndarray], indices: Sequence[int]) -> pd.DataFrame:
    """
    Projects the given physical rows into a new frame, in the given order.

    An empty index list gives a zero-row frame that still carries every
    column with its dtype.
    """
    rows = np.asarray(indices, dtype=np.intp)
    return pd.DataFrame({name: array[rows] for name, array in storage.items()})


def infer_column_type(series: pd.Series) -> ColumnType:
    """Maps a pandas column dtype back to a ColumnType."""
    dtype = series.dtype
    if pd.api.types.is_bool_dtype(dtype):
        return ColumnType.BOOLEAN
    if pd.api.types.is_datetime64_any_dtype(dtype):
        return ColumnType.INSTANT
    if pd.api.types.is_float_dtype(dtype):
        return ColumnType.FLOAT32 if dtype == np.float32 else ColumnType.FLOAT64
    if pd.api.types.is_integer_dtype(dtype):
        return ColumnType.INT32 if dtype == np.int32 else ColumnType.INT64
    if len(series) and all(isinstance(v, datetime) for v in series):
        return ColumnType.INSTANT
    return ColumnType.STRING
