import logging
from typing import Any, Mapping

import numpy as np
import pandas as pd

from windowed_dataset.column_store import ColumnType, allocate, set_value, select_rows, infer_column_type
from windowed_dataset.errors import MalformedRecordError

logger = logging.getLogger("WindowedBuffer")


class WindowedBuffer:
    """
    A fixed-capacity circular buffer of typed, time-ordered records.

    Records are assumed to arrive in chronological order. Once the buffer
    is full, each insertion overwrites the oldest physical slot.

    Buffers behave as values: insert() returns a new buffer and leaves the
    receiver, and every other reference to it, unchanged.
    """

    def __init__(self, column_types: Mapping[str, ColumnType | str], capacity: int):
        if capacity < 0:
            raise ValueError(f"Buffer capacity must be >= 0, got {capacity}")

        self._column_types: dict[str, ColumnType] = {
            name: ColumnType.of(kind) for name, kind in column_types.items()
        }
        self._capacity: int = capacity
        self._occupancy: int = 0
        self._write_cursor: int = 0
        self._storage: dict[str, np.ndarray] = {
            name: allocate(kind, capacity) for name, kind in self._column_types.items()
        }

    @classmethod
    def from_frame(cls, frame: pd.DataFrame, capacity: int) -> "WindowedBuffer":
        """Creates an empty buffer whose schema is inferred from a frame."""
        column_types = {name: infer_column_type(frame[name]) for name in frame.columns}
        return cls(column_types, capacity)

    @property
    def column_types(self) -> dict[str, ColumnType]:
        return dict(self._column_types)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def occupancy(self) -> int:
        return self._occupancy

    @property
    def write_cursor(self) -> int:
        return self._write_cursor

    def __len__(self) -> int:
        return self._occupancy

    def __repr__(self) -> str:
        return (f"WindowedBuffer(columns={list(self._column_types)}, capacity={self._capacity}, "
                f"occupancy={self._occupancy}, write_cursor={self._write_cursor})")

    def has_column(self, name: str) -> bool:
        return name in self._column_types

    def copy(self) -> "WindowedBuffer":
        """
        Deep copy of the buffer.
        Storage is copied slot for slot, so the cursor stays valid.
        """
        duplicate = WindowedBuffer.__new__(WindowedBuffer)
        duplicate._column_types = dict(self._column_types)
        duplicate._capacity = self._capacity
        duplicate._occupancy = self._occupancy
        duplicate._write_cursor = self._write_cursor
        duplicate._storage = {name: array.copy() for name, array in self._storage.items()}
        return duplicate

    def insert(self, record: Mapping[str, Any]) -> "WindowedBuffer":
        """
        Inserts one record and returns the resulting buffer.

        Args:
            record: mapping (dict, pandas row, ...) with a value for every
                declared column. Extra keys are ignored.

        Returns:
            A new buffer holding the record. The receiver is not modified.
            A zero-capacity buffer is returned as is.

        Raises:
            MalformedRecordError: a declared column has no value in record.
        """
        # size-0 window holds nothing
        if self._capacity == 0:
            logger.debug("Dropping record inserted into zero-capacity buffer")
            return self

        missing = [name for name in self._column_types if name not in record]
        if missing:
            logger.error(f"Rejecting record without columns {missing}")
            raise MalformedRecordError(missing)

        updated = self.copy()
        for name, kind in self._column_types.items():
            set_value(updated._storage[name], self._write_cursor, record[name], kind)

        updated._occupancy = min(self._occupancy + 1, self._capacity)
        updated._write_cursor = (self._write_cursor + 1) % self._capacity
        return updated

    def indices(self) -> list[int]:
        """
        Physical slot indices of the live rows, oldest first.
        Recomputed on every call from capacity, occupancy and cursor.
        """
        return chronological_indices(self._capacity, self._occupancy, self._write_cursor)

    def to_frame(self) -> pd.DataFrame:
        """Returns the live rows as a DataFrame in insertion order."""
        return select_rows(self._storage, self.indices())

    def select(self, indices: list[int]) -> pd.DataFrame:
        """Projects arbitrary physical slots, in the given order."""
        return select_rows(self._storage, indices)

    def column(self, name: str) -> np.ndarray:
        """Raw physical storage of one column, indexed by slot."""
        return self._storage[name]


def chronological_indices(capacity: int, occupancy: int, write_cursor: int) -> list[int]:
    """
    Derives the oldest-to-newest slot order of a circular buffer.

    Args:
        capacity: number of physical slots
        occupancy: number of live rows
        write_cursor: slot that receives the next write

    Returns:
        List of slot indices, length == occupancy
    """
    if occupancy == 0:
        return []

    # not wrapped yet
    if occupancy < capacity:
        return list(range(occupancy))

    return [i % capacity for i in range(write_cursor, write_cursor + capacity)]
