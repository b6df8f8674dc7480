import logging
from typing import Any, Sequence

import pandas as pd

from windowed_dataset.column_store import ColumnType
from windowed_dataset.errors import InvalidColumnError
from windowed_dataset.window_buffer import WindowedBuffer

logger = logging.getLogger("TimeWindow")


def binary_search_window_start(timestamps: Sequence[Any], indices: Sequence[int], target_time: Any) -> int:
    """
    Finds the first position in indices whose timestamp is >= target_time.

    Args:
        timestamps: timestamp column, addressed by physical slot
        indices: slot indices in chronological order
        target_time: instant to search for

    Returns:
        Position in indices where the window starts, len(indices) if every
        timestamp is older than target_time
    """
    left, right = 0, len(indices)
    while left < right:
        mid = (left + right) // 2
        if timestamps[indices[mid]] < target_time:
            left = mid + 1
        else:
            right = mid
    return left


def time_window_view(buffer: WindowedBuffer, timestamp_column: str, window_length_ms: float | None) -> pd.DataFrame:
    """
    Returns the rows whose timestamp falls within window_length_ms of the
    most recent timestamp, in chronological order.

    A missing or negative window gives an empty frame, a zero window gives
    only the most recent row. For instant columns the window is a duration;
    numeric timestamp columns are read as epoch milliseconds.

    Raises:
        InvalidColumnError: timestamp_column is not part of the schema
    """
    indices = buffer.indices()

    if not indices:
        return buffer.select([])

    if window_length_ms is None or window_length_ms < 0:
        return buffer.select([])

    if window_length_ms == 0:
        return buffer.select([indices[-1]])

    if not buffer.has_column(timestamp_column):
        logger.error(f"Timestamp column '{timestamp_column}' not found in dataset")
        raise InvalidColumnError(timestamp_column, f"Timestamp column '{timestamp_column}' not found in dataset")

    timestamps = buffer.column(timestamp_column)
    latest_time = timestamps[indices[-1]]

    if buffer.column_types[timestamp_column] is ColumnType.INSTANT:
        start_time = latest_time - pd.Timedelta(milliseconds=window_length_ms).to_timedelta64()
    else:
        start_time = latest_time - window_length_ms

    start_pos = binary_search_window_start(timestamps, indices, start_time)
    return buffer.select(indices[start_pos:])
