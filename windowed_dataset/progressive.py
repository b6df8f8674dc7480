import logging
from typing import Any, Callable

import pandas as pd

from windowed_dataset.config import PROGRESSIVE_BUFFER_SIZE, TIME_FIELD
from windowed_dataset.errors import InvalidColumnError
from windowed_dataset.window_buffer import WindowedBuffer

logger = logging.getLogger("ProgressiveBuilder")


def add_column_by_windowed_fn(
    time_series: pd.DataFrame,
    colname: str,
    windowed_fn: Callable[[WindowedBuffer], Any],
    windowed_dataset_size: int | None = None,                   # accepted for compatibility, not used
    time_field: str = TIME_FIELD,
    include_current: bool = False,
) -> pd.DataFrame:
    """
    Adds a column computed by replaying a time series through a windowed
    buffer, row by row, as if it were arriving in real time.

    Rows are inserted in time_field order. By default each row receives
    windowed_fn applied to the buffer holding all earlier rows, so the
    first row gets None and no row sees its own values. With
    include_current=True the row is inserted before windowed_fn runs.

    The buffer always holds PROGRESSIVE_BUFFER_SIZE rows at most;
    windowed_dataset_size does not change that.

    Args:
        time_series: frame with one record per row
        colname: name of the new column
        windowed_fn: function of a WindowedBuffer returning a value or None
        windowed_dataset_size: ignored, see above
        time_field: column that orders the rows
        include_current: whether a row's own record is visible to windowed_fn

    Returns:
        A copy of time_series with colname added
    """
    if time_field not in time_series.columns:
        logger.error(f"Time field '{time_field}' not found in time series")
        raise InvalidColumnError(time_field)

    if windowed_dataset_size is not None and windowed_dataset_size != PROGRESSIVE_BUFFER_SIZE:
        logger.warning(f"windowed_dataset_size={windowed_dataset_size} is ignored, "
                       f"using fixed buffer capacity {PROGRESSIVE_BUFFER_SIZE}")

    # positional index, so duplicate row labels cannot misalign the output
    ordered = time_series.reset_index(drop=True).sort_values(time_field, kind="stable")
    buffer = WindowedBuffer.from_frame(time_series, PROGRESSIVE_BUFFER_SIZE)

    results: list[Any] = []
    previous: Any = None
    for record in ordered.to_dict("records"):
        buffer = buffer.insert(record)
        current = windowed_fn(buffer)
        results.append(current if include_current else previous)
        previous = current

    result = time_series.copy()
    result[colname] = pd.Series(results, index=ordered.index, dtype=object).sort_index().to_numpy()
    return result
