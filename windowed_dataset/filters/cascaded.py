from typing_extensions import override

from windowed_dataset.filters.smoothing_filter import SmoothingFilter, require_column, recent_values
from windowed_dataset.window_buffer import WindowedBuffer


def cascaded_smoothing_filter(buffer: WindowedBuffer, median_window: int, ma_window: int, column: str) -> float | None:
    """
    Median filter followed by a moving average.

    The last median_window + ma_window samples are median filtered first to
    drop outliers, then the last ma_window filtered values are averaged to
    smooth the remaining noise.

    Args:
        buffer: a WindowedBuffer
        median_window: window size of the median stage
        ma_window: window size of the averaging stage
        column: column holding the values

    Returns:
        The smoothed value, or None for non-positive window sizes or
        insufficient data
    """
    require_column(buffer, column)
    if median_window <= 0 or ma_window <= 0:
        return None
    if buffer.occupancy < median_window + ma_window:
        return None

    values = recent_values(buffer, column, median_window + ma_window)
    half = median_window // 2

    # samples closer than half a window to either edge are left as they are
    median_filtered = [
        sorted(values[i - half:i + half + 1])[half] if half <= i < len(values) - half else values[i]
        for i in range(len(values))
    ]

    return float(sum(median_filtered[-ma_window:]) / ma_window)


class CascadedSmoothingFilter(SmoothingFilter):
    def __init__(self, median_window: int, ma_window: int, column: str):
        super().__init__(column)
        self.median_window = median_window
        self.ma_window = ma_window

    @override
    def apply(self, buffer: WindowedBuffer) -> float | None:
        return cascaded_smoothing_filter(buffer, self.median_window, self.ma_window, self.column)
