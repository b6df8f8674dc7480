from typing_extensions import override

from windowed_dataset.filters.smoothing_filter import SmoothingFilter, require_column, recent_values
from windowed_dataset.window_buffer import WindowedBuffer

CASCADE_SIZE = 5


def median_filter(buffer: WindowedBuffer, window_size: int, column: str) -> float | None:
    """
    Median of the most recent window_size samples.

    For even sizes the upper-middle element is returned (index
    window_size // 2 of the sorted window), not the mean of the two middle
    elements.

    Returns:
        The median, or None when fewer than window_size samples are held or
        window_size is not positive
    """
    require_column(buffer, column)
    if window_size <= 0 or buffer.occupancy < window_size:
        return None

    values = sorted(recent_values(buffer, column, window_size))
    return values[window_size // 2]


def cascaded_median_filter(buffer: WindowedBuffer, column: str) -> float | None:
    """
    3-point median over the last 5 samples, then the 5-point median of
    the result.
    Only the 3 interior samples are filtered in the first stage; the
    outermost two pass through unchanged.

    Returns:
        The filtered value, or None with fewer than 5 samples
    """
    require_column(buffer, column)
    if buffer.occupancy < CASCADE_SIZE:
        return None

    values = recent_values(buffer, column, CASCADE_SIZE)
    median_3 = [
        sorted(values[i - 1:i + 2])[1] if 1 <= i < len(values) - 1 else values[i]
        for i in range(len(values))
    ]
    return sorted(median_3)[CASCADE_SIZE // 2]


class MedianFilter(SmoothingFilter):
    def __init__(self, window_size: int, column: str):
        super().__init__(column)
        self.window_size = window_size

    @override
    def apply(self, buffer: WindowedBuffer) -> float | None:
        return median_filter(buffer, self.window_size, self.column)


class CascadedMedianFilter(SmoothingFilter):
    @override
    def apply(self, buffer: WindowedBuffer) -> float | None:
        return cascaded_median_filter(buffer, self.column)
