from typing_extensions import override

from windowed_dataset.filters.smoothing_filter import SmoothingFilter, require_column, recent_values
from windowed_dataset.window_buffer import WindowedBuffer


def moving_average(buffer: WindowedBuffer, window_size: int, column: str) -> float | None:
    """
    Simple moving average of the most recent window_size samples.

    Returns:
        The mean, or None when fewer than window_size samples are held or
        window_size is not positive
    """
    require_column(buffer, column)
    if window_size <= 0 or buffer.occupancy < window_size:
        return None

    values = recent_values(buffer, column, window_size)
    return sum(values) / window_size


def exponential_moving_average(buffer: WindowedBuffer, alpha: float, column: str) -> float | None:
    """
    Exponential moving average over every sample held by the buffer.

    The oldest sample seeds the average, newer samples are folded in with
    ema = alpha * value + (1 - alpha) * ema.

    Args:
        alpha: smoothing factor, 0 < alpha <= 1 (higher is more responsive)

    Returns:
        The EMA, or None for an empty buffer or an alpha out of range
    """
    require_column(buffer, column)
    if not 0 < alpha <= 1:
        return None
    if buffer.occupancy == 0:
        return None

    values = recent_values(buffer, column)
    ema = values[0]
    for value in values[1:]:
        ema = alpha * value + (1 - alpha) * ema
    return ema


class MovingAverage(SmoothingFilter):
    def __init__(self, window_size: int, column: str):
        super().__init__(column)
        self.window_size = window_size

    @override
    def apply(self, buffer: WindowedBuffer) -> float | None:
        return moving_average(buffer, self.window_size, self.column)


class ExponentialMovingAverage(SmoothingFilter):
    def __init__(self, alpha: float, column: str):
        super().__init__(column)
        self.alpha = alpha

    @override
    def apply(self, buffer: WindowedBuffer) -> float | None:
        return exponential_moving_average(buffer, self.alpha, self.column)
