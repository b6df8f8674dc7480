from abc import ABC, abstractmethod
import logging

from windowed_dataset.errors import InvalidColumnError
from windowed_dataset.window_buffer import WindowedBuffer

logger = logging.getLogger("SmoothingFilter")


class SmoothingFilter(ABC):
    """
    A streaming estimator over the most recent samples of one column.
    Instances are callable with a buffer, so they can be used directly as
    windowed functions.
    """

    def __init__(self, column: str):
        self.column = column

    @abstractmethod
    def apply(self, buffer: WindowedBuffer) -> float | None:
        raise NotImplementedError

    def __call__(self, buffer: WindowedBuffer) -> float | None:
        return self.apply(buffer)


def require_column(buffer: WindowedBuffer, column: str) -> None:
    if not buffer.has_column(column):
        logger.error(f"Value column '{column}' not found in dataset")
        raise InvalidColumnError(column)


def recent_values(buffer: WindowedBuffer, column: str, count: int | None = None) -> list:
    """
    Values of column in chronological order, as plain Python numbers.
    With count, only the trailing count values are returned.
    """
    values = buffer.to_frame()[column]
    if count is not None:
        values = values.tail(count)
    return values.tolist()
