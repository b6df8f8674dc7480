import os
import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

LOG_LEVEL  = os.getenv("WINDOWED_DATASET_LOG_LEVEL", "WARNING")
TIME_FIELD = os.getenv("WINDOWED_DATASET_TIME_FIELD", "timestamp")

# Capacity of the buffer used by add_column_by_windowed_fn.
# Fixed on purpose: callers cannot size it per call.
PROGRESSIVE_BUFFER_SIZE = 120


def setup_logging(level: str | None = None) -> None:
    """
    Configures root logging for scripts that use the library.
    Falls back to WINDOWED_DATASET_LOG_LEVEL when no level is given.
    """
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format=LOG_FORMAT
    )
