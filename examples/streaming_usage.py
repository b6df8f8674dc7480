"""
Example walking through the windowed buffer on a simulated sensor stream.
"""

import math

import pandas as pd

from windowed_dataset.config import setup_logging
from windowed_dataset.filters.averages import MovingAverage, ExponentialMovingAverage
from windowed_dataset.filters.cascaded import CascadedSmoothingFilter
from windowed_dataset.filters.median import median_filter
from windowed_dataset.progressive import add_column_by_windowed_fn
from windowed_dataset.time_window import time_window_view
from windowed_dataset.window_buffer import WindowedBuffer

setup_logging("info")

start = pd.Timestamp("2024-01-01 00:00:00")
samples = [
    {"timestamp": start + pd.Timedelta(seconds=i),
     "value": 10.0 + 2.0 * math.sin(i / 2.0) + (25.0 if i == 6 else 0.0),
     "sensor_id": "sensor-1"}
    for i in range(12)
]

# Example 1: progressive insertion into a 5-row window
print("=" * 60)
print("Example 1: Progressive insertion")
print("=" * 60)
buffer = WindowedBuffer({"timestamp": "instant", "value": "float64", "sensor_id": "string"}, 5)
for sample in samples[:8]:
    buffer = buffer.insert(sample)
    print(f"value={sample['value']:6.2f}  occupancy={buffer.occupancy}  cursor={buffer.write_cursor}  "
          f"window={[round(v, 2) for v in buffer.to_frame()['value']]}")

# Example 2: trailing time windows
print("=" * 60)
print("Example 2: Time windows")
print("=" * 60)
for sample in samples[8:]:
    buffer = buffer.insert(sample)
print(time_window_view(buffer, "timestamp", 3000))

# Example 3: smoothing the outlier at t=6s
print("=" * 60)
print("Example 3: Smoothing filters")
print("=" * 60)
series = pd.DataFrame(samples)
for name, windowed_fn in [
    ("ma3", MovingAverage(3, "value")),
    ("ema", ExponentialMovingAverage(0.3, "value")),
    ("median3", lambda wb: median_filter(wb, 3, "value")),
    ("cascaded", CascadedSmoothingFilter(3, 2, "value")),
]:
    series = add_column_by_windowed_fn(series, name, windowed_fn, include_current=True)
print(series.drop(columns=["sensor_id"]))
