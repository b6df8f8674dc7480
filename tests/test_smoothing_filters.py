import pytest

from windowed_dataset.errors import InvalidColumnError
from windowed_dataset.filters.averages import (
    moving_average, exponential_moving_average, MovingAverage, ExponentialMovingAverage
)
from windowed_dataset.filters.cascaded import cascaded_smoothing_filter, CascadedSmoothingFilter
from windowed_dataset.filters.median import (
    median_filter, cascaded_median_filter, MedianFilter, CascadedMedianFilter
)
from windowed_dataset.filters.smoothing_filter import SmoothingFilter
from windowed_dataset.window_buffer import WindowedBuffer


def make_buffer(values, capacity=10, column="x", kind="int32") -> WindowedBuffer:
    buf = WindowedBuffer({column: kind}, capacity)
    for v in values:
        buf = buf.insert({column: v})
    return buf


@pytest.fixture
def rising():
    return make_buffer([800, 810, 820, 830, 840])


@pytest.fixture
def with_outlier():
    return make_buffer([800, 810, 1500, 820, 830])


# ============================================================================
# MOVING AVERAGE
# ============================================================================

class TestMovingAverage:

    def test_window_sizes(self, rising):
        assert moving_average(rising, 3, "x") == 830
        assert moving_average(rising, 4, "x") == 825
        assert moving_average(rising, 5, "x") == 820

    def test_insufficient_data(self, rising):
        assert moving_average(rising, 6, "x") is None
        assert moving_average(rising, 10, "x") is None

    def test_custom_column(self):
        buf = make_buffer([900, 950, 1000], capacity=5, column="HeartInterval")
        assert moving_average(buf, 3, "HeartInterval") == 950

    def test_empty_buffer(self):
        buf = make_buffer([], capacity=5)
        assert moving_average(buf, 1, "x") is None
        assert moving_average(buf, 3, "x") is None

    def test_single_sample(self):
        buf = make_buffer([800], capacity=5)
        assert moving_average(buf, 1, "x") == 800
        assert moving_average(buf, 2, "x") is None

    def test_after_wrapping(self):
        buf = make_buffer([100, 200, 300, 400, 500], capacity=3)
        assert moving_average(buf, 3, "x") == 400
        assert moving_average(buf, 2, "x") == 450

    def test_floating_point(self):
        buf = make_buffer([800.5, 810.7, 820.3], capacity=5, kind="float64")
        assert moving_average(buf, 3, "x") == pytest.approx(810.5, abs=0.01)

    @pytest.mark.parametrize("window_size", [0, -2])
    def test_non_positive_window(self, rising, window_size):
        assert moving_average(rising, window_size, "x") is None


# ============================================================================
# MEDIAN FILTER
# ============================================================================

class TestMedianFilter:

    def test_window_sizes(self, with_outlier):
        assert median_filter(with_outlier, 3, "x") == 830
        assert median_filter(with_outlier, 5, "x") == 820

    def test_even_window_takes_upper_middle(self, with_outlier):
        # sorted [810 820 830 1500] -> index 2
        assert median_filter(with_outlier, 4, "x") == 830

    def test_insufficient_data(self, with_outlier):
        assert median_filter(with_outlier, 6, "x") is None

    def test_odd_and_even_windows(self):
        buf = make_buffer([100, 200, 300, 400, 500])
        assert median_filter(buf, 5, "x") == 300
        assert median_filter(buf, 3, "x") == 400
        assert median_filter(buf, 4, "x") == 400
        assert median_filter(buf, 2, "x") == 500

    def test_custom_column(self):
        buf = make_buffer([900, 950, 1000], capacity=5, column="CustomCol")
        assert median_filter(buf, 3, "CustomCol") == 950

    def test_returns_python_number(self, with_outlier):
        assert type(median_filter(with_outlier, 3, "x")) is int

    def test_non_positive_window(self, with_outlier):
        assert median_filter(with_outlier, 0, "x") is None


class TestCascadedMedianFilter:

    def test_alternating_outliers(self):
        # 3-point stage gives [800 810 1500 820 820]
        buf = make_buffer([800, 1500, 810, 2000, 820])
        assert cascaded_median_filter(buf, "x") == 820

    def test_single_outlier_removed(self):
        buf = make_buffer([800, 810, 5000, 820, 830])
        assert cascaded_median_filter(buf, "x") == 820

    def test_insufficient_data(self):
        assert cascaded_median_filter(make_buffer([800, 810, 820]), "x") is None
        assert cascaded_median_filter(make_buffer([800, 810, 820, 830]), "x") is None

    def test_exactly_five_samples(self, rising):
        assert cascaded_median_filter(rising, "x") == 820

    def test_uses_last_five_only(self):
        buf = make_buffer([1, 2, 3, 800, 1500, 810, 2000, 820])
        assert cascaded_median_filter(buf, "x") == 820

    def test_custom_column(self):
        buf = make_buffer([700, 710, 720, 730, 740], capacity=8, column="Interval")
        assert cascaded_median_filter(buf, "Interval") == 720


# ============================================================================
# EXPONENTIAL MOVING AVERAGE
# ============================================================================

class TestExponentialMovingAverage:

    def test_higher_alpha_follows_recent_values(self):
        buf = make_buffer([800.0, 810.0, 820.0], kind="float64")
        ema_low = exponential_moving_average(buf, 0.1, "x")
        ema_high = exponential_moving_average(buf, 0.9, "x")
        assert ema_high > ema_low

    def test_known_value(self):
        buf = make_buffer([800.0, 900.0, 1000.0], kind="float64")
        # 800 -> 850 -> 925
        assert exponential_moving_average(buf, 0.5, "x") == pytest.approx(925.0)

    def test_single_sample(self):
        buf = make_buffer([800.0], capacity=5, kind="float64")
        assert exponential_moving_average(buf, 0.5, "x") == 800.0

    def test_empty_buffer(self):
        assert exponential_moving_average(make_buffer([], capacity=5, kind="float64"), 0.3, "x") is None

    def test_alpha_one_returns_latest(self):
        buf = make_buffer([800.0, 900.0], capacity=5, kind="float64")
        assert exponential_moving_average(buf, 1.0, "x") == 900.0

    def test_tiny_alpha_stays_near_first(self):
        buf = make_buffer([800.0, 900.0], capacity=5, kind="float64")
        assert exponential_moving_average(buf, 0.01, "x") == pytest.approx(801.0)

    @pytest.mark.parametrize("alpha", [0, -0.5, 1.01, 2])
    def test_alpha_out_of_range(self, alpha):
        buf = make_buffer([800.0, 900.0], capacity=5, kind="float64")
        assert exponential_moving_average(buf, alpha, "x") is None

    def test_seeds_from_oldest_retained(self):
        # 100 was overwritten, so 200 seeds the average
        buf = make_buffer([100.0, 200.0, 300.0], capacity=2, kind="float64")
        assert exponential_moving_average(buf, 0.5, "x") == pytest.approx(250.0)


# ============================================================================
# CASCADED SMOOTHING FILTER
# ============================================================================

class TestCascadedSmoothingFilter:

    @pytest.fixture
    def noisy(self):
        return make_buffer([800, 810, 1500, 820, 805,
                            815, 812, 808, 795, 2000,
                            805, 820, 800, 810, 815], capacity=20, kind="int64")

    def test_results_in_range(self, noisy):
        for median_window, ma_window in [(5, 3), (3, 2)]:
            result = cascaded_smoothing_filter(noisy, median_window, ma_window, "x")
            assert isinstance(result, float)
            assert 700 < result < 900

    def test_known_value(self):
        # median stage gives [10 20 30 30 40], average of the last two
        buf = make_buffer([10, 100, 20, 30, 40])
        assert cascaded_smoothing_filter(buf, 3, 2, "x") == pytest.approx(35.0)

    def test_even_median_window(self):
        # half = 2, so positions 2..4 use the 5 samples centred on them
        buf = make_buffer([1, 2, 3, 100, 5, 6, 7])
        assert cascaded_smoothing_filter(buf, 4, 3, "x") == pytest.approx(19 / 3)

    def test_insufficient_data(self):
        buf = make_buffer([800, 810, 820], kind="int64")
        assert cascaded_smoothing_filter(buf, 5, 3, "x") is None
        assert cascaded_smoothing_filter(buf, 10, 5, "x") is None

    def test_outliers_removed(self):
        buf = make_buffer([800, 800, 5000, 800, 800,
                           800, 800, 800, 100, 800,
                           800, 800], capacity=15, kind="int64")
        assert cascaded_smoothing_filter(buf, 5, 3, "x") == pytest.approx(800.0)

    def test_noise_reduced(self):
        buf = make_buffer([795, 803, 798, 802, 799, 801, 797, 804, 800, 798], capacity=15, kind="int64")
        result = cascaded_smoothing_filter(buf, 5, 3, "x")
        assert 795 < result < 805

    def test_parameter_sensitivity(self):
        buf = make_buffer([800, 810, 1200, 820, 805, 815, 812, 808, 795, 805, 820, 800, 810, 815, 800],
                          capacity=20, kind="int64")
        results = [cascaded_smoothing_filter(buf, m, a, "x") for m, a in [(3, 2), (5, 3), (7, 4)]]
        assert all(700 < r < 900 for r in results)
        assert abs(results[0] - results[1]) < 100
        assert abs(results[1] - results[2]) < 100

    def test_constant_data(self):
        buf = make_buffer([800] * 8, kind="int64")
        assert cascaded_smoothing_filter(buf, 5, 3, "x") == pytest.approx(800.0)

    @pytest.mark.parametrize("median_window, ma_window", [(0, 3), (3, 0), (-1, 3), (0, 0)])
    def test_non_positive_windows(self, median_window, ma_window):
        buf = make_buffer([800] * 8, kind="int64")
        assert cascaded_smoothing_filter(buf, median_window, ma_window, "x") is None


# ============================================================================
# COMMON BEHAVIOUR
# ============================================================================

@pytest.mark.parametrize("call", [
    lambda buf: moving_average(buf, 3, "missing"),
    lambda buf: median_filter(buf, 3, "missing"),
    lambda buf: cascaded_median_filter(buf, "missing"),
    lambda buf: exponential_moving_average(buf, 0.5, "missing"),
    lambda buf: cascaded_smoothing_filter(buf, 3, 2, "missing"),
])
def test_missing_column_raises(call):
    with pytest.raises(InvalidColumnError):
        call(make_buffer([1, 2, 3, 4, 5]))


def test_missing_column_raises_even_without_data():
    with pytest.raises(InvalidColumnError):
        moving_average(make_buffer([]), 3, "missing")


def test_filter_objects_match_functions(with_outlier):
    filters = [
        (MovingAverage(3, "x"), moving_average(with_outlier, 3, "x")),
        (MedianFilter(4, "x"), median_filter(with_outlier, 4, "x")),
        (CascadedMedianFilter("x"), cascaded_median_filter(with_outlier, "x")),
        (ExponentialMovingAverage(0.5, "x"), exponential_moving_average(with_outlier, 0.5, "x")),
        (CascadedSmoothingFilter(3, 2, "x"), cascaded_smoothing_filter(with_outlier, 3, 2, "x")),
    ]
    for smoothing_filter, expected in filters:
        assert isinstance(smoothing_filter, SmoothingFilter)
        assert smoothing_filter(with_outlier) == expected
        assert smoothing_filter.apply(with_outlier) == expected


def test_base_filter_is_abstract():
    with pytest.raises(TypeError):
        SmoothingFilter("x")
