"""
Moving Average Tests

SMA / EMA over candle series: lengths, alignment, values, short input.
"""

import numpy as np
import pytest

from cryptochart.services.indicators.calculations import (
    ema,
    exponential_moving_average,
    simple_moving_average,
    sma,
)


class TestSimpleMovingAverage:
    """SMA points and array form"""

    def test_two_period_example(self, make_candles):
        candles = make_candles([10.0, 20.0, 30.0])

        points = simple_moving_average(candles, 2)

        assert [p.value for p in points] == [15.0, 25.0]
        assert [p.time for p in points] == [candles[1].time, candles[2].time]

    @pytest.mark.parametrize("period", [1, 2, 5, 20, 50])
    def test_length_and_window_means(self, make_candles, period):
        rng = np.random.default_rng(7)
        closes = list(100 + rng.normal(0, 5, 120).cumsum())
        candles = make_candles(closes)

        points = simple_moving_average(candles, period)

        assert len(points) == len(candles) - period + 1
        for i, point in enumerate(points):
            window = closes[i : i + period]
            assert point.time == candles[i + period - 1].time
            assert point.value == pytest.approx(sum(window) / period, rel=1e-12)

    def test_period_equal_to_length(self, make_candles):
        candles = make_candles([1.0, 2.0, 3.0, 4.0])

        points = simple_moving_average(candles, 4)

        assert len(points) == 1
        assert points[0].value == 2.5
        assert points[0].time == candles[-1].time

    @pytest.mark.parametrize("length", [0, 1, 19])
    def test_short_series_is_empty(self, make_candles, length):
        candles = make_candles([50.0] * length)
        assert simple_moving_average(candles, 20) == []

    def test_non_positive_period_is_empty(self, make_candles):
        candles = make_candles([1.0, 2.0, 3.0])
        assert simple_moving_average(candles, 0) == []
        assert simple_moving_average(candles, -2) == []

    def test_unsorted_input_is_sorted_first(self, make_candles):
        candles = make_candles([10.0, 20.0, 30.0, 40.0])
        shuffled = [candles[2], candles[0], candles[3], candles[1]]

        assert simple_moving_average(shuffled, 2) == simple_moving_average(candles, 2)

    def test_insufficient_data_event(self, make_candles):
        events = []
        simple_moving_average(make_candles([1.0]), 5, on_event=lambda e, f: events.append((e, f)))

        assert events == [("sma.insufficient_data", {"length": 1, "period": 5})]

    def test_array_form(self):
        result = sma(np.array([2.0, 4.0, 6.0, 8.0]), 3)
        np.testing.assert_allclose(result, [4.0, 6.0])


class TestExponentialMovingAverage:
    """EMA seeding and recurrence"""

    def test_first_value_equals_sma(self, make_candles):
        rng = np.random.default_rng(11)
        candles = make_candles(list(1000 + rng.normal(0, 20, 60)))

        ema_points = exponential_moving_average(candles, 21)
        sma_points = simple_moving_average(candles, 21)

        assert ema_points[0].value == sma_points[0].value
        assert ema_points[0].time == candles[20].time

    def test_recurrence(self, make_candles):
        candles = make_candles([float(c) for c in range(1, 11)])

        points = exponential_moving_average(candles, 3)

        # multiplier 2 / (3 + 1) = 0.5 on a straight line keeps a lag of one step
        assert [p.value for p in points] == [2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0]
        assert [p.time for p in points] == [c.time for c in candles[2:]]

    def test_length(self, make_candles):
        candles = make_candles([5.0] * 30)
        assert len(exponential_moving_average(candles, 21)) == 10

    def test_short_series_is_empty(self, make_candles):
        assert exponential_moving_average(make_candles([1.0, 2.0]), 3) == []
        assert exponential_moving_average([], 3) == []

    def test_array_form_matches_manual(self):
        data = np.array([1.0, 2.0, 3.0, 10.0])
        result = ema(data, 2)

        multiplier = 2 / 3
        expected = [1.5]
        for value in data[2:]:
            expected.append((value - expected[-1]) * multiplier + expected[-1])

        np.testing.assert_allclose(result, expected)
