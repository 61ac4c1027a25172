import math
import unittest
from datetime import datetime, timedelta

import numpy as np

from src.analytics.holt_winters import SeasonalSmoother
from src.analytics.series import EventSeries, SeriesItem
from src.exceptions import InsufficientDataError

T0 = datetime(2020, 1, 1, 0, 0, 0)


def daily_series(values, start=T0):
    series = EventSeries()
    for i, v in enumerate(values):
        series.add(SeriesItem(start + timedelta(days=i), v))
    return series


def smoother(values, window=10, season_length=None):
    return SeasonalSmoother(daily_series(values), 0.7, 0.7, 0.7, window,
                            season_length=season_length)


SCENARIO = [4.0, 4.2, 3.9, 4.1, 4.3, 4.0]


class TestSeasonLength(unittest.TestCase):

    def test_short_series_defaults_to_two(self):
        self.assertEqual(smoother([4.0]).season_length, 2)
        self.assertEqual(smoother([]).season_length, 2)

    def test_periodic_series(self):
        for period in (4, 6):
            values = [math.sin(2 * math.pi * i / period) for i in range(4 * period + 1)]
            season = smoother(values).season_length
            print(f"Period {period}: inferred season length {season}")
            self.assertEqual(season % period, 0)

    def test_scenario_peaks_at_lag_three(self):
        s = smoother(SCENARIO)
        self.assertLess(s.autocorrelation(1), 0)
        self.assertLess(s.autocorrelation(2), 0)
        self.assertGreater(s.autocorrelation(3), 0.7)
        self.assertEqual(s.season_length, 3)

    def test_constant_series_has_undefined_correlation(self):
        s = smoother([2.0] * 6)
        self.assertTrue(np.isnan(s.autocorrelation(1)))
        self.assertEqual(s.season_length, 1)

    def test_forced_season_length(self):
        self.assertEqual(smoother(SCENARIO, season_length=1).season_length, 1)
        with self.assertRaises(ValueError):
            smoother(SCENARIO, season_length=0)


class TestStatistics(unittest.TestCase):

    def test_mean_gap_uses_chronological_order(self):
        series = EventSeries()
        series.add(SeriesItem(T0 + timedelta(hours=4), 1.0))
        series.add(SeriesItem(T0, 2.0))
        series.add(SeriesItem(T0 + timedelta(hours=2), 3.0))
        s = SeasonalSmoother(series, 0.7, 0.7, 0.7, 10)
        self.assertEqual(s.count, 3)
        self.assertAlmostEqual(s.mean_value, 2.0)
        self.assertEqual(s.mean_gap, timedelta(hours=2))

    def test_single_sample_has_no_gap(self):
        self.assertEqual(smoother([4.0]).mean_gap, timedelta(0))


class TestInsufficientData(unittest.TestCase):

    def test_empty_series(self):
        with self.assertRaises(InsufficientDataError):
            smoother([]).predict_next()

    def test_single_sample(self):
        with self.assertRaises(InsufficientDataError):
            smoother([4.0]).predict_next()

    def test_fewer_than_two_seasons(self):
        with self.assertRaises(InsufficientDataError):
            smoother([4.0, 4.1, 4.2], season_length=2).predict_next()

    def test_predict_without_spacing(self):
        with self.assertRaises(InsufficientDataError):
            smoother([4.0]).predict(T0 + timedelta(days=3))


class TestForecast(unittest.TestCase):

    def test_scenario_next_event(self):
        item = smoother(SCENARIO).predict_next()
        self.assertIsNotNone(item)
        self.assertEqual(item.timestamp, T0 + timedelta(days=6))
        self.assertAlmostEqual(item.value, 4.2)

    def test_predict_next_is_idempotent(self):
        s = smoother(SCENARIO)
        first = s.predict_next()
        second = s.predict_next()
        self.assertEqual(first.timestamp, second.timestamp)
        self.assertEqual(first.value, second.value)

    def test_negative_series_yields_absolute_value(self):
        item = smoother([-v for v in SCENARIO]).predict_next()
        self.assertAlmostEqual(item.value, 4.2)

    def test_values_are_non_negative_with_one_decimal(self):
        s = smoother([5.3, 2.1, 6.7, 1.2, 4.4, 3.3, 6.1, 2.8, 4.9])
        for index in range(s.season_length):
            value = s.value_at(index)
            self.assertGreaterEqual(value, 0.0)
            self.assertAlmostEqual(value, round(value, 1), places=9)

    def test_linear_trend_without_season(self):
        values = [100.0 + 0.5 * i for i in range(20)]
        item = smoother(values, window=20, season_length=1).predict_next()
        self.assertEqual(item.timestamp, T0 + timedelta(days=20))
        self.assertAlmostEqual(item.value, 110.0, delta=0.1)

    def test_all_zero_series_has_no_forecast(self):
        s = smoother([0.0] * 6)
        self.assertIsNone(s.predict_next())
        self.assertEqual(s.value_at(0), 0.0)

    def test_predict_target_date(self):
        s = smoother(SCENARIO)
        last = T0 + timedelta(days=5)

        item = s.predict(last + timedelta(days=2, hours=12))
        self.assertEqual(item.timestamp, last + timedelta(days=2))
        self.assertAlmostEqual(item.value, 4.4)

    def test_predict_target_before_next_period(self):
        s = smoother(SCENARIO)
        with self.assertRaises(ValueError):
            s.predict(T0 + timedelta(days=5, hours=6))

    def test_predict_beyond_one_season(self):
        s = smoother(SCENARIO)
        self.assertIsNone(s.predict(T0 + timedelta(days=5 + s.season_length + 1)))

    def test_forecast_and_fitted_shapes(self):
        s = smoother(SCENARIO)
        self.assertEqual(len(s.forecast()), 3)
        self.assertEqual(len(s.fitted), 6 + 3)

    def test_window_uses_most_recent_samples(self):
        # Old history far from the recent level must not leak into the fit
        values = [50.0] * 10 + SCENARIO
        s = smoother(values, window=6, season_length=3)
        self.assertAlmostEqual(s.predict_next().value, 4.2)


if __name__ == '__main__':
    unittest.main()
