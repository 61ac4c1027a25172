from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Tuple

import numpy as np

from src.analytics.series import EventSeries, SeriesItem
from src.exceptions import InsufficientDataError


class SeasonalSmoother:
    """
    Holt-Winters smoothing over an EventSeries with an inferred season length.

    The season length is the lag (1..n/2) with the highest sample
    autocorrelation. Fitting needs two full seasons of history inside the
    analysis window, which is at least `2 * season_length` samples wide.

    Args:
        series: Samples to fit. A chronological snapshot is taken here, so
            later changes to `series` do not affect this smoother.
        alpha, beta, gamma: Level, trend and seasonal smoothing coefficients.
        window: Number of most recent samples to fit on.
        season_length: Fixed season length; inferred when None.
    """

    def __init__(self,
                 series: EventSeries,
                 alpha: float,
                 beta: float,
                 gamma: float,
                 window: int,
                 season_length: Optional[int] = None):
        self.alpha = alpha
        self.beta = beta
        self.gamma = gamma
        self.window = window

        self._items = series.sorted_items()
        self._y = np.array([item.value for item in self._items], dtype=float)
        self._count = len(self._items)
        self._mean_value = float(self._y.mean()) if self._count else 0.0
        self._mean_gap = self._compute_mean_gap()
        if season_length is None:
            season_length = self._infer_season_length()
        elif season_length < 1:
            raise ValueError(f"season_length must be positive, got {season_length}")
        self._season_length = season_length
        self._result: Optional[Tuple[np.ndarray, np.ndarray]] = None

    @property
    def count(self) -> int:
        return self._count

    @property
    def mean_value(self) -> float:
        return self._mean_value

    @property
    def mean_gap(self) -> timedelta:
        return self._mean_gap

    @property
    def season_length(self) -> int:
        return self._season_length

    def _compute_mean_gap(self) -> timedelta:
        if self._count < 2:
            return timedelta(0)
        span = self._items[-1].timestamp - self._items[0].timestamp
        return span / (self._count - 1)

    def autocorrelation(self, lag: int) -> float:
        """
        Sample autocorrelation r(lag) of the values.
        Returns NaN when the deviations in the overlap are all zero.
        """
        deviations = self._y - self._mean_value
        head = deviations[:self._count - lag]
        tail = deviations[lag:]
        bottom = float(np.dot(head, head))
        if bottom == 0.0:
            return float("nan")
        return float(np.dot(head, tail)) / bottom

    def _infer_season_length(self) -> int:
        if self._count < 2:
            return 2

        best_corr = -1.0
        best_lag = 1
        for lag in range(1, self._count // 2 + 1):
            corr = self.autocorrelation(lag)
            # NaN compares False and is never selected
            if corr > best_corr:
                best_corr = corr
                best_lag = lag
        return best_lag

    def _smooth(self) -> Tuple[np.ndarray, np.ndarray]:
        """Runs the decomposition. Returns (forecast, fitted)."""
        if self._result is not None:
            return self._result

        season = self._season_length
        count = self._count
        window = max(self.window, season * 2)
        if count < season * 2:
            raise InsufficientDataError()

        ylen = min(window, count)
        offset = count - window if window < count else 0
        remainder = ylen % season
        ylen -= remainder
        offset += remainder
        y = self._y[offset:offset + ylen]

        # Division by zero is part of the model: it yields inf/NaN that the
        # value extraction treats as unusable.
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            ybar1 = y[:season].sum() / season
            ybar2 = y[season:season * 2].sum() / season
            b0 = (ybar2 - ybar1) / season
            tbar = (season + 2) / 2.0
            a0 = ybar1 - b0 * tbar

            trend = a0 + np.arange(1, ylen + 1) * b0
            indices = y / trend

            seasonal = np.zeros(ylen + season)
            seasonal[:season] = (indices[:season] + indices[season:season * 2]) / 2.0
            seasonal[:season] *= np.float64(season) / seasonal[:season].sum()

            fitted = np.zeros(ylen + season)
            level, slope = a0, b0
            for i in range(ylen):
                prev_level, prev_slope = level, slope
                level = (self.alpha * y[i]) / seasonal[i] \
                    + (1.0 - self.alpha) * (prev_level + prev_slope)
                slope = self.beta * (level - prev_level) + (1.0 - self.beta) * prev_slope
                seasonal[i + season] = (self.gamma * y[i]) / level \
                    + (1.0 - self.gamma) * seasonal[i]
                fitted[i] = (a0 + b0 * (i + 1)) * seasonal[i]

            steps = np.arange(1, season + 1)
            forecast = (level + slope * steps) * seasonal[ylen:ylen + season]

        self._result = (forecast, fitted)
        return self._result

    def forecast(self) -> np.ndarray:
        """Raw forecast for the next `season_length` periods."""
        return self._smooth()[0].copy()

    @property
    def fitted(self) -> np.ndarray:
        return self._smooth()[1].copy()

    def value_at(self, index: int) -> float:
        """
        First usable forecast value at or after `index`.

        Zero, NaN and infinite entries are skipped. The value is rounded
        half-up to one decimal and made non-negative; 0.0 means nothing
        usable was found.
        """
        if index < 0:
            raise ValueError(f"Forecast index must be non-negative, got {index}")

        forecast = self._smooth()[0]
        value = 0.0
        while index < len(forecast):
            value = float(forecast[index])
            index += 1
            if value != 0.0 and np.isfinite(value):
                break

        if not np.isfinite(value) or value == 0.0:
            return 0.0

        rounded = Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        return abs(float(rounded))

    def predict_next(self) -> Optional[SeriesItem]:
        """Forecast one mean gap after the last sample, or None if unusable."""
        if self._count == 0:
            raise InsufficientDataError()

        timestamp = self._items[-1].timestamp + self._mean_gap
        value = self.value_at(0)
        if value == 0.0:
            return None
        return SeriesItem(timestamp, value)

    def predict(self, target: datetime) -> Optional[SeriesItem]:
        """
        Forecast the period containing `target`.

        The result is dated a whole number of mean gaps after the last sample.
        """
        if self._count == 0:
            raise InsufficientDataError()
        if self._mean_gap <= timedelta(0):
            raise InsufficientDataError("Series has no time spacing to step by.")

        last = self._items[-1].timestamp
        periods = (target - last) // self._mean_gap
        if periods < 1:
            raise ValueError(
                f"Target {target} is less than one period ({self._mean_gap}) after {last}"
            )

        value = self.value_at(periods - 1)
        if value == 0.0:
            return None
        return SeriesItem(last + self._mean_gap * periods, value)
