from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, Optional

from src.analytics.holt_winters import SeasonalSmoother
from src.analytics.series import EventSeries, SeriesItem
from src.data.catalogue import EarthquakeCatalogue
from src.exceptions import InsufficientDataError
from src.geo.regions import REGIONS, Region
from config.settings import (
    FORECAST_WINDOW, SMOOTHING_ALPHA, SMOOTHING_BETA, SMOOTHING_GAMMA
)


@dataclass(frozen=True)
class EarthquakePrediction:
    region: Region
    timestamp: datetime
    magnitude: float


class RegionForecaster:
    def __init__(self,
                 catalogue: EarthquakeCatalogue,
                 alpha: float = SMOOTHING_ALPHA,
                 beta: float = SMOOTHING_BETA,
                 gamma: float = SMOOTHING_GAMMA,
                 window: int = FORECAST_WINDOW):
        self.catalogue = catalogue
        self.alpha = alpha
        self.beta = beta
        self.gamma = gamma
        self.window = window

    def build_series(self, region: Region, now: Optional[datetime] = None) -> EventSeries:
        """
        Magnitude series for one region, closed by a zero-magnitude sample
        dated `now` (wall-clock time when not given).
        """
        series = EventSeries()
        for quake in self.catalogue.by_region(region):
            series.add(SeriesItem(quake.timestamp, quake.magnitude))

        series.add(SeriesItem(now or datetime.now(), 0.0))
        return series

    def forecast_for_region(self,
                            region: Region,
                            now: Optional[datetime] = None) -> Optional[EarthquakePrediction]:
        """
        Predicts the next earthquake in `region` with Holt-Winters smoothing.

        Returns:
            EarthquakePrediction, or None when the region has fewer than two
            seasons of history or no usable forecast value.
        """
        series = self.build_series(region, now)

        item = None
        if len(series) > 0:
            smoother = SeasonalSmoother(series, self.alpha, self.beta, self.gamma, self.window)
            try:
                item = smoother.predict_next()
            except InsufficientDataError:
                item = None

        if item is None:
            print(f"Could not predict earthquake with specified base for region: {region.display_name}")
            return None

        return EarthquakePrediction(region=region, timestamp=item.timestamp, magnitude=item.value)

    def forecast_all(self,
                     regions: Optional[Iterable[Region]] = None,
                     now: Optional[datetime] = None) -> Dict[Region, EarthquakePrediction]:
        """Forecasts every region sharing one `now`; regions without a forecast are left out."""
        now = now or datetime.now()
        predictions = {}
        for region in (regions if regions is not None else REGIONS):
            prediction = self.forecast_for_region(region, now)
            if prediction is not None:
                predictions[region] = prediction
        return predictions
