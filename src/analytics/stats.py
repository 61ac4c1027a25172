import calendar
from typing import Dict, Iterable

import pandas as pd

from src.data.catalogue import EarthquakeCatalogue
from src.geo.regions import REGIONS, Region
from config.settings import MAGNITUDE_BAND_HIGH, MAGNITUDE_BAND_LOW


class SeismicityStats:
    """
    Distribution counts over the earthquake base, as plotted by the charts.
    """

    @staticmethod
    def region_distribution(catalogue: EarthquakeCatalogue,
                            regions: Iterable[Region] = REGIONS) -> Dict[str, int]:
        """Event count per region, keyed by display name, in table order."""
        counts = catalogue.to_frame()['region'].value_counts()
        return {r.display_name: int(counts.get(r.key, 0)) for r in regions}

    @staticmethod
    def magnitude_bands(low: float = MAGNITUDE_BAND_LOW,
                        high: float = MAGNITUDE_BAND_HIGH):
        return [f"< {low:g}", f"{low:g} - {high:g}", f"> {high:g}"]

    @staticmethod
    def magnitude_distribution(catalogue: EarthquakeCatalogue,
                               regions: Iterable[Region] = REGIONS,
                               low: float = MAGNITUDE_BAND_LOW,
                               high: float = MAGNITUDE_BAND_HIGH) -> pd.DataFrame:
        """
        Per-region counts in three magnitude bands.

        Bands: magnitude < low, low <= magnitude <= high, magnitude > high.
        Rows are region display names, columns the band labels.
        """
        df = catalogue.to_frame()
        mags = df['magnitude']
        labels = SeismicityStats.magnitude_bands(low, high)

        data = {}
        for r in regions:
            in_region = df['region'] == r.key
            data[r.display_name] = [
                int((in_region & (mags < low)).sum()),
                int((in_region & (mags >= low) & (mags <= high)).sum()),
                int((in_region & (mags > high)).sum()),
            ]
        return pd.DataFrame.from_dict(data, orient='index', columns=labels)

    @staticmethod
    def month_distribution(catalogue: EarthquakeCatalogue) -> Dict[str, int]:
        """Event count per calendar month, January first, summed over all years."""
        months = catalogue.to_frame()['timestamp'].dt.month.value_counts()
        return {calendar.month_name[m]: int(months.get(m, 0)) for m in range(1, 13)}
