from typing import Iterable, List, Optional

import pandas as pd

from src.data.events import Earthquake, ScaleType
from src.geo.regions import Region, RegionClassifier

COLUMNS = ['timestamp', 'latitude', 'longitude', 'depth', 'scale', 'magnitude', 'region']

# An event is identified by when, where and how strong it was
IDENTITY = ['timestamp', 'region', 'magnitude']


class EarthquakeCatalogue:
    """
    In-memory earthquake base backed by a pandas DataFrame.

    Rows are deduplicated on (timestamp, region, magnitude) and kept in
    chronological order. The `region` column holds region keys; queries
    return Earthquake records.
    """

    def __init__(self, frame: Optional[pd.DataFrame] = None,
                 classifier: Optional[RegionClassifier] = None):
        self.classifier = classifier or RegionClassifier()

        if frame is None:
            frame = pd.DataFrame(columns=COLUMNS)
        df = frame.loc[:, COLUMNS].copy()
        df['timestamp'] = pd.to_datetime(df['timestamp'])
        df['magnitude'] = df['magnitude'].astype(float)
        for col in ('latitude', 'longitude', 'depth'):
            df[col] = df[col].astype(float)

        df.drop_duplicates(subset=IDENTITY, keep='first', inplace=True)
        df.sort_values(by='timestamp', kind='stable', inplace=True)
        df.reset_index(drop=True, inplace=True)
        self._df = df

    @classmethod
    def from_events(cls, events: Iterable[Earthquake],
                    classifier: Optional[RegionClassifier] = None) -> "EarthquakeCatalogue":
        rows = [{
            'timestamp': e.timestamp,
            'latitude': e.latitude,
            'longitude': e.longitude,
            'depth': e.depth,
            'scale': e.scale.value,
            'magnitude': e.magnitude,
            'region': e.region.key,
        } for e in events]
        return cls(pd.DataFrame(rows, columns=COLUMNS), classifier)

    def __len__(self):
        return len(self._df)

    def to_frame(self) -> pd.DataFrame:
        return self._df.copy()

    def merge(self, other: "EarthquakeCatalogue") -> "EarthquakeCatalogue":
        """New catalogue holding the events of both; rows from self win on duplicates."""
        combined = pd.concat([self._df, other._df], ignore_index=True)
        return EarthquakeCatalogue(combined, self.classifier)

    def _to_events(self, df: pd.DataFrame) -> List[Earthquake]:
        events = []
        for row in df.itertuples(index=False):
            events.append(Earthquake(
                region=self._region(row.region),
                timestamp=row.timestamp.to_pydatetime(),
                magnitude=float(row.magnitude),
                scale=ScaleType.parse(row.scale),
                longitude=float(row.longitude),
                latitude=float(row.latitude),
                depth=float(row.depth),
            ))
        return events

    def _region(self, key: str) -> Region:
        region = self.classifier.get(key)
        if region is None:
            region = self.classifier.classify(key)
        return region

    def earthquakes(self) -> List[Earthquake]:
        """All events, oldest first."""
        return self._to_events(self._df)

    def latest(self) -> Optional[Earthquake]:
        if self._df.empty:
            return None
        return self._to_events(self._df.loc[[self._df['timestamp'].idxmax()]])[0]

    def oldest(self) -> Optional[Earthquake]:
        if self._df.empty:
            return None
        return self._to_events(self._df.loc[[self._df['timestamp'].idxmin()]])[0]

    def strongest(self) -> Optional[Earthquake]:
        if self._df.empty:
            return None
        return self._to_events(self._df.loc[[self._df['magnitude'].idxmax()]])[0]

    def first_year(self) -> Optional[int]:
        oldest = self.oldest()
        return oldest.timestamp.year if oldest else None

    def last_year(self) -> Optional[int]:
        latest = self.latest()
        return latest.timestamp.year if latest else None

    def _region_mask(self, region: Optional[Region]) -> pd.Series:
        if region is None:
            return pd.Series(True, index=self._df.index)
        return self._df['region'] == region.key

    def by_region(self, *regions: Region) -> List[Earthquake]:
        keys = []
        for r in regions:
            if r is None:
                raise ValueError("Region must be not null!")
            keys.append(r.key)
        return self._to_events(self._df.loc[self._df['region'].isin(keys)])

    def by_month(self, month: int) -> List[Earthquake]:
        """Events in calendar month `month` (1 = January) of any year."""
        if not 1 <= month <= 12:
            raise ValueError(f"Month must be in 1..12, got {month}")
        return self._to_events(self._df.loc[self._df['timestamp'].dt.month == month])

    def by_magnitude_gt(self, gt: float, region: Optional[Region] = None) -> List[Earthquake]:
        mask = (self._df['magnitude'] > gt) & self._region_mask(region)
        return self._to_events(self._df.loc[mask])

    def by_magnitude_lt(self, lt: float, region: Optional[Region] = None) -> List[Earthquake]:
        mask = (self._df['magnitude'] < lt) & self._region_mask(region)
        return self._to_events(self._df.loc[mask])

    def by_magnitude_between(self, ge: float, le: float,
                             region: Optional[Region] = None) -> List[Earthquake]:
        """Events with ge <= magnitude <= le."""
        mask = (self._df['magnitude'] >= ge) & (self._df['magnitude'] <= le)
        mask &= self._region_mask(region)
        return self._to_events(self._df.loc[mask])
