import os
from datetime import datetime
from typing import Iterable, Optional

import pandas as pd
import requests
from obspy import read_events
from obspy.core.event import Catalog

from src.data.catalogue import COLUMNS, EarthquakeCatalogue
from src.data.events import ScaleType
from src.exceptions import CatalogueLoadError, UnknownRegionError
from src.geo.regions import RegionClassifier
from config.settings import (
    DATE_FORMAT, EMSC_URL, FIELD_SEPARATOR, LOCAL_BASE_PATH, REQUEST_TIMEOUT, SNAPSHOT_PATH
)


class SeismicDataLoader:
    """
    Handles ingestion of the Chilean earthquake base from the local cache,
    the bundled snapshot, the EMSC CSV feed or any ObsPy-readable catalogue,
    normalised into an EarthquakeCatalogue.
    """

    @staticmethod
    def parse_line(line: str, classifier: RegionClassifier) -> Optional[dict]:
        """
        Parses one semicolon separated line:
            date;time;lat;lon;depth;depth type;scale;magnitude;region;...

        Returns None for header lines and the 'WEST CHILE RISE' offshore zone.
        """
        upper = line.upper()
        if not line.strip() or 'WEST CHILE' in upper or 'DATE' in upper:
            return None

        fields = line.split(FIELD_SEPARATOR)
        # Feed times may carry fractional seconds
        time_str = fields[1].strip().split('.')[0]
        return {
            'timestamp': datetime.strptime(f"{fields[0].strip()} {time_str}", DATE_FORMAT),
            'latitude': float(fields[2]),
            'longitude': float(fields[3]),
            'depth': float(fields[4]),
            'scale': ScaleType.parse(fields[6]).value,
            'magnitude': float(fields[7]),
            'region': classifier.classify(fields[8]).key,
        }

    @staticmethod
    def parse_lines(lines: Iterable[str],
                    classifier: Optional[RegionClassifier] = None) -> pd.DataFrame:
        classifier = classifier or RegionClassifier()
        rows = []
        for line_num, line in enumerate(lines, 1):
            try:
                row = SeismicDataLoader.parse_line(line, classifier)
            except (ValueError, IndexError, UnknownRegionError) as e:
                print(f"⚠️ Could not parse line {line_num}: {line.strip()} ({e})")
                continue
            if row is not None:
                rows.append(row)
        return pd.DataFrame(rows, columns=COLUMNS)

    @staticmethod
    def read_file(file_path: str,
                  classifier: Optional[RegionClassifier] = None) -> pd.DataFrame:
        print(f"Reading earthquake base: {file_path}...")
        with open(file_path, 'r', encoding='utf-8', errors='replace') as f:
            return SeismicDataLoader.parse_lines(f, classifier)

    @staticmethod
    def fetch_remote(url: str = EMSC_URL,
                     classifier: Optional[RegionClassifier] = None,
                     timeout: float = REQUEST_TIMEOUT) -> pd.DataFrame:
        """
        Downloads the latest events from the EMSC CSV export.
        A failed request leaves the caller with an empty frame.
        """
        print("🌐 Querying EMSC earthquake feed...")
        try:
            response = requests.get(url, timeout=timeout)
        except requests.RequestException as e:
            print(f"❌ EMSC request failed: {e}")
            return pd.DataFrame(columns=COLUMNS)

        if response.status_code != 200:
            print(f"❌ EMSC returned HTTP {response.status_code}")
            return pd.DataFrame(columns=COLUMNS)

        df = SeismicDataLoader.parse_lines(response.text.splitlines(), classifier)
        print(f"✅ Fetched {len(df)} events from EMSC.")
        return df

    @staticmethod
    def load_obspy(file_path: str,
                   classifier: Optional[RegionClassifier] = None) -> EarthquakeCatalogue:
        """
        Reads a QuakeML / NDK / ... file through ObsPy. Events are assigned to
        a region through their 'region name' description; events outside the
        region table are skipped.
        """
        classifier = classifier or RegionClassifier()
        try:
            catalog: Catalog = read_events(file_path)
        except Exception as e:
            raise CatalogueLoadError(f"Failed to read catalogue via ObsPy: {e}") from e
        return SeismicDataLoader.from_obspy_catalog(catalog, classifier)

    @staticmethod
    def from_obspy_catalog(catalog: Catalog,
                           classifier: Optional[RegionClassifier] = None) -> EarthquakeCatalogue:
        classifier = classifier or RegionClassifier()
        rows = []
        for event in catalog:
            try:
                origin = event.preferred_origin() or event.origins[0]
                mag = event.preferred_magnitude() or event.magnitudes[0]
            except IndexError:
                # Skip malformed events without origin/mag
                continue

            names = [d.text for d in event.event_descriptions if d.type == 'region name']
            if not names:
                continue
            try:
                region = classifier.classify(names[0])
            except UnknownRegionError:
                continue

            rows.append({
                'timestamp': origin.time.datetime,
                'latitude': origin.latitude,
                'longitude': origin.longitude,
                # ObsPy depths are metres, the base keeps kilometres
                'depth': (origin.depth or 0.0) / 1000.0,
                'scale': ScaleType.parse(mag.magnitude_type or '').value,
                'magnitude': mag.mag,
                'region': region.key,
            })

        print(f"✅ Loaded {len(rows)} events from ObsPy catalogue.")
        return EarthquakeCatalogue(pd.DataFrame(rows, columns=COLUMNS), classifier)

    @staticmethod
    def format_line(row) -> str:
        stamp = row.timestamp.strftime(DATE_FORMAT)
        date_str, time_str = stamp.split(' ')
        return FIELD_SEPARATOR.join([
            date_str, time_str, str(row.latitude), str(row.longitude), str(row.depth),
            ' ', row.scale, str(row.magnitude), row.region, '',
        ])

    @staticmethod
    def write_cache(catalogue: EarthquakeCatalogue, file_path: str) -> None:
        with open(file_path, 'w', encoding='utf-8') as f:
            for row in catalogue.to_frame().itertuples(index=False):
                f.write(SeismicDataLoader.format_line(row) + "\n")

    @staticmethod
    def load_base(load_remote: bool = False,
                  classifier: Optional[RegionClassifier] = None,
                  local_path: str = LOCAL_BASE_PATH,
                  snapshot_path: str = SNAPSHOT_PATH,
                  url: str = EMSC_URL) -> EarthquakeCatalogue:
        """
        Loads the earthquake base: the local cache when present, otherwise the
        bundled snapshot, optionally merged with the EMSC feed. The merged
        base is written back to the local cache.

        Raises:
            CatalogueLoadError: neither source could be read.
        """
        classifier = classifier or RegionClassifier()
        source = local_path if os.path.exists(local_path) else snapshot_path
        try:
            frame = SeismicDataLoader.read_file(source, classifier)
        except OSError as e:
            raise CatalogueLoadError(f"Failed to read earthquake base '{source}': {e}") from e

        catalogue = EarthquakeCatalogue(frame, classifier)
        print(f"Resources base count: {len(catalogue)}")

        if load_remote:
            remote = SeismicDataLoader.fetch_remote(url, classifier)
            catalogue = catalogue.merge(EarthquakeCatalogue(remote, classifier))

        try:
            SeismicDataLoader.write_cache(catalogue, local_path)
        except OSError as e:
            print(f"⚠️ Could not write local cache '{local_path}': {e}")

        print(f"✅ Loaded {len(catalogue)} events successfully.")
        return catalogue
