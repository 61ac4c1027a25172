import io
import os
import shutil
import tempfile
import unittest
from contextlib import redirect_stdout
from datetime import datetime
from unittest.mock import MagicMock, patch

import requests
from obspy import UTCDateTime
from obspy.core.event import Catalog, Event, EventDescription, Magnitude, Origin

from src.data.loader import SeismicDataLoader
from src.exceptions import CatalogueLoadError
from src.geo.regions import RegionClassifier
from config.settings import SNAPSHOT_PATH

FEED = """Date;Time UTC;Latitude;Longitude;Depth;Depth Type;Magnitude Type;Magnitude;Region name;Last update
2016-12-25;14:22:26.8;-43.41;-73.95;35;f;MW;7.6;ISLA CHILOE, LOS LAGOS, CHILE;2016-12-25 16:00
2017-04-24;21:38:28.3;-33.04;-72.06;28;;M;6.9;OFFSHORE VALPARAISO, CHILE;2017-04-24 23:00
2017-05-01;10:00:00.0;-55.00;-80.00;10;;MB;4.5;WEST CHILE RISE;2017-05-01 11:00
2017-06-02;03:15:00.0;-12.00;-77.00;40;;ML;4.1;NEAR COAST OF PERU;2017-06-02 04:00
"""


class TestParsing(unittest.TestCase):

    def setUp(self):
        self.classifier = RegionClassifier()

    def test_parse_line(self):
        row = SeismicDataLoader.parse_line(
            "2017-04-24;21:38:28.3;-33.04;-72.06;28;;M;6.9;OFFSHORE VALPARAISO, CHILE;x",
            self.classifier)
        self.assertEqual(row['timestamp'], datetime(2017, 4, 24, 21, 38, 28))
        self.assertEqual(row['scale'], 'ML')
        self.assertEqual(row['magnitude'], 6.9)
        self.assertEqual(row['depth'], 28.0)
        self.assertEqual(row['region'], 'Valparaiso')

    def test_header_and_west_chile_rise_are_skipped(self):
        self.assertIsNone(SeismicDataLoader.parse_line(FEED.splitlines()[0], self.classifier))
        self.assertIsNone(SeismicDataLoader.parse_line(FEED.splitlines()[3], self.classifier))

    def test_unknown_region_is_skipped_with_warning(self):
        out = io.StringIO()
        with redirect_stdout(out):
            df = SeismicDataLoader.parse_lines(FEED.splitlines(), self.classifier)
        self.assertEqual(len(df), 2)
        self.assertEqual(list(df['region']), ['LosLagos', 'Valparaiso'])
        self.assertIn("Could not parse line 5", out.getvalue())

    def test_bundled_snapshot(self):
        with redirect_stdout(io.StringIO()):
            df = SeismicDataLoader.read_file(SNAPSHOT_PATH, self.classifier)
        self.assertEqual(len(df), 51)
        self.assertEqual((df['region'] == 'Maule').sum(), 11)
        self.assertEqual((df['region'] == 'OHiggins').sum(), 2)


class TestRemoteFeed(unittest.TestCase):

    @patch('src.data.loader.requests.get')
    def test_fetch_remote(self, mock_get):
        mock_get.return_value = MagicMock(status_code=200, text=FEED)
        with redirect_stdout(io.StringIO()):
            df = SeismicDataLoader.fetch_remote("http://example.invalid/feed", timeout=5)
        mock_get.assert_called_with("http://example.invalid/feed", timeout=5)
        self.assertEqual(len(df), 2)

    @patch('src.data.loader.requests.get')
    def test_http_error_gives_empty_frame(self, mock_get):
        mock_get.return_value = MagicMock(status_code=503, text="")
        with redirect_stdout(io.StringIO()):
            df = SeismicDataLoader.fetch_remote("http://example.invalid/feed")
        self.assertTrue(df.empty)

    @patch('src.data.loader.requests.get')
    def test_connection_error_gives_empty_frame(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("offline")
        with redirect_stdout(io.StringIO()):
            df = SeismicDataLoader.fetch_remote("http://example.invalid/feed")
        self.assertTrue(df.empty)


class TestLoadBase(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp(prefix="quake_base_")
        self.addCleanup(shutil.rmtree, self.tmpdir)
        self.local = os.path.join(self.tmpdir, "earthquakes.base")

    def test_snapshot_then_cache(self):
        with redirect_stdout(io.StringIO()):
            catalogue = SeismicDataLoader.load_base(local_path=self.local,
                                                    snapshot_path=SNAPSHOT_PATH)
        self.assertEqual(len(catalogue), 51)
        self.assertTrue(os.path.exists(self.local))

        # Second load reads the cache written by the first
        with redirect_stdout(io.StringIO()):
            cached = SeismicDataLoader.load_base(local_path=self.local,
                                                 snapshot_path="/nonexistent.csv")
        self.assertEqual(set(cached.earthquakes()), set(catalogue.earthquakes()))

    def test_cache_line_format(self):
        with redirect_stdout(io.StringIO()):
            SeismicDataLoader.load_base(local_path=self.local, snapshot_path=SNAPSHOT_PATH)
        with open(self.local, encoding='utf-8') as f:
            first = f.readline().rstrip("\n")
        self.assertEqual(first, "2012-01-14;03:12:40;-20.21;-69.41;98.0; ;ML;3.4;Tarapaca;")

    @patch('src.data.loader.requests.get')
    def test_remote_merge(self, mock_get):
        mock_get.return_value = MagicMock(status_code=200, text=FEED)
        with redirect_stdout(io.StringIO()):
            catalogue = SeismicDataLoader.load_base(load_remote=True, local_path=self.local,
                                                    snapshot_path=SNAPSHOT_PATH)
        self.assertEqual(len(catalogue), 53)

    def test_missing_sources(self):
        with redirect_stdout(io.StringIO()):
            with self.assertRaises(CatalogueLoadError):
                SeismicDataLoader.load_base(local_path=self.local,
                                            snapshot_path=os.path.join(self.tmpdir, "none.csv"))


class TestObspyCatalog(unittest.TestCase):

    def _event(self, region_text, mag=6.1, magnitude_type='Mw'):
        return Event(
            origins=[Origin(time=UTCDateTime(2019, 1, 20, 1, 32, 51),
                            latitude=-30.27, longitude=-71.37, depth=53000.0)],
            magnitudes=[Magnitude(mag=mag, magnitude_type=magnitude_type)],
            event_descriptions=[EventDescription(text=region_text, type='region name')],
        )

    def test_from_obspy_catalog(self):
        catalog = Catalog(events=[
            self._event("COQUIMBO, CHILE"),
            self._event("SOUTHERN PERU"),
            Event(),
        ])
        with redirect_stdout(io.StringIO()):
            catalogue = SeismicDataLoader.from_obspy_catalog(catalog)
        self.assertEqual(len(catalogue), 1)
        quake = catalogue.earthquakes()[0]
        self.assertEqual(quake.region.key, 'Coquimbo')
        self.assertEqual(quake.timestamp, datetime(2019, 1, 20, 1, 32, 51))
        self.assertEqual(quake.depth, 53.0)
        self.assertEqual(quake.scale.name, 'MW')


if __name__ == '__main__':
    unittest.main()
