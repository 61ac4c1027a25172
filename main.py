import argparse
import os
from datetime import datetime

from src.analytics.forecasting import RegionForecaster
from src.data.loader import SeismicDataLoader
from src.exceptions import UnknownRegionError
from src.geo.regions import RegionClassifier
from src.reporting.charts import (
    magnitude_distribution_chart, month_distribution_chart, region_distribution_chart
)
from config.settings import CHART_DIR


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Chilean earthquake statistics and naive Holt-Winters forecasts."
    )
    parser.add_argument("--remote", action="store_true",
                        help="merge the latest events from the EMSC feed")
    parser.add_argument("--obspy", metavar="FILE",
                        help="also load a QuakeML/NDK catalogue through ObsPy")
    parser.add_argument("--charts", default=CHART_DIR, metavar="DIR",
                        help="directory for the PNG charts (default: %(default)s)")
    parser.add_argument("--no-charts", action="store_true",
                        help="skip chart rendering")
    parser.add_argument("--region", action="append", metavar="NAME",
                        help="forecast only this region (repeatable)")
    return parser


def render_charts(catalogue, chart_dir):
    region_distribution_chart(catalogue, os.path.join(chart_dir, "EarthquakesByRegion.png"))
    print("Regional distribution - OK")

    magnitude_distribution_chart(catalogue, os.path.join(chart_dir, "EarthquakesByMagnitude.png"))
    print("Magnitude distribution - OK")

    month_distribution_chart(catalogue, os.path.join(chart_dir, "EarthquakesByMonth.png"))
    print("Month distribution - OK")


def main(argv=None):
    args = build_parser().parse_args(argv)
    classifier = RegionClassifier()

    regions = list(classifier)
    if args.region:
        try:
            regions = [classifier.classify(name) for name in args.region]
        except UnknownRegionError as e:
            print(f"❌ {e}")
            return 2

    catalogue = SeismicDataLoader.load_base(load_remote=args.remote, classifier=classifier)
    if args.obspy:
        catalogue = catalogue.merge(SeismicDataLoader.load_obspy(args.obspy, classifier))

    if not len(catalogue):
        print("⚠️ Earthquake base is empty, skipping charts.")
    elif not args.no_charts:
        render_charts(catalogue, args.charts)
    print()

    forecaster = RegionForecaster(catalogue)
    predictions = forecaster.forecast_all(regions, now=datetime.now())
    for region in regions:
        p = predictions.get(region)
        if p is not None:
            print(f"Nearest possible earthquake in {region.display_name}: "
                  f"{p.timestamp:%Y-%m-%d %H:%M:%S} {p.magnitude}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
