"""
Chart rendering for the earthquake base (PNG files via matplotlib).
"""

import os
import time
from typing import Dict, Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from src.analytics.stats import SeismicityStats
from src.data.catalogue import EarthquakeCatalogue
from config.settings import CHART_DPI, CHART_HEIGHT, CHART_WIDTH


def _check_base(catalogue: Optional[EarthquakeCatalogue]) -> None:
    if catalogue is None or len(catalogue) == 0:
        raise ValueError("Empty earthquakes base passed")


def _title(catalogue: EarthquakeCatalogue, by: str) -> str:
    return (f"Earthquakes in Chile, distribution by {by}, "
            f"{catalogue.first_year()} - {catalogue.last_year()}")


def _output_path(output_file: Optional[str], prefix: str) -> str:
    if not output_file:
        output_file = f"{prefix}_{int(time.time() * 1000)}.png"
    directory = os.path.dirname(output_file)
    if directory:
        os.makedirs(directory, exist_ok=True)
    return output_file


def _figure():
    return plt.figure(figsize=(CHART_WIDTH / CHART_DPI, CHART_HEIGHT / CHART_DPI))


def _save(path: str) -> str:
    plt.tight_layout()
    plt.savefig(path, dpi=CHART_DPI)
    plt.close()
    return path


def _pie(title: str, counts: Dict[str, int], path: str) -> str:
    # Empty slices only clutter the labels
    counts = {label: n for label, n in counts.items() if n > 0}
    _figure()
    plt.pie(list(counts.values()), labels=list(counts.keys()),
            autopct="%1.1f%%", labeldistance=1.05, textprops={"fontsize": 12})
    plt.title(title)
    plt.axis("equal")
    return _save(path)


def region_distribution_chart(catalogue: EarthquakeCatalogue,
                              output_file: Optional[str] = None) -> str:
    """Pie chart of event counts per region. Returns the written path."""
    _check_base(catalogue)
    path = _output_path(output_file, "EarthquakesByRegion")
    return _pie(_title(catalogue, "regions"),
                SeismicityStats.region_distribution(catalogue), path)


def month_distribution_chart(catalogue: EarthquakeCatalogue,
                             output_file: Optional[str] = None) -> str:
    """Pie chart of event counts per calendar month. Returns the written path."""
    _check_base(catalogue)
    path = _output_path(output_file, "EarthquakesByMonth")
    return _pie(_title(catalogue, "month"),
                SeismicityStats.month_distribution(catalogue), path)


def magnitude_distribution_chart(catalogue: EarthquakeCatalogue,
                                 output_file: Optional[str] = None) -> str:
    """Grouped bar chart of magnitude bands per region. Returns the written path."""
    _check_base(catalogue)
    path = _output_path(output_file, "EarthquakesByMagnitude")
    df = SeismicityStats.magnitude_distribution(catalogue)

    fig = _figure()
    ax = fig.add_subplot(111)
    df.plot.bar(ax=ax, edgecolor="none")
    ax.set_title(_title(catalogue, "magnitude"))
    ax.set_xlabel("Region")
    ax.set_ylabel("Count")
    plt.xticks(rotation=22.5, ha="right")
    return _save(path)
