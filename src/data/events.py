from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from src.geo.regions import Region


class ScaleType(Enum):
    """Magnitude scales reported by the catalogue."""
    ML = "ML"
    MB = "MB"
    MS = "MS"
    MW = "MW"

    @classmethod
    def parse(cls, text: str) -> "ScaleType":
        text = text.strip().upper()
        # EMSC reports plain 'M' (or nothing) for local magnitudes
        if text in ("M", ""):
            text = "ML"
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"Unknown magnitude scale: {text!r}")


@dataclass(frozen=True)
class Earthquake:
    """
    One catalogue entry.

    Two earthquakes are the same event when timestamp, region and magnitude
    match; location, depth and scale are carried along but not compared.
    Sorting puts the newest event first.
    """
    region: Region
    timestamp: datetime
    magnitude: float
    scale: ScaleType = field(default=ScaleType.ML, compare=False)
    longitude: float = field(default=0.0, compare=False)
    latitude: float = field(default=0.0, compare=False)
    depth: float = field(default=0.0, compare=False)

    def __lt__(self, other: "Earthquake") -> bool:
        return self.timestamp > other.timestamp

    def __str__(self):
        return (f"{self.timestamp:%Y-%m-%d %H:%M:%S} {self.region.key} "
                f"{self.magnitude}{self.scale.name} {self.depth} "
                f"lng: {self.longitude} lat: {self.latitude}")
