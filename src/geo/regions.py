from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

from src.exceptions import UnknownRegionError


@dataclass(frozen=True)
class Region:
    key: str             # 'Maule', 'Biobio', ...
    display_name: str    # 'Maule', 'Bio-Bio', ...
    number: int          # administrative region number
    aliases: Tuple[str, ...] = ()

    def __str__(self):
        return self.key


# Administrative regions of Chile, in the order they are matched against names.
REGIONS: Tuple[Region, ...] = (
    Region("Tarapaca", "Tarapacá", 1),
    Region("Antofagasta", "Antofagasta", 2),
    Region("Atacama", "Atacama", 3),
    Region("Coquimbo", "Coquimbo", 4),
    Region("Valparaiso", "Valparaiso", 5),
    Region("OHiggins", "O'Higgins", 6, ("O`HIGGINS", "O'HIGGINS", "LIBERTADOR")),
    Region("Maule", "Maule", 7),
    Region("Biobio", "Bio-Bio", 8, ("Bio-Bio",)),
    Region("Araucania", "Araucania", 9, ("La Araucania",)),
    Region("LosLagos", "Los Lagos", 10, ("Los Lagos",)),
    Region("Aysen", "Aisen", 11, ("Aisen",)),
    Region("Magallanes", "Magallanes", 12, ("Antarctica Chilena",)),
    Region("Metropolitana", "Región Metropolitana", 13),
    Region("LosRios", "Los Rios", 14, ("Los Rios",)),
    Region("Arica_y_Parinacota", "Arica y Parinacota", 15, ("Arica", "Parinacota")),
)


class RegionClassifier:
    """
    Maps free-text region names from catalogue feeds onto the region table.

    A name matches a region when it contains the region key or one of its
    aliases (case-insensitive); the first region in table order wins.
    """

    def __init__(self, regions: Tuple[Region, ...] = REGIONS):
        self.regions = tuple(regions)
        self._by_key: Dict[str, Region] = {r.key.upper(): r for r in self.regions}

    def __iter__(self) -> Iterator[Region]:
        return iter(self.regions)

    def __len__(self):
        return len(self.regions)

    def classify(self, name: str) -> Region:
        text = name.upper().strip()
        for region in self.regions:
            if region.key.upper() in text:
                return region
            for alias in region.aliases:
                if alias.upper() in text:
                    return region
        raise UnknownRegionError(text)

    def get(self, key: str) -> Optional[Region]:
        """Exact lookup by region key, e.g. 'Maule'."""
        return self._by_key.get(key.upper().strip())
