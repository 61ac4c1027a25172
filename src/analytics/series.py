from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Iterator, List, Optional

import numpy as np


@dataclass
class SeriesItem:
    """A single (timestamp, value) sample."""
    timestamp: datetime
    value: float

    def __lt__(self, other: "SeriesItem") -> bool:
        return self.timestamp < other.timestamp


class EventSeries:
    """
    Ordered collection of SeriesItem samples.

    Storage keeps insertion order. `first()`/`last()` read a chronological
    view and never reorder the storage, so `at(i)` always indexes insertion
    order. `next()` is a one-way cursor over insertion order; use `reset()`
    or plain iteration for another pass.
    """

    def __init__(self, items: Optional[Iterable[SeriesItem]] = None):
        self._items: List[SeriesItem] = list(items) if items is not None else []
        self._cursor = 0

    def add(self, item: SeriesItem) -> None:
        self._items.append(item)

    def __len__(self):
        return len(self._items)

    def __iter__(self) -> Iterator[SeriesItem]:
        return iter(list(self._items))

    def sorted_items(self) -> List[SeriesItem]:
        # sorted() is stable: equal timestamps keep insertion order
        return sorted(self._items, key=lambda item: item.timestamp)

    def sorted(self) -> "EventSeries":
        return EventSeries(self.sorted_items())

    def first(self) -> Optional[SeriesItem]:
        if not self._items:
            return None
        return min(self._items, key=lambda item: item.timestamp)

    def last(self) -> Optional[SeriesItem]:
        if not self._items:
            return None
        # max() keeps the first of equal keys; the stable sort keeps the last
        return self.sorted_items()[-1]

    def next(self) -> Optional[SeriesItem]:
        if self._cursor >= len(self._items):
            return None
        item = self._items[self._cursor]
        self._cursor += 1
        return item

    def reset(self) -> None:
        self._cursor = 0

    def at(self, index: int) -> Optional[SeriesItem]:
        if 0 <= index < len(self._items):
            return self._items[index]
        return None

    def values(self) -> np.ndarray:
        return np.array([item.value for item in self._items], dtype=float)
