"""Per-store line-start tables."""

from __future__ import annotations

from bisect import bisect_right
from typing import Iterable, Iterator, List, Optional

LINE_FEED = 0x0A


class LineStarts:
    """Sorted offsets of the first byte following each line feed in a store.

    A marker ``m`` belongs to the byte range that contains the line feed at
    ``m - 1``, so for a piece covering ``[start, end)`` the markers it owns
    are exactly those with ``start < m <= end``. The seeded ``0`` of the
    original store is therefore never attributed to any piece.
    """

    __slots__ = ("_markers",)

    def __init__(self, markers: Iterable[int] = ()) -> None:
        self._markers: List[int] = list(markers)

    @classmethod
    def scan(cls, data: bytes) -> "LineStarts":
        markers = [0]
        index = data.find(LINE_FEED)
        while index != -1:
            markers.append(index + 1)
            index = data.find(LINE_FEED, index + 1)
        return cls(markers)

    def append(self, marker: int) -> None:
        if self._markers and marker < self._markers[-1]:
            raise ValueError("line starts must be appended in order")
        self._markers.append(marker)

    def count_within(self, start: int, end: int) -> int:
        if end <= start:
            return 0
        return bisect_right(self._markers, end) - bisect_right(self._markers, start)

    def nth_within(self, start: int, end: int, n: int) -> Optional[int]:
        """Return the ``n``-th (0-based) marker owned by ``[start, end)``."""

        if n < 0 or n >= self.count_within(start, end):
            return None
        return self._markers[bisect_right(self._markers, start) + n]

    def last_within(self, start: int, end: int) -> Optional[int]:
        count = self.count_within(start, end)
        if count == 0:
            return None
        return self._markers[bisect_right(self._markers, end) - 1]

    def __len__(self) -> int:
        return len(self._markers)

    def __iter__(self) -> Iterator[int]:
        return iter(self._markers)

    def __repr__(self) -> str:
        return f"LineStarts({self._markers!r})"


__all__ = ["LineStarts", "LINE_FEED"]
