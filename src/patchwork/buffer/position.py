"""Two-dimensional document coordinates."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Position:
    """Byte column ``x`` on the 0-based line ``y``."""

    x: int = 0
    y: int = 0

    def moved(self, *, x: int | None = None, y: int | None = None) -> "Position":
        return Position(self.x if x is None else x, self.y if y is None else y)


ORIGIN = Position(0, 0)

__all__ = ["Position", "ORIGIN"]
