"""Piece descriptors referencing byte runs inside the two text stores."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Source(str, Enum):
    """Store a piece reads its bytes from."""

    ORIGINAL = "original"
    APPEND = "append"


@dataclass(slots=True)
class Piece:
    """Half-open byte range ``[offset, offset + length)`` into one store."""

    source: Source
    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclass(frozen=True, slots=True)
class TextRange:
    """Absolute, half-open document range reported by searches."""

    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start


__all__ = ["Source", "Piece", "TextRange"]
