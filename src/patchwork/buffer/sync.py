"""Adapter boundary types exchanged between buffers and host widgets."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .position import Position


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing the current buffer state."""

    text: str
    cursor: Position
    cursor_offset: int
    version: int
    attributes: dict[str, str] = field(default_factory=dict)


class BufferPathError(RuntimeError):
    """Raised when a buffer is saved without any destination path."""

    def __init__(self, message: str, *, name: Optional[str] = None) -> None:
        super().__init__(message)
        self.name = name


def describe_path(path: Optional[Path]) -> str:
    return str(path) if path is not None else "[No Name]"
