"""Key input, mode identifiers and handler results for the editor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class EditorMode(str, Enum):
    NORMAL = "normal"
    INSERT = "insert"
    COMMAND = "command"


@dataclass(slots=True)
class KeyInput:
    """Normalized key event passed to ``handle_key``.

    ``key`` carries names such as ``ESC``, ``ENTER``, ``BACKSPACE`` or the
    arrow names for special keys and the character itself otherwise;
    ``text`` is set only for printable input.
    """

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None


@dataclass(slots=True)
class ModeResult:
    """Outcome of one keystroke."""

    consumed: bool
    switch_to: Optional[EditorMode] = None
    status: str = "ok"
    message: Optional[str] = None


ARROW_KEYS = frozenset({"LEFT", "RIGHT", "UP", "DOWN"})

__all__ = ["ARROW_KEYS", "EditorMode", "KeyInput", "ModeResult"]
