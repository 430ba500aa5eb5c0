"""Editor collaborator: explicit state plus one input function per keystroke."""

from .base import ARROW_KEYS, EditorMode, KeyInput, ModeResult
from .commands import run_command
from .modes import handle_key, switch_mode
from .motion import is_valid_column, is_valid_line
from .state import INSERT_BANNER, EditorState

__all__ = [
    "ARROW_KEYS",
    "EditorMode",
    "EditorState",
    "INSERT_BANNER",
    "KeyInput",
    "ModeResult",
    "handle_key",
    "is_valid_column",
    "is_valid_line",
    "run_command",
    "switch_mode",
]
