"""Explicit editor state threaded through every keystroke."""

from __future__ import annotations

from dataclasses import dataclass

from patchwork.buffer import ORIGIN, Buffer, Position
from patchwork.highlight import FileType

from .base import EditorMode

INSERT_BANNER = "-- INSERT --"


@dataclass
class EditorState:
    """Everything the input handler reads and writes besides the buffer."""

    buffer: Buffer
    cursor: Position = ORIGIN
    line_length: int = 0
    mode: EditorMode = EditorMode.NORMAL
    command: str = ""
    message: str = ""
    last_search: str = ""
    quit_requested: bool = False
    file_type: FileType = FileType.UNKNOWN

    @classmethod
    def for_buffer(cls, buffer: Buffer) -> "EditorState":
        state = cls(buffer=buffer)
        state.replace_buffer(buffer)
        return state

    def replace_buffer(self, buffer: Buffer) -> None:
        self.buffer = buffer
        self.cursor = ORIGIN
        self.file_type = FileType.from_path(buffer.path)
        self.refresh_line_length()

    def refresh_line_length(self) -> None:
        self.line_length = self.buffer.line_length(self.cursor.y)

    def status_line(self) -> str:
        marker = " [+]" if self.buffer.dirty else ""
        return f"{self.cursor.y}:{self.cursor.x} | {self.line_length}{marker}"

    def command_line(self) -> str:
        if self.mode is EditorMode.COMMAND:
            return f":{self.command}"
        return self.message


__all__ = ["EditorState", "INSERT_BANNER"]
