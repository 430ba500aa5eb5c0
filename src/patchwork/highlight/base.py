"""File types and the highlighter contract shared by every language."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from os import PathLike
from pathlib import Path
from typing import List, Optional, Protocol, Union

PathArg = Union[str, PathLike]


class FileType(str, Enum):
    RUST = "rs"
    TOML = "toml"
    TEXT = "text"
    UNKNOWN = "unknown"

    @classmethod
    def from_path(cls, path: Optional[PathArg]) -> "FileType":
        if path is None:
            return cls.UNKNOWN
        return _EXTENSIONS.get(Path(path).suffix.lower(), cls.UNKNOWN)


_EXTENSIONS = {
    ".rs": FileType.RUST,
    ".toml": FileType.TOML,
    ".txt": FileType.TEXT,
    ".text": FileType.TEXT,
    ".md": FileType.TEXT,
}


@dataclass(frozen=True, slots=True)
class StyledSpan:
    """A run of display text with a Rich style string (``""`` = default)."""

    text: str
    style: str = ""


class Highlighter(Protocol):
    """Turns document text into styled spans.

    The spans concatenate to the input with every CRLF folded to LF.
    """

    file_type: FileType

    def highlight(self, text: str) -> List[StyledSpan]:
        ...


def display_text(text: str) -> str:
    return text.replace("\r\n", "\n")


def merge_spans(spans: List[StyledSpan]) -> List[StyledSpan]:
    merged: List[StyledSpan] = []
    for span in spans:
        if not span.text:
            continue
        if merged and merged[-1].style == span.style:
            merged[-1] = StyledSpan(merged[-1].text + span.text, span.style)
        else:
            merged.append(span)
    return merged


class PlainTextHighlighter:
    file_type = FileType.TEXT

    def highlight(self, text: str) -> List[StyledSpan]:
        shown = display_text(text)
        return [StyledSpan(shown)] if shown else []


__all__ = [
    "FileType",
    "Highlighter",
    "PlainTextHighlighter",
    "StyledSpan",
    "display_text",
    "merge_spans",
]
