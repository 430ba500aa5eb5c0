"""Syntax highlighting for the closed set of supported file types."""

from __future__ import annotations

from .base import (
    FileType,
    Highlighter,
    PlainTextHighlighter,
    StyledSpan,
    display_text,
    merge_spans,
)
from .lexed import RustHighlighter, TomlHighlighter


def highlighter_for(file_type: FileType) -> Highlighter:
    """Pick the highlighter for ``file_type``; unknown types render plain."""

    if file_type is FileType.RUST:
        return RustHighlighter()
    if file_type is FileType.TOML:
        return TomlHighlighter()
    return PlainTextHighlighter()


__all__ = [
    "FileType",
    "Highlighter",
    "PlainTextHighlighter",
    "RustHighlighter",
    "StyledSpan",
    "TomlHighlighter",
    "display_text",
    "highlighter_for",
    "merge_spans",
]
