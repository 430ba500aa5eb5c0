"""Pygments-backed highlighters for Rust and TOML sources."""

from __future__ import annotations

import re
from typing import Any, ClassVar, List, Sequence, Tuple

from pygments import lex
from pygments.lexer import Lexer
from pygments.lexers import RustLexer, TOMLLexer
from pygments.token import Comment, Keyword, Name, Number, Operator, Punctuation
from pygments.token import String, Token

from .base import FileType, StyledSpan, display_text, merge_spans

StyleRule = Tuple[Any, str]


class LexedHighlighter:
    """Maps Pygments token types onto Rich styles, first matching rule wins."""

    file_type: ClassVar[FileType] = FileType.UNKNOWN
    rules: ClassVar[Sequence[StyleRule]] = ()

    def __init__(self) -> None:
        self._lexer = self.make_lexer()

    def make_lexer(self) -> Lexer:  # pragma: no cover - abstract override
        raise NotImplementedError

    def style_for(self, token_type: Any, value: str) -> str:
        for parent, style in self.rules:
            if token_type in parent:
                return style
        return ""

    def highlight(self, text: str) -> List[StyledSpan]:
        shown = display_text(text)
        spans = [
            StyledSpan(value, self.style_for(token_type, value))
            for token_type, value in lex(shown, self._lexer)
        ]
        return merge_spans(spans)


class RustHighlighter(LexedHighlighter):
    file_type = FileType.RUST

    KEYWORD = "bright_red"
    CONSTANT = "bright_green"
    IDENTIFIER = "bright_white"
    TYPE = "bright_yellow"
    SYMBOL = "bright_white"
    COMMENT = "white"

    rules = (
        (Comment, COMMENT),
        (Keyword.Type, TYPE),
        (Keyword.Constant, CONSTANT),
        (Keyword, KEYWORD),
        (String, CONSTANT),
        (Number, CONSTANT),
        (Name, IDENTIFIER),
        (Operator, SYMBOL),
        (Punctuation, SYMBOL),
    )

    def make_lexer(self) -> Lexer:
        return RustLexer(stripnl=False, ensurenl=False)

    def style_for(self, token_type: Any, value: str) -> str:
        style = super().style_for(token_type, value)
        if style == self.IDENTIFIER and value[:1].isupper():
            return self.TYPE
        return style


_TABLE_HEADER = re.compile(r"^[ \t]*\[.*\][ \t]*$", re.MULTILINE)


class TomlHighlighter(LexedHighlighter):
    file_type = FileType.TOML

    TABLE = "yellow"
    KEY = "bright_blue"
    VALUE = "bright_green"
    STRING = "rgb(200,84,60)"
    INTEGER = "bright_green"
    SYMBOL = ""
    BOOLEAN = "blue"
    COMMENT = "white"

    rules = (
        (Comment, COMMENT),
        (Keyword.Constant, BOOLEAN),
        (String, STRING),
        (Number, INTEGER),
        (Name, KEY),
        (Keyword, TABLE),
        (Operator, SYMBOL),
        (Punctuation, SYMBOL),
        (Token.Literal, VALUE),
    )

    def make_lexer(self) -> Lexer:
        return TOMLLexer(stripnl=False, ensurenl=False)

    def highlight(self, text: str) -> List[StyledSpan]:
        shown = display_text(text)
        headers = [match.span() for match in _TABLE_HEADER.finditer(shown)]
        spans: List[StyledSpan] = []
        position = 0
        for token_type, value in lex(shown, self._lexer):
            start = position
            position += len(value)
            if any(lo <= start < hi for lo, hi in headers):
                spans.append(StyledSpan(value, self.TABLE))
            else:
                spans.append(StyledSpan(value, self.style_for(token_type, value)))
        return merge_spans(spans)


__all__ = ["LexedHighlighter", "RustHighlighter", "TomlHighlighter"]
