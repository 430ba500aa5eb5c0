from __future__ import annotations

import pytest

from patchwork.highlight import (
    FileType,
    PlainTextHighlighter,
    RustHighlighter,
    StyledSpan,
    TomlHighlighter,
    display_text,
    highlighter_for,
    merge_spans,
)

RUST_SOURCE = (
    "// entry point\r\n"
    "fn main() {\r\n"
    "    let name: String = String::new();\r\n"
    "    let count = 5;\r\n"
    "}\r\n"
)

TOML_SOURCE = (
    "# manifest\r\n"
    "[package]\r\n"
    'name = "patchwork"\r\n'
    "version = 1\r\n"
    "publish = false\r\n"
)


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("main.rs", FileType.RUST),
        ("Cargo.toml", FileType.TOML),
        ("notes.txt", FileType.TEXT),
        ("README.MD", FileType.TEXT),
        ("script.py", FileType.UNKNOWN),
        (None, FileType.UNKNOWN),
    ],
)
def test_file_type_from_path(path, expected) -> None:
    assert FileType.from_path(path) is expected


def test_highlighter_for_each_file_type() -> None:
    assert isinstance(highlighter_for(FileType.RUST), RustHighlighter)
    assert isinstance(highlighter_for(FileType.TOML), TomlHighlighter)
    assert isinstance(highlighter_for(FileType.TEXT), PlainTextHighlighter)
    assert isinstance(highlighter_for(FileType.UNKNOWN), PlainTextHighlighter)


def test_plain_text_is_one_unstyled_span() -> None:
    spans = PlainTextHighlighter().highlight("a\r\nb")

    assert spans == [StyledSpan("a\nb")]
    assert PlainTextHighlighter().highlight("") == []


def test_merge_spans_joins_equal_styles() -> None:
    spans = [
        StyledSpan("a", "red"),
        StyledSpan("b", "red"),
        StyledSpan("", "blue"),
        StyledSpan("c"),
    ]

    assert merge_spans(spans) == [StyledSpan("ab", "red"), StyledSpan("c")]


@pytest.mark.parametrize(
    ("highlighter", "source"),
    [(RustHighlighter(), RUST_SOURCE), (TomlHighlighter(), TOML_SOURCE)],
)
def test_spans_cover_the_display_text(highlighter, source: str) -> None:
    spans = highlighter.highlight(source)

    assert "".join(span.text for span in spans) == display_text(source)
    assert all(span.text for span in spans)


def test_rust_styles() -> None:
    spans = RustHighlighter().highlight(RUST_SOURCE)

    assert StyledSpan("fn", RustHighlighter.KEYWORD) in spans
    assert StyledSpan("let", RustHighlighter.KEYWORD) in spans
    assert StyledSpan("5", RustHighlighter.CONSTANT) in spans
    assert any(
        span.text == "String" and span.style == RustHighlighter.TYPE for span in spans
    )
    assert any(
        "// entry point" in span.text and span.style == RustHighlighter.COMMENT
        for span in spans
    )


def test_toml_styles() -> None:
    spans = TomlHighlighter().highlight(TOML_SOURCE)

    assert StyledSpan("[package]", TomlHighlighter.TABLE) in spans
    assert any(
        '"patchwork"' in span.text and span.style == TomlHighlighter.STRING
        for span in spans
    )
    assert any(
        "# manifest" in span.text and span.style == TomlHighlighter.COMMENT
        for span in spans
    )
