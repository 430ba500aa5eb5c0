from __future__ import annotations

from typing import List

import pytest

from patchwork.adapters.textual import (
    TextualEditorAdapter,
    TextualUIHooks,
    display_cursor_index,
)
from patchwork.buffer import Buffer, BufferMirror
from patchwork.editor import INSERT_BANNER, EditorState


def make_state(text: str = "File is read.\r\nThe end.") -> EditorState:
    return EditorState.for_buffer(Buffer.from_text(text, name="story"))


def test_adapter_updates_buffer_and_status() -> None:
    updates: List[BufferMirror] = []
    statuses: List[str] = []
    commands: List[str] = []
    hooks = TextualUIHooks(
        update_buffer=updates.append,
        update_status=statuses.append,
        show_command=commands.append,
    )
    adapter = TextualEditorAdapter(make_state(), hooks)

    adapter.handle_textual_key("i", text="i")
    adapter.handle_textual_key("a", text="a")

    assert updates[-1].text == "aFile is read.\r\nThe end."
    assert updates[-1].cursor_offset == 1
    assert statuses[0] == "0:0 | 13"
    assert statuses[-1] == "0:1 | 14 [+]"
    assert commands[-1] == INSERT_BANNER

    adapter.handle_textual_key("ESC")
    assert commands[-1] == ""


def test_adapter_relays_command_line() -> None:
    commands: List[str] = []
    quits: List[bool] = []
    hooks = TextualUIHooks(
        update_buffer=lambda mirror: None,
        show_command=commands.append,
        request_quit=lambda: quits.append(True),
    )
    adapter = TextualEditorAdapter(make_state(), hooks)

    adapter.handle_textual_key(":", text=":")
    adapter.handle_textual_key("q", text="q")
    assert commands[-1] == ":q"
    assert not quits

    adapter.handle_textual_key("ENTER")

    assert quits == [True]
    assert adapter.state.quit_requested is True


def test_adapter_shows_debug_line() -> None:
    lines: List[str] = []
    hooks = TextualUIHooks(update_buffer=lambda mirror: None, show_debug=lines.append)
    adapter = TextualEditorAdapter(make_state(), hooks)

    adapter.handle_textual_key("DOWN")

    assert lines[-1].startswith("nl_original=[0, 15]")
    assert "offset=15" in lines[-1]


def test_adapter_emits_log_lines() -> None:
    logs: List[str] = []
    hooks = TextualUIHooks(update_buffer=lambda mirror: None, log=logs.append)
    adapter = TextualEditorAdapter(make_state(), hooks)

    adapter.handle_textual_key("i", text="i")

    assert any(line.startswith("key ->") for line in logs)
    assert any("switch_to='insert'" in line for line in logs)


def test_adapter_uppercases_modifiers() -> None:
    logs: List[str] = []
    hooks = TextualUIHooks(update_buffer=lambda mirror: None, log=logs.append)
    adapter = TextualEditorAdapter(make_state(), hooks)

    result = adapter.handle_textual_key("X", modifiers=("ctrl",))

    assert result.consumed is False
    assert any("mods=('CTRL',)" in line for line in logs)


@pytest.mark.parametrize(
    ("text", "offset", "expected"),
    [
        ("ab\r\ncd", 0, 0),
        ("ab\r\ncd", 4, 3),
        ("ab\r\ncd", 6, 5),
        ("é!", 2, 1),
        ("é!", 3, 2),
    ],
)
def test_display_cursor_index(text: str, offset: int, expected: int) -> None:
    assert display_cursor_index(text, offset) == expected


def test_render_buffer_marks_cursor() -> None:
    pytest.importorskip("textual")
    from patchwork.adapters.textual.app import render_buffer
    from patchwork.highlight import PlainTextHighlighter

    buffer = Buffer.from_text("ab\r\ncd")

    on_char = render_buffer(buffer.mirror(), PlainTextHighlighter())
    assert on_char.plain == "ab\ncd"
    assert any(span.start == 0 and span.end == 1 for span in on_char.spans)

    at_end = render_buffer(buffer.mirror(buffer.position_of(6)), PlainTextHighlighter())
    assert at_end.plain == "ab\ncd "
