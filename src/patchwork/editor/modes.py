"""Per-mode key handling and the single keystroke entry point."""

from __future__ import annotations

from typing import Callable, Dict

from patchwork.buffer import Position
from patchwork.runtime import telemetry

from .base import ARROW_KEYS, EditorMode, KeyInput, ModeResult
from .commands import run_command, search
from .motion import MOTIONS, char_width_before, move_back, move_down
from .state import INSERT_BANNER, EditorState

ModeHandler = Callable[[EditorState, KeyInput], ModeResult]

_ESCAPE = {"ESC", "<Esc>"}
_ENTER = {"ENTER", "RETURN"}


def handle_key(state: EditorState, key: KeyInput) -> ModeResult:
    """Apply one keystroke to ``state`` and report what happened."""

    mode = state.mode
    with telemetry.span(
        name=f"mode::{mode.value}",
        component=True,
        metadata={"key": key.key, "mode": mode.value},
    ):
        result = _HANDLERS[mode](state, key)
    if result.switch_to is not None and result.switch_to is not state.mode:
        switch_mode(state, result.switch_to)
    return result


def switch_mode(state: EditorState, mode: EditorMode) -> None:
    previous = state.mode
    state.mode = mode
    if mode is EditorMode.INSERT:
        state.message = INSERT_BANNER
    elif previous is EditorMode.INSERT:
        state.message = ""
    if mode is EditorMode.COMMAND:
        state.command = ""
    telemetry.record_event("mode.switch", data={"mode": mode.value})


def _handle_normal(state: EditorState, key: KeyInput) -> ModeResult:
    if key.key in ARROW_KEYS:
        MOTIONS[key.key](state)
        return ModeResult(consumed=True, status="motion")
    if key.key in _ENTER:
        move_down(state)
        return ModeResult(consumed=True, status="motion")
    if key.key == "BACKSPACE":
        move_back(state)
        return ModeResult(consumed=True, status="motion")

    text = key.text
    if text == "i":
        return ModeResult(
            consumed=True, switch_to=EditorMode.INSERT, message="enter_insert"
        )
    if text == ":":
        state.message = ""
        return ModeResult(
            consumed=True, switch_to=EditorMode.COMMAND, message="enter_command"
        )
    if text == "n" and state.last_search:
        return search(state, state.last_search)
    if text is not None and text in MOTIONS:
        MOTIONS[text](state)
        return ModeResult(consumed=True, status="motion")
    return ModeResult(consumed=False, status="miss")


def _handle_insert(state: EditorState, key: KeyInput) -> ModeResult:
    if key.key in _ESCAPE:
        return ModeResult(
            consumed=True, switch_to=EditorMode.NORMAL, message="exit_insert"
        )
    if key.key in ARROW_KEYS:
        MOTIONS[key.key](state)
        return ModeResult(consumed=True, status="motion")
    if key.key in _ENTER:
        return _insert_new_line(state)
    if key.key == "BACKSPACE":
        return _backspace(state)
    if key.text:
        return _insert_text(state, key.text)
    return ModeResult(consumed=False, status="miss")


def _insert_text(state: EditorState, text: str) -> ModeResult:
    if state.buffer.insert(text, state.cursor) is None:
        return ModeResult(consumed=True, status="unaddressable")
    state.cursor = state.cursor.moved(x=state.cursor.x + len(text.encode("utf-8")))
    state.refresh_line_length()
    return ModeResult(consumed=True, status="edit")


def _insert_new_line(state: EditorState) -> ModeResult:
    if state.buffer.insert_new_line(state.cursor) is None:
        return ModeResult(consumed=True, status="unaddressable")
    state.cursor = Position(0, state.cursor.y + 1)
    state.refresh_line_length()
    return ModeResult(consumed=True, status="edit")


def _backspace(state: EditorState) -> ModeResult:
    buffer = state.buffer
    cursor = state.cursor
    offset = buffer.offset_of(cursor)
    if offset is None:
        return ModeResult(consumed=True, status="unaddressable")

    if cursor.x > 0:
        width = char_width_before(buffer, offset)
        buffer.delete_range(offset - width, width)
        state.cursor = cursor.moved(x=cursor.x - width)
    elif cursor.y > 0:
        previous = cursor.y - 1
        line_length = buffer.line_length(previous)
        line_start = buffer.offset_of(Position(0, previous))
        if line_start is None:
            return ModeResult(consumed=True, status="unaddressable")
        # Join the lines by dropping the terminator between them.
        joint = line_start + line_length
        buffer.delete_range(joint, offset - joint)
        state.cursor = Position(line_length, previous)
    else:
        return ModeResult(consumed=True, status="noop")

    state.refresh_line_length()
    return ModeResult(consumed=True, status="edit")


def _handle_command(state: EditorState, key: KeyInput) -> ModeResult:
    if key.key in _ESCAPE:
        state.command = ""
        return ModeResult(
            consumed=True, switch_to=EditorMode.NORMAL, message="command_cancel"
        )
    if key.key in _ENTER:
        line = state.command
        state.command = ""
        return run_command(state, line)
    if key.key == "BACKSPACE":
        if not state.command:
            return ModeResult(
                consumed=True, switch_to=EditorMode.NORMAL, message="command_cancel"
            )
        state.command = state.command[:-1]
        return ModeResult(consumed=True, status="editing")
    if key.text:
        state.command += key.text
        return ModeResult(consumed=True, status="editing")
    return ModeResult(consumed=False, status="miss", message="unhandled")


_HANDLERS: Dict[EditorMode, ModeHandler] = {
    EditorMode.NORMAL: _handle_normal,
    EditorMode.INSERT: _handle_insert,
    EditorMode.COMMAND: _handle_command,
}


__all__ = ["handle_key", "switch_mode"]
