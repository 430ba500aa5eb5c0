"""Cursor motion and bounds checks against the current buffer."""

from __future__ import annotations

from patchwork.buffer import Buffer, Position

from .state import EditorState


def is_valid_line(state: EditorState, y: int) -> bool:
    return 0 <= y < state.buffer.total_lines()


def is_valid_column(state: EditorState, position: Position) -> bool:
    if not is_valid_line(state, position.y):
        return False
    return 0 <= position.x <= state.buffer.line_length(position.y)


def char_width_before(buffer: Buffer, offset: int) -> int:
    """Bytes of the UTF-8 character ending at ``offset`` (0 at the start)."""

    chunk = buffer.table.get_bytes(max(offset - 4, 0), offset)
    if not chunk:
        return 0
    width = 1
    while width < len(chunk) and chunk[-width] & 0xC0 == 0x80:
        width += 1
    return width


def char_width_at(buffer: Buffer, offset: int) -> int:
    lead = buffer.table.get_bytes(offset, offset + 1)
    if not lead:
        return 0
    byte = lead[0]
    if byte >= 0xF0:
        return 4
    if byte >= 0xE0:
        return 3
    if byte >= 0xC0:
        return 2
    return 1


def move_to(state: EditorState, position: Position) -> None:
    state.cursor = position
    state.refresh_line_length()


def _move_to_line(state: EditorState, y: int) -> None:
    length = state.buffer.line_length(y)
    state.cursor = Position(min(state.cursor.x, length), y)
    state.line_length = length


def move_up(state: EditorState) -> None:
    if state.cursor.y > 0:
        _move_to_line(state, state.cursor.y - 1)


def move_down(state: EditorState) -> None:
    if is_valid_line(state, state.cursor.y + 1):
        _move_to_line(state, state.cursor.y + 1)


def move_left(state: EditorState) -> None:
    if state.cursor.x == 0:
        return
    offset = state.buffer.table.offset_from_position(state.cursor)
    step = char_width_before(state.buffer, offset) if offset is not None else 1
    state.cursor = state.cursor.moved(x=max(state.cursor.x - max(step, 1), 0))


def move_right(state: EditorState) -> None:
    offset = state.buffer.table.offset_from_position(state.cursor)
    step = char_width_at(state.buffer, offset) if offset is not None else 1
    target = state.cursor.moved(x=state.cursor.x + max(step, 1))
    if is_valid_column(state, target):
        state.cursor = target


def move_back(state: EditorState) -> None:
    """Step left, wrapping to the end of the previous line."""

    if state.cursor.x > 0:
        move_left(state)
    elif state.cursor.y > 0:
        y = state.cursor.y - 1
        length = state.buffer.line_length(y)
        state.cursor = Position(length, y)
        state.line_length = length


MOTIONS = {
    "LEFT": move_left,
    "RIGHT": move_right,
    "UP": move_up,
    "DOWN": move_down,
    "h": move_left,
    "l": move_right,
    "k": move_up,
    "j": move_down,
}

__all__ = [
    "MOTIONS",
    "char_width_at",
    "char_width_before",
    "is_valid_column",
    "is_valid_line",
    "move_back",
    "move_down",
    "move_left",
    "move_right",
    "move_to",
    "move_up",
]
