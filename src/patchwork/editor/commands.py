"""Ex-style command lines typed after ``:``."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional

from patchwork.buffer import Buffer, BufferPathError, TextRange
from patchwork.highlight import FileType
from patchwork.runtime import telemetry

from .base import EditorMode, ModeResult
from .motion import move_to
from .state import EditorState

CommandHandler = Callable[[EditorState, str, bool], ModeResult]


def _done(status: str, message: str = "") -> ModeResult:
    return ModeResult(
        consumed=True, switch_to=EditorMode.NORMAL, status=status, message=message
    )


def _fail(state: EditorState, status: str, message: str) -> ModeResult:
    state.message = message
    return _done(status, message)


def _reason(exc: Exception) -> object:
    return getattr(exc, "strerror", None) or exc


def run_command(state: EditorState, line: str) -> ModeResult:
    text = line.strip()
    telemetry.record_event("command.submit", data={"command": text})
    if not text:
        return _done("command_empty")
    if text.startswith("/"):
        return _handle_find(state, text[1:], False)

    name, _, rest = text.partition(" ")
    force = name.endswith("!")
    handler = _COMMAND_HANDLERS.get(name.rstrip("!"))
    if handler is None:
        return _fail(state, "command_error", f"Not an editor command: {name}")
    return handler(state, rest.strip(), force)


def _write(state: EditorState, target: Optional[str]) -> Optional[Path]:
    buffer = state.buffer
    try:
        path = buffer.save(target or None)
    except BufferPathError:
        state.message = "No file name"
        return None
    except OSError as exc:
        telemetry.record_event(
            "command.write_failed",
            level="error",
            data={"path": target or buffer.path, "error": exc},
        )
        state.message = f"Can't write: {_reason(exc)}"
        return None
    state.file_type = FileType.from_path(path)
    state.message = f'"{path}" {buffer.total_lines()}L, {len(buffer)}B written'
    return path


def _handle_write(state: EditorState, args: str, force: bool) -> ModeResult:
    del force
    if _write(state, args) is None:
        return _done("command_error", state.message)
    return _done("command_write", state.message)


def _handle_quit(state: EditorState, args: str, force: bool) -> ModeResult:
    del args
    if state.buffer.dirty and not force:
        return _fail(
            state,
            "command_error",
            "No write since last change (add ! to override)",
        )
    state.quit_requested = True
    return _done("command_quit_force" if force else "command_quit")


def _handle_wq(state: EditorState, args: str, force: bool) -> ModeResult:
    if _write(state, args) is None and not force:
        return _done("command_error", state.message)
    state.quit_requested = True
    return _done("command_wq", state.message)


def _handle_x(state: EditorState, args: str, force: bool) -> ModeResult:
    if state.buffer.dirty or args:
        return _handle_wq(state, args, force)
    state.quit_requested = True
    return _done("command_x")


def _handle_edit(state: EditorState, args: str, force: bool) -> ModeResult:
    current = state.buffer.path
    target = Path(args) if args else current
    if target is None:
        return _fail(state, "command_error", "No file name")
    if state.buffer.dirty and not force:
        return _fail(
            state,
            "command_error",
            "No write since last change (add ! to override)",
        )
    try:
        buffer = Buffer.from_file(target)
        state.message = f'"{target}" {buffer.total_lines()}L, {len(buffer)}B'
    except FileNotFoundError:
        buffer = Buffer(name=target.name, path=target)
        state.message = f'"{target}" [New]'
    except (OSError, UnicodeDecodeError) as exc:
        telemetry.record_event(
            "command.edit_failed",
            level="error",
            data={"path": target, "error": exc},
        )
        return _fail(state, "command_error", f"Can't open: {_reason(exc)}")
    state.replace_buffer(buffer)
    return _done("command_edit", state.message)


def next_match(state: EditorState, matches: List[TextRange]) -> Optional[TextRange]:
    """First match strictly after the cursor, wrapping to the top."""

    if not matches:
        return None
    cursor = state.buffer.table.offset_from_position(state.cursor) or 0
    for match in matches:
        if match.start > cursor:
            return match
    return matches[0]


def search(state: EditorState, needle: str) -> ModeResult:
    matches = state.buffer.find(needle, all_matches=True)
    match = next_match(state, matches)
    if match is None:
        return _fail(state, "search_miss", f"Pattern not found: {needle}")
    position = state.buffer.position_of(match.start)
    if position is not None:
        move_to(state, position)
    plural = "es" if len(matches) != 1 else ""
    state.message = f"/{needle} [{len(matches)} match{plural}]"
    return _done("search_hit", state.message)


def _handle_find(state: EditorState, args: str, force: bool) -> ModeResult:
    del force
    needle = args or state.last_search
    if not needle:
        return _fail(state, "command_error", "No previous search pattern")
    state.last_search = needle
    return search(state, needle)


def _handle_echo(state: EditorState, args: str, force: bool) -> ModeResult:
    del force
    state.message = args
    return _done("command_echo", args)


_COMMAND_HANDLERS: Dict[str, CommandHandler] = {
    "echo": _handle_echo,
    "write": _handle_write,
    "w": _handle_write,
    "quit": _handle_quit,
    "q": _handle_quit,
    "wq": _handle_wq,
    "x": _handle_x,
    "exit": _handle_x,
    "edit": _handle_edit,
    "e": _handle_edit,
    "find": _handle_find,
}


__all__ = ["next_match", "run_command", "search"]
