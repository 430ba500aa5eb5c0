"""Adapter that feeds Textual key events through ``handle_key``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from patchwork.buffer import BufferMirror
from patchwork.buffer.piece_table import ENCODING
from patchwork.editor import EditorState, KeyInput, ModeResult, handle_key


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    show_command: Callable[[str], None] = _noop
    show_debug: Callable[[str], None] = _noop
    request_quit: Callable[[], None] = _noop
    log: Callable[[str], None] = _noop


def display_cursor_index(text: str, offset: int) -> int:
    """Map a byte ``offset`` into ``text`` onto the LF-folded display text."""

    prefix = text.encode(ENCODING)[: max(offset, 0)].decode(ENCODING, errors="ignore")
    return len(prefix) - prefix.count("\r\n")


class TextualEditorAdapter:
    """Bridges an ``EditorState`` to a Textual-friendly surface."""

    def __init__(self, state: EditorState, hooks: TextualUIHooks) -> None:
        self.state = state
        self.hooks = hooks
        self.refresh()

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> ModeResult:
        """Translate a Textual key event into a ``KeyInput`` and dispatch it."""

        normalized_modifiers = tuple(str(mod).upper() for mod in modifiers)
        self._log_state("key ->", key=key, text=text, mods=normalized_modifiers)
        result = handle_key(
            self.state, KeyInput(key=key, text=text, modifiers=normalized_modifiers)
        )
        self._log_state(
            "result <-",
            consumed=result.consumed,
            status=result.status,
            message=result.message,
            switch_to=result.switch_to.value if result.switch_to else None,
        )
        self.refresh()
        if self.state.quit_requested:
            self.hooks.request_quit()
        return result

    def refresh(self) -> None:
        state = self.state
        self.hooks.update_buffer(state.buffer.mirror(state.cursor))
        self.hooks.update_status(state.status_line())
        self.hooks.show_command(state.command_line())
        self.hooks.show_debug(state.buffer.debug_line(state.cursor))

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix] + [f"{key}={value!r}" for key, value in snapshot.items()]
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        state = self.state
        return {
            "mode": state.mode.value,
            "cursor": (state.cursor.x, state.cursor.y),
            "command": state.command,
            "buffer": state.buffer.name,
            "buffer_version": state.buffer.version,
        }


__all__ = ["TextualEditorAdapter", "TextualUIHooks", "display_cursor_index"]
