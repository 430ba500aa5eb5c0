"""Textual host for the editor."""

from .controller import TextualEditorAdapter, TextualUIHooks, display_cursor_index

__all__ = ["TextualEditorAdapter", "TextualUIHooks", "display_cursor_index"]
