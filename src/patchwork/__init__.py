"""Terminal text editor built around a piece-table text buffer."""

__all__ = [
    "adapters",
    "buffer",
    "editor",
    "highlight",
    "runtime",
]

__version__ = "0.1.0"
