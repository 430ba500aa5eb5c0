"""Piece-table text buffer and its file-backed façade."""

from .buffer import Buffer, Transaction
from .lines import LineStarts
from .piece import Piece, Source, TextRange
from .piece_table import LINE_TERMINATOR, PieceTable, normalize_line_endings
from .position import ORIGIN, Position
from .sync import BufferMirror, BufferPathError

__all__ = [
    "Buffer",
    "BufferMirror",
    "BufferPathError",
    "LINE_TERMINATOR",
    "LineStarts",
    "ORIGIN",
    "Piece",
    "PieceTable",
    "Position",
    "Source",
    "TextRange",
    "Transaction",
    "normalize_line_endings",
]
