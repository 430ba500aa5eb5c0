"""Piece-table storage backing every buffer.

The document is never stored contiguously. It is the in-order concatenation
of the byte runs referenced by ``_pieces``, each pointing either into the
immutable original store or into the append-only store that receives every
inserted string. All offsets, lengths and columns are byte counts over the
UTF-8 encoding of the text.

Addressing failures are reported as ``None`` (or an empty result / silent
no-op for edits); nothing in here raises for out-of-range input.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from .lines import LineStarts
from .piece import Piece, Source, TextRange
from .position import Position

LINE_TERMINATOR = "\r\n"
ENCODING = "utf-8"


def normalize_line_endings(text: str) -> str:
    """Rewrite lone LFs to CRLF unless the text already contains a CRLF."""

    if LINE_TERMINATOR in text:
        return text
    return text.replace("\n", LINE_TERMINATOR)


class PieceTable:
    def __init__(self, original: bytes = b"") -> None:
        self._original = bytes(original)
        self._append = bytearray()
        self._original_lines = LineStarts.scan(self._original)
        self._append_lines = LineStarts()
        self._pieces: List[Piece] = []
        if self._original:
            self._pieces.append(Piece(Source.ORIGINAL, 0, len(self._original)))

    @classmethod
    def from_text(cls, text: str) -> "PieceTable":
        return cls(normalize_line_endings(text).encode(ENCODING))

    # -- introspection -------------------------------------------------

    @property
    def pieces(self) -> Tuple[Piece, ...]:
        """Copies of the current pieces, in document order."""

        return tuple(Piece(p.source, p.offset, p.length) for p in self._pieces)

    @property
    def original(self) -> bytes:
        return self._original

    @property
    def append_store(self) -> bytes:
        return bytes(self._append)

    @property
    def original_line_starts(self) -> Tuple[int, ...]:
        return tuple(self._original_lines)

    @property
    def append_line_starts(self) -> Tuple[int, ...]:
        return tuple(self._append_lines)

    def __len__(self) -> int:
        return sum(piece.length for piece in self._pieces)

    def __repr__(self) -> str:
        return f"PieceTable(pieces={len(self._pieces)}, length={len(self)})"

    def _store(self, source: Source) -> bytes | bytearray:
        if source is Source.ORIGINAL:
            return self._original
        return self._append

    def _lines(self, source: Source) -> LineStarts:
        if source is Source.ORIGINAL:
            return self._original_lines
        return self._append_lines

    # -- addressing ----------------------------------------------------

    def locate(self, offset: int) -> Optional[Tuple[int, int]]:
        """Return ``(piece index, store offset)`` holding logical ``offset``.

        An offset sitting exactly on a piece boundary resolves to the end of
        the preceding piece, so appending at a growing boundary can extend
        that piece without looking ahead.
        """

        if offset < 0:
            return None
        remaining = offset
        for index, piece in enumerate(self._pieces):
            if remaining <= piece.length:
                return index, piece.offset + remaining
            remaining -= piece.length
        return None

    def _line_start(self, y: int) -> Optional[int]:
        """Logical offset of the first byte of line ``y`` (``y >= 1``)."""

        remaining = y
        consumed = 0
        for piece in self._pieces:
            lines = self._lines(piece.source)
            count = lines.count_within(piece.offset, piece.end)
            if remaining > count:
                remaining -= count
                consumed += piece.length
                continue
            marker = lines.nth_within(piece.offset, piece.end, remaining - 1)
            if marker is None:  # pragma: no cover - guarded by count above
                return None
            return consumed + marker - piece.offset
        return None

    def offset_from_position(self, position: Position) -> Optional[int]:
        """Translate ``position`` into a logical offset.

        The column must keep the offset on its own line: strictly before the
        start of the next line, or at most the document length on the last
        line. Anything else is not addressable and yields ``None``.
        """

        if position.x < 0 or position.y < 0:
            return None
        if position.y == 0:
            line_start = 0
        else:
            found = self._line_start(position.y)
            if found is None:
                return None
            line_start = found

        offset = line_start + position.x
        next_start = self._line_start(position.y + 1)
        limit = len(self) if next_start is None else next_start - 1
        if offset > limit:
            return None
        return offset

    def position_from_offset(self, offset: int) -> Optional[Position]:
        if offset < 0 or offset > len(self):
            return None

        line = 0
        line_start = 0
        consumed = 0
        for piece in self._pieces:
            if consumed >= offset:
                break
            reach = piece.offset + min(piece.length, offset - consumed)
            lines = self._lines(piece.source)
            count = lines.count_within(piece.offset, reach)
            if count:
                line += count
                marker = lines.last_within(piece.offset, reach)
                assert marker is not None
                line_start = consumed + marker - piece.offset
            consumed += piece.length
        return Position(offset - line_start, line)

    def line_breaks(self) -> int:
        """Recorded line terminators inside the current pieces."""

        return sum(
            self._lines(piece.source).count_within(piece.offset, piece.end)
            for piece in self._pieces
        )

    def total_lines(self) -> int:
        """Number of addressable lines (line breaks + 1)."""

        return self.line_breaks() + 1

    # -- mutation ------------------------------------------------------

    def insert(self, text: str, offset: int) -> None:
        if not text:
            return

        located = self.locate(offset)
        if located is None and (self._pieces or offset != 0):
            return

        data = text.encode(ENCODING)
        append_start = len(self._append)
        self._append.extend(data)
        if text == LINE_TERMINATOR:
            self._append_lines.append(append_start + len(data))

        if located is None:
            self._pieces.append(Piece(Source.APPEND, append_start, len(data)))
            return

        index, store_offset = located
        piece = self._pieces[index]
        if (
            piece.source is Source.APPEND
            and store_offset == piece.end
            and piece.end == append_start
        ):
            # The piece owns the tail of the append store: grow it in place.
            piece.length += len(data)
            return

        fragments = (
            Piece(piece.source, piece.offset, store_offset - piece.offset),
            Piece(Source.APPEND, append_start, len(data)),
            Piece(piece.source, store_offset, piece.end - store_offset),
        )
        self._pieces[index : index + 1] = [f for f in fragments if f.length > 0]

    def insert_new_line(self, offset: int) -> None:
        self.insert(LINE_TERMINATOR, offset)

    def delete(self, offset: int, count: int) -> None:
        if count <= 0:
            return

        first = self.locate(offset)
        last = self.locate(offset + count)
        if first is None or last is None:
            return

        start_index, start_at = first
        end_index, end_at = last

        if start_index == end_index:
            piece = self._pieces[start_index]
            if start_at == piece.offset:
                piece.offset += count
                piece.length -= count
                self._drop_if_empty(start_index)
                return
            if end_at == piece.end:
                piece.length -= count
                self._drop_if_empty(start_index)
                return

        head = self._pieces[start_index]
        tail = self._pieces[end_index]
        remainders = (
            Piece(head.source, head.offset, start_at - head.offset),
            Piece(tail.source, end_at, tail.end - end_at),
        )
        self._pieces[start_index : end_index + 1] = [
            r for r in remainders if r.length > 0
        ]

    def _drop_if_empty(self, index: int) -> None:
        if self._pieces[index].length == 0:
            del self._pieces[index]

    # -- reading -------------------------------------------------------

    def _clipped(
        self, start: int, stop: Optional[int]
    ) -> Iterator[Tuple[int, Piece, int, int]]:
        """Yield ``(logical start, piece, store lo, store hi)`` per overlapping piece."""

        consumed = 0
        for piece in self._pieces:
            piece_start = consumed
            consumed += piece.length
            if consumed <= start:
                continue
            if stop is not None and piece_start >= stop:
                break
            lo = max(start - piece_start, 0)
            hi = piece.length if stop is None else min(stop - piece_start, piece.length)
            yield piece_start + lo, piece, piece.offset + lo, piece.offset + hi

    def get_bytes(self, offset: int = 0, until: Optional[int] = None) -> bytes:
        start = max(offset, 0)
        if until is not None and until <= start:
            return b""
        return b"".join(
            self._store(piece.source)[lo:hi]
            for _, piece, lo, hi in self._clipped(start, until)
        )

    def get(self, offset: int = 0, until: Optional[int] = None) -> str:
        """Return the document slice ``[offset, until)``; ``until=None`` reads to the end."""

        return self.get_bytes(offset, until).decode(ENCODING, errors="replace")

    def find(
        self, text: str, offset: int = 0, all_matches: bool = False
    ) -> List[TextRange]:
        """Search each piece at or after ``offset`` for ``text``.

        Matches are looked for inside single pieces only; an occurrence that
        straddles two pieces is not reported. With ``all_matches`` every
        non-overlapping match of a piece is returned, otherwise only the
        first one per piece.
        """

        needle = text.encode(ENCODING)
        if not needle:
            return []

        found: List[TextRange] = []
        for logical_start, piece, lo, hi in self._clipped(max(offset, 0), None):
            store = self._store(piece.source)
            index = store.find(needle, lo, hi)
            while index != -1:
                start = logical_start + index - lo
                found.append(TextRange(start, start + len(needle)))
                if not all_matches:
                    break
                index = store.find(needle, index + len(needle), hi)
        return found


__all__ = ["PieceTable", "LINE_TERMINATOR", "ENCODING", "normalize_line_endings"]
