"""File-backed buffer façade over the piece table."""

from __future__ import annotations

from contextlib import AbstractContextManager
from os import PathLike
from pathlib import Path
from typing import ContextManager, List, Optional, Union

from patchwork.runtime import telemetry

from .piece import TextRange
from .piece_table import ENCODING, LINE_TERMINATOR, PieceTable
from .position import ORIGIN, Position
from .sync import BufferMirror, BufferPathError, describe_path

PathArg = Union[str, PathLike]


class Buffer:
    """A named document with an optional backing file.

    Collaborators address the document by ``Position``. Positions the table
    cannot resolve are logged and skipped, never raised.
    """

    def __init__(
        self,
        *,
        name: str = "default",
        table: Optional[PieceTable] = None,
        path: Optional[PathArg] = None,
    ) -> None:
        self.name = name
        self.table = table if table is not None else PieceTable()
        self._path = Path(path) if path is not None else None
        self.version = 0
        self.dirty = False

    @classmethod
    def from_text(
        cls, text: str, *, name: str = "default", path: Optional[PathArg] = None
    ) -> "Buffer":
        return cls(name=name, table=PieceTable.from_text(text), path=path)

    @classmethod
    def from_file(cls, path: PathArg, *, name: Optional[str] = None) -> "Buffer":
        """Read ``path`` fully into a new buffer.

        ``OSError`` propagates, and so does ``UnicodeDecodeError`` for content
        that is not valid UTF-8: such a file would not survive a save.
        """

        file_path = Path(path)
        with telemetry.span(
            "buffer::load", component="buffer", metadata={"path": file_path}
        ) as handle:
            # Bytes are decoded directly so CRLF pairs survive untouched.
            raw = file_path.read_bytes()
            handle.add_metadata("bytes", len(raw))
            content = raw.decode(ENCODING)
        return cls.from_text(content, name=name or file_path.name, path=file_path)

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def set_path(self, path: PathArg) -> None:
        self._path = Path(path)

    def save(self, path: Optional[PathArg] = None) -> Path:
        target = Path(path) if path is not None else self._path
        if target is None:
            raise BufferPathError("No file name", name=self.name)

        data = self.table.get_bytes()
        with telemetry.span(
            "buffer::save", component="buffer", metadata={"path": target}
        ):
            target.write_bytes(data)
        self._path = target
        self.dirty = False
        telemetry.record_event(
            "buffer.saved", data={"path": target, "bytes": len(data)}
        )
        return target

    # -- reading -------------------------------------------------------

    @property
    def text(self) -> str:
        return self.table.get()

    def __len__(self) -> int:
        return len(self.table)

    def total_lines(self) -> int:
        return self.table.total_lines()

    def offset_of(self, position: Position) -> Optional[int]:
        offset = self.table.offset_from_position(position)
        if offset is None:
            telemetry.record_event(
                "buffer.unaddressable",
                level="warning",
                data={"buffer": self.name, "x": position.x, "y": position.y},
            )
        return offset

    def position_of(self, offset: int) -> Optional[Position]:
        return self.table.position_from_offset(offset)

    def line_length(self, y: int) -> int:
        """Visible byte length of line ``y`` without its terminator."""

        start = self.table.offset_from_position(Position(0, y))
        if start is None:
            return 0
        next_start = self.table.offset_from_position(Position(0, y + 1))
        if next_start is None:
            return len(self.table) - start
        tail = self.table.get_bytes(max(next_start - 2, start), next_start)
        terminator = 2 if tail.endswith(LINE_TERMINATOR.encode(ENCODING)) else 1
        return max(next_start - start - terminator, 0)

    def find(
        self, text: str, *, offset: int = 0, all_matches: bool = True
    ) -> List[TextRange]:
        with telemetry.span(
            "buffer::find", component="buffer", metadata={"buffer": self.name}
        ) as handle:
            matches = self.table.find(text, offset, all_matches)
            handle.add_metadata("matches", len(matches))
        return matches

    # -- editing -------------------------------------------------------

    def insert(self, text: str, position: Position) -> Optional[int]:
        """Insert ``text`` at ``position``; return the offset used, or ``None``."""

        offset = self.offset_of(position)
        if offset is None or not text:
            return offset
        with Transaction(self, "insert") as tx:
            self.table.insert(text, offset)
            tx.commit()
        return offset

    def insert_new_line(self, position: Position) -> Optional[int]:
        return self.insert(LINE_TERMINATOR, position)

    def delete(self, position: Position, count: int) -> Optional[int]:
        offset = self.offset_of(position)
        if offset is None:
            return None
        return self.delete_range(offset, count)

    def delete_range(self, offset: int, count: int) -> Optional[int]:
        if count <= 0:
            return offset
        if offset < 0 or offset + count > len(self.table):
            telemetry.record_event(
                "buffer.unaddressable",
                level="warning",
                data={"buffer": self.name, "offset": offset, "count": count},
            )
            return None
        with Transaction(self, "delete") as tx:
            self.table.delete(offset, count)
            tx.commit()
        return offset

    # -- host views ----------------------------------------------------

    def mirror(self, cursor: Position = ORIGIN) -> BufferMirror:
        offset = self.table.offset_from_position(cursor)
        return BufferMirror(
            text=self.text,
            cursor=cursor,
            cursor_offset=offset if offset is not None else len(self.table),
            version=self.version,
            attributes={
                "name": self.name,
                "path": describe_path(self._path),
                "dirty": "yes" if self.dirty else "no",
            },
        )

    def debug_line(self, cursor: Position = ORIGIN) -> str:
        offset = self.table.offset_from_position(cursor)
        pieces = ", ".join(
            f"{p.source.value}[{p.offset}:{p.end}]" for p in self.table.pieces
        )
        return (
            f"nl_original={list(self.table.original_line_starts)} | "
            f"nl_append={list(self.table.append_line_starts)} | "
            f"offset={offset} | pieces=[{pieces}]"
        )


class Transaction(AbstractContextManager["Transaction"]):
    """Wraps one buffer edit in a telemetry span and records its effect."""

    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[telemetry.SpanHandle]] = None
        self._length_before = 0

    def __enter__(self) -> "Transaction":
        self._length_before = len(self.buffer.table)
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def commit(self) -> None:
        if len(self.buffer.table) == self._length_before:
            return
        self.buffer.version += 1
        self.buffer.dirty = True

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False
