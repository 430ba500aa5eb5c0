from __future__ import annotations

from pathlib import Path

import pytest

from patchwork.buffer import Buffer, BufferPathError, Position, TextRange

THREE_LINES = "File is read.\r\nThe hero lied.\r\nThe end."


def test_line_length_excludes_terminators() -> None:
    buffer = Buffer.from_text(THREE_LINES)

    assert buffer.total_lines() == 3
    assert buffer.line_length(0) == 13
    assert buffer.line_length(1) == 14
    assert buffer.line_length(2) == 8
    assert buffer.line_length(3) == 0


def test_line_length_after_joining_lines() -> None:
    buffer = Buffer.from_text("File is read.\r\nThe hero lied.\r\nThe end.\r\n")
    buffer.delete_range(29, 2)

    assert buffer.text == "File is read.\r\nThe hero lied.The end.\r\n"
    assert buffer.total_lines() == 3
    assert buffer.line_length(1) == 22
    assert buffer.line_length(2) == 0


def test_line_length_with_bare_line_feed() -> None:
    buffer = Buffer.from_text("ab\r\ncd\nef")

    assert buffer.line_length(0) == 2
    assert buffer.line_length(1) == 2
    assert buffer.line_length(2) == 2


def test_insert_tracks_version_and_dirty_flag() -> None:
    buffer = Buffer.from_text("File is read.")
    assert buffer.version == 0
    assert buffer.dirty is False

    assert buffer.insert("not ", Position(8, 0)) == 8

    assert buffer.text == "File is not read."
    assert buffer.version == 1
    assert buffer.dirty is True


def test_unaddressable_edits_are_skipped() -> None:
    buffer = Buffer.from_text(THREE_LINES)

    assert buffer.insert("x", Position(0, 3)) is None
    assert buffer.insert("x", Position(15, 0)) is None
    assert buffer.delete(Position(0, 9), 1) is None
    assert buffer.delete_range(38, 5) is None

    assert buffer.text == THREE_LINES
    assert buffer.version == 0
    assert buffer.dirty is False


def test_insert_new_line_and_delete() -> None:
    buffer = Buffer.from_text("File is read.")
    buffer.insert_new_line(Position(4, 0))

    assert buffer.text == "File\r\n is read."
    assert buffer.total_lines() == 2
    assert buffer.position_of(6) == Position(0, 1)

    assert buffer.delete(Position(0, 1), 1) == 6
    assert buffer.text == "File\r\nis read."
    assert buffer.version == 2


def test_find_defaults_to_every_match() -> None:
    buffer = Buffer.from_text("The hero lied.\r\nThe hero ran.")

    assert buffer.find("hero") == [TextRange(4, 8), TextRange(20, 24)]
    assert buffer.find("hero", all_matches=False) == [TextRange(4, 8)]
    assert buffer.find("hero", offset=9) == [TextRange(20, 24)]


def test_from_file_reads_bytes_verbatim(tmp_path: Path) -> None:
    path = tmp_path / "notes.txt"
    path.write_bytes(b"one\r\ntwo\r\n")

    buffer = Buffer.from_file(path)

    assert buffer.name == "notes.txt"
    assert buffer.path == path
    assert buffer.text == "one\r\ntwo\r\n"
    assert buffer.total_lines() == 3
    assert buffer.dirty is False


def test_from_file_normalizes_bare_line_feeds(tmp_path: Path) -> None:
    path = tmp_path / "unix.txt"
    path.write_bytes(b"one\ntwo")

    buffer = Buffer.from_file(path)

    assert buffer.text == "one\r\ntwo"
    assert buffer.line_length(0) == 3


def test_from_file_missing_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        Buffer.from_file(tmp_path / "missing.txt")


def test_save_writes_document_and_clears_dirty(tmp_path: Path) -> None:
    path = tmp_path / "out.txt"
    buffer = Buffer.from_text("héllo", path=path)
    buffer.insert("!", Position(6, 0))

    assert buffer.save() == path
    assert path.read_bytes() == "héllo!".encode("utf-8")
    assert buffer.dirty is False


def test_save_to_new_path_adopts_it(tmp_path: Path) -> None:
    buffer = Buffer.from_text("data")
    target = tmp_path / "saved.txt"

    buffer.save(target)

    assert buffer.path == target
    assert target.read_text() == "data"


def test_save_without_path_raises() -> None:
    buffer = Buffer.from_text("data", name="scratch")

    with pytest.raises(BufferPathError) as info:
        buffer.save()

    assert info.value.name == "scratch"


def test_mirror_reports_cursor_offset_and_attributes() -> None:
    buffer = Buffer.from_text(THREE_LINES, name="story")

    mirror = buffer.mirror(Position(3, 1))

    assert mirror.text == THREE_LINES
    assert mirror.cursor == Position(3, 1)
    assert mirror.cursor_offset == 18
    assert mirror.attributes == {"name": "story", "path": "[No Name]", "dirty": "no"}


def test_debug_line_lists_pieces() -> None:
    buffer = Buffer.from_text("abc")
    buffer.insert("x", Position(1, 0))

    line = buffer.debug_line(Position(1, 0))

    assert "offset=1" in line
    assert "pieces=[original[0:1], append[0:1], original[1:3]]" in line


def test_set_path_redirects_save(tmp_path: Path) -> None:
    buffer = Buffer.from_text("data", path=tmp_path / "first.txt")
    buffer.set_path(tmp_path / "second.txt")

    buffer.save()

    assert (tmp_path / "second.txt").read_text() == "data"
    assert not (tmp_path / "first.txt").exists()


def test_from_file_rejects_invalid_utf8(tmp_path: Path) -> None:
    path = tmp_path / "latin1.txt"
    path.write_bytes(b"caf\xe9\r\nline\r\n")

    with pytest.raises(UnicodeDecodeError):
        Buffer.from_file(path)

    assert path.read_bytes() == b"caf\xe9\r\nline\r\n"
