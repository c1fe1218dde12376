"""Conversions between UTF-8 byte offsets and LSP line/UTF-16 positions."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "Position",
    "Range",
    "Point",
    "InputEdit",
    "byte_to_position",
    "byte_range_to_range",
    "position_to_byte",
    "compute_input_edit",
    "apply_change",
]


@dataclass(frozen=True, order=True)
class Position:
    """Zero-based line and UTF-16 code-unit column."""

    line: int
    character: int


@dataclass(frozen=True)
class Range:
    """Half-open span between two positions."""

    start: Position
    end: Position


@dataclass(frozen=True)
class Point:
    """Zero-based row and UTF-8 byte column, as a syntax tree counts them."""

    row: int
    column: int


@dataclass(frozen=True)
class InputEdit:
    """Description of a text edit in byte offsets and byte-column points."""

    start_byte: int
    old_end_byte: int
    new_end_byte: int
    start_position: Point
    old_end_position: Point
    new_end_position: Point


def _utf8_len(text: str) -> int:
    return len(text.encode("utf-8"))


def _utf16_len(text: str) -> int:
    return sum(2 if ord(ch) > 0xFFFF else 1 for ch in text)


def byte_to_position(src: str, offset: int) -> Position:
    """Map a UTF-8 byte offset to a Position, clamping past-end offsets."""
    data = src.encode("utf-8")
    offset = min(max(offset, 0), len(data))
    prefix = data[:offset]
    line = prefix.count(b"\n")
    line_start = prefix.rfind(b"\n") + 1
    column = data[line_start:offset].decode("utf-8")
    return Position(line, _utf16_len(column))


def byte_range_to_range(src: str, byte_start: int, byte_end: int) -> Range:
    """Map a UTF-8 byte range to a Range."""
    return Range(byte_to_position(src, byte_start), byte_to_position(src, byte_end))


def position_to_byte(src: str, pos: Position) -> int:
    """Map a Position to a UTF-8 byte offset, clamping to line end or EOF."""
    lines = src.split("\n")
    if pos.line >= len(lines):
        return _utf8_len(src)
    offset = sum(_utf8_len(line) + 1 for line in lines[: pos.line])
    remaining = pos.character
    for ch in lines[pos.line]:
        if remaining == 0:
            return offset
        units = _utf16_len(ch)
        if remaining < units:
            return offset
        remaining -= units
        offset += _utf8_len(ch)
    return offset


def _byte_point(data: bytes, offset: int) -> Point:
    offset = min(offset, len(data))
    prefix = data[:offset]
    line_start = prefix.rfind(b"\n") + 1
    return Point(prefix.count(b"\n"), offset - line_start)


def _shifted_point(start: Point, inserted: bytes) -> Point:
    newlines = inserted.count(b"\n")
    if newlines == 0:
        return Point(start.row, start.column + len(inserted))
    last_nl = inserted.rfind(b"\n")
    return Point(start.row + newlines, len(inserted) - last_nl - 1)


def compute_input_edit(text: str, range: Range, new_text: str) -> InputEdit:
    """Describe replacing ``range`` of the pre-edit ``text`` with ``new_text``."""
    data = text.encode("utf-8")
    inserted = new_text.encode("utf-8")
    start_byte = position_to_byte(text, range.start)
    old_end_byte = max(position_to_byte(text, range.end), start_byte)
    start_position = _byte_point(data, start_byte)
    return InputEdit(
        start_byte=start_byte,
        old_end_byte=old_end_byte,
        new_end_byte=start_byte + len(inserted),
        start_position=start_position,
        old_end_position=_byte_point(data, old_end_byte),
        new_end_position=_shifted_point(start_position, inserted),
    )


def apply_change(text: str, range: Range | None, new_text: str) -> str:
    """Return ``text`` with ``range`` replaced by ``new_text``; None replaces it all."""
    if range is None:
        return new_text
    start = position_to_byte(text, range.start)
    end = max(position_to_byte(text, range.end), start)
    data = text.encode("utf-8")
    return (data[:start] + new_text.encode("utf-8") + data[end:]).decode("utf-8")