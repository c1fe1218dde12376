import pytest

from lintropy.position import (
    InputEdit,
    Point,
    Position,
    Range,
    apply_change,
    byte_range_to_range,
    byte_to_position,
    compute_input_edit,
    position_to_byte,
)


def test_ascii_offsets_map_to_utf16_columns():
    src = "fn main() {\n    let x = 1;\n}\n"
    assert byte_to_position(src, src.index("let")) == Position(1, 4)


def test_unicode_column_counts_utf16_units():
    src = "let π = 3;\n"
    offset = src.encode("utf-8").index(b"=")
    assert byte_to_position(src, offset) == Position(0, 6)


def test_offset_at_eof_is_clamped():
    assert byte_to_position("abc", 9999) == Position(0, 3)


@pytest.mark.parametrize("target", [0, 1, 12, 18, None])
def test_position_round_trips_with_byte_to_position(target):
    src = "fn main() {\n    let π = 3;\n}\n"
    if target is None:
        target = len(src.encode("utf-8"))
    pos = byte_to_position(src, target)
    assert position_to_byte(src, pos) == target


def test_position_past_line_end_clamps_to_line_end():
    assert position_to_byte("ab\ncd\n", Position(0, 99)) == 2


def test_position_past_last_line_clamps_to_eof():
    src = "ab\ncd"
    assert position_to_byte(src, Position(7, 0)) == len(src)


def test_astral_char_counts_two_utf16_units():
    src = "a😀b"
    offset = src.encode("utf-8").index(b"b")
    pos = byte_to_position(src, offset)
    assert pos == Position(0, 3)
    assert position_to_byte(src, pos) == offset


def test_byte_range_to_range_uses_both_ends():
    src = "fn main() {\n    let x = 1;\n}\n"
    start = src.index("let")
    rng = byte_range_to_range(src, start, start + 3)
    assert rng == Range(byte_to_position(src, start), byte_to_position(src, start + 3))
    assert rng.start.line == rng.end.line


def test_apply_change_replaces_range_in_place():
    text = "let x = 1;\nlet y = 2;\n"
    rng = Range(Position(0, 4), Position(0, 5))
    assert apply_change(text, rng, "xx") == "let xx = 1;\nlet y = 2;\n"


def test_apply_change_inserts_multiline():
    rng = Range(Position(0, 1), Position(0, 1))
    assert apply_change("abc", rng, "XY\n") == "aXY\nbc"


def test_apply_change_none_replaces_whole_buffer():
    assert apply_change("old", None, "new") == "new"


def test_compute_input_edit_single_line():
    text = "let x = 1;\nlet y = 2;\n"
    rng = Range(Position(1, 4), Position(1, 5))
    edit = compute_input_edit(text, rng, "yy")
    assert edit == InputEdit(
        start_byte=15,
        old_end_byte=16,
        new_end_byte=17,
        start_position=Point(1, 4),
        old_end_position=Point(1, 5),
        new_end_position=Point(1, 6),
    )


def test_compute_input_edit_multiline_insert():
    rng = Range(Position(0, 1), Position(0, 1))
    edit = compute_input_edit("abc", rng, "XY\nZ")
    assert edit.start_byte == 1
    assert edit.old_end_byte == 1
    assert edit.new_end_byte == 5
    assert edit.new_end_position == Point(1, 1)


def test_compute_input_edit_inverted_range_collapses():
    rng = Range(Position(0, 3), Position(0, 1))
    edit = compute_input_edit("abcdef", rng, "")
    assert edit.old_end_byte == edit.start_byte == 3