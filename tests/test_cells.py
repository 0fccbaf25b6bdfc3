import pytest

from vtstate.cells import Attribute, Cell, Renditions, Row, isprint_iso8859_1


def test_default_sgr_has_no_attributes_or_colors():
    sgr = Renditions(0).sgr()
    assert sgr.startswith("\033[0")
    assert sgr.endswith("m")
    assert ";" not in sgr


def test_bold_set_and_cleared():
    r = Renditions(0)
    r.set_rendition(1)
    assert r.get_attribute(Attribute.BOLD)
    assert ";1" in r.sgr()
    r.set_rendition(22)
    assert not r.get_attribute(Attribute.BOLD)
    assert r == Renditions(0)


def test_faint_not_set_by_sgr_two():
    r = Renditions(0)
    r.set_rendition(2)
    assert r == Renditions(0)


def test_rendition_zero_resets_everything():
    r = Renditions(41)
    r.set_rendition(4)
    r.set_rendition(32)
    r.set_rendition(0)
    assert r == Renditions(0)


def test_default_foreground_restores():
    r = Renditions(0)
    r.set_rendition(31)
    assert r != Renditions(0)
    r.set_rendition(39)
    assert r == Renditions(0)


def test_bright_colors_match_256_color_indices():
    bright = Renditions(0)
    bright.set_rendition(91)
    indexed = Renditions(0)
    indexed.set_foreground_color(9)
    assert bright == indexed
    assert ";38;5;" in bright.sgr()


def test_bright_background_matches_indexed():
    bright = Renditions(0)
    bright.set_rendition(103)
    indexed = Renditions(0)
    indexed.set_background_color(11)
    assert bright == indexed
    assert ";48;5;" in bright.sgr()


def test_true_color_round_trip():
    color = Renditions.make_true_color(1, 2, 3)
    assert Renditions.is_true_color(color)
    assert not Renditions.is_true_color(255)
    r = Renditions(0)
    r.set_foreground_color(color)
    assert ";38;2;1;2;3" in r.sgr()
    r.set_background_color(Renditions.make_true_color(4, 5, 6))
    assert ";48;2;4;5;6" in r.sgr()


def test_out_of_range_color_ignored():
    r = Renditions(0)
    r.set_background_color(300)
    r.set_foreground_color(-1)
    assert r == Renditions(0)


def test_attribute_helpers_and_copy():
    r = Renditions(0)
    r.set_attribute(Attribute.ITALIC, True)
    r.set_attribute(Attribute.INVERSE, True)
    dup = r.copy()
    assert dup == r
    r.clear_attributes()
    assert not r.get_attribute(Attribute.ITALIC)
    assert dup.get_attribute(Attribute.INVERSE)
    assert ";3" in dup.sgr() and ";7" in dup.sgr()


@pytest.mark.parametrize(
    "ch, expected",
    [(0x41, True), (0x7F, False), (0xA0, True), (0xFF, True), (0x100, False), (0x1F, False)],
)
def test_isprint_iso8859_1(ch, expected):
    assert isprint_iso8859_1(ch) is expected


def test_empty_cell_prints_space():
    cell = Cell(0)
    assert cell.empty()
    assert cell.print_grapheme() == b" "
    assert cell.debug_contents() == "'_' ()"


def test_append_ascii_and_unicode():
    cell = Cell(0)
    cell.append(ord("a"))
    cell.append(0xE9)
    assert cell.print_grapheme() == "aé".encode("utf-8")
    assert not cell.empty()


def test_fallback_prefixes_no_break_space():
    cell = Cell(0)
    cell.append(0x301)
    cell.fallback = True
    assert cell.print_grapheme() == b"\xc2\xa0" + "\u0301".encode("utf-8")


def test_cell_full_after_limit():
    cell = Cell(0)
    for _ in range(31):
        cell.append(ord("x"))
    assert not cell.full()
    cell.append(ord("x"))
    assert cell.full()


def test_blank_cells_match():
    space = Cell(0)
    space.append(ord(" "))
    nbsp = Cell(0)
    nbsp.append(0xA0)
    empty = Cell(0)
    assert space.is_blank() and nbsp.is_blank() and empty.is_blank()
    assert space.contents_match(empty)
    assert nbsp.contents_match(space)
    letter = Cell(0)
    letter.append(ord("q"))
    assert not letter.is_blank()
    assert not letter.contents_match(empty)


def test_reset_and_clear():
    cell = Cell(0)
    cell.append(ord("z"))
    cell.wide = True
    cell.reset(42)
    assert cell == Cell(42)
    cell.append(ord("z"))
    cell.clear()
    assert cell.empty()


def test_width_follows_wide_flag():
    cell = Cell(0)
    assert cell.width == 1
    cell.wide = True
    assert cell.width == 2


def test_debug_contents_lists_bytes():
    cell = Cell(0)
    cell.append(ord("A"))
    assert cell.debug_contents() == "'A' [0x41]"


def test_compare_equal_cells(capsys):
    a = Cell(0)
    a.append(ord("a"))
    assert a.compare(a.copy()) is False
    assert capsys.readouterr().err == ""


def test_compare_reports_width(capsys):
    a = Cell(0)
    b = Cell(0)
    b.wide = True
    assert a.compare(b) is True
    assert "width" in capsys.readouterr().err


def test_compare_fallback_alone_does_not_matter(capsys):
    a = Cell(0)
    b = Cell(0)
    b.fallback = True
    assert a.compare(b) is False
    assert "fallback" in capsys.readouterr().err


def test_cell_copy_independent():
    a = Cell(0)
    a.append(ord("a"))
    b = a.copy()
    b.append(ord("b"))
    b.renditions.set_rendition(1)
    assert a != b
    assert not a.renditions.get_attribute(Attribute.BOLD)


def test_row_insert_and_delete_keep_width():
    row = Row(5, 0)
    row.cells[0].append(ord("a"))
    row.cells[4].append(ord("e"))
    row.insert_cell(0, 0)
    assert len(row.cells) == 5
    assert row.cells[0].empty()
    assert row.cells[1].print_grapheme() == b"a"
    assert row.cells[4].empty()
    row.delete_cell(0, 0)
    assert len(row.cells) == 5
    assert row.cells[0].print_grapheme() == b"a"


def test_row_wrap_on_last_cell():
    row = Row(3, 0)
    assert not row.wrap
    row.wrap = True
    assert row.cells[-1].wrap
    assert row.wrap


def test_new_rows_differ_by_generation():
    a = Row(4, 0)
    b = Row(4, 0)
    assert a.cells == b.cells
    assert a != b


def test_row_copy_equal_and_independent():
    a = Row(4, 0)
    b = a.copy()
    assert a == b
    b.cells[0].append(ord("k"))
    assert a != b
    assert a.cells[0].empty()


def test_row_reset_changes_generation():
    a = Row(4, 0)
    a.cells[1].append(ord("k"))
    b = a.copy()
    b.reset(0)
    assert b.gen != a.gen
    assert all(cell.empty() for cell in b.cells)