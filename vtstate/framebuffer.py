"""Draw state and framebuffer: the screen contents a terminal maintains."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from vtstate.cells import Cell, Renditions, Row

_TAB_STOP = 8


class MouseReportingMode(enum.IntEnum):
    NONE = 0
    X10 = 9
    VT220 = 1000
    VT220_HILIGHT = 1001
    BTN_EVENT = 1002
    ANY_EVENT = 1003


class MouseEncodingMode(enum.IntEnum):
    DEFAULT = 0
    UTF8 = 1005
    SGR = 1006
    URXVT = 1015


@dataclass
class SavedCursor:
    """Cursor state stored by DECSC and restored by DECRC."""

    cursor_col: int = 0
    cursor_row: int = 0
    renditions: Renditions = field(default_factory=Renditions)
    auto_wrap_mode: bool = True
    origin_mode: bool = False

    def copy(self) -> SavedCursor:
        return SavedCursor(
            self.cursor_col,
            self.cursor_row,
            self.renditions.copy(),
            self.auto_wrap_mode,
            self.origin_mode,
        )


class DrawState:
    """Cursor, modes, margins, tab stops and current renditions."""

    def __init__(self, width: int, height: int) -> None:
        self._width = width
        self._height = height
        self._cursor_col = 0
        self._cursor_row = 0
        self._combining_char_col = 0
        self._combining_char_row = 0
        self._default_tabs = True
        self._tabs = [False] * width
        self._scrolling_region_top_row = 0
        self._scrolling_region_bottom_row = height - 1
        self._renditions = Renditions(0)
        self._save = SavedCursor()

        self.next_print_will_wrap = False
        self.origin_mode = False
        self.auto_wrap_mode = True
        self.insert_mode = False
        self.cursor_visible = True
        self.reverse_video = False
        self.bracketed_paste = False
        self.mouse_reporting_mode = MouseReportingMode.NONE
        self.mouse_focus_event = False
        self.mouse_alternate_scroll = False
        self.mouse_encoding_mode = MouseEncodingMode.DEFAULT
        self.application_mode_cursor_keys = False

        self._reinitialize_tabs(0)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def cursor_col(self) -> int:
        return self._cursor_col

    @property
    def cursor_row(self) -> int:
        return self._cursor_row

    @property
    def combining_char_col(self) -> int:
        return self._combining_char_col

    @property
    def combining_char_row(self) -> int:
        return self._combining_char_row

    @property
    def scrolling_region_top_row(self) -> int:
        return self._scrolling_region_top_row

    @property
    def scrolling_region_bottom_row(self) -> int:
        return self._scrolling_region_bottom_row

    @property
    def renditions(self) -> Renditions:
        return self._renditions

    @property
    def background_rendition(self) -> int:
        return self._renditions.background_color

    def _reinitialize_tabs(self, start: int) -> None:
        for i in range(start, len(self._tabs)):
            self._tabs[i] = i % _TAB_STOP == 0

    def _new_grapheme(self) -> None:
        self._combining_char_col = self._cursor_col
        self._combining_char_row = self._cursor_row

    def _snap_cursor_to_border(self) -> None:
        self._cursor_row = max(self._cursor_row, self.limit_top())
        self._cursor_row = min(self._cursor_row, self.limit_bottom())
        self._cursor_col = max(self._cursor_col, 0)
        if self._cursor_col >= self._width:
            self._cursor_col = self._width - 1

    def move_row(self, n: int, relative: bool = False) -> None:
        """Move the cursor to row n (relative to the top limit, or to the cursor)."""
        if relative:
            self._cursor_row += n
        else:
            self._cursor_row = n + self.limit_top()
        self._snap_cursor_to_border()
        self._new_grapheme()
        self.next_print_will_wrap = False

    def move_col(self, n: int, relative: bool = False, implicit: bool = False) -> None:
        """Move the cursor to column n; implicit moves come from printing."""
        if implicit:
            self._new_grapheme()
        if relative:
            self._cursor_col += n
        else:
            self._cursor_col = n
        if implicit:
            self.next_print_will_wrap = self._cursor_col >= self._width
        self._snap_cursor_to_border()
        if not implicit:
            self._new_grapheme()
            self.next_print_will_wrap = False

    def set_tab(self) -> None:
        self._tabs[self._cursor_col] = True

    def clear_tab(self, col: int) -> None:
        self._tabs[col] = False

    def clear_default_tabs(self) -> None:
        """Stop regenerating default tab stops on resize."""
        self._default_tabs = False

    def get_next_tab(self, count: int) -> int:
        """Column of the count-th tab stop right (count >= 0) or left of the cursor.

        Returns -1 if no such stop lies to the right, 0 if none lies to the left.
        """
        if count >= 0:
            for i in range(self._cursor_col + 1, self._width):
                if self._tabs[i]:
                    count -= 1
                    if count == 0:
                        return i
            return -1
        for i in range(self._cursor_col - 1, 0, -1):
            if self._tabs[i]:
                count += 1
                if count == 0:
                    return i
        return 0

    def set_scrolling_region(self, top: int, bottom: int) -> None:
        if self._height < 1:
            return
        top = max(top, 0)
        bottom = min(bottom, self._height - 1)
        # The real rule requires a two-line region.
        bottom = max(bottom, top)
        self._scrolling_region_top_row = top
        self._scrolling_region_bottom_row = bottom
        if self.origin_mode:
            self._snap_cursor_to_border()
            self._new_grapheme()

    def limit_top(self) -> int:
        return self._scrolling_region_top_row if self.origin_mode else 0

    def limit_bottom(self) -> int:
        return self._scrolling_region_bottom_row if self.origin_mode else self._height - 1

    def set_foreground_color(self, x: int) -> None:
        self._renditions.set_foreground_color(x)

    def set_background_color(self, x: int) -> None:
        self._renditions.set_background_color(x)

    def add_rendition(self, x: int) -> None:
        self._renditions.set_rendition(x)

    def save_cursor(self) -> None:
        self._save = SavedCursor(
            self._cursor_col,
            self._cursor_row,
            self._renditions.copy(),
            self.auto_wrap_mode,
            self.origin_mode,
        )

    def restore_cursor(self) -> None:
        self._cursor_col = self._save.cursor_col
        self._cursor_row = self._save.cursor_row
        self._renditions = self._save.renditions.copy()
        self.auto_wrap_mode = self._save.auto_wrap_mode
        self.origin_mode = self._save.origin_mode
        # The screen may have been resized since the save.
        self._snap_cursor_to_border()
        self._new_grapheme()

    def clear_saved_cursor(self) -> None:
        self._save = SavedCursor()

    def resize(self, width: int, height: int) -> None:
        if self._width != width or self._height != height:
            # Reset the whole scrolling region on any resize, as xterm does.
            self._scrolling_region_top_row = 0
            self._scrolling_region_bottom_row = height - 1

        if width < len(self._tabs):
            del self._tabs[width:]
        else:
            self._tabs.extend([False] * (width - len(self._tabs)))
        if self._default_tabs:
            self._reinitialize_tabs(self._width)

        self._width = width
        self._height = height
        self._snap_cursor_to_border()

        if self._combining_char_col >= width or self._combining_char_row >= height:
            self._combining_char_col = -1
            self._combining_char_row = -1

    def copy(self) -> DrawState:
        other = DrawState.__new__(DrawState)
        other.__dict__.update(self.__dict__)
        other._tabs = list(self._tabs)
        other._renditions = self._renditions.copy()
        other._save = self._save.copy()
        return other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DrawState):
            return NotImplemented
        # Only fields that affect the display are compared.
        return (
            self._width == other._width
            and self._height == other._height
            and self._cursor_col == other._cursor_col
            and self._cursor_row == other._cursor_row
            and self.cursor_visible == other.cursor_visible
            and self.reverse_video == other.reverse_video
            and self._renditions == other._renditions
            and self.bracketed_paste == other.bracketed_paste
            and self.mouse_reporting_mode == other.mouse_reporting_mode
            and self.mouse_focus_event == other.mouse_focus_event
            and self.mouse_alternate_scroll == other.mouse_alternate_scroll
            and self.mouse_encoding_mode == other.mouse_encoding_mode
        )

    __hash__ = None  # type: ignore[assignment]


class Framebuffer:
    """Rows of cells plus draw state, titles, clipboard and bell count.

    Rows are shared between copies of a framebuffer and copied on first write.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"invalid framebuffer size {width}x{height}")
        self.ds = DrawState(width, height)
        self.icon_name = ""
        self.window_title = ""
        self.clipboard = ""
        self.bell_count = 0
        self.title_initialized = False
        self._owned: dict[int, Row] = {}
        self._rows: list[Row] = []
        self._place_rows(0, self._newrow(), height)

    @property
    def rows(self) -> tuple[Row, ...]:
        return tuple(self._rows)

    def _newrow(self) -> Row:
        return Row(self.ds.width, self.ds.background_rendition)

    def _own(self, row: Row) -> None:
        self._owned[id(row)] = row

    def _release(self, rows) -> None:
        for row in rows:
            self._owned.pop(id(row), None)

    def _place_rows(self, index: int, row: Row, count: int) -> None:
        self._rows[index:index] = [row] * count
        if count == 1:
            self._own(row)

    def _row_index(self, row: int) -> int:
        if row == -1:
            row = self.ds.cursor_row
        if not 0 <= row < len(self._rows):
            raise IndexError(f"row {row} out of range")
        return row

    def _col_index(self, cells: list[Cell], col: int) -> int:
        if col == -1:
            col = self.ds.cursor_col
        if not 0 <= col < len(cells):
            raise IndexError(f"column {col} out of range")
        return col

    def get_row(self, row: int = -1) -> Row:
        """The row for reading; -1 means the cursor row."""
        return self._rows[self._row_index(row)]

    def get_cell(self, row: int = -1, col: int = -1) -> Cell:
        """The cell for reading; -1 means the cursor position."""
        cells = self._rows[self._row_index(row)].cells
        return cells[self._col_index(cells, col)]

    def get_mutable_row(self, row: int = -1) -> Row:
        """The row for writing, copied first if it is shared."""
        index = self._row_index(row)
        current = self._rows[index]
        if id(current) not in self._owned:
            current = current.copy()
            self._rows[index] = current
            self._own(current)
        return current

    def get_mutable_cell(self, row: int = -1, col: int = -1) -> Cell:
        cells = self.get_mutable_row(row).cells
        return cells[self._col_index(cells, col)]

    def get_combining_cell(self) -> Cell | None:
        """The cell a combining character attaches to, or None if it is gone."""
        col = self.ds.combining_char_col
        row = self.ds.combining_char_row
        if col < 0 or row < 0 or col >= self.ds.width or row >= self.ds.height:
            return None
        return self.get_mutable_cell(row, col)

    def apply_renditions_to_cell(self, cell: Cell | None = None) -> None:
        if cell is None:
            cell = self.get_mutable_cell()
        cell.renditions = self.ds.renditions.copy()

    def scroll(self, n: int) -> None:
        """Scroll the region up by n lines (down if n is negative)."""
        if n >= 0:
            self.delete_line(self.ds.scrolling_region_top_row, n)
        else:
            self.insert_line(self.ds.scrolling_region_top_row, -n)

    def move_rows_autoscroll(self, rows: int) -> None:
        ds = self.ds
        # Outside the scrolling region the cursor just moves.
        if (
            ds.cursor_row < ds.scrolling_region_top_row
            or ds.cursor_row > ds.scrolling_region_bottom_row
        ):
            ds.move_row(rows, True)
            return

        if ds.cursor_row + rows > ds.scrolling_region_bottom_row:
            n = ds.cursor_row + rows - ds.scrolling_region_bottom_row
            self.scroll(n)
            ds.move_row(-n, True)
        elif ds.cursor_row + rows < ds.scrolling_region_top_row:
            n = ds.cursor_row + rows - ds.scrolling_region_top_row
            self.scroll(n)
            ds.move_row(-n, True)

        ds.move_row(rows, True)

    def insert_line(self, before_row: int, count: int) -> None:
        top = self.ds.scrolling_region_top_row
        bottom = self.ds.scrolling_region_bottom_row
        if before_row < top or before_row > bottom + 1:
            return
        scroll = min(bottom + 1 - before_row, count)
        if scroll <= 0:
            return
        start = bottom + 1 - scroll
        self._release(self._rows[start:start + scroll])
        del self._rows[start:start + scroll]
        self._place_rows(before_row, self._newrow(), scroll)

    def delete_line(self, row: int, count: int) -> None:
        top = self.ds.scrolling_region_top_row
        bottom = self.ds.scrolling_region_bottom_row
        if row < top or row > bottom:
            return
        scroll = min(bottom + 1 - row, count)
        if scroll <= 0:
            return
        self._release(self._rows[row:row + scroll])
        del self._rows[row:row + scroll]
        self._place_rows(bottom + 1 - scroll, self._newrow(), scroll)

    def insert_cell(self, row: int, col: int) -> None:
        self.get_mutable_row(row).insert_cell(col, self.ds.background_rendition)

    def delete_cell(self, row: int, col: int) -> None:
        self.get_mutable_row(row).delete_cell(col, self.ds.background_rendition)

    def reset(self) -> None:
        """Full reset; the bell count and icon name survive."""
        width, height = self.ds.width, self.ds.height
        self.ds = DrawState(width, height)
        self._owned = {}
        self._rows = []
        self._place_rows(0, self._newrow(), height)
        self.window_title = ""
        self.clipboard = ""

    def soft_reset(self) -> None:
        ds = self.ds
        ds.insert_mode = False
        ds.origin_mode = False
        ds.cursor_visible = True
        ds.application_mode_cursor_keys = False
        ds.set_scrolling_region(0, ds.height - 1)
        ds.add_rendition(0)
        ds.clear_saved_cursor()

    def set_title_initialized(self) -> None:
        self.title_initialized = True

    def prefix_window_title(self, s: str) -> None:
        if self.icon_name == self.window_title:
            # Keep the two equal if they were.
            self.icon_name = s + self.icon_name
        self.window_title = s + self.window_title

    def resize(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"invalid framebuffer size {width}x{height}")
        old_height, old_width = self.ds.height, self.ds.width
        self.ds.resize(width, height)

        blank = self._newrow()
        if old_height != height:
            if height < len(self._rows):
                self._release(self._rows[height:])
                del self._rows[height:]
            else:
                self._place_rows(len(self._rows), blank, height - len(self._rows))
        if old_width == width:
            return

        background = self.ds.background_rendition
        for index, row in enumerate(self._rows):
            if row is blank:
                break
            resized = row.copy()
            resized.wrap = False
            if width < len(resized.cells):
                del resized.cells[width:]
            else:
                resized.cells.extend(
                    Cell(background) for _ in range(width - len(resized.cells))
                )
            self._release((row,))
            self._rows[index] = resized
            self._own(resized)

    def reset_cell(self, cell: Cell) -> None:
        cell.reset(self.ds.background_rendition)

    def reset_row(self, row: Row) -> None:
        row.reset(self.ds.background_rendition)

    def ring_bell(self) -> None:
        self.bell_count += 1

    def copy(self) -> Framebuffer:
        """A copy that shares rows with this framebuffer until either writes."""
        other = Framebuffer.__new__(Framebuffer)
        other.ds = self.ds.copy()
        other.icon_name = self.icon_name
        other.window_title = self.window_title
        other.clipboard = self.clipboard
        other.bell_count = self.bell_count
        other.title_initialized = self.title_initialized
        other._rows = list(self._rows)
        other._owned = {}
        self._owned = {}
        return other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Framebuffer):
            return NotImplemented
        return (
            len(self._rows) == len(other._rows)
            and all(a is b for a, b in zip(self._rows, other._rows))
            and self.window_title == other.window_title
            and self.clipboard == other.clipboard
            and self.bell_count == other.bell_count
            and self.ds == other.ds
        )

    __hash__ = None  # type: ignore[assignment]