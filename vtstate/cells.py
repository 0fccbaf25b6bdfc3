"""Screen cells, their renditions, and rows of cells."""

from __future__ import annotations

import enum
import itertools
import sys

_COLOR_MASK = 0x1FFFFFF  # colours are stored in 25 bits
_ATTRIBUTE_MASK = 0xFF
_TRUE_COLOR_MASK = 0x1000000
_MAX_CELL_CONTENTS = 32
_NO_BREAK_SPACE = b"\xc2\xa0"

_row_generation = itertools.count()


class Attribute(enum.IntEnum):
    """Character attributes, numbered by their bit position."""

    BOLD = 0
    FAINT = 1
    ITALIC = 2
    UNDERLINED = 3
    BLINK = 4
    INVERSE = 5
    INVISIBLE = 6


_SGR_ATTRIBUTES = {
    1: Attribute.BOLD,
    22: Attribute.BOLD,
    3: Attribute.ITALIC,
    23: Attribute.ITALIC,
    4: Attribute.UNDERLINED,
    24: Attribute.UNDERLINED,
    5: Attribute.BLINK,
    25: Attribute.BLINK,
    7: Attribute.INVERSE,
    27: Attribute.INVERSE,
    8: Attribute.INVISIBLE,
    28: Attribute.INVISIBLE,
}

_SGR_ORDER = (
    (Attribute.BOLD, ";1"),
    (Attribute.ITALIC, ";3"),
    (Attribute.UNDERLINED, ";4"),
    (Attribute.BLINK, ";5"),
    (Attribute.INVERSE, ";7"),
    (Attribute.INVISIBLE, ";8"),
)


class Renditions:
    """Foreground and background colour plus character attributes."""

    __slots__ = ("_foreground", "_background", "_attributes")

    def __init__(self, background: int = 0) -> None:
        self._foreground = 0
        self._background = background & _COLOR_MASK
        self._attributes = 0

    @property
    def foreground_color(self) -> int:
        return self._foreground

    @foreground_color.setter
    def foreground_color(self, value: int) -> None:
        self._foreground = value & _COLOR_MASK

    @property
    def background_color(self) -> int:
        return self._background

    @background_color.setter
    def background_color(self, value: int) -> None:
        self._background = value & _COLOR_MASK

    @staticmethod
    def make_true_color(r: int, g: int, b: int) -> int:
        """Pack an RGB triple into a true-colour value."""
        return (_TRUE_COLOR_MASK | (r << 16) | (g << 8) | b) & 0xFFFFFFFF

    @staticmethod
    def is_true_color(color: int) -> bool:
        return (color & _TRUE_COLOR_MASK) != 0

    def set_foreground_color(self, num: int) -> None:
        """Set a 256-colour index or a true colour as foreground."""
        if 0 <= num <= 255:
            self.foreground_color = 30 + num
        elif self.is_true_color(num):
            self.foreground_color = num

    def set_background_color(self, num: int) -> None:
        """Set a 256-colour index or a true colour as background."""
        if 0 <= num <= 255:
            self.background_color = 40 + num
        elif self.is_true_color(num):
            self.background_color = num

    def set_rendition(self, num: int) -> None:
        """Apply one SGR parameter (16-colour set and attributes only)."""
        if num == 0:
            self.clear_attributes()
            self.foreground_color = 0
            self.background_color = 0
            return
        if num == 39:
            self.foreground_color = 0
        elif num == 49:
            self.background_color = 0
        elif 30 <= num <= 37:
            self.foreground_color = num
        elif 40 <= num <= 47:
            self.background_color = num
        elif 90 <= num <= 97:
            self.foreground_color = num - 90 + 38
        elif 100 <= num <= 107:
            self.background_color = num - 100 + 48
        elif num in _SGR_ATTRIBUTES:
            self.set_attribute(_SGR_ATTRIBUTES[num], num < 9)

    def sgr(self) -> str:
        """The SGR escape sequence that selects these renditions."""
        parts = ["\033[0"]
        parts.extend(code for attr, code in _SGR_ORDER if self.get_attribute(attr))
        parts.append(self._color_sgr(self.foreground_color, 38, 30, 37))
        parts.append(self._color_sgr(self.background_color, 48, 40, 47))
        parts.append("m")
        return "".join(parts)

    def _color_sgr(self, color: int, extended: int, base: int, last_ansi: int) -> str:
        if not color:
            return ""
        if self.is_true_color(color):
            red, green, blue = (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF
            return f";{extended};2;{red};{green};{blue}"
        if color > last_ansi:
            return f";{extended};5;{color - base}"
        return f";{color}"

    def set_attribute(self, attr: Attribute, val: bool) -> None:
        if val:
            self._attributes = (self._attributes | (1 << attr)) & _ATTRIBUTE_MASK
        else:
            self._attributes &= ~(1 << attr) & _ATTRIBUTE_MASK

    def get_attribute(self, attr: Attribute) -> bool:
        return bool(self._attributes & (1 << attr))

    def clear_attributes(self) -> None:
        self._attributes = 0

    def copy(self) -> Renditions:
        other = Renditions.__new__(Renditions)
        other._foreground = self._foreground
        other._background = self._background
        other._attributes = self._attributes
        return other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Renditions):
            return NotImplemented
        return (
            self._attributes == other._attributes
            and self._foreground == other._foreground
            and self._background == other._background
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Renditions(fg={self._foreground:#x}, bg={self._background:#x}, "
            f"attrs={self._attributes:#04x})"
        )


def isprint_iso8859_1(ch: int) -> bool:
    """Whether ch is a printing ISO 8859-1 character."""
    return 0xA0 <= ch <= 0xFF or 0x20 <= ch <= 0x7E


def _encode(ch: int) -> bytes:
    if ch <= 0x7F:
        return bytes((ch,))
    return chr(ch).encode("utf-8", "surrogatepass")


class Cell:
    """One character cell: UTF-8 contents plus renditions and flags."""

    __slots__ = ("contents", "renditions", "wide", "fallback", "wrap")

    def __init__(self, background_color: int = 0) -> None:
        self.contents = bytearray()
        self.renditions = Renditions(background_color)
        self.wide = False
        self.fallback = False
        self.wrap = False

    def reset(self, background_color: int) -> None:
        self.contents.clear()
        self.renditions = Renditions(background_color)
        self.wide = False
        self.fallback = False
        self.wrap = False

    @property
    def width(self) -> int:
        """Number of columns the cell occupies."""
        return 2 if self.wide else 1

    def empty(self) -> bool:
        return not self.contents

    def full(self) -> bool:
        """True once the cell holds as many bytes as it may."""
        return len(self.contents) >= _MAX_CELL_CONTENTS

    def clear(self) -> None:
        self.contents.clear()

    def is_blank(self) -> bool:
        return not self.contents or self.contents in (b" ", _NO_BREAK_SPACE)

    def contents_match(self, other: Cell) -> bool:
        return (self.is_blank() and other.is_blank()) or self.contents == other.contents

    def append(self, ch: int) -> None:
        """Append a code point to the cell, UTF-8 encoded."""
        self.contents += _encode(ch)

    def print_grapheme(self) -> bytes:
        """The bytes that draw this cell on a UTF-8 terminal."""
        if not self.contents:
            return b" "
        # A cell that starts with a combining character is drawn on a no-break space.
        prefix = _NO_BREAK_SPACE if self.fallback else b""
        return prefix + bytes(self.contents)

    def debug_contents(self) -> str:
        if not self.contents:
            return "'_' ()"
        grapheme = self.print_grapheme().decode("utf-8", "replace")
        listed = ", ".join(f"0x{byte:02x}" for byte in self.contents)
        return f"'{grapheme}' [{listed}]"

    def compare(self, other: Cell) -> bool:
        """Report differences to stderr; True if they matter for display."""
        differs = False
        grapheme = self.print_grapheme()
        other_grapheme = other.print_grapheme()
        if grapheme != other_grapheme:
            differs = True
            print(
                f"Graphemes: '{grapheme.decode('utf-8', 'replace')}' vs. "
                f"'{other_grapheme.decode('utf-8', 'replace')}'",
                file=sys.stderr,
            )
        if not self.contents_match(other):
            print(
                f"Contents: {self.debug_contents()} ({len(self.contents)}) vs. "
                f"{other.debug_contents()} ({len(other.contents)})",
                file=sys.stderr,
            )
        if self.fallback != other.fallback:
            print(f"fallback: {int(self.fallback)} vs. {int(other.fallback)}", file=sys.stderr)
        if self.wide != other.wide:
            differs = True
            print(f"width: {int(self.wide)} vs. {int(other.wide)}", file=sys.stderr)
        if self.renditions != other.renditions:
            differs = True
            print("renditions differ", file=sys.stderr)
        if self.wrap != other.wrap:
            differs = True
            print(f"wrap: {int(self.wrap)} vs. {int(other.wrap)}", file=sys.stderr)
        return differs

    def copy(self) -> Cell:
        other = Cell.__new__(Cell)
        other.contents = bytearray(self.contents)
        other.renditions = self.renditions.copy()
        other.wide = self.wide
        other.fallback = self.fallback
        other.wrap = self.wrap
        return other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cell):
            return NotImplemented
        return (
            self.contents == other.contents
            and self.fallback == other.fallback
            and self.wide == other.wide
            and self.renditions == other.renditions
            and self.wrap == other.wrap
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Cell({self.debug_contents()})"


class Row:
    """A line of cells with a generation number that tells rows apart cheaply."""

    __slots__ = ("cells", "gen")

    def __init__(self, width: int, background_color: int = 0) -> None:
        self.cells = [Cell(background_color) for _ in range(width)]
        self.gen = next(_row_generation)

    @property
    def wrap(self) -> bool:
        """Whether the row continues onto the next one."""
        return self.cells[-1].wrap

    @wrap.setter
    def wrap(self, value: bool) -> None:
        self.cells[-1].wrap = value

    def insert_cell(self, col: int, background_color: int) -> None:
        self.cells.insert(col, Cell(background_color))
        self.cells.pop()

    def delete_cell(self, col: int, background_color: int) -> None:
        self.cells.append(Cell(background_color))
        del self.cells[col]

    def reset(self, background_color: int) -> None:
        self.gen = next(_row_generation)
        for cell in self.cells:
            cell.reset(background_color)

    def copy(self) -> Row:
        """An independent copy that keeps the same generation."""
        other = Row.__new__(Row)
        other.cells = [cell.copy() for cell in self.cells]
        other.gen = self.gen
        return other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Row):
            return NotImplemented
        return self.gen == other.gen and self.cells == other.cells

    __hash__ = None  # type: ignore[assignment]

    def __len__(self) -> int:
        return len(self.cells)

    def __repr__(self) -> str:
        return f"Row(width={len(self.cells)}, gen={self.gen})"