"""Terminal functions run for CSI sequences, escape sequences and control characters."""

from __future__ import annotations

from vtstate.cells import Renditions
from vtstate.dispatcher import Dispatcher, FunctionType, register_function
from vtstate.framebuffer import Framebuffer, MouseEncodingMode, MouseReportingMode

_MAX_TITLE_LENGTH = 256
_CLIPBOARD_PREFIX = "52;c;"


def _clearline(fb: Framebuffer, row: int, start: int, end: int) -> None:
    for col in range(start, end + 1):
        fb.reset_cell(fb.get_mutable_cell(row, col))


def csi_el(fb: Framebuffer, dispatch: Dispatcher) -> None:
    """Erase in line."""
    mode = dispatch.getparam(0, 0)
    if mode == 0:
        _clearline(fb, -1, fb.ds.cursor_col, fb.ds.width - 1)
    elif mode == 1:
        _clearline(fb, -1, 0, fb.ds.cursor_col)
    elif mode == 2:
        fb.reset_row(fb.get_mutable_row(-1))


def csi_ed(fb: Framebuffer, dispatch: Dispatcher) -> None:
    """Erase in display."""
    mode = dispatch.getparam(0, 0)
    if mode == 0:
        _clearline(fb, -1, fb.ds.cursor_col, fb.ds.width - 1)
        for y in range(fb.ds.cursor_row + 1, fb.ds.height):
            fb.reset_row(fb.get_mutable_row(y))
    elif mode == 1:
        for y in range(fb.ds.cursor_row):
            fb.reset_row(fb.get_mutable_row(y))
        _clearline(fb, -1, 0, fb.ds.cursor_col)
    elif mode == 2:
        for y in range(fb.ds.height):
            fb.reset_row(fb.get_mutable_row(y))


def csi_cursormove(fb: Framebuffer, dispatch: Dispatcher) -> None:
    """Relative (CUU, CUD, CUF, CUB) and absolute (CUP, HVP) cursor movement."""
    num = dispatch.getparam(0, 1)
    final = dispatch.dispatch_chars[:1]
    if final == "A":
        fb.ds.move_row(-num, True)
    elif final == "B":
        fb.ds.move_row(num, True)
    elif final == "C":
        fb.ds.move_col(num, True)
    elif final == "D":
        fb.ds.move_col(-num, True)
    elif final in ("H", "f"):
        fb.ds.move_row(dispatch.getparam(0, 1) - 1)
        fb.ds.move_col(dispatch.getparam(1, 1) - 1)


def csi_da(fb: Framebuffer, dispatch: Dispatcher) -> None:
    """Device attributes: answer as a plain vt220."""
    dispatch.terminal_to_host += b"\033[?62c"


def csi_sda(fb: Framebuffer, dispatch: Dispatcher) -> None:
    """Secondary device attributes."""
    dispatch.terminal_to_host += b"\033[>1;10;0c"


def esc_decaln(fb: Framebuffer, dispatch: Dispatcher) -> None:
    """Screen alignment pattern: fill the screen with 'E'."""
    for y in range(fb.ds.height):
        for x in range(fb.ds.width):
            cell = fb.get_mutable_cell(y, x)
            fb.reset_cell(cell)
            cell.append(ord("E"))


def ctrl_lf(fb: Framebuffer, dispatch: Dispatcher) -> None:
    """Line feed; also index, vertical tab and form feed."""
    fb.move_rows_autoscroll(1)


def ctrl_cr(fb: Framebuffer, dispatch: Dispatcher) -> None:
    fb.ds.move_col(0)


def ctrl_bs(fb: Framebuffer, dispatch: Dispatcher) -> None:
    fb.ds.move_col(-1, True)


def ctrl_ri(fb: Framebuffer, dispatch: Dispatcher) -> None:
    """Reverse index: a line feed upwards."""
    fb.move_rows_autoscroll(-1)


def ctrl_nel(fb: Framebuffer, dispatch: Dispatcher) -> None:
    fb.ds.move_col(0)
    fb.move_rows_autoscroll(1)


def _ht_n(fb: Framebuffer, count: int) -> None:
    col = fb.ds.get_next_tab(count)
    if col == -1:
        col = fb.ds.width - 1
    # A tab preserves, but does not set, the wrap state.
    wrap_state = fb.ds.next_print_will_wrap
    fb.ds.move_col(col, False)
    fb.ds.next_print_will_wrap = wrap_state


def ctrl_ht(fb: Framebuffer, dispatch: Dispatcher) -> None:
    _ht_n(fb, 1)


def csi_cxt(fb: Framebuffer, dispatch: Dispatcher) -> None:
    """Cursor forward (CHT) or backward (CBT) by tab stops."""
    param = dispatch.getparam(0, 1)
    if dispatch.dispatch_chars[:1] == "Z":
        param = -param
    if param == 0:
        return
    _ht_n(fb, param)


def ctrl_hts(fb: Framebuffer, dispatch: Dispatcher) -> None:
    fb.ds.set_tab()


def csi_tbc(fb: Framebuffer, dispatch: Dispatcher) -> None:
    """Clear the tab stop at the cursor, or all tab stops."""
    param = dispatch.getparam(0, 0)
    if param == 0:
        fb.ds.clear_tab(fb.ds.cursor_col)
    elif param == 3:
        fb.ds.clear_default_tabs()
        for x in range(fb.ds.width):
            fb.ds.clear_tab(x)


def _dec_mode(param: int, fb: Framebuffer) -> str | None:
    """The draw-state flag a DEC private mode controls, after its side effects."""
    if param == 1:
        return "application_mode_cursor_keys"
    if param == 3:
        # 80/132 columns: ignored, but the screen is cleared.
        fb.ds.move_row(0)
        fb.ds.move_col(0)
        for y in range(fb.ds.height):
            fb.reset_row(fb.get_mutable_row(y))
        return None
    if param == 5:
        return "reverse_video"
    if param == 6:
        fb.ds.move_row(0)
        fb.ds.move_col(0)
        return "origin_mode"
    if param == 7:
        return "auto_wrap_mode"
    if param == 25:
        return "cursor_visible"
    if param == 1004:
        return "mouse_focus_event"
    if param == 1007:
        return "mouse_alternate_scroll"
    if param == 2004:
        return "bracketed_paste"
    return None


def _is_mouse_reporting(param: int) -> bool:
    return param == 9 or 1000 <= param <= 1003


def _is_mouse_encoding(param: int) -> bool:
    return param in (1005, 1006, 1015)


def _set_dec_modes(fb: Framebuffer, dispatch: Dispatcher, value: bool) -> None:
    for i in range(dispatch.param_count()):
        param = dispatch.getparam(i, 0)
        if _is_mouse_reporting(param):
            fb.ds.mouse_reporting_mode = (
                MouseReportingMode(param) if value else MouseReportingMode.NONE
            )
        elif _is_mouse_encoding(param):
            fb.ds.mouse_encoding_mode = (
                MouseEncodingMode(param) if value else MouseEncodingMode.DEFAULT
            )
        else:
            name = _dec_mode(param, fb)
            if name is not None:
                setattr(fb.ds, name, value)


def csi_decsm(fb: Framebuffer, dispatch: Dispatcher) -> None:
    """Set DEC private modes."""
    _set_dec_modes(fb, dispatch, True)


def csi_decrm(fb: Framebuffer, dispatch: Dispatcher) -> None:
    """Reset DEC private modes."""
    _set_dec_modes(fb, dispatch, False)


def _set_ansi_modes(fb: Framebuffer, dispatch: Dispatcher, value: bool) -> None:
    for i in range(dispatch.param_count()):
        if dispatch.getparam(i, 0) == 4:  # insert/replace mode
            fb.ds.insert_mode = value


def csi_sm(fb: Framebuffer, dispatch: Dispatcher) -> None:
    _set_ansi_modes(fb, dispatch, True)


def csi_rm(fb: Framebuffer, dispatch: Dispatcher) -> None:
    _set_ansi_modes(fb, dispatch, False)


def csi_decstbm(fb: Framebuffer, dispatch: Dispatcher) -> None:
    """Set top and bottom margins; invalid margins are ignored, as in xterm."""
    top = dispatch.getparam(0, 1)
    bottom = dispatch.getparam(1, fb.ds.height)
    if bottom <= top or top > fb.ds.height or (top == 0 and bottom == 1):
        return
    fb.ds.set_scrolling_region(top - 1, bottom - 1)
    fb.ds.move_row(0)
    fb.ds.move_col(0)


def ctrl_bel(fb: Framebuffer, dispatch: Dispatcher) -> None:
    fb.ring_bell()


def csi_sgr(fb: Framebuffer, dispatch: Dispatcher) -> None:
    """Select graphic rendition."""
    count = dispatch.param_count()
    i = 0
    while i < count:
        rendition = dispatch.getparam(i, 0)
        extended = rendition in (38, 48)
        # In 38;5;Ps and 48;5;Ps a Ps of 0 is a colour, not a reset.
        if extended and count - i >= 3 and dispatch.getparam(i + 1, -1) == 5:
            color = dispatch.getparam(i + 2, 0)
            if rendition == 38:
                fb.ds.set_foreground_color(color)
            else:
                fb.ds.set_background_color(color)
            i += 3
            continue
        if extended and count - i >= 5 and dispatch.getparam(i + 1, -1) == 2:
            color = Renditions.make_true_color(
                dispatch.getparam(i + 2, 0),
                dispatch.getparam(i + 3, 0),
                dispatch.getparam(i + 4, 0),
            )
            if rendition == 38:
                fb.ds.set_foreground_color(color)
            else:
                fb.ds.set_background_color(color)
            i += 5
            continue
        fb.ds.add_rendition(rendition)
        i += 1


def esc_decsc(fb: Framebuffer, dispatch: Dispatcher) -> None:
    fb.ds.save_cursor()


def esc_decrc(fb: Framebuffer, dispatch: Dispatcher) -> None:
    fb.ds.restore_cursor()


def csi_dsr(fb: Framebuffer, dispatch: Dispatcher) -> None:
    """Device status report, including the cursor position report."""
    param = dispatch.getparam(0, 0)
    if param == 5:
        dispatch.terminal_to_host += b"\033[0n"
    elif param == 6:
        report = f"\033[{fb.ds.cursor_row + 1};{fb.ds.cursor_col + 1}R"
        dispatch.terminal_to_host += report.encode("ascii")


def csi_il(fb: Framebuffer, dispatch: Dispatcher) -> None:
    """Insert lines at the cursor row and go to the first column."""
    fb.insert_line(fb.ds.cursor_row, dispatch.getparam(0, 1))
    fb.ds.move_col(0)


def csi_dl(fb: Framebuffer, dispatch: Dispatcher) -> None:
    """Delete lines at the cursor row and go to the first column."""
    fb.delete_line(fb.ds.cursor_row, dispatch.getparam(0, 1))
    fb.ds.move_col(0)


def csi_ich(fb: Framebuffer, dispatch: Dispatcher) -> None:
    for _ in range(dispatch.getparam(0, 1)):
        fb.insert_cell(fb.ds.cursor_row, fb.ds.cursor_col)


def csi_dch(fb: Framebuffer, dispatch: Dispatcher) -> None:
    for _ in range(dispatch.getparam(0, 1)):
        fb.delete_cell(fb.ds.cursor_row, fb.ds.cursor_col)


def csi_vpa(fb: Framebuffer, dispatch: Dispatcher) -> None:
    """Line position absolute."""
    fb.ds.move_row(dispatch.getparam(0, 1) - 1)


def csi_hpa(fb: Framebuffer, dispatch: Dispatcher) -> None:
    """Character position absolute (CHA and HPA)."""
    fb.ds.move_col(dispatch.getparam(0, 1) - 1)


def csi_ech(fb: Framebuffer, dispatch: Dispatcher) -> None:
    """Erase characters from the cursor onwards, within the line."""
    num = dispatch.getparam(0, 1)
    limit = min(fb.ds.cursor_col + num - 1, fb.ds.width - 1)
    _clearline(fb, -1, fb.ds.cursor_col, limit)


def esc_ris(fb: Framebuffer, dispatch: Dispatcher) -> None:
    """Reset to initial state."""
    fb.reset()


def csi_decstr(fb: Framebuffer, dispatch: Dispatcher) -> None:
    """Soft terminal reset."""
    fb.soft_reset()


def csi_sd(fb: Framebuffer, dispatch: Dispatcher) -> None:
    fb.scroll(dispatch.getparam(0, 1))


def csi_su(fb: Framebuffer, dispatch: Dispatcher) -> None:
    fb.scroll(-dispatch.getparam(0, 1))


def osc_dispatch(dispatch: Dispatcher, fb: Framebuffer) -> None:
    """Handle a finished operating-system command: clipboard or titles."""
    osc = dispatch.osc_string
    if osc.startswith(_CLIPBOARD_PREFIX):
        fb.clipboard = osc[len(_CLIPBOARD_PREFIX):]
        return
    if not osc:
        return

    cmd_num = -1
    offset = 0
    if osc[0] == ";":
        cmd_num = 0
        offset = 1
    elif len(osc) >= 2 and osc[1] == ";":
        # 0: icon name and window title, 1: icon name, 2: window title.
        cmd_num = ord(osc[0]) - ord("0")
        offset = 2

    set_icon = cmd_num in (0, 1)
    set_title = cmd_num in (0, 2)
    if not (set_icon or set_title):
        return
    fb.set_title_initialized()
    new_title = osc[offset:min(len(osc), _MAX_TITLE_LENGTH)]
    if set_icon:
        fb.icon_name = new_title
    if set_title:
        fb.window_title = new_title


_CSI = FunctionType.CSI
_ESCAPE = FunctionType.ESCAPE
_CONTROL = FunctionType.CONTROL

_REGISTRATIONS = (
    (_CSI, "K", csi_el, True),
    (_CSI, "J", csi_ed, True),
    (_CSI, "A", csi_cursormove, True),
    (_CSI, "B", csi_cursormove, True),
    (_CSI, "C", csi_cursormove, True),
    (_CSI, "D", csi_cursormove, True),
    (_CSI, "H", csi_cursormove, True),
    (_CSI, "f", csi_cursormove, True),
    (_CSI, "c", csi_da, True),
    (_CSI, ">c", csi_sda, True),
    (_ESCAPE, "#8", esc_decaln, True),
    (_CONTROL, "\x0a", ctrl_lf, True),
    (_CONTROL, "\x84", ctrl_lf, True),
    (_CONTROL, "\x0b", ctrl_lf, True),
    (_CONTROL, "\x0c", ctrl_lf, True),
    (_CONTROL, "\x0d", ctrl_cr, True),
    (_CONTROL, "\x08", ctrl_bs, True),
    (_CONTROL, "\x8d", ctrl_ri, True),
    (_CONTROL, "\x85", ctrl_nel, True),
    (_CONTROL, "\x09", ctrl_ht, False),
    (_CSI, "I", csi_cxt, False),
    (_CSI, "Z", csi_cxt, False),
    (_CONTROL, "\x88", ctrl_hts, True),
    (_CSI, "g", csi_tbc, False),
    (_CSI, "?h", csi_decsm, False),
    (_CSI, "?l", csi_decrm, False),
    (_CSI, "h", csi_sm, True),
    (_CSI, "l", csi_rm, True),
    (_CSI, "r", csi_decstbm, True),
    (_CONTROL, "\x07", ctrl_bel, True),
    (_CSI, "m", csi_sgr, False),
    (_ESCAPE, "7", esc_decsc, True),
    (_ESCAPE, "8", esc_decrc, True),
    (_CSI, "n", csi_dsr, True),
    (_CSI, "L", csi_il, True),
    (_CSI, "M", csi_dl, True),
    (_CSI, "@", csi_ich, True),
    (_CSI, "P", csi_dch, True),
    (_CSI, "d", csi_vpa, True),
    (_CSI, "G", csi_hpa, True),
    (_CSI, "`", csi_hpa, True),
    (_CSI, "X", csi_ech, True),
    (_ESCAPE, "c", esc_ris, True),
    (_CSI, "!p", csi_decstr, True),
    (_CSI, "S", csi_sd, True),
    (_CSI, "T", csi_su, True),
)

for _type, _chars, _function, _clears in _REGISTRATIONS:
    register_function(_type, _chars, _function, _clears)