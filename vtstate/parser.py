"""Escape-sequence parser fed with code points, and a UTF-8 front end for it."""

from __future__ import annotations

from vtstate.actions import Action
from vtstate.states import State, StateFamily

_FAMILY = StateFamily()

_REPLACEMENT_CHARACTER = 0xFFFD
_MAX_CODE_POINT = 0x10FFFF
_INVALID = -1
_INCOMPLETE = -2


def _keep(action: Action, actions: list[Action]) -> None:
    if not action.ignore():
        actions.append(action)


class Parser:
    """The DEC ANSI state machine: turns code points into actions."""

    def __init__(self) -> None:
        self._state: State = _FAMILY.ground

    @property
    def state(self) -> State:
        """The state the parser is in."""
        return self._state

    def input(self, ch: int) -> list[Action]:
        """Feed one code point; return the actions it produces, in order."""
        actions: list[Action] = []
        tx = self._state.input(ch)
        if tx.next_state is not None:
            _keep(self._state.exit(), actions)
        _keep(tx.action, actions)
        if tx.next_state is not None:
            _keep(tx.next_state.enter(), actions)
            self._state = tx.next_state
        return actions

    def reset_input(self) -> None:
        """Return to the ground state."""
        self._state = _FAMILY.ground


def _decode(buf: bytearray) -> tuple[int, int]:
    """Decode one UTF-8 character from the start of buf.

    Returns (bytes consumed, code point), or (_INVALID, 0) for an ill-formed
    sequence and (_INCOMPLETE, 0) when more bytes are needed.
    """
    lead = buf[0]
    if lead <= 0x7F:
        return 1, lead
    if 0xC2 <= lead <= 0xDF:
        need, low, high, cp = 2, 0x80, 0xBF, lead & 0x1F
    elif lead == 0xE0:
        need, low, high, cp = 3, 0xA0, 0xBF, lead & 0x0F
    elif 0xE1 <= lead <= 0xEC or 0xEE <= lead <= 0xEF:
        need, low, high, cp = 3, 0x80, 0xBF, lead & 0x0F
    elif lead == 0xED:
        need, low, high, cp = 3, 0x80, 0x9F, lead & 0x0F
    elif lead == 0xF0:
        need, low, high, cp = 4, 0x90, 0xBF, lead & 0x07
    elif 0xF1 <= lead <= 0xF3:
        need, low, high, cp = 4, 0x80, 0xBF, lead & 0x07
    elif lead == 0xF4:
        need, low, high, cp = 4, 0x80, 0x8F, lead & 0x07
    else:
        return _INVALID, 0

    for position, byte in enumerate(buf[1:need], start=1):
        lo, hi = (low, high) if position == 1 else (0x80, 0xBF)
        if not lo <= byte <= hi:
            return _INVALID, 0
        cp = (cp << 6) | (byte & 0x3F)
    if len(buf) < need:
        return _INCOMPLETE, 0
    return need, cp


class UTF8Parser:
    """Decodes a byte stream as UTF-8 and feeds the code points to a Parser.

    Ill-formed input becomes U+FFFD, following the Unicode best practice of
    replacing each maximal ill-formed subpart.
    """

    def __init__(self) -> None:
        self._parser = Parser()
        self._buf = bytearray()

    @property
    def parser(self) -> Parser:
        return self._parser

    def input(self, byte: int) -> list[Action]:
        """Feed one byte; return the actions produced so far."""
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"not a byte: {byte!r}")

        # A lone ASCII byte needs no decoding.
        if not self._buf and byte <= 0x7F:
            return self._parser.input(byte)

        self._buf.append(byte)
        actions: list[Action] = []
        total = 0
        original_length = len(self._buf)

        while total != original_length:
            consumed, cp = _decode(self._buf)
            if consumed == _INVALID:
                # Replace what was read and try again with the last byte alone.
                if len(self._buf) > 1:
                    consumed = len(self._buf) - 1
                    del self._buf[:-1]
                else:
                    consumed = 1
                    self._buf.clear()
                cp = _REPLACEMENT_CHARACTER
            elif consumed == _INCOMPLETE:
                total += len(self._buf)
                continue
            else:
                del self._buf[:consumed]

            if cp > _MAX_CODE_POINT or 0xD800 <= cp <= 0xDFFF:
                cp = _REPLACEMENT_CHARACTER

            actions.extend(self._parser.input(cp))
            total += consumed

        return actions

    def reset_input(self) -> None:
        """Drop any partial character and return to the ground state."""
        self._parser.reset_input()
        self._buf.clear()