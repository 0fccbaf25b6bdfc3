"""Translation of user keystrokes for the host's cursor-key mode."""

from __future__ import annotations

import enum

from vtstate.actions import UserByte

_ESC = 0x1B


class UserInputState(enum.Enum):
    GROUND = "ground"
    ESC = "esc"
    SS3 = "ss3"


class UserInput:
    """Rewrites SS3 cursor keys as CSI when the host is not in application mode."""

    def __init__(self) -> None:
        self.state = UserInputState.GROUND

    def input(self, act: UserByte, application_mode_cursor_keys: bool) -> bytes:
        """Feed one user byte; return the bytes to send to the host."""
        c = act.c
        if self.state is UserInputState.GROUND:
            if c == _ESC:
                self.state = UserInputState.ESC
            return bytes((c,))

        if self.state is UserInputState.ESC:
            if c == ord("O"):
                # ESC O is the 7-bit SS3; wait to see the next byte.
                self.state = UserInputState.SS3
                return b""
            self.state = UserInputState.GROUND
            return bytes((c,))

        self.state = UserInputState.GROUND
        if not application_mode_cursor_keys and ord("A") <= c <= ord("D"):
            return bytes((ord("["), c))
        return bytes((ord("O"), c))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UserInput):
            return NotImplemented
        return self.state == other.state

    __hash__ = None  # type: ignore[assignment]