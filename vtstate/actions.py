"""Parser actions: the events the escape-sequence state machine emits."""

from __future__ import annotations


class Action:
    """Base action; carries the character that triggered it, if any."""

    name = "Action"

    def __init__(self) -> None:
        self.ch: int = -1
        self.char_present: bool = False

    def act_on_terminal(self, emu) -> None:
        """Apply this action to an emulator. The base action does nothing."""

    def ignore(self) -> bool:
        """Whether the parser should drop this action."""
        return False

    def __repr__(self) -> str:
        if self.char_present:
            return f"{type(self).__name__}(ch={self.ch:#x})"
        return f"{type(self).__name__}()"


class Ignore(Action):
    name = "Ignore"

    def ignore(self) -> bool:
        return True


class Print(Action):
    name = "Print"

    def act_on_terminal(self, emu) -> None:
        emu.print_char(self)


class Execute(Action):
    name = "Execute"

    def act_on_terminal(self, emu) -> None:
        emu.execute(self)


class Clear(Action):
    name = "Clear"

    def act_on_terminal(self, emu) -> None:
        emu.dispatch.clear(self)


class Collect(Action):
    name = "Collect"

    def act_on_terminal(self, emu) -> None:
        emu.dispatch.collect(self)


class Param(Action):
    name = "Param"

    def act_on_terminal(self, emu) -> None:
        emu.dispatch.newparamchar(self)


class EscDispatch(Action):
    name = "Esc_Dispatch"

    def act_on_terminal(self, emu) -> None:
        emu.esc_dispatch(self)


class CSIDispatch(Action):
    name = "CSI_Dispatch"

    def act_on_terminal(self, emu) -> None:
        emu.csi_dispatch(self)


class Hook(Action):
    name = "Hook"


class Put(Action):
    name = "Put"


class Unhook(Action):
    name = "Unhook"


class OSCStart(Action):
    name = "OSC_Start"

    def act_on_terminal(self, emu) -> None:
        emu.dispatch.osc_start(self)


class OSCPut(Action):
    name = "OSC_Put"

    def act_on_terminal(self, emu) -> None:
        emu.dispatch.osc_put(self)


class OSCEnd(Action):
    name = "OSC_End"

    def act_on_terminal(self, emu) -> None:
        emu.osc_end(self)


class UserByte(Action):
    """A keystroke byte from the user; not produced by the host parser."""

    name = "UserByte"

    def __init__(self, c: int) -> None:
        super().__init__()
        self.c: int = c & 0xFF

    def act_on_terminal(self, emu) -> None:
        emu.dispatch.terminal_to_host += emu.user.input(
            self, emu.fb.ds.application_mode_cursor_keys
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UserByte):
            return NotImplemented
        return self.c == other.c

    def __hash__(self) -> int:
        return hash(("UserByte", self.c))

    def __repr__(self) -> str:
        return f"UserByte({self.c:#04x})"


class Resize(Action):
    """A window-size change; not produced by the host parser."""

    name = "Resize"

    def __init__(self, width: int, height: int) -> None:
        super().__init__()
        self.width = width
        self.height = height

    def act_on_terminal(self, emu) -> None:
        emu.resize(self.width, self.height)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Resize):
            return NotImplemented
        return self.width == other.width and self.height == other.height

    def __hash__(self) -> int:
        return hash(("Resize", self.width, self.height))

    def __repr__(self) -> str:
        return f"Resize({self.width}, {self.height})"