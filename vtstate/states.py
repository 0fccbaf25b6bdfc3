"""States of the escape-sequence parser, after the DEC ANSI parser model."""

from __future__ import annotations

import abc
from dataclasses import dataclass, field

from vtstate.actions import (
    Action,
    Clear,
    Collect,
    CSIDispatch,
    EscDispatch,
    Execute,
    Hook,
    Ignore,
    OSCEnd,
    OSCPut,
    OSCStart,
    Param,
    Print,
    Put,
    Unhook,
)


@dataclass
class Transition:
    """An action to emit and, optionally, the state to move to."""

    action: Action = field(default_factory=Ignore)
    next_state: State | None = None


def _c0_prime(ch: int) -> bool:
    return ch <= 0x17 or ch == 0x19 or 0x1C <= ch <= 0x1F


def _glgr(ch: int) -> bool:
    return 0x20 <= ch <= 0x7F or 0xA0 <= ch <= 0xFF


def _is_param_char(ch: int) -> bool:
    return 0x30 <= ch <= 0x39 or ch == 0x3B


class State(abc.ABC):
    """One state of the parser; all states of a parser share a family."""

    def __init__(self, family: StateFamily | None = None) -> None:
        self.family = family

    def _anywhere_rule(self, ch: int) -> Transition | None:
        fam = self.family
        if (
            ch in (0x18, 0x1A)
            or 0x80 <= ch <= 0x8F
            or 0x91 <= ch <= 0x97
            or ch in (0x99, 0x9A)
        ):
            return Transition(Execute(), fam.ground)
        if ch == 0x9C:
            return Transition(next_state=fam.ground)
        if ch == 0x1B:
            return Transition(next_state=fam.escape)
        if ch in (0x98, 0x9E, 0x9F):
            return Transition(next_state=fam.sos_pm_apc_string)
        if ch == 0x90:
            return Transition(next_state=fam.dcs_entry)
        if ch == 0x9D:
            return Transition(next_state=fam.osc_string)
        if ch == 0x9B:
            return Transition(next_state=fam.csi_entry)
        return None

    def input(self, ch: int) -> Transition:
        """Return the transition taken on code point ch."""
        tx = self._anywhere_rule(ch)
        if tx is None:
            # High code points are parsed as if they were 'A'.
            tx = self._input_state_rule(0x41 if ch >= 0xA0 else ch)
        tx.action.char_present = True
        tx.action.ch = ch
        return tx

    def enter(self) -> Action:
        """Action emitted when the state is entered."""
        return Ignore()

    def exit(self) -> Action:
        """Action emitted when the state is left."""
        return Ignore()

    @abc.abstractmethod
    def _input_state_rule(self, ch: int) -> Transition:
        """The state-specific part of the transition table."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Ground(State):
    def _input_state_rule(self, ch: int) -> Transition:
        if _c0_prime(ch):
            return Transition(Execute())
        if _glgr(ch):
            return Transition(Print())
        return Transition()


class Escape(State):
    def enter(self) -> Action:
        return Clear()

    def _input_state_rule(self, ch: int) -> Transition:
        fam = self.family
        if _c0_prime(ch):
            return Transition(Execute())
        if 0x20 <= ch <= 0x2F:
            return Transition(Collect(), fam.escape_intermediate)
        if (
            0x30 <= ch <= 0x4F
            or 0x51 <= ch <= 0x57
            or ch in (0x59, 0x5A, 0x5C)
            or 0x60 <= ch <= 0x7E
        ):
            return Transition(EscDispatch(), fam.ground)
        if ch == 0x5B:
            return Transition(next_state=fam.csi_entry)
        if ch == 0x5D:
            return Transition(next_state=fam.osc_string)
        if ch == 0x50:
            return Transition(next_state=fam.dcs_entry)
        if ch in (0x58, 0x5E, 0x5F):
            return Transition(next_state=fam.sos_pm_apc_string)
        return Transition()


class EscapeIntermediate(State):
    def _input_state_rule(self, ch: int) -> Transition:
        if _c0_prime(ch):
            return Transition(Execute())
        if 0x20 <= ch <= 0x2F:
            return Transition(Collect())
        if 0x30 <= ch <= 0x7E:
            return Transition(EscDispatch(), self.family.ground)
        return Transition()


class CSIEntry(State):
    def enter(self) -> Action:
        return Clear()

    def _input_state_rule(self, ch: int) -> Transition:
        fam = self.family
        if _c0_prime(ch):
            return Transition(Execute())
        if 0x40 <= ch <= 0x7E:
            return Transition(CSIDispatch(), fam.ground)
        if _is_param_char(ch):
            return Transition(Param(), fam.csi_param)
        if 0x3C <= ch <= 0x3F:
            return Transition(Collect(), fam.csi_param)
        if ch == 0x3A:
            return Transition(next_state=fam.csi_ignore)
        if 0x20 <= ch <= 0x2F:
            return Transition(Collect(), fam.csi_intermediate)
        return Transition()


class CSIParam(State):
    def _input_state_rule(self, ch: int) -> Transition:
        fam = self.family
        if _c0_prime(ch):
            return Transition(Execute())
        if _is_param_char(ch):
            return Transition(Param())
        if ch == 0x3A or 0x3C <= ch <= 0x3F:
            return Transition(next_state=fam.csi_ignore)
        if 0x20 <= ch <= 0x2F:
            return Transition(Collect(), fam.csi_intermediate)
        if 0x40 <= ch <= 0x7E:
            return Transition(CSIDispatch(), fam.ground)
        return Transition()


class CSIIntermediate(State):
    def _input_state_rule(self, ch: int) -> Transition:
        fam = self.family
        if _c0_prime(ch):
            return Transition(Execute())
        if 0x20 <= ch <= 0x2F:
            return Transition(Collect())
        if 0x40 <= ch <= 0x7E:
            return Transition(CSIDispatch(), fam.ground)
        if 0x30 <= ch <= 0x3F:
            return Transition(next_state=fam.csi_ignore)
        return Transition()


class CSIIgnore(State):
    def _input_state_rule(self, ch: int) -> Transition:
        if _c0_prime(ch):
            return Transition(Execute())
        if 0x40 <= ch <= 0x7E:
            return Transition(next_state=self.family.ground)
        return Transition()


class DCSEntry(State):
    def enter(self) -> Action:
        return Clear()

    def _input_state_rule(self, ch: int) -> Transition:
        fam = self.family
        if 0x20 <= ch <= 0x2F:
            return Transition(Collect(), fam.dcs_intermediate)
        if ch == 0x3A:
            return Transition(next_state=fam.dcs_ignore)
        if _is_param_char(ch):
            return Transition(Param(), fam.dcs_param)
        if 0x3C <= ch <= 0x3F:
            return Transition(Collect(), fam.dcs_param)
        if 0x40 <= ch <= 0x7E:
            return Transition(next_state=fam.dcs_passthrough)
        return Transition()


class DCSParam(State):
    def _input_state_rule(self, ch: int) -> Transition:
        fam = self.family
        if _is_param_char(ch):
            return Transition(Param())
        if ch == 0x3A or 0x3C <= ch <= 0x3F:
            return Transition(next_state=fam.dcs_ignore)
        if 0x20 <= ch <= 0x2F:
            return Transition(Collect(), fam.dcs_intermediate)
        if 0x40 <= ch <= 0x7E:
            return Transition(next_state=fam.dcs_passthrough)
        return Transition()


class DCSIntermediate(State):
    def _input_state_rule(self, ch: int) -> Transition:
        fam = self.family
        if 0x20 <= ch <= 0x2F:
            return Transition(Collect())
        if 0x40 <= ch <= 0x7E:
            return Transition(next_state=fam.dcs_passthrough)
        if 0x30 <= ch <= 0x3F:
            return Transition(next_state=fam.dcs_ignore)
        return Transition()


class DCSPassthrough(State):
    def enter(self) -> Action:
        return Hook()

    def exit(self) -> Action:
        return Unhook()

    def _input_state_rule(self, ch: int) -> Transition:
        if _c0_prime(ch) or 0x20 <= ch <= 0x7E:
            return Transition(Put())
        if ch == 0x9C:
            return Transition(next_state=self.family.ground)
        return Transition()


class DCSIgnore(State):
    def _input_state_rule(self, ch: int) -> Transition:
        if ch == 0x9C:
            return Transition(next_state=self.family.ground)
        return Transition()


class OSCString(State):
    def enter(self) -> Action:
        return OSCStart()

    def exit(self) -> Action:
        return OSCEnd()

    def _input_state_rule(self, ch: int) -> Transition:
        if 0x20 <= ch <= 0x7F:
            return Transition(OSCPut())
        # BEL is the xterm variant of the string terminator.
        if ch in (0x9C, 0x07):
            return Transition(next_state=self.family.ground)
        return Transition()


class SOSPMAPCString(State):
    def _input_state_rule(self, ch: int) -> Transition:
        if ch == 0x9C:
            return Transition(next_state=self.family.ground)
        return Transition()


class StateFamily:
    """The full set of parser states, each linked back to this family."""

    def __init__(self) -> None:
        self.ground = Ground(self)
        self.escape = Escape(self)
        self.escape_intermediate = EscapeIntermediate(self)
        self.csi_entry = CSIEntry(self)
        self.csi_param = CSIParam(self)
        self.csi_intermediate = CSIIntermediate(self)
        self.csi_ignore = CSIIgnore(self)
        self.dcs_entry = DCSEntry(self)
        self.dcs_param = DCSParam(self)
        self.dcs_intermediate = DCSIntermediate(self)
        self.dcs_passthrough = DCSPassthrough(self)
        self.dcs_ignore = DCSIgnore(self)
        self.osc_string = OSCString(self)
        self.sos_pm_apc_string = SOSPMAPCString(self)

    def __iter__(self):
        return iter(
            (
                self.ground,
                self.escape,
                self.escape_intermediate,
                self.csi_entry,
                self.csi_param,
                self.csi_intermediate,
                self.csi_ignore,
                self.dcs_entry,
                self.dcs_param,
                self.dcs_intermediate,
                self.dcs_passthrough,
                self.dcs_ignore,
                self.osc_string,
                self.sos_pm_apc_string,
            )
        )