"""Collects parameters and intermediates and dispatches terminal functions."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable

from vtstate.actions import Action, Collect

MAXIMUM_CLIPBOARD_SIZE = 16 * 1024
PARAM_MAX = 65535
_MAX_PARAMS_LENGTH = 100
_MAX_DISPATCH_CHARS = 8


class FunctionType(enum.Enum):
    ESCAPE = "escape"
    CSI = "csi"
    CONTROL = "control"


@dataclass(frozen=True)
class Function:
    """A registered terminal function and whether it clears the wrap state."""

    function: Callable
    clears_wrap_state: bool = True


@dataclass
class DispatchRegistry:
    escape: dict[str, Function] = field(default_factory=dict)
    csi: dict[str, Function] = field(default_factory=dict)
    control: dict[str, Function] = field(default_factory=dict)

    def table(self, function_type: FunctionType) -> dict[str, Function]:
        """Return the lookup table for one kind of function."""
        if function_type is FunctionType.ESCAPE:
            return self.escape
        if function_type is FunctionType.CSI:
            return self.csi
        return self.control


_GLOBAL_REGISTRY = DispatchRegistry()


def get_global_dispatch_registry() -> DispatchRegistry:
    """Return the process-wide registry of terminal functions."""
    return _GLOBAL_REGISTRY


def register_function(
    function_type: FunctionType,
    dispatch_chars: str,
    function: Callable,
    clears_wrap_state: bool = True,
) -> Function:
    """Register a function; an existing entry for the same key is kept."""
    table = get_global_dispatch_registry().table(function_type)
    return table.setdefault(dispatch_chars, Function(function, clears_wrap_state))


def _parse_param(segment: str) -> int:
    if not segment:
        return -1
    value = int(segment)
    return -1 if value > PARAM_MAX else value


class Dispatcher:
    """Accumulates escape-sequence state and runs registered functions."""

    def __init__(self) -> None:
        self.params: str = ""
        self.parsed_params: list[int] = []
        self.parsed: bool = False
        self.dispatch_chars: str = ""
        self._osc_chars: list[str] = []
        self.terminal_to_host: bytearray = bytearray()

    @property
    def osc_string(self) -> str:
        """The characters collected for the current operating-system command."""
        return "".join(self._osc_chars)

    def _parse_params(self) -> None:
        if self.parsed:
            return
        self.parsed_params = [_parse_param(s) for s in self.params.split(";")]
        self.parsed = True

    def getparam(self, n: int, defaultval: int) -> int:
        """Return parameter n, or defaultval if it is missing or below 1."""
        self._parse_params()
        ret = self.parsed_params[n] if len(self.parsed_params) > n else defaultval
        return defaultval if ret < 1 else ret

    def param_count(self) -> int:
        self._parse_params()
        return len(self.parsed_params)

    def newparamchar(self, act: Action) -> None:
        if not act.char_present:
            raise ValueError("parameter action carries no character")
        ch = chr(act.ch)
        if ch != ";" and not ("0" <= ch <= "9"):
            raise ValueError(f"invalid parameter character {ch!r}")
        if len(self.params) < _MAX_PARAMS_LENGTH:
            self.params += ch
        self.parsed = False

    def collect(self, act: Action) -> None:
        if not act.char_present:
            raise ValueError("collect action carries no character")
        if len(self.dispatch_chars) < _MAX_DISPATCH_CHARS and act.ch <= 255:
            self.dispatch_chars += chr(act.ch)

    def clear(self, act: Action | None = None) -> None:
        self.params = ""
        self.dispatch_chars = ""
        self.parsed = False

    def __str__(self) -> str:
        text = f'[dispatch="{self.dispatch_chars}" params="{self.params}"]'
        return text[:63]

    def dispatch(self, function_type: FunctionType, act: Action, fb) -> None:
        """Look up and run the function selected by the collected sequence."""
        if function_type in (FunctionType.ESCAPE, FunctionType.CSI):
            if not act.char_present:
                raise ValueError("dispatch action carries no character")
            final = Collect()
            final.char_present = True
            final.ch = act.ch
            self.collect(final)

        if function_type is FunctionType.CONTROL:
            if act.ch < 0 or act.ch > 255:
                raise ValueError(f"control character out of range: {act.ch}")
            key = chr(act.ch)
        else:
            key = self.dispatch_chars

        entry = get_global_dispatch_registry().table(function_type).get(key)
        if entry is None:
            fb.ds.next_print_will_wrap = False
            return
        if entry.clears_wrap_state:
            fb.ds.next_print_will_wrap = False
        entry.function(fb, self)

    def osc_put(self, act: Action) -> None:
        if not act.char_present:
            raise ValueError("OSC put action carries no character")
        if len(self._osc_chars) < MAXIMUM_CLIPBOARD_SIZE:
            self._osc_chars.append(chr(act.ch))

    def osc_start(self, act: Action | None = None) -> None:
        self._osc_chars.clear()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dispatcher):
            return NotImplemented
        return (
            self.params == other.params
            and self.parsed_params == other.parsed_params
            and self.parsed == other.parsed
            and self.dispatch_chars == other.dispatch_chars
            and self._osc_chars == other._osc_chars
            and self.terminal_to_host == other.terminal_to_host
        )

    __hash__ = None  # type: ignore[assignment]