from types import SimpleNamespace

import pytest

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
    Resize,
    Unhook,
    UserByte,
)


class _Recorder:
    def __init__(self):
        self.calls = []

    def __getattr__(self, name):
        def record(*args):
            self.calls.append((name, args))

        return record


class _FakeUser:
    def __init__(self):
        self.seen = []

    def input(self, act, application_mode):
        self.seen.append((act.c, application_mode))
        return bytes([act.c])


def _make_emu(app_mode=False):
    emu = _Recorder()
    emu.dispatch = _Recorder()
    emu.dispatch.terminal_to_host = bytearray()
    emu.user = _FakeUser()
    emu.fb = SimpleNamespace(ds=SimpleNamespace(application_mode_cursor_keys=app_mode))
    return emu


def test_default_action_fields():
    act = Print()
    assert act.ch == -1
    assert act.char_present is False


def test_ignore_flags():
    assert Ignore().ignore() is True
    for cls in (Print, Execute, Clear, Collect, Param, EscDispatch, CSIDispatch,
                Hook, Put, Unhook, OSCStart, OSCPut, OSCEnd):
        assert cls().ignore() is False


@pytest.mark.parametrize(
    "cls, method",
    [
        (Print, "print_char"),
        (Execute, "execute"),
        (EscDispatch, "esc_dispatch"),
        (CSIDispatch, "csi_dispatch"),
        (OSCEnd, "osc_end"),
    ],
)
def test_emulator_level_routing(cls, method):
    emu = _make_emu()
    act = cls()
    act.act_on_terminal(emu)
    assert emu.calls == [(method, (act,))]
    assert emu.dispatch.calls == []


@pytest.mark.parametrize(
    "cls, method",
    [
        (Clear, "clear"),
        (Collect, "collect"),
        (Param, "newparamchar"),
        (OSCStart, "osc_start"),
        (OSCPut, "osc_put"),
    ],
)
def test_dispatcher_level_routing(cls, method):
    emu = _make_emu()
    act = cls()
    act.act_on_terminal(emu)
    assert emu.dispatch.calls == [(method, (act,))]
    assert emu.calls == []


@pytest.mark.parametrize("cls", [Hook, Put, Unhook, Ignore])
def test_unhandled_actions_do_nothing(cls):
    emu = _make_emu()
    cls().act_on_terminal(emu)
    assert emu.calls == []
    assert emu.dispatch.calls == []


def test_resize_routes_dimensions():
    emu = _make_emu()
    Resize(80, 24).act_on_terminal(emu)
    assert emu.calls == [("resize", (80, 24))]


@pytest.mark.parametrize("app_mode", [True, False])
def test_userbyte_appends_translated_input(app_mode):
    emu = _make_emu(app_mode)
    UserByte(ord("x")).act_on_terminal(emu)
    UserByte(ord("y")).act_on_terminal(emu)
    assert bytes(emu.dispatch.terminal_to_host) == b"xy"
    assert emu.user.seen == [(ord("x"), app_mode), (ord("y"), app_mode)]


def test_userbyte_equality_and_hash():
    assert UserByte(65) == UserByte(65)
    assert UserByte(65) != UserByte(66)
    assert hash(UserByte(7)) == hash(UserByte(7))
    assert UserByte(65) != Resize(65, 65)


def test_userbyte_truncates_to_byte():
    assert UserByte(-1) == UserByte(0xFF)
    assert UserByte(0x141).c == 0x41


def test_resize_equality():
    assert Resize(80, 24) == Resize(80, 24)
    assert Resize(80, 24) != Resize(24, 80)
    assert len({Resize(1, 2), Resize(1, 2)}) == 1


def test_names_match_action_kinds():
    assert EscDispatch.name == "Esc_Dispatch"
    assert CSIDispatch().name == "CSI_Dispatch"
    assert isinstance(UserByte(0), Action)