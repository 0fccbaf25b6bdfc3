import pytest

from vtstate.actions import (
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
from vtstate.states import StateFamily, Transition


@pytest.fixture
def family():
    return StateFamily()


ALL_STATES = [
    "ground",
    "escape",
    "escape_intermediate",
    "csi_entry",
    "csi_param",
    "csi_intermediate",
    "csi_ignore",
    "dcs_entry",
    "dcs_param",
    "dcs_intermediate",
    "dcs_passthrough",
    "dcs_ignore",
    "osc_string",
    "sos_pm_apc_string",
]


def test_default_transition_is_ignore_without_next_state():
    tx = Transition()
    assert tx.action.ignore() is True
    assert tx.next_state is None


def test_every_state_belongs_to_family(family):
    states = list(family)
    assert len(states) == len(ALL_STATES)
    assert all(state.family is family for state in states)


@pytest.mark.parametrize("start", ALL_STATES)
@pytest.mark.parametrize(
    "ch, action_type, target",
    [
        (0x18, Execute, "ground"),
        (0x1A, Execute, "ground"),
        (0x85, Execute, "ground"),
        (0x99, Execute, "ground"),
        (0x9C, Ignore, "ground"),
        (0x1B, Ignore, "escape"),
        (0x98, Ignore, "sos_pm_apc_string"),
        (0x9E, Ignore, "sos_pm_apc_string"),
        (0x9F, Ignore, "sos_pm_apc_string"),
        (0x90, Ignore, "dcs_entry"),
        (0x9D, Ignore, "osc_string"),
        (0x9B, Ignore, "csi_entry"),
    ],
)
def test_anywhere_rules(family, start, ch, action_type, target):
    tx = getattr(family, start).input(ch)
    assert type(tx.action) is action_type
    assert tx.next_state is getattr(family, target)
    assert tx.action.char_present is True
    assert tx.action.ch == ch


@pytest.mark.parametrize(
    "start, ch, action_type, target",
    [
        ("ground", ord("A"), Print, None),
        ("ground", ord(" "), Print, None),
        ("ground", 0x7F, Print, None),
        ("ground", 0x0A, Execute, None),
        ("ground", 0x19, Execute, None),
        ("escape", ord("["), Ignore, "csi_entry"),
        ("escape", ord("]"), Ignore, "osc_string"),
        ("escape", ord("P"), Ignore, "dcs_entry"),
        ("escape", ord("X"), Ignore, "sos_pm_apc_string"),
        ("escape", ord("^"), Ignore, "sos_pm_apc_string"),
        ("escape", ord("_"), Ignore, "sos_pm_apc_string"),
        ("escape", ord("("), Collect, "escape_intermediate"),
        ("escape", ord("c"), EscDispatch, "ground"),
        ("escape", ord("7"), EscDispatch, "ground"),
        ("escape", ord("\\"), EscDispatch, "ground"),
        ("escape", 0x0D, Execute, None),
        ("escape", 0x7F, Ignore, None),
        ("escape_intermediate", ord("#"), Collect, None),
        ("escape_intermediate", ord("8"), EscDispatch, "ground"),
        ("csi_entry", ord("?"), Collect, "csi_param"),
        ("csi_entry", ord("5"), Param, "csi_param"),
        ("csi_entry", ord(";"), Param, "csi_param"),
        ("csi_entry", ord("m"), CSIDispatch, "ground"),
        ("csi_entry", ord(":"), Ignore, "csi_ignore"),
        ("csi_entry", ord("!"), Collect, "csi_intermediate"),
        ("csi_param", ord("1"), Param, None),
        ("csi_param", ord(":"), Ignore, "csi_ignore"),
        ("csi_param", ord("<"), Ignore, "csi_ignore"),
        ("csi_param", ord(" "), Collect, "csi_intermediate"),
        ("csi_param", ord("H"), CSIDispatch, "ground"),
        ("csi_intermediate", ord(" "), Collect, None),
        ("csi_intermediate", ord("p"), CSIDispatch, "ground"),
        ("csi_intermediate", ord("0"), Ignore, "csi_ignore"),
        ("csi_ignore", ord("m"), Ignore, "ground"),
        ("csi_ignore", ord("5"), Ignore, None),
        ("csi_ignore", 0x08, Execute, None),
        ("dcs_entry", ord(" "), Collect, "dcs_intermediate"),
        ("dcs_entry", ord(":"), Ignore, "dcs_ignore"),
        ("dcs_entry", ord("1"), Param, "dcs_param"),
        ("dcs_entry", ord("?"), Collect, "dcs_param"),
        ("dcs_entry", ord("q"), Ignore, "dcs_passthrough"),
        ("dcs_param", ord("2"), Param, None),
        ("dcs_param", ord(":"), Ignore, "dcs_ignore"),
        ("dcs_param", ord("$"), Collect, "dcs_intermediate"),
        ("dcs_param", ord("q"), Ignore, "dcs_passthrough"),
        ("dcs_intermediate", ord("$"), Collect, None),
        ("dcs_intermediate", ord("q"), Ignore, "dcs_passthrough"),
        ("dcs_intermediate", ord("0"), Ignore, "dcs_ignore"),
        ("dcs_passthrough", ord("x"), Put, None),
        ("dcs_passthrough", 0x0A, Put, None),
        ("dcs_ignore", ord("x"), Ignore, None),
        ("osc_string", ord("a"), OSCPut, None),
        ("osc_string", 0x07, Ignore, "ground"),
        ("osc_string", 0x0A, Ignore, None),
        ("sos_pm_apc_string", ord("a"), Ignore, None),
    ],
)
def test_state_rules(family, start, ch, action_type, target):
    tx = getattr(family, start).input(ch)
    assert type(tx.action) is action_type
    expected = None if target is None else getattr(family, target)
    assert tx.next_state is expected
    assert tx.action.ch == ch


def test_high_code_point_prints_and_keeps_character(family):
    tx = family.ground.input(0x4E2D)
    assert type(tx.action) is Print
    assert tx.action.ch == 0x4E2D
    assert tx.next_state is None


def test_high_code_point_treated_as_final_byte_in_csi(family):
    tx = family.csi_param.input(0xA0)
    assert type(tx.action) is CSIDispatch
    assert tx.next_state is family.ground
    assert tx.action.ch == 0xA0


@pytest.mark.parametrize(
    "state, enter_type, exit_type",
    [
        ("ground", Ignore, Ignore),
        ("escape", Clear, Ignore),
        ("csi_entry", Clear, Ignore),
        ("csi_param", Ignore, Ignore),
        ("dcs_entry", Clear, Ignore),
        ("dcs_passthrough", Hook, Unhook),
        ("osc_string", OSCStart, OSCEnd),
        ("sos_pm_apc_string", Ignore, Ignore),
    ],
)
def test_enter_and_exit_actions(family, state, enter_type, exit_type):
    s = getattr(family, state)
    assert type(s.enter()) is enter_type
    assert type(s.exit()) is exit_type


def test_each_input_yields_fresh_action(family):
    first = family.ground.input(ord("a"))
    second = family.ground.input(ord("b"))
    assert first.action is not second.action
    assert (first.action.ch, second.action.ch) == (ord("a"), ord("b"))


def test_families_are_independent():
    one = StateFamily()
    two = StateFamily()
    assert one.ground.input(0x1B).next_state is one.escape
    assert two.ground.input(0x1B).next_state is two.escape
    assert one.escape is not two.escape