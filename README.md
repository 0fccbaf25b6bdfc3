# vtstate

`vtstate` holds the building blocks of a VT220/xterm-style terminal, in pure
Python with no dependencies: a UTF-8 decoder and ANSI/ECMA-48 escape-sequence
state machine that turn a byte stream into actions, a dispatcher that
collects parameters and routes control functions, the control functions
themselves, and an in-memory framebuffer of cells, renditions, cursor,
scrolling region, tab stops, modes, titles, clipboard and bell.

Nothing is drawn; it is a library for code that needs to know what a screen
would hold.

## Installation

```
pip install vtstate
```

## Modules

| Module                | What it holds |
|-----------------------|---------------|
| `vtstate.parser`      | `UTF8Parser` (bytes in) and `Parser` (code points in); both return lists of actions |
| `vtstate.states`      | the state machine: `Ground`, `Escape`, `CSIEntry`, `CSIParam`, `OSCString`, `DCSPassthrough`, … grouped in a `StateFamily`; `Transition` |
| `vtstate.actions`     | `Print`, `Execute`, `Clear`, `Collect`, `Param`, `EscDispatch`, `CSIDispatch`, `OSCStart`, `OSCPut`, `OSCEnd`, `Hook`, `Put`, `Unhook`, `Ignore`, plus `UserByte` and `Resize` |
| `vtstate.dispatcher`  | `Dispatcher`, `FunctionType`, `Function`, `DispatchRegistry`, `register_function`, `get_global_dispatch_registry` |
| `vtstate.functions`   | the control functions (`csi_cursormove`, `csi_ed`, `csi_sgr`, `csi_decsm`, `ctrl_lf`, `esc_decaln`, `osc_dispatch`, …); importing the module registers them |
| `vtstate.framebuffer` | `Framebuffer`, `DrawState`, `SavedCursor`, `MouseReportingMode`, `MouseEncodingMode` |
| `vtstate.cells`       | `Cell`, `Row`, `Renditions`, `Attribute`, `isprint_iso8859_1` |
| `vtstate.userinput`   | `UserInput`, which rewrites SS3 cursor keys as CSI when the host is not in application cursor-key mode |

## Usage

### Parsing

```python
from vtstate.parser import UTF8Parser

parser = UTF8Parser()
actions = [action for byte in b"\x1b[31mhi" for action in parser.input(byte)]
print([action.name for action in actions])
# ['Clear', 'Clear', 'Param', 'Param', 'CSI_Dispatch', 'Print', 'Print']
```

Each action carries the code point that triggered it in `ch` (with
`char_present` set).

### Dispatching control functions

```python
import vtstate.functions  # registers the control functions
from vtstate.actions import CSIDispatch, Param
from vtstate.dispatcher import Dispatcher, FunctionType
from vtstate.framebuffer import Framebuffer

def with_char(action, ch):
    action.ch = ord(ch)
    action.char_present = True
    return action

fb = Framebuffer(80, 24)
dispatcher = Dispatcher()
fb.ds.move_row(4)
fb.ds.move_col(9)

dispatcher.newparamchar(with_char(Param(), "6"))
dispatcher.dispatch(FunctionType.CSI, with_char(CSIDispatch(), "n"), fb)
print(bytes(dispatcher.terminal_to_host))  # b'\x1b[5;10R'
```

Replies meant for the program (status reports, device attributes) collect in
`Dispatcher.terminal_to_host`. The functions in `vtstate.functions` can also
be called directly as `function(fb, dispatcher)`.

### User keystrokes

```python
from vtstate.actions import UserByte
from vtstate.userinput import UserInput

keys = UserInput()
print([keys.input(UserByte(b), False) for b in b"\x1bOA"])
# [b'\x1b', b'', b'[A']
```

### Behaviour worth knowing

* Invalid UTF-8 becomes U+FFFD, replacing each maximal ill-formed subpart;
  surrogates and code points above U+10FFFF are replaced too.
* Up to 100 parameter characters are kept per sequence, and a parameter
  above 65535 counts as absent; `getparam` returns the default for any
  value below 1.
* An OSC string is kept up to 16 KiB; titles are cut at 256 characters.
  `52;c;` sets the clipboard, `0;`, `1;` and `2;` set icon name and/or title.
* `Cell.full()` is true once a cell holds 32 bytes.
* Unknown control functions are ignored but still clear the pending
  auto-wrap state.
* `Framebuffer.copy()` shares rows with the original until either writes to
  them.

## What it does not do

There is no emulator object here. The actions' `act_on_terminal(emu)`
expects an object with `print_char`, `execute`, `csi_dispatch`,
`esc_dispatch`, `osc_end` and `resize` methods and `dispatch`, `user` and
`fb` attributes, and the package does not provide one. In particular,
placing printed characters into cells — auto-wrap, insert mode, wide and
combining characters — and the 7-bit escape forms of C1 controls are left to
the caller. Nor does the package render a screen or produce the bytes that
would redraw one.

## Running the tests

```
pip install -e ".[test]"
pytest
```