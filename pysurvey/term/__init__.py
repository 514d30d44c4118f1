"""
Utilities to work with the terminal and escape sequences.

We limit ourselves to a sensible subset of vt100, which is supported by
xterm-compatible terminals, by xterm.js (e.g. VSCode), and by Windows 10
and up. We don't use curses, because that's Unix only, and would require a
whole separate implementation for Windows.

The parts where Unix and Windows need to differ live in the
``TerminalContext`` subclasses, which put the terminal in raw mode and
restore it afterwards.
"""

from ._context import TerminalContext, enable_raw_mode  # noqa
from ._input_reader import ByteReader  # noqa
from .input_keys import Key, read_key  # noqa
