"""Curses key codes to logical keys."""

from __future__ import annotations

import curses

from gbt.core.messages import Key, KeyInput

_CTRL_C = 3
_ESC = 27

_SPECIAL = {
    curses.KEY_UP: Key.UP,
    curses.KEY_DOWN: Key.DOWN,
    curses.KEY_PPAGE: Key.PAGE_UP,
    curses.KEY_NPAGE: Key.PAGE_DOWN,
    curses.KEY_HOME: Key.HOME,
    curses.KEY_END: Key.END,
    curses.KEY_ENTER: Key.ACTIVATE,
    10: Key.ACTIVATE,
    13: Key.ACTIVATE,
    curses.KEY_BACKSPACE: Key.DELETE,
    curses.KEY_DC: Key.DELETE,
    127: Key.DELETE,
    8: Key.DELETE,
    _ESC: Key.CANCEL,
    _CTRL_C: Key.INTERRUPT,
}

# Letter bindings keep their character so filter input can still type them.
_LETTERS = {
    "k": Key.UP,
    "j": Key.DOWN,
    "g": Key.HOME,
    "G": Key.END,
    "n": Key.CANCEL,
    "/": Key.FILTER,
    "q": Key.QUIT,
}


def translate_key(ch: int | str) -> KeyInput | None:
    """Map a ``get_wch()`` result to a KeyInput; None for input with no meaning.

    ``get_wch`` returns function keys as ints and everything else as a
    one-character string, which may be any printable code point.
    """
    if isinstance(ch, str):
        if len(ch) != 1:
            return None
        if ch.isprintable():
            return KeyInput(_LETTERS.get(ch, Key.CHAR), char=ch)
        ch = ord(ch)
    special = _SPECIAL.get(ch)
    if special is not None:
        return KeyInput(special)
    if 32 <= ch <= 126:
        char = chr(ch)
        return KeyInput(_LETTERS.get(char, Key.CHAR), char=char)
    return None


HELP_TEXT = "↑/↓ navigate   enter checkout   ⌫ delete   / filter   q quit"
