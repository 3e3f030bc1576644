import curses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, Optional, Union

UP = "up"
DOWN = "down"
LEFT = "left"
RIGHT = "right"
HOME = "home"
END = "end"
ENTER = "enter"
ESC = "esc"
TAB = "tab"
BACKSPACE = "backspace"
DELETE = "delete"
RESIZE = "resize"

CTRL = "ctrl"

_SPECIAL_KEYS = {
    curses.KEY_UP: UP,
    curses.KEY_DOWN: DOWN,
    curses.KEY_LEFT: LEFT,
    curses.KEY_RIGHT: RIGHT,
    curses.KEY_HOME: HOME,
    curses.KEY_END: END,
    curses.KEY_ENTER: ENTER,
    curses.KEY_BACKSPACE: BACKSPACE,
    curses.KEY_DC: DELETE,
    curses.KEY_RESIZE: RESIZE,
}

_CONTROL_CHARS = {
    "\n": ENTER,
    "\r": ENTER,
    "\t": TAB,
    "\x1b": ESC,
    "\x7f": BACKSPACE,
    "\x08": BACKSPACE,
}


class KeyEventKind(Enum):
    PRESS = "press"
    REPEAT = "repeat"
    RELEASE = "release"


@dataclass(frozen=True)
class KeyEvent:
    code: str
    modifiers: FrozenSet[str] = field(default_factory=frozenset)
    kind: KeyEventKind = KeyEventKind.PRESS

    @property
    def ctrl(self) -> bool:
        return CTRL in self.modifiers

    @property
    def is_char(self) -> bool:
        """True for a single printable character typed without Ctrl."""
        return len(self.code) == 1 and self.code.isprintable() and not self.ctrl


def translate_key(key: Union[int, str]) -> Optional[KeyEvent]:
    """Turn a curses ``get_wch``/``getch`` result into a ``KeyEvent``."""
    if isinstance(key, int):
        if key in _SPECIAL_KEYS:
            return KeyEvent(_SPECIAL_KEYS[key])
        if 0 <= key < 256:
            key = chr(key)
        else:
            return None

    if key in _CONTROL_CHARS:
        return KeyEvent(_CONTROL_CHARS[key])
    if len(key) == 1 and ord(key) < 32:
        return KeyEvent(chr(ord(key) + 96), frozenset({CTRL}))
    return KeyEvent(key)


def read_key_event(stdscr: Any) -> Optional[KeyEvent]:
    try:
        key = stdscr.get_wch()
    except curses.error:
        # Timeout without input.
        return None
    return translate_key(key)
