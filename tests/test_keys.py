import curses
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from fexplorer import keys
from fexplorer.keys import KeyEvent, KeyEventKind, read_key_event, translate_key


@pytest.mark.parametrize(
    "raw, expected",
    [
        (curses.KEY_UP, keys.UP),
        (curses.KEY_DOWN, keys.DOWN),
        (curses.KEY_LEFT, keys.LEFT),
        (curses.KEY_RIGHT, keys.RIGHT),
        (curses.KEY_BACKSPACE, keys.BACKSPACE),
        (curses.KEY_DC, keys.DELETE),
        ("\n", keys.ENTER),
        ("\r", keys.ENTER),
        ("\t", keys.TAB),
        ("\x1b", keys.ESC),
        ("\x7f", keys.BACKSPACE),
        (10, keys.ENTER),
        ("q", "q"),
        ("é", "é"),
    ],
)
def test_translate_key(raw, expected):
    event = translate_key(raw)

    assert event.code == expected
    assert event.kind is KeyEventKind.PRESS
    assert not event.ctrl


def test_control_characters_carry_ctrl_modifier():
    event = translate_key("\x03")

    assert event == KeyEvent("c", frozenset({keys.CTRL}))
    assert event.ctrl
    assert not event.is_char


def test_unknown_function_key_is_dropped():
    assert translate_key(curses.KEY_F1) is None
    assert translate_key(curses.KEY_NPAGE) is None


def test_is_char():
    assert KeyEvent("a").is_char
    assert not KeyEvent(keys.ENTER).is_char


def test_read_key_event_returns_none_on_timeout():
    class TimeoutScreen:
        def get_wch(self):
            raise curses.error("no input")

    assert read_key_event(TimeoutScreen()) is None


def test_read_key_event_translates(screen):
    screen.keys = ["j"]

    assert read_key_event(screen) == KeyEvent("j")
