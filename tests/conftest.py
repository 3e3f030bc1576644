import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))


class FakeStdScr:
    """Records what would have been written to a curses window."""

    def __init__(self, height: int = 24, width: int = 80, keys=()):
        self.height = height
        self.width = width
        self.writes = []
        self.keys = list(keys)
        self.refresh_calls = 0

    def getmaxyx(self):
        return (self.height, self.width)

    def addstr(self, y, x, string, *args):
        self.writes.append((y, x, string))

    def erase(self):
        self.writes = []

    def refresh(self):
        self.refresh_calls += 1

    def keypad(self, flag):
        pass

    def leaveok(self, flag):
        pass

    def idlok(self, flag):
        pass

    def timeout(self, value):
        pass

    def get_wch(self):
        return self.keys.pop(0)

    def text(self) -> str:
        return "\n".join(string for _, _, string in self.writes)


@pytest.fixture
def screen():
    return FakeStdScr()
