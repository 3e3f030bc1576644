import curses
from typing import Any, Optional

PAIR_DIRECTORY = 1
PAIR_SELECTED = 2
PAIR_ERROR = 3
PAIR_BORDER = 4
PAIR_HEADER = 5


def color(pair: int) -> int:
    try:
        return curses.color_pair(pair)
    except curses.error:
        # Colours not initialised (no terminal, or colour-less terminal).
        return curses.A_NORMAL


def init_colors() -> None:
    try:
        curses.start_color()
        curses.use_default_colors()
        curses.init_pair(PAIR_DIRECTORY, curses.COLOR_BLUE, -1)
        curses.init_pair(PAIR_SELECTED, curses.COLOR_BLACK, curses.COLOR_CYAN)
        curses.init_pair(PAIR_ERROR, curses.COLOR_RED, -1)
        curses.init_pair(PAIR_BORDER, curses.COLOR_CYAN, -1)
        curses.init_pair(PAIR_HEADER, curses.COLOR_YELLOW, -1)
    except curses.error:
        pass


class Frame:
    """A rectangular region of a curses window.

    Coordinates passed to the drawing methods are relative to the region and
    everything is clipped to it, so states can draw without knowing where
    on the screen they ended up.
    """

    def __init__(
        self,
        window: Any,
        y: int = 0,
        x: int = 0,
        height: Optional[int] = None,
        width: Optional[int] = None,
    ):
        self.window = window
        if height is None or width is None:
            max_y, max_x = window.getmaxyx()
            height = max_y - y if height is None else height
            width = max_x - x if width is None else width
        self.y = y
        self.x = x
        self.height = max(0, height)
        self.width = max(0, width)

    def sub(self, row: int, col: int, height: int, width: int) -> "Frame":
        row = max(0, min(row, self.height))
        col = max(0, min(col, self.width))
        height = max(0, min(height, self.height - row))
        width = max(0, min(width, self.width - col))
        return Frame(self.window, self.y + row, self.x + col, height, width)

    def centered(self, height: int, width: int) -> "Frame":
        height = min(height, self.height)
        width = min(width, self.width)
        return self.sub((self.height - height) // 2, (self.width - width) // 2, height, width)

    def addstr(self, row: int, col: int, text: str, attr: int = 0) -> None:
        if row < 0 or row >= self.height or col < 0 or col >= self.width:
            return
        clipped = text[: self.width - col]
        if not clipped:
            return
        try:
            self.window.addstr(self.y + row, self.x + col, clipped, attr)
        except curses.error:
            # Writing the bottom-right cell moves the cursor off-screen.
            pass

    def fill(self, attr: int = 0) -> None:
        for row in range(self.height):
            self.addstr(row, 0, " " * self.width, attr)

    def box(self, title: str = "", footer: str = "", attr: int = 0) -> "Frame":
        """Draw a border around the region and return the inner region."""
        if self.height < 2 or self.width < 2:
            return self.sub(0, 0, 0, 0)

        inner = self.width - 2
        top = "┏" + "━" * inner + "┓"
        bottom = "┗" + "━" * inner + "┛"
        self.addstr(0, 0, top, attr)
        for row in range(1, self.height - 1):
            self.addstr(row, 0, "┃", attr)
            self.addstr(row, self.width - 1, "┃", attr)
        self.addstr(self.height - 1, 0, bottom, attr)

        if title:
            self.addstr(0, 1, title[:inner], attr | curses.A_BOLD)
        if footer:
            footer = footer[:inner]
            self.addstr(self.height - 1, self.width - 1 - len(footer), footer, attr | curses.A_BOLD)
        return self.sub(1, 1, self.height - 2, self.width - 2)
