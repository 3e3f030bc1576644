import curses
import textwrap
from typing import List, Optional

from . import keys
from .constants import Constants
from .file_manager import FileManager, SortDir
from .frame import PAIR_BORDER, PAIR_HEADER, Frame, color
from .message import BoolMessage, Message, StringMessage, TwoStringsMessage
from .state import AppEvent, State


class Popup(State):
    """Overlay state that returns to the explorer when it closes.

    A popup produces at most one reply per close; ``close`` queues it for
    the controller, which hands it to the explorer.
    """

    overlay = True
    title = ""

    def enter(self, file_manager: FileManager) -> None:
        self.send_message(None)

    def close(self, reply: Optional[Message] = None) -> AppEvent:
        self.send_message(reply)
        return AppEvent.OPEN_EXPLORER

    def handle_key_event(self, key_event: keys.KeyEvent, file_manager: FileManager) -> AppEvent:
        if key_event.ctrl and key_event.code == "c":
            return AppEvent.EXIT
        return self.handle_popup_key(key_event, file_manager)

    def handle_popup_key(self, key_event: keys.KeyEvent, file_manager: FileManager) -> AppEvent:
        raise NotImplementedError

    def _panel(self, frame: Frame, height: int, width: int, title: str = "", footer: str = "") -> Frame:
        area = frame.centered(height, width)
        area.fill()
        return area.box(title or self.title, footer=footer, attr=color(PAIR_BORDER))


class ConfirmationPopup(Popup):
    title = "CONFIRM"

    def __init__(self):
        self.prompt = ""

    def enter(self, file_manager: FileManager) -> None:
        super().enter(file_manager)
        self.prompt = ""

    def handle_message(self, message: Optional[Message], file_manager: FileManager) -> None:
        if isinstance(message, StringMessage):
            self.prompt = message.value

    def handle_popup_key(self, key_event: keys.KeyEvent, file_manager: FileManager) -> AppEvent:
        code = key_event.code
        if code in ("y", "Y", keys.ENTER):
            return self.close(BoolMessage(True))
        if code in ("n", "N", "q", keys.ESC):
            return self.close(BoolMessage(False))
        return AppEvent.NONE

    def draw(self, frame: Frame, file_manager: FileManager) -> None:
        width = min(max(30, frame.width // 2), frame.width)
        lines = textwrap.wrap(self.prompt, max(1, width - 4)) or [""]
        inner = self._panel(frame, len(lines) + 4, width, footer=" [y]es  [n]o ")
        for row, line in enumerate(lines):
            inner.addstr(row, 1, line, curses.A_BOLD)
        count = len(file_manager.selection)
        noun = "item" if count == 1 else "items"
        inner.addstr(len(lines) + 1, 1, f"{count} {noun} selected")


class TextFieldPopup(Popup):
    """Single-line text input pre-filled from a ``TwoStringsMessage``."""

    title = "INPUT"

    def __init__(self):
        self.label = ""
        self.buffer = ""
        self.position = 0

    def enter(self, file_manager: FileManager) -> None:
        super().enter(file_manager)
        self.label = ""
        self.buffer = ""
        self.position = 0

    def handle_message(self, message: Optional[Message], file_manager: FileManager) -> None:
        if isinstance(message, TwoStringsMessage):
            self.label = message.label
            self.buffer = message.value
            self.position = len(self.buffer)
        elif isinstance(message, StringMessage):
            self.label = message.value

    def submit(self) -> AppEvent:
        return self.close(StringMessage(self.buffer))

    def handle_popup_key(self, key_event: keys.KeyEvent, file_manager: FileManager) -> AppEvent:
        code = key_event.code

        if code == keys.ENTER:
            return self.submit()
        if code == keys.ESC:
            return self.close(None)

        if key_event.ctrl:
            if code == "u":
                self.buffer = self.buffer[self.position:]
                self.position = 0
            return AppEvent.NONE

        if code == keys.BACKSPACE:
            if self.position > 0:
                self.buffer = self.buffer[: self.position - 1] + self.buffer[self.position:]
                self.position -= 1
        elif code == keys.DELETE:
            self.buffer = self.buffer[: self.position] + self.buffer[self.position + 1:]
        elif code == keys.LEFT:
            self.position = max(0, self.position - 1)
        elif code == keys.RIGHT:
            self.position = min(len(self.buffer), self.position + 1)
        elif code == keys.HOME:
            self.position = 0
        elif code == keys.END:
            self.position = len(self.buffer)
        elif key_event.is_char:
            self.buffer = self.buffer[: self.position] + code + self.buffer[self.position:]
            self.position += 1
        return AppEvent.NONE

    def hint(self) -> str:
        return ""

    def draw(self, frame: Frame, file_manager: FileManager) -> None:
        width = min(max(50, len(self.buffer) + 4, frame.width * 2 // 3), frame.width)
        hint = self.hint()
        height = 5 if hint else 3
        inner = self._panel(frame, height, width, title=self.label or self.title, footer=" Enter ok  Esc cancel ")

        field_width = max(1, inner.width - 2)
        start = max(0, self.position - field_width + 1)
        visible = self.buffer[start:start + field_width]
        inner.addstr(0, 1, visible)
        cursor_col = self.position - start
        cursor_char = self.buffer[self.position] if self.position < len(self.buffer) else " "
        inner.addstr(0, 1 + cursor_col, cursor_char, curses.A_REVERSE)
        if hint:
            inner.addstr(2, 1, hint, curses.A_DIM)


class NewFilePopup(TextFieldPopup):
    title = Constants.NEW_FILE_LABEL

    def submit(self) -> AppEvent:
        if not self.buffer.strip():
            return self.close(None)
        return super().submit()

    def hint(self) -> str:
        return Constants.NEW_FILE_HINT


class SortingPopup(Popup):
    title = "SORTING"
    SHORTCUTS = {"u": SortDir.UNSORTED, "s": SortDir.START, "e": SortDir.END}

    def __init__(self):
        self.options: List[SortDir] = list(SortDir)
        self.index = 0

    def enter(self, file_manager: FileManager) -> None:
        super().enter(file_manager)
        self.index = self.options.index(file_manager.dir_sorting)

    def handle_popup_key(self, key_event: keys.KeyEvent, file_manager: FileManager) -> AppEvent:
        code = key_event.code
        if code in (keys.DOWN, "j"):
            self.index = (self.index + 1) % len(self.options)
        elif code in (keys.UP, "k"):
            self.index = (self.index - 1) % len(self.options)
        elif code == keys.ENTER:
            file_manager.set_dir_sorting(self.options[self.index])
            return self.close()
        elif code in self.SHORTCUTS:
            file_manager.set_dir_sorting(self.SHORTCUTS[code])
            return self.close()
        elif code in (keys.ESC, "q"):
            return self.close()
        return AppEvent.NONE

    def draw(self, frame: Frame, file_manager: FileManager) -> None:
        inner = self._panel(frame, len(self.options) + 2, 36, footer=" Enter apply  Esc close ")
        shortcut_for = {mode: key for key, mode in self.SHORTCUTS.items()}
        for row, mode in enumerate(self.options):
            marker = "●" if mode is file_manager.dir_sorting else " "
            line = f"{marker} [{shortcut_for[mode]}] {mode.label}"
            attr = curses.A_REVERSE if row == self.index else curses.A_NORMAL
            inner.addstr(row, 1, line.ljust(inner.width - 2), attr)


class KeyMappingPopup(Popup):
    title = "KEY MAPPINGS"
    KEY_COLUMN_WIDTH = 14

    def __init__(self):
        self.scroll = 0
        self.visible_rows = 0

    def enter(self, file_manager: FileManager) -> None:
        super().enter(file_manager)
        self.scroll = 0

    def _max_scroll(self) -> int:
        return max(0, len(Constants.KEY_MAPPINGS) - self.visible_rows)

    def handle_popup_key(self, key_event: keys.KeyEvent, file_manager: FileManager) -> AppEvent:
        code = key_event.code
        if code in (keys.ESC, "q", "m"):
            return self.close()
        if code in (keys.DOWN, "j"):
            self.scroll = min(self.scroll + 1, self._max_scroll())
        elif code in (keys.UP, "k"):
            self.scroll = max(0, self.scroll - 1)
        return AppEvent.NONE

    def draw(self, frame: Frame, file_manager: FileManager) -> None:
        rows = len(Constants.KEY_MAPPINGS)
        inner = self._panel(frame, min(rows + 2, frame.height), 56, footer=" Esc close ")
        self.visible_rows = inner.height
        self.scroll = min(self.scroll, self._max_scroll())

        visible = Constants.KEY_MAPPINGS[self.scroll:self.scroll + inner.height]
        for row, (key_names, description) in enumerate(visible):
            if not key_names:
                inner.addstr(row, 1, description, color(PAIR_HEADER) | curses.A_BOLD)
                continue
            inner.addstr(row, 2, key_names.ljust(self.KEY_COLUMN_WIDTH) + description)
