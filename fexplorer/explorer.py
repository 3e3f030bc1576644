import curses
import textwrap
from typing import List, Optional

from . import keys
from .constants import Constants
from .exceptions import EntryIndexError
from .file_manager import DirEntry, FileManager, pretty_path
from .frame import PAIR_BORDER, PAIR_DIRECTORY, PAIR_ERROR, PAIR_HEADER, PAIR_SELECTED, Frame, color
from .message import BoolMessage, Message, MessageSource, StringMessage, TwoStringsMessage
from .state import AppEvent, State
from .string_ring_buffer import StringRingBuffer

SIZE_COLUMN_WIDTH = 10


def format_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "K", "M", "G", "T"):
        if value < 1024 or unit == "T":
            if unit == "B":
                return f"{int(value)}{unit}"
            return f"{value:.1f}{unit}"
        value /= 1024
    return f"{size}B"


class ExplorerTable(State):
    """Directory listing with a cursor, the primary state.

    Popup replies are routed through ``message_source``: the explorer sets
    it when it asks for a popup and ``handle_message`` acts on the reply
    according to it, then resets it.
    """

    def __init__(self, error_capacity: int = Constants.DISPLAY_ERROR_CAPACITY):
        self.cursor: Optional[int] = 0
        self.list_offset = 0
        self.message_source = MessageSource.NONE
        self.last_path: Optional[str] = None
        self.error_ring_buffer = StringRingBuffer(error_capacity)

    # === Cursor helpers ===
    def _clamp_cursor(self, file_manager: FileManager) -> None:
        total = file_manager.num_files
        if total == 0:
            self.cursor = None
        elif self.cursor is None:
            self.cursor = 0
        else:
            self.cursor = max(0, min(self.cursor, total - 1))

    def _move_cursor(self, file_manager: FileManager, delta: int) -> None:
        total = file_manager.num_files
        if total == 0:
            self.cursor = None
            return
        if self.cursor is None:
            self.cursor = 0 if delta > 0 else total - 1
            return
        self.cursor = (self.cursor + delta) % total

    def _follow(self, file_manager: FileManager, path: Optional[str]) -> None:
        """Put the cursor on ``path`` if it is listed, else keep it in range."""
        index = file_manager.index_of(path) if path else None
        if index is not None:
            self.cursor = index
        else:
            self._clamp_cursor(file_manager)

    def selected_entry(self, file_manager: FileManager) -> Optional[DirEntry]:
        if self.cursor is None:
            return None
        try:
            return file_manager.get_entry_at_index(self.cursor)
        except EntryIndexError:
            return None

    def selected_file_in_table(self, file_manager: FileManager) -> Optional[str]:
        entry = self.selected_entry(file_manager)
        return entry.path if entry else None

    # === Navigation ===
    def _enter_directory(self, file_manager: FileManager, entry: DirEntry) -> None:
        if file_manager.change_dir(entry.path):
            self.cursor = 0
            self.list_offset = 0
        self._clamp_cursor(file_manager)

    def _go_to_parent(self, file_manager: FileManager) -> None:
        previous = file_manager.current_dir
        if file_manager.change_dir(".."):
            self.list_offset = 0
            self.cursor = 0
            self._follow(file_manager, previous)
        self._clamp_cursor(file_manager)

    # === State contract ===
    def enter(self, file_manager: FileManager) -> None:
        file_manager.update()
        self._follow(file_manager, self.last_path)

    def exit(self, file_manager: FileManager) -> None:
        # Popups may re-sort the listing; the cursor follows its entry back.
        self.last_path = self.selected_file_in_table(file_manager)

    def handle_message(self, message: Optional[Message], file_manager: FileManager) -> None:
        source = self.message_source
        self.message_source = MessageSource.NONE

        if source is MessageSource.DELETION_CONFIRMATION_PROMPT:
            if isinstance(message, BoolMessage) and message.value is True:
                file_manager.delete_selection()
                self._clamp_cursor(file_manager)
        elif source is MessageSource.PATH_CHANGE_POPUP:
            if isinstance(message, StringMessage):
                if file_manager.change_dir(message.value):
                    self.cursor = 0
                    self.list_offset = 0
                self._clamp_cursor(file_manager)
        elif source is MessageSource.NEW_FILE_POPUP:
            if isinstance(message, StringMessage) and message.value.strip():
                created = file_manager.create_entry(message.value)
                self._follow(file_manager, created)

    def handle_key_event(self, key_event: keys.KeyEvent, file_manager: FileManager) -> AppEvent:
        code = key_event.code

        if key_event.ctrl:
            if code == "c":
                return AppEvent.EXIT
            return AppEvent.NONE

        if code == "q":
            return AppEvent.EXIT
        if code == "s":
            return AppEvent.OPEN_SORTING_POPUP
        if code == "m":
            return AppEvent.OPEN_KEY_MAPPING_POPUP

        if code == "n":
            self.message_source = MessageSource.NEW_FILE_POPUP
            self.send_message(TwoStringsMessage(Constants.NEW_FILE_LABEL, ""))
            return AppEvent.OPEN_NEW_FILE_POPUP

        if code == keys.TAB:
            self.message_source = MessageSource.PATH_CHANGE_POPUP
            self.send_message(TwoStringsMessage(Constants.CHANGE_PATH_LABEL, file_manager.current_dir))
            return AppEvent.OPEN_TEXT_FIELD_POPUP

        if code == "x":
            if not file_manager.selection:
                return AppEvent.NONE
            self.message_source = MessageSource.DELETION_CONFIRMATION_PROMPT
            self.send_message(StringMessage(Constants.DELETE_PROMPT))
            return AppEvent.OPEN_CONFIRMATION_POPUP

        if code == "d":
            current = self.selected_file_in_table(file_manager)
            file_manager.cycle_dir_sorting()
            self._follow(file_manager, current)
        elif code in (keys.DOWN, "j"):
            self._move_cursor(file_manager, 1)
        elif code in (keys.UP, "k"):
            self._move_cursor(file_manager, -1)
        elif code == keys.HOME:
            self.cursor = 0
            self._clamp_cursor(file_manager)
        elif code in (keys.END, "G"):
            self.cursor = file_manager.num_files - 1
            self._clamp_cursor(file_manager)
        elif code in (keys.RIGHT, "l"):
            entry = self.selected_entry(file_manager)
            if entry is not None and entry.is_dir:
                self._enter_directory(file_manager, entry)
        elif code in (keys.LEFT, "h"):
            self._go_to_parent(file_manager)
        elif code == keys.ENTER:
            entry = self.selected_entry(file_manager)
            if entry is not None:
                if entry.is_dir:
                    self._enter_directory(file_manager, entry)
                else:
                    file_manager.open_path(entry.path)
        elif code in ("y", " "):
            path = self.selected_file_in_table(file_manager)
            if path is not None:
                file_manager.toggle_selection(path)
        elif code == "c":
            file_manager.clear_selection()
        elif code == "v":
            file_manager.paste()
            file_manager.clear_selection()
            self._clamp_cursor(file_manager)
        elif code in ("g", "."):
            current = self.selected_file_in_table(file_manager)
            file_manager.toggle_hidden()
            self._follow(file_manager, current)

        return AppEvent.NONE

    # === Rendering ===
    def _status_text(self, file_manager: FileManager) -> str:
        parts = [f"sort: {file_manager.dir_sorting.label}"]
        if file_manager.show_hidden:
            parts.append("hidden: shown")
        if file_manager.selection:
            parts.append(f"selected: {len(file_manager.selection)}")
        parts.append(Constants.HELP_HINT)
        return " " + "  ".join(parts) + " "

    def _scroll_to_cursor(self, visible_rows: int) -> None:
        if self.cursor is None or visible_rows <= 0:
            self.list_offset = 0
            return
        if self.cursor < self.list_offset:
            self.list_offset = self.cursor
        elif self.cursor >= self.list_offset + visible_rows:
            self.list_offset = self.cursor - visible_rows + 1

    def _draw_table(self, area: Frame, file_manager: FileManager) -> None:
        name_width = max(1, area.width - SIZE_COLUMN_WIDTH - 1)
        header = "FILENAME".ljust(name_width) + " " + "SIZE".rjust(SIZE_COLUMN_WIDTH)
        area.addstr(0, 0, header, curses.A_BOLD | curses.A_DIM)

        visible_rows = area.height - 1
        self._scroll_to_cursor(visible_rows)
        entries = file_manager.get_entries()
        for row, index in enumerate(range(self.list_offset, min(len(entries), self.list_offset + visible_rows))):
            entry = entries[index]
            name = entry.name + ("/" if entry.is_dir else "")
            size = "" if entry.is_dir else format_size(entry.size)
            line = name[:name_width].ljust(name_width) + " " + size.rjust(SIZE_COLUMN_WIDTH)

            if file_manager.is_selected(entry.path):
                attr = color(PAIR_SELECTED)
            elif entry.is_dir:
                attr = color(PAIR_DIRECTORY) | curses.A_BOLD
            else:
                attr = curses.A_NORMAL
            if not entry.readable:
                attr |= curses.A_DIM
            if index == self.cursor:
                attr |= curses.A_REVERSE
            area.addstr(row + 1, 0, line, attr)

    def _draw_errors(self, area: Frame) -> None:
        width = max(1, area.width)
        lines: List[str] = []
        for error in self.error_ring_buffer:
            lines.extend(textwrap.wrap(error, width) or [""])
        # Newest errors stay visible when the panel overflows.
        for row, line in enumerate(lines[-area.height:] if area.height else []):
            area.addstr(row, 0, line, color(PAIR_ERROR))

    def draw(self, frame: Frame, file_manager: FileManager) -> None:
        for error in file_manager.take_errors():
            self.error_ring_buffer.push(error)
        self._clamp_cursor(file_manager)

        border = color(PAIR_BORDER)
        path_area = frame.sub(0, 0, 3, frame.width)
        main_area = frame.sub(3, 0, frame.height - 3, frame.width)
        table_width = main_area.width * 70 // 100
        table_area = main_area.sub(0, 0, main_area.height, table_width)
        error_area = main_area.sub(0, table_width, main_area.height, main_area.width - table_width)

        inner_path = path_area.box(Constants.PATH_TITLE, attr=border)
        inner_path.addstr(0, 0, pretty_path(file_manager.current_dir), color(PAIR_HEADER) | curses.A_BOLD)

        inner_table = table_area.box(Constants.TITLE, footer=self._status_text(file_manager), attr=border)
        self._draw_table(inner_table, file_manager)

        inner_errors = error_area.box(Constants.ERROR_LOG_TITLE, attr=border)
        self._draw_errors(inner_errors)
