import os
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from fexplorer import keys
from fexplorer.constants import Constants
from fexplorer.explorer import ExplorerTable, format_size
from fexplorer.file_manager import FileManager, SortDir
from fexplorer.frame import Frame
from fexplorer.keys import KeyEvent
from fexplorer.message import BoolMessage, MessageSource, StringMessage, TwoStringsMessage
from fexplorer.state import AppEvent


def press(explorer, fm, code, ctrl=False):
    modifiers = frozenset({keys.CTRL}) if ctrl else frozenset()
    return explorer.handle_key_event(KeyEvent(code, modifiers), fm)


@pytest.fixture
def workspace(tmp_path):
    (tmp_path / "alpha").mkdir()
    (tmp_path / "alpha" / "inside.txt").write_text("inside")
    (tmp_path / "one.txt").write_text("one")
    (tmp_path / "two.txt").write_text("two")
    (tmp_path / ".secret").write_text("secret")
    return tmp_path


@pytest.fixture
def handler(workspace):
    fm = FileManager(str(workspace), dir_sorting=SortDir.START)
    explorer = ExplorerTable()
    explorer.enter(fm)
    return explorer, fm


def test_cursor_wraps_from_last_to_first(handler):
    explorer, fm = handler
    explorer.cursor = fm.num_files - 1

    assert press(explorer, fm, keys.DOWN) is AppEvent.NONE
    assert explorer.cursor == 0


def test_cursor_wraps_from_first_to_last(handler):
    explorer, fm = handler
    explorer.cursor = 0

    press(explorer, fm, "k")

    assert explorer.cursor == fm.num_files - 1


def test_cursor_moves_with_vim_keys(handler):
    explorer, fm = handler

    press(explorer, fm, "j")
    assert explorer.cursor == 1
    press(explorer, fm, keys.UP)
    assert explorer.cursor == 0


def test_home_and_end_jump(handler):
    explorer, fm = handler

    press(explorer, fm, "G")
    assert explorer.cursor == fm.num_files - 1
    press(explorer, fm, keys.HOME)
    assert explorer.cursor == 0


def test_empty_directory_has_no_cursor(tmp_path):
    fm = FileManager(str(tmp_path))
    explorer = ExplorerTable()
    explorer.enter(fm)

    assert explorer.cursor is None
    press(explorer, fm, "j")
    assert explorer.cursor is None
    assert press(explorer, fm, "y") is AppEvent.NONE
    assert fm.selection == set()


def test_right_enters_directory(handler, workspace):
    explorer, fm = handler
    assert fm.entries[0].name == "alpha"

    press(explorer, fm, "l")

    assert fm.current_dir == os.path.realpath(workspace / "alpha")
    assert explorer.cursor == 0


def test_right_on_file_does_nothing(handler):
    explorer, fm = handler
    before = fm.current_dir
    explorer.cursor = 1

    press(explorer, fm, keys.RIGHT)

    assert fm.current_dir == before
    assert fm.take_errors() == []


def test_left_returns_to_parent_with_cursor_on_previous_directory(handler, workspace):
    explorer, fm = handler
    press(explorer, fm, "l")

    press(explorer, fm, "h")

    assert fm.current_dir == os.path.realpath(workspace)
    assert fm.entries[explorer.cursor].name == "alpha"


def test_enter_opens_files(handler, monkeypatch):
    explorer, fm = handler
    opened = []
    monkeypatch.setattr(fm, "open_path", lambda path: opened.append(path) or True)
    explorer.cursor = 1

    press(explorer, fm, keys.ENTER)

    assert opened == [fm.entries[1].path]


def test_toggle_and_clear_selection(handler):
    explorer, fm = handler
    explorer.cursor = 1
    path = fm.entries[1].path

    press(explorer, fm, "y")
    assert fm.is_selected(path)
    press(explorer, fm, " ")
    assert not fm.is_selected(path)

    press(explorer, fm, "y")
    press(explorer, fm, "c")
    assert fm.selection == set()


def test_delete_requires_confirmation(handler):
    explorer, fm = handler
    explorer.cursor = 1
    target = fm.entries[1].path
    press(explorer, fm, "y")

    event = press(explorer, fm, "x")

    assert event is AppEvent.OPEN_CONFIRMATION_POPUP
    assert explorer.message_source is MessageSource.DELETION_CONFIRMATION_PROMPT
    assert explorer.get_message() == StringMessage(Constants.DELETE_PROMPT)
    assert os.path.exists(target)

    explorer.handle_message(BoolMessage(True), fm)

    assert not os.path.exists(target)
    assert explorer.message_source is MessageSource.NONE


@pytest.mark.parametrize("reply", [BoolMessage(False), None, StringMessage("yes")])
def test_delete_cancelled_by_any_other_reply(handler, reply):
    explorer, fm = handler
    explorer.cursor = 1
    target = fm.entries[1].path
    press(explorer, fm, "y")
    press(explorer, fm, "x")

    explorer.handle_message(reply, fm)

    assert os.path.exists(target)
    assert fm.is_selected(target)
    assert explorer.message_source is MessageSource.NONE


def test_delete_without_selection_does_not_prompt(handler):
    explorer, fm = handler

    assert press(explorer, fm, "x") is AppEvent.NONE
    assert explorer.get_message() is None


def test_reply_without_pending_request_is_ignored(handler):
    explorer, fm = handler
    explorer.cursor = 1
    target = fm.entries[1].path
    fm.add_to_selection(target)

    explorer.handle_message(BoolMessage(True), fm)

    assert os.path.exists(target)


def test_tab_prompts_for_path_prefilled_with_current_directory(handler):
    explorer, fm = handler

    event = press(explorer, fm, keys.TAB)

    assert event is AppEvent.OPEN_TEXT_FIELD_POPUP
    assert explorer.message_source is MessageSource.PATH_CHANGE_POPUP
    assert explorer.get_message() == TwoStringsMessage(Constants.CHANGE_PATH_LABEL, fm.current_dir)
    assert explorer.get_message() is None


def test_path_change_reply_changes_directory(handler, workspace):
    explorer, fm = handler
    press(explorer, fm, keys.TAB)
    explorer.cursor = 2

    explorer.handle_message(StringMessage(str(workspace / "alpha")), fm)

    assert fm.current_dir == os.path.realpath(workspace / "alpha")
    assert explorer.cursor == 0
    assert explorer.message_source is MessageSource.NONE


def test_path_change_to_invalid_path_reports_error(handler):
    explorer, fm = handler
    before = fm.current_dir
    press(explorer, fm, keys.TAB)

    explorer.handle_message(StringMessage("/definitely/not/here"), fm)

    assert fm.current_dir == before
    assert len(fm.take_errors()) == 1
    assert explorer.message_source is MessageSource.NONE


def test_path_change_cancelled_resets_tag(handler):
    explorer, fm = handler
    before = fm.current_dir
    press(explorer, fm, keys.TAB)

    explorer.handle_message(None, fm)

    assert fm.current_dir == before
    assert explorer.message_source is MessageSource.NONE


def test_new_file_reply_creates_file_and_moves_cursor(handler, workspace):
    explorer, fm = handler

    assert press(explorer, fm, "n") is AppEvent.OPEN_NEW_FILE_POPUP
    assert explorer.get_message() == TwoStringsMessage(Constants.NEW_FILE_LABEL, "")

    explorer.handle_message(StringMessage("fresh.txt"), fm)

    assert (workspace / "fresh.txt").is_file()
    assert fm.entries[explorer.cursor].name == "fresh.txt"
    assert explorer.message_source is MessageSource.NONE


def test_paste_copies_selection_and_clears_it(handler, workspace):
    explorer, fm = handler
    explorer.cursor = 1
    source = fm.entries[1]
    press(explorer, fm, "y")
    explorer.cursor = 0
    press(explorer, fm, "l")

    press(explorer, fm, "v")

    assert (workspace / "alpha" / source.name).read_text() == Path(source.path).read_text()
    assert os.path.exists(source.path)
    assert fm.selection == set()


def test_cycle_sorting_keeps_cursor_on_entry(handler):
    explorer, fm = handler
    explorer.cursor = 0
    assert fm.entries[0].name == "alpha"

    press(explorer, fm, "d")

    assert fm.dir_sorting is SortDir.END
    assert fm.entries[explorer.cursor].name == "alpha"
    assert explorer.cursor == fm.num_files - 1


def test_toggle_hidden(handler):
    explorer, fm = handler

    press(explorer, fm, "g")
    assert ".secret" in [entry.name for entry in fm.entries]

    press(explorer, fm, ".")
    assert ".secret" not in [entry.name for entry in fm.entries]


def test_quit_keys(handler):
    explorer, fm = handler

    assert press(explorer, fm, "q") is AppEvent.EXIT
    assert press(explorer, fm, "c", ctrl=True) is AppEvent.EXIT


def test_popup_keys(handler):
    explorer, fm = handler

    assert press(explorer, fm, "s") is AppEvent.OPEN_SORTING_POPUP
    assert press(explorer, fm, "m") is AppEvent.OPEN_KEY_MAPPING_POPUP


def test_draw_drains_errors_into_panel(handler, screen):
    explorer, fm = handler
    fm.change_dir("missing")

    explorer.draw(Frame(screen), fm)

    assert fm.take_errors() == []
    assert len(explorer.error_ring_buffer) == 1
    rendered = screen.text()
    assert Constants.ERROR_LOG_TITLE in rendered
    assert "No such directory" in rendered


def test_draw_lists_entries(handler, screen):
    explorer, fm = handler

    explorer.draw(Frame(screen), fm)

    rendered = screen.text()
    assert "alpha/" in rendered
    assert "one.txt" in rendered
    assert ".secret" not in rendered
    assert Constants.HELP_HINT in rendered


def test_display_buffer_keeps_most_recent_errors(handler, screen):
    explorer, fm = handler

    for number in range(25):
        fm.push_error(f"failure {number}")
        explorer.draw(Frame(screen), fm)

    assert len(explorer.error_ring_buffer) == Constants.DISPLAY_ERROR_CAPACITY
    assert list(explorer.error_ring_buffer)[0] == "failure 5"


def test_format_size():
    assert format_size(0) == "0B"
    assert format_size(1023) == "1023B"
    assert format_size(2048) == "2.0K"
