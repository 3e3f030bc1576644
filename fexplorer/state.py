from enum import Enum, IntEnum
from typing import Optional

from .message import MessageReceiver, MessageSender


class AppWindow(IntEnum):
    EXPLORER = 0
    SORTING_POPUP = 1
    KEY_MAPPING_POPUP = 2
    CONFIRMATION_POPUP = 3
    TEXT_FIELD_POPUP = 4
    NEW_FILE_POPUP = 5


class AppEvent(Enum):
    """Outcome of handling one key press."""

    NONE = "none"
    EXIT = "exit"
    OPEN_EXPLORER = "open_explorer"
    OPEN_SORTING_POPUP = "open_sorting_popup"
    OPEN_KEY_MAPPING_POPUP = "open_key_mapping_popup"
    OPEN_CONFIRMATION_POPUP = "open_confirmation_popup"
    OPEN_TEXT_FIELD_POPUP = "open_text_field_popup"
    OPEN_NEW_FILE_POPUP = "open_new_file_popup"

    @property
    def target(self) -> Optional[AppWindow]:
        return _EVENT_TARGETS.get(self)


_EVENT_TARGETS = {
    AppEvent.OPEN_EXPLORER: AppWindow.EXPLORER,
    AppEvent.OPEN_SORTING_POPUP: AppWindow.SORTING_POPUP,
    AppEvent.OPEN_KEY_MAPPING_POPUP: AppWindow.KEY_MAPPING_POPUP,
    AppEvent.OPEN_CONFIRMATION_POPUP: AppWindow.CONFIRMATION_POPUP,
    AppEvent.OPEN_TEXT_FIELD_POPUP: AppWindow.TEXT_FIELD_POPUP,
    AppEvent.OPEN_NEW_FILE_POPUP: AppWindow.NEW_FILE_POPUP,
}


class State(MessageSender, MessageReceiver):
    """One UI mode. The controller forwards key presses to the active state.

    ``enter`` and ``exit`` run once when the state becomes active or stops
    being active. ``draw`` renders from the file manager and must not change
    it beyond draining its error queue. Overlay states are drawn on top of
    the explorer.
    """

    overlay = False

    def enter(self, file_manager) -> None:
        pass

    def exit(self, file_manager) -> None:
        pass

    def handle_key_event(self, key_event, file_manager) -> AppEvent:
        raise NotImplementedError

    def draw(self, frame, file_manager) -> None:
        raise NotImplementedError
