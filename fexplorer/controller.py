import logging
from typing import Callable, List, Optional

from .explorer import ExplorerTable
from .file_manager import FileManager
from .keys import KeyEvent, KeyEventKind
from .popups import (
    ConfirmationPopup,
    KeyMappingPopup,
    NewFilePopup,
    SortingPopup,
    TextFieldPopup,
)
from .state import AppEvent, AppWindow, State

logger = logging.getLogger(__name__)


def default_states() -> List[State]:
    states = {
        AppWindow.EXPLORER: ExplorerTable(),
        AppWindow.SORTING_POPUP: SortingPopup(),
        AppWindow.KEY_MAPPING_POPUP: KeyMappingPopup(),
        AppWindow.CONFIRMATION_POPUP: ConfirmationPopup(),
        AppWindow.TEXT_FIELD_POPUP: TextFieldPopup(),
        AppWindow.NEW_FILE_POPUP: NewFilePopup(),
    }
    return [states[window] for window in AppWindow]


class Controller:
    def __init__(
        self,
        file_manager: FileManager,
        event_source: Optional[Callable[[], Optional[KeyEvent]]] = None,
        states: Optional[List[State]] = None,
    ):
        self.file_manager = file_manager
        self.event_source = event_source
        self.all_states = states if states is not None else default_states()
        self.current_state_index = AppWindow.EXPLORER

    @property
    def active_window(self) -> AppWindow:
        return self.current_state_index

    @property
    def active_state(self) -> State:
        return self.all_states[self.current_state_index]

    def start(self) -> None:
        self.active_state.enter(self.file_manager)

    def change_state(self, new_window: AppWindow) -> None:
        """Leave the active state and enter ``new_window``.

        Exit always runs before enter, also when ``new_window`` is already
        active. The leaving state's outbound message is handed to the
        entered state after its ``enter``.
        """
        old_state = self.active_state
        old_state.exit(self.file_manager)
        message = old_state.get_message()

        logger.debug("state %s -> %s", self.current_state_index.name, new_window.name)
        self.current_state_index = new_window

        new_state = self.active_state
        new_state.enter(self.file_manager)
        new_state.handle_message(message, self.file_manager)

    def dispatch(self, key_event: KeyEvent) -> AppEvent:
        # Only presses count; release and repeat events are dropped.
        if key_event.kind is not KeyEventKind.PRESS:
            return AppEvent.NONE

        app_event = self.active_state.handle_key_event(key_event, self.file_manager)
        if app_event in (AppEvent.NONE, AppEvent.EXIT):
            return app_event

        target = app_event.target
        if target is not None:
            self.change_state(target)
        return AppEvent.NONE

    def handle_events(self) -> AppEvent:
        if self.event_source is None:
            return AppEvent.NONE
        key_event = self.event_source()
        if key_event is None:
            return AppEvent.NONE
        return self.dispatch(key_event)

    def draw(self, frame) -> None:
        state = self.active_state
        if state.overlay:
            self.all_states[AppWindow.EXPLORER].draw(frame, self.file_manager)
        state.draw(frame, self.file_manager)
