import curses
import logging
import os
from typing import Any, Callable, Optional

from .config import UserConfig, load_user_config
from .controller import Controller
from .file_manager import FileManager
from .frame import Frame, init_colors
from .keys import read_key_event
from .state import AppEvent

logger = logging.getLogger(__name__)


def build_controller(start_path: str, config: UserConfig) -> Controller:
    file_manager = FileManager(
        start_path,
        show_hidden=config.show_hidden,
        dir_sorting=config.dir_sorting,
        error_capacity=config.error_log_capacity,
        opener=config.opener,
    )
    for warning in config.warnings:
        file_manager.push_error(f"config: {warning}")
    return Controller(file_manager)


class Orchestrator:
    def __init__(
        self,
        start_path: Optional[str] = None,
        controller_factory: Optional[Callable[[str, UserConfig], Any]] = None,
        config: Optional[UserConfig] = None,
    ):
        self.start_path = os.path.realpath(start_path or os.getcwd())
        self.controller_factory = controller_factory or build_controller
        self.controller: Optional[Any] = None
        self.config = config

    def setup(self) -> None:
        if self.config is None:
            self.config = load_user_config()
        if self.controller is None:
            self.controller = self.controller_factory(self.start_path, self.config)
            logger.info("starting in %s", self.start_path)

    def _curses_main(self, stdscr) -> None:
        assert self.controller is not None
        controller = self.controller

        try:
            curses.curs_set(0)
        except curses.error:
            pass
        try:
            curses.noecho()
            curses.raw()
            curses.nonl()
        except curses.error:
            pass
        init_colors()

        try:
            stdscr.keypad(True)
            stdscr.leaveok(True)
            stdscr.idlok(True)
        except Exception:
            pass

        # Block until the next key; nothing happens between key presses.
        stdscr.timeout(-1)
        controller.event_source = lambda: read_key_event(stdscr)
        controller.start()

        while True:
            stdscr.erase()
            controller.draw(Frame(stdscr))
            stdscr.refresh()

            if controller.handle_events() is AppEvent.EXIT:
                break

    def _run_curses(self) -> None:
        os.environ.setdefault("ESCDELAY", "25")
        curses.wrapper(self._curses_main)

    def run(self) -> None:
        self.setup()
        try:
            self._run_curses()
        except KeyboardInterrupt:
            pass
        finally:
            self.shutdown()

    def shutdown(self) -> None:
        logger.info("exiting")
