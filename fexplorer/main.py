import argparse
import sys
from typing import List, Optional

from .config import load_user_config
from .exceptions import NavigationError
from .logging_utils import setup_logging
from .orchestrator import Orchestrator


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="fexplorer", description="Keyboard-driven terminal file manager.")
    parser.add_argument("path", nargs="?", default=None, help="directory to start in (default: current directory)")
    args = parser.parse_args(argv)

    config = load_user_config()
    setup_logging(config.log_level)

    orchestrator = Orchestrator(args.path, config=config)
    try:
        orchestrator.setup()
    except NavigationError as exc:
        print(f"fexplorer: {exc}", file=sys.stderr)
        return 2

    orchestrator.run()
    return 0

