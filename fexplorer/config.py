import json
import os
import shlex
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .file_manager import DEFAULT_ERROR_CAPACITY, SortDir

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_opener() -> List[str]:
    if sys.platform == "darwin":
        return ["open"]
    return ["xdg-open"]


@dataclass
class UserConfig:
    show_hidden: bool = False
    dir_sorting: SortDir = SortDir.UNSORTED
    error_log_capacity: int = DEFAULT_ERROR_CAPACITY
    opener: List[str] = field(default_factory=default_opener)
    log_level: str = "INFO"
    warnings: List[str] = field(default_factory=list)


def _config_path() -> str:
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if not xdg_config:
        xdg_config = os.path.join(os.path.expanduser("~"), ".config")
    return os.path.join(xdg_config, "fexplorer", "config.json")


def _normalize_command(entry) -> List[str]:
    if isinstance(entry, str):
        return shlex.split(entry) if entry.strip() else []
    if isinstance(entry, list):
        if all(isinstance(token, str) for token in entry):
            return [token for token in entry if token]
    return []


def _normalize_bool(data: Dict[str, Any], key: str, default: bool) -> Tuple[bool, List[str]]:
    if key not in data:
        return default, []
    value = data[key]
    if isinstance(value, bool):
        return value, []
    return default, [f"{key} ignored (expected true or false)"]


def _normalize_dir_sorting(raw_value) -> Tuple[SortDir, List[str]]:
    if raw_value is None:
        return SortDir.UNSORTED, []
    if isinstance(raw_value, str):
        try:
            return SortDir(raw_value.strip().lower()), []
        except ValueError:
            pass
    choices = ", ".join(mode.value for mode in SortDir)
    return SortDir.UNSORTED, [f"dir_sorting '{raw_value}' ignored (use one of: {choices})"]


def _normalize_capacity(raw_value) -> Tuple[int, List[str]]:
    if raw_value is None:
        return DEFAULT_ERROR_CAPACITY, []
    # bool is an int subclass
    if isinstance(raw_value, int) and not isinstance(raw_value, bool) and raw_value > 0:
        return raw_value, []
    return DEFAULT_ERROR_CAPACITY, [
        f"error_log_capacity '{raw_value}' ignored (expected a positive integer)"
    ]


def _normalize_opener(raw_value) -> Tuple[List[str], List[str]]:
    if raw_value is None:
        return default_opener(), []
    command = _normalize_command(raw_value)
    if command:
        return command, []
    return default_opener(), ["opener ignored (expected a command string or list of strings)"]


def _normalize_log_level(raw_value) -> Tuple[str, List[str]]:
    if raw_value is None:
        return "INFO", []
    if isinstance(raw_value, str) and raw_value.strip().upper() in _LOG_LEVELS:
        return raw_value.strip().upper(), []
    return "INFO", [f"log_level '{raw_value}' ignored (use one of: {', '.join(_LOG_LEVELS)})"]


def load_user_config(path: Optional[str] = None) -> UserConfig:
    path = path or _config_path()
    data: Any = {}
    warnings: List[str] = []

    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError:
        pass
    except (OSError, ValueError) as exc:
        warnings.append(f"config {path} ignored ({exc})")
        data = {}

    if not isinstance(data, dict):
        warnings.append(f"config {path} ignored (expected a JSON object)")
        data = {}

    show_hidden, hidden_warnings = _normalize_bool(data, "show_hidden", False)
    dir_sorting, sorting_warnings = _normalize_dir_sorting(data.get("dir_sorting"))
    capacity, capacity_warnings = _normalize_capacity(data.get("error_log_capacity"))
    opener, opener_warnings = _normalize_opener(data.get("opener"))
    log_level, level_warnings = _normalize_log_level(data.get("log_level"))

    warnings += (
        hidden_warnings
        + sorting_warnings
        + capacity_warnings
        + opener_warnings
        + level_warnings
    )
    return UserConfig(
        show_hidden=show_hidden,
        dir_sorting=dir_sorting,
        error_log_capacity=capacity,
        opener=opener,
        log_level=log_level,
        warnings=warnings,
    )
