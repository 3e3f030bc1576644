import logging
import os
import shutil
import subprocess
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Iterable, List, Optional, Set, Union

from .exceptions import (
    CreationError,
    DeletionError,
    EntryIndexError,
    FileManagerError,
    ListingError,
    NavigationError,
    OpenError,
    PasteError,
)

logger = logging.getLogger(__name__)

HIDDEN_MARKER = "."
DEFAULT_ERROR_CAPACITY = 20


class SortDir(Enum):
    """Where directories go relative to files in the listing."""

    UNSORTED = "unsorted"
    START = "start"
    END = "end"

    @property
    def label(self) -> str:
        return _SORT_LABELS[self]

    def next(self) -> "SortDir":
        order = list(SortDir)
        return order[(order.index(self) + 1) % len(order)]


_SORT_LABELS = {
    SortDir.UNSORTED: "Unsorted",
    SortDir.START: "Directories first",
    SortDir.END: "Directories last",
}


@dataclass(frozen=True)
class DirEntry:
    name: str
    path: str
    size: int
    is_dir: bool
    readable: bool


def pretty_path(path: str) -> str:
    home = os.path.realpath(os.path.expanduser("~"))
    if path == home:
        return "~"
    if path.startswith(home + os.sep):
        return "~" + path[len(home):]
    return path


class FileManager:
    """Directory state, selection set and error queue shared by every UI state.

    ``entries`` is rebuilt from scratch by ``update()`` whenever the
    directory, the sort mode or the hidden-file flag changes. ``selection``
    holds absolute paths and is never touched by a rebuild, so marks survive
    navigation. Filesystem failures never raise out of the public
    operations; they are queued as strings and drained by ``take_errors()``.
    """

    def __init__(
        self,
        start_path: Optional[str] = None,
        *,
        show_hidden: bool = False,
        dir_sorting: SortDir = SortDir.UNSORTED,
        error_capacity: int = DEFAULT_ERROR_CAPACITY,
        opener: Optional[List[str]] = None,
    ):
        start_real = os.path.realpath(start_path or os.getcwd())
        if not os.path.isdir(start_real):
            raise NavigationError("Not a directory", path=start_real)

        self.current_dir = start_real
        self.entries: List[DirEntry] = []
        self.dir_sorting = dir_sorting
        self.show_hidden = show_hidden
        self.selection: Set[str] = set()
        self.error_log: Deque[str] = deque(maxlen=error_capacity)
        self.opener = list(opener) if opener else ["xdg-open"]

        self.update()

    @property
    def num_files(self) -> int:
        return len(self.entries)

    # === Errors ===
    def push_error(self, error: Union[str, FileManagerError]) -> None:
        text = str(error)
        logger.warning(text)
        self.error_log.append(text)

    def take_errors(self) -> List[str]:
        errors = list(self.error_log)
        self.error_log.clear()
        return errors

    # === Listing ===
    def _scan(self) -> List[DirEntry]:
        scanned = []
        with os.scandir(self.current_dir) as it:
            for item in it:
                if item.name.startswith(HIDDEN_MARKER) and not self.show_hidden:
                    continue
                entry = self._make_entry(item)
                if entry is not None:
                    scanned.append(entry)
        return scanned

    def _make_entry(self, item: os.DirEntry) -> Optional[DirEntry]:
        try:
            is_dir = item.is_dir()
            try:
                stat = item.stat()
            except FileNotFoundError:
                # Dangling symlink; describe the link itself.
                stat = item.stat(follow_symlinks=False)
        except OSError as exc:
            self.push_error(ListingError.from_os_error("Cannot stat", item.path, exc))
            return None

        return DirEntry(
            name=item.name,
            path=os.path.join(self.current_dir, item.name),
            size=0 if is_dir else stat.st_size,
            is_dir=is_dir,
            readable=os.access(item.path, os.R_OK),
        )

    @staticmethod
    def _partition(entries: Iterable[DirEntry], dirs_first: bool) -> List[DirEntry]:
        dirs = [entry for entry in entries if entry.is_dir]
        files = [entry for entry in entries if not entry.is_dir]
        return dirs + files if dirs_first else files + dirs

    def update(self) -> None:
        try:
            scanned = self._scan()
        except OSError as exc:
            # Keep the last good snapshot on screen.
            self.push_error(ListingError.from_os_error("Cannot list", self.current_dir, exc))
            return

        if self.dir_sorting is SortDir.START:
            scanned = self._partition(scanned, dirs_first=True)
        elif self.dir_sorting is SortDir.END:
            scanned = self._partition(scanned, dirs_first=False)

        self.entries = scanned

    def get_entries(self) -> List[DirEntry]:
        return self.entries

    def get_entry_at_index(self, index: int) -> DirEntry:
        if index < 0 or index >= len(self.entries):
            raise EntryIndexError(index, len(self.entries))
        return self.entries[index]

    def index_of(self, path: str) -> Optional[int]:
        for index, entry in enumerate(self.entries):
            if entry.path == path:
                return index
        return None

    # === Navigation ===
    def _resolve(self, path: str) -> str:
        expanded = os.path.expanduser(str(path).strip())
        return os.path.realpath(os.path.join(self.current_dir, expanded))

    def change_dir(self, path: str) -> bool:
        if not str(path).strip():
            self.push_error(NavigationError("Empty path"))
            return False

        target = self._resolve(path)
        if not os.path.exists(target):
            self.push_error(NavigationError("No such directory", path=target))
            return False
        if not os.path.isdir(target):
            self.push_error(NavigationError("Not a directory", path=target))
            return False
        if not os.access(target, os.R_OK | os.X_OK):
            self.push_error(NavigationError("Permission denied", path=target))
            return False

        logger.debug("change_dir %s -> %s", self.current_dir, target)
        self.current_dir = target
        self.update()
        return True

    def _climb_to_existing_dir(self) -> None:
        path = self.current_dir
        while not os.path.isdir(path):
            parent = os.path.dirname(path)
            if parent == path:
                break
            path = parent
        if path != self.current_dir:
            logger.info("current directory vanished, moving to %s", path)
            self.current_dir = path

    # === Flags ===
    def toggle_hidden(self) -> None:
        self.show_hidden = not self.show_hidden
        self.update()

    def set_dir_sorting(self, mode: SortDir) -> None:
        self.dir_sorting = mode
        self.update()

    def cycle_dir_sorting(self) -> SortDir:
        self.set_dir_sorting(self.dir_sorting.next())
        return self.dir_sorting

    # === Selection ===
    def add_to_selection(self, path: str) -> None:
        self.selection.add(os.path.abspath(path))

    def remove_from_selection(self, path: str) -> None:
        self.selection.discard(os.path.abspath(path))

    def toggle_selection(self, path: str) -> bool:
        """Flip the mark on ``path``; returns True when it ends up selected."""
        if self.is_selected(path):
            self.remove_from_selection(path)
            return False
        self.add_to_selection(path)
        return True

    def clear_selection(self) -> None:
        self.selection.clear()

    def is_selected(self, path: str) -> bool:
        return os.path.abspath(path) in self.selection

    # === Bulk operations ===
    def _paste_one(self, source: str) -> str:
        name = os.path.basename(source.rstrip(os.sep))
        dest = os.path.join(self.current_dir, name)

        if not os.path.lexists(source):
            raise PasteError("Source no longer exists", path=source)
        if os.path.lexists(dest):
            raise PasteError("Destination already exists", path=dest)

        copy_tree = os.path.isdir(source) and not os.path.islink(source)
        if copy_tree:
            real_source = os.path.realpath(source)
            if self.current_dir == real_source or self.current_dir.startswith(real_source + os.sep):
                raise PasteError("Cannot paste a directory into itself", path=source)

        try:
            if copy_tree:
                shutil.copytree(source, dest, symlinks=True)
            else:
                shutil.copy2(source, dest, follow_symlinks=False)
        except OSError as exc:
            raise PasteError.from_os_error("Cannot paste", source, exc) from exc
        return dest

    def paste(self) -> int:
        """Copy every selected path into the current directory.

        Best-effort: a failing item is reported and skipped. The selection
        is left as it was. Returns the number of items copied.
        """
        copied = 0
        for source in sorted(self.selection):
            try:
                self._paste_one(source)
            except PasteError as exc:
                self.push_error(exc)
                continue
            copied += 1

        logger.info("pasted %d of %d item(s) into %s", copied, len(self.selection), self.current_dir)
        self.update()
        return copied

    def _delete_one(self, path: str) -> None:
        if not os.path.lexists(path):
            raise DeletionError("No such file or directory", path=path)
        try:
            if os.path.isdir(path) and not os.path.islink(path):
                shutil.rmtree(path)
            else:
                os.remove(path)
        except OSError as exc:
            raise DeletionError.from_os_error("Cannot delete", path, exc) from exc

    def delete_selection(self) -> int:
        """Permanently remove every selected path.

        Removed paths leave the selection; paths that failed stay selected
        so the user can retry. Returns the number of items removed.
        """
        total = len(self.selection)
        removed = 0
        removed_dirs: List[str] = []
        for path in sorted(self.selection):
            # Sorted order visits a directory before anything under it.
            if any(path.startswith(parent + os.sep) for parent in removed_dirs):
                self.selection.discard(path)
                removed += 1
                continue
            is_tree = os.path.isdir(path) and not os.path.islink(path)
            try:
                self._delete_one(path)
            except DeletionError as exc:
                self.push_error(exc)
                continue
            if is_tree:
                removed_dirs.append(path)
            self.selection.discard(path)
            removed += 1

        logger.info("deleted %d of %d item(s)", removed, total)
        self._climb_to_existing_dir()
        self.update()
        return removed

    # === Single-entry operations ===
    def create_entry(self, name: str) -> Optional[str]:
        """Create an empty file, or a directory when ``name`` ends with a slash."""
        name = name.strip()
        make_dir = name.endswith("/")
        name = name.rstrip("/")

        if not name or name in (".", ".."):
            self.push_error(CreationError("Invalid name", path=name or None))
            return None
        if os.sep in name or (os.altsep and os.altsep in name):
            self.push_error(CreationError("Name must not contain a path separator", path=name))
            return None

        target = os.path.join(self.current_dir, name)
        if os.path.lexists(target):
            self.push_error(CreationError("Already exists", path=target))
            return None

        try:
            if make_dir:
                os.mkdir(target)
            else:
                with open(target, "x", encoding="utf-8"):
                    pass
        except OSError as exc:
            self.push_error(CreationError.from_os_error("Cannot create", target, exc))
            return None

        logger.info("created %s", target)
        self.update()
        return target

    def open_path(self, path: str) -> bool:
        if os.path.isdir(path):
            return self.change_dir(path)
        if not os.path.lexists(path):
            self.push_error(OpenError("No such file", path=path))
            return False

        try:
            subprocess.Popen(
                [*self.opener, path],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            self.push_error(OpenError.from_os_error(f"Cannot run {self.opener[0]}", path, exc))
            return False
        return True
