"""Error types raised and queued by the file manager.

Every filesystem failure is converted into one of these at the
``FileManager`` boundary and turned into a plain string for the error log:

    FileManagerError (base)
    ├── NavigationError - target directory missing, not a directory or unreadable
    ├── ListingError    - directory enumeration or stat failed
    ├── PasteError      - one selected item could not be copied
    ├── DeletionError   - one selected item could not be removed
    ├── CreationError   - new file/directory could not be created
    ├── OpenError       - opener command could not be started
    └── EntryIndexError - cursor index outside the current listing
"""

from typing import Optional


class FileManagerError(Exception):
    """Base exception for file manager failures.

    Attributes:
        message: Human-readable description of what was attempted
        path: Path the operation was working on, if any
        reason: Underlying cause (usually the ``OSError`` text)
    """

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> None:
        self.message = message
        self.path = path
        self.reason = reason
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        text = self.message
        if self.path:
            text = f"{text}: {self.path}"
        if self.reason:
            text = f"{text} ({self.reason})"
        return text

    @classmethod
    def from_os_error(cls, message: str, path: str, exc: OSError) -> "FileManagerError":
        reason = exc.strerror or str(exc) or exc.__class__.__name__
        return cls(message, path=path, reason=reason)


class NavigationError(FileManagerError):
    pass


class ListingError(FileManagerError):
    pass


class PasteError(FileManagerError):
    pass


class DeletionError(FileManagerError):
    pass


class CreationError(FileManagerError):
    pass


class OpenError(FileManagerError):
    pass


class EntryIndexError(FileManagerError, IndexError):
    """Index does not point at an entry of the current listing."""

    def __init__(self, index: int, total: int) -> None:
        self.index = index
        self.total = total
        super().__init__(f"No entry at index {index}", reason=f"{total} entries")
