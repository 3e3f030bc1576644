"""Payloads exchanged between the explorer and the popups it opens.

The explorer hands a prompt to the next state when it switches away and the
popup hands its reply back when it closes. Popups know nothing about what
the reply is for; the explorer remembers that in a ``MessageSource`` tag.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


@dataclass(frozen=True)
class StringMessage:
    value: str


@dataclass(frozen=True)
class BoolMessage:
    value: bool


@dataclass(frozen=True)
class TwoStringsMessage:
    label: str
    value: str


Message = Union[StringMessage, BoolMessage, TwoStringsMessage]


class MessageSource(Enum):
    NONE = "none"
    DELETION_CONFIRMATION_PROMPT = "deletion_confirmation_prompt"
    PATH_CHANGE_POPUP = "path_change_popup"
    NEW_FILE_POPUP = "new_file_popup"


class MessageSender:
    _outbox: Optional[Message] = None

    def get_message(self) -> Optional[Message]:
        """Hand over the pending outbound message; it is consumed once."""
        message, self._outbox = self._outbox, None
        return message

    def send_message(self, message: Optional[Message]) -> None:
        self._outbox = message


class MessageReceiver:
    def handle_message(self, message: Optional[Message], file_manager) -> None:
        pass
