"""In-memory chat history made of immutable messages."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum


class Sender(str, Enum):
    """Author of a chat turn."""

    USER = "user"
    BOT = "bot"


@dataclass(frozen=True)
class Message:
    """A single chat turn. Never modified after creation."""

    text: str
    sender: Sender

    @property
    def is_bot(self) -> bool:
        return self.sender is Sender.BOT


class MessageStore:
    """Ordered, append-only conversation history.

    The only mutation besides ``append`` is ``clear``, which empties the whole
    store at once.
    """

    def __init__(self) -> None:
        self._messages: list[Message] = []

    @property
    def messages(self) -> tuple[Message, ...]:
        """Return an immutable snapshot of all stored messages."""
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    def append(self, message: Message) -> None:
        """Append a message to the end of the history."""
        self._messages.append(message)

    def clear(self) -> None:
        """Drop every stored message."""
        self._messages = []

    def last(self, sender: Sender | None = None) -> Message | None:
        """Return the newest message, optionally restricted to one sender."""
        for message in reversed(self._messages):
            if sender is None or message.sender is sender:
                return message
        return None
