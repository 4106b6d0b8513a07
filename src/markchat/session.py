"""Turn-taking between the user, the completion service and the message store."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import Protocol

from .exceptions import CompletionError
from .message_store import Message, MessageStore, Sender
from .postprocess import process

LOGGER = logging.getLogger(__name__)

FALLBACK_REPLY = "Error getting response. Try again!"


class Completer(Protocol):
    async def complete(self, user_text: str) -> str: ...


class SubmitResult(str, Enum):
    """Outcome of a submission attempt."""

    SENT = "SENT"
    EMPTY = "EMPTY"
    BUSY = "BUSY"


@dataclass
class Session:
    """Transient orchestration state for one chat session."""

    store: MessageStore = field(default_factory=MessageStore)
    busy: bool = False
    started: bool = False
    # Bumped on every clear; replies from an older generation are dropped.
    generation: int = 0


SessionListener = Callable[[Session], None]


class SessionController:
    """Accept user input, run one completion at a time and record both turns."""

    def __init__(
        self,
        client: Completer,
        session: Session | None = None,
        postprocess: Callable[[str], str] = process,
    ) -> None:
        self.client = client
        self.session = session or Session()
        self._postprocess = postprocess
        self._listeners: list[SessionListener] = []

    @property
    def messages(self) -> tuple[Message, ...]:
        return self.session.store.messages

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register ``listener`` for change notifications; return an unsubscriber."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self.session)
            except Exception as exc:  # noqa: BLE001 - a broken view must not stall chat.
                LOGGER.warning(
                    "session.listener.failed",
                    extra={
                        "event": "session.listener.failed",
                        "error_type": type(exc).__name__,
                        "error": str(exc),
                    },
                )

    async def submit(self, text: str) -> SubmitResult:
        """Send ``text`` as a user turn and append the bot reply."""
        if not text.strip():
            return SubmitResult.EMPTY
        session = self.session
        if session.busy:
            LOGGER.info("session.submit.busy", extra={"event": "session.submit.busy"})
            return SubmitResult.BUSY

        session.started = True
        session.store.append(Message(text=text, sender=Sender.USER))
        session.busy = True
        generation = session.generation
        self._notify()

        try:
            try:
                raw_reply = await self.client.complete(text)
            except CompletionError as exc:
                LOGGER.warning(
                    "session.reply.failed",
                    extra={
                        "event": "session.reply.failed",
                        "error": str(exc),
                        "status_code": exc.status_code,
                    },
                )
                reply = FALLBACK_REPLY
            else:
                reply = self._postprocess(raw_reply)

            if generation != session.generation:
                LOGGER.info(
                    "session.reply.discarded",
                    extra={
                        "event": "session.reply.discarded",
                        "request_generation": generation,
                        "current_generation": session.generation,
                    },
                )
            else:
                session.store.append(Message(text=reply, sender=Sender.BOT))
        finally:
            session.busy = False
            self._notify()
        return SubmitResult.SENT

    def clear(self, force: bool = False) -> bool:
        """Empty the session.

        Refused while a request is in flight unless ``force`` is set, in which
        case the pending reply is discarded when it arrives.
        """
        session = self.session
        if session.busy and not force:
            LOGGER.info("session.clear.busy", extra={"event": "session.clear.busy"})
            return False
        session.store.clear()
        session.started = False
        session.generation += 1
        LOGGER.info(
            "session.cleared",
            extra={"event": "session.cleared", "generation": session.generation},
        )
        self._notify()
        return True
