"""Copy-to-clipboard affordance with a self-clearing acknowledgment."""

from __future__ import annotations

from collections.abc import Callable
import logging
from typing import Protocol

LOGGER = logging.getLogger(__name__)

DEFAULT_ACK_SECONDS = 2.0


class TimerHandle(Protocol):
    def stop(self) -> None: ...


# Same shape as textual's ``set_timer(delay, callback)``.
Scheduler = Callable[[float, Callable[[], None]], TimerHandle]
ClipboardWriter = Callable[[str], None]


class CopyFeedback:
    """Write message text to the clipboard and track the "copied" label.

    Only one acknowledgment is visible at a time; copying again cancels the
    pending reset of the previous one.
    """

    def __init__(
        self,
        writer: ClipboardWriter,
        scheduler: Scheduler,
        delay: float = DEFAULT_ACK_SECONDS,
        on_change: Callable[[int | None], None] | None = None,
    ) -> None:
        self._writer = writer
        self._scheduler = scheduler
        self.delay = delay
        self._on_change = on_change
        self._timer: TimerHandle | None = None
        self.copied_index: int | None = None

    def copy(self, index: int, text: str) -> bool:
        """Copy ``text`` for the message at ``index``; return whether it worked."""
        try:
            self._writer(text)
        except Exception as exc:  # noqa: BLE001 - platform clipboard backends vary.
            self._log_failure(index, exc)
            return False

        self._cancel_timer()
        self._set(index)
        self._timer = self._scheduler(self.delay, self._expire)
        return True

    def _expire(self) -> None:
        self._timer = None
        self._set(None)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    def _set(self, index: int | None) -> None:
        self.copied_index = index
        if self._on_change is not None:
            self._on_change(index)

    def reset(self) -> None:
        """Hide the acknowledgment immediately."""
        self._cancel_timer()
        if self.copied_index is not None:
            self._set(None)

    @staticmethod
    def _log_failure(index: int, exc: Exception) -> None:
        LOGGER.warning(
            "clipboard.copy.failed",
            extra={
                "event": "clipboard.copy.failed",
                "message_index": index,
                "error_type": type(exc).__name__,
                "error": str(exc),
            },
        )
