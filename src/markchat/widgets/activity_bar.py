"""Activity bar widget showing an animated "Analyzing..." indicator."""

from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.timer import Timer
from textual.widgets import Label, Static

_ANIMATION_FRAMES: tuple[str, ...] = (
    "·······",
    "●······",
    "·●·····",
    "··●····",
    "···●···",
    "····●··",
    "·····●·",
    "······●",
)

class ActivityBar(Static):
    """Render the pending-reply animation and shortcut hints."""

    DEFAULT_CSS = """
    ActivityBar {
        layout: horizontal;
        height: 1;
        padding: 0 1;
    }
    ActivityBar #activity_left {
        width: 1fr;
    }
    ActivityBar #activity_right {
        width: auto;
        text-align: right;
    }
    """

    def __init__(
        self,
        shortcut_hints: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._shortcut_hints = shortcut_hints
        self._animation_timer: Timer | None = None
        self._active = False
        self._hint = ""
        self._frame_index = 0

    @property
    def active(self) -> bool:
        return self._active

    def compose(self) -> ComposeResult:
        """Compose left (animation) and right (shortcuts) labels."""
        yield Label("", id="activity_left")
        yield Label(self._shortcut_hints, id="activity_right")

    def start_activity(self, hint: str = "Analyzing...") -> None:
        """Begin the animated dots next to ``hint``."""
        if self._active:
            return
        self._active = True
        self._hint = hint
        self._frame_index = 0
        self._show_frame()
        self._animation_timer = self.set_interval(0.12, self._advance_frame)

    def stop_activity(self) -> None:
        """Stop the animation and clear the left label."""
        self._active = False
        if self._animation_timer is not None:
            self._animation_timer.stop()
            self._animation_timer = None
        self.query_one("#activity_left", Label).update("")

    def _advance_frame(self) -> None:
        if not self._active:
            return
        self._frame_index = (self._frame_index + 1) % len(_ANIMATION_FRAMES)
        self._show_frame()

    def _show_frame(self) -> None:
        frame = _ANIMATION_FRAMES[self._frame_index]
        self.query_one("#activity_left", Label).update(f"{self._hint} {frame}")
