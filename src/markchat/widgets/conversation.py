"""Scrollable conversation view widget."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from textual.app import ComposeResult
from textual.containers import Vertical, VerticalScroll
from textual.widgets import Static

from ..message_store import Message
from ..rendering import render
from .message import MessageBubble


class ConversationView(VerticalScroll):
    """Host message bubbles, or a welcome placeholder before the first turn."""

    DEFAULT_CSS = """
    ConversationView > #welcome {
        height: auto;
        width: 100%;
        align-horizontal: center;
        margin-top: 2;
    }
    ConversationView > #welcome > #welcome-title {
        width: auto;
        text-style: bold;
    }
    ConversationView > #welcome > #welcome-subtitle {
        width: auto;
        color: $text-muted;
    }
    """

    def __init__(self, code_theme: str = "monokai", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.code_theme = code_theme

    def compose(self) -> ComposeResult:
        with Vertical(id="welcome"):
            yield Static("Hi", id="welcome-title")
            yield Static("use chat to get started", id="welcome-subtitle")

    @property
    def bubbles(self) -> list[MessageBubble]:
        return list(self.query(MessageBubble))

    def set_welcome_visible(self, visible: bool) -> None:
        self.query_one("#welcome", Vertical).display = visible

    async def sync(self, messages: Sequence[Message], started: bool) -> None:
        """Bring mounted bubbles in line with ``messages``.

        The store only appends or clears, so either new bubbles are mounted
        for the tail or everything is removed.
        """
        self.set_welcome_visible(not started)
        mounted = self.bubbles
        if len(mounted) > len(messages):
            for bubble in mounted:
                await bubble.remove()
            mounted = []
        new_bubbles = [
            self._bubble_for(index, message)
            for index, message in enumerate(messages)
            if index >= len(mounted)
        ]
        if new_bubbles:
            await self.mount_all(new_bubbles)
            self.scroll_end(animate=False)

    def _bubble_for(self, index: int, message: Message) -> MessageBubble:
        bubble = MessageBubble(render(message), index, code_theme=self.code_theme)
        bubble.add_class(f"message-{message.sender.value}")
        return bubble

    def show_copied(self, index: int | None) -> None:
        """Display the copy acknowledgment on bubble ``index`` only."""
        for bubble in self.bubbles:
            bubble.set_copied(bubble.index == index)
