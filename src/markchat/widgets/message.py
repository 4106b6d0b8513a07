"""Message bubble widget for conversation rendering."""

from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Button, Label, Static

from ..message_store import Sender
from ..rendering import HighlightedCode, PlainCode, RenderedMessage, to_renderable
from .code_block import CodeBlock


class MessageBubble(Vertical):
    """Render a single chat turn, plus a copy button for bot replies."""

    DEFAULT_CSS = """
    MessageBubble {
        height: auto;
    }
    MessageBubble > #header-block {
        text-style: bold;
    }
    MessageBubble > .prose-segment {
        height: auto;
        padding: 0;
    }
    MessageBubble > #copy-row {
        height: auto;
        align-horizontal: right;
    }
    MessageBubble > #copy-row > #copy-btn {
        min-width: 8;
        height: 1;
        border: none;
        padding: 0 1;
    }
    MessageBubble > #copy-row > #copied-label {
        margin-left: 1;
        color: $success;
    }
    """

    class CopyRequested(Message):
        """Posted when the user clicks the copy button."""

        def __init__(self, index: int, text: str) -> None:
            super().__init__()
            self.index = index
            self.text = text

    def __init__(
        self,
        rendered: RenderedMessage,
        index: int,
        code_theme: str = "monokai",
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.rendered = rendered
        self.index = index
        self.code_theme = code_theme
        self.add_class(f"role-{rendered.sender.value}")

    @property
    def role_prefix(self) -> str:
        """Return a human-friendly role label."""
        return "You" if self.rendered.sender is Sender.USER else "Assistant"

    def compose(self) -> ComposeResult:
        """Compose header, content blocks and the optional copy row."""
        yield Static(self.role_prefix, id="header-block")
        for block in self.rendered.blocks:
            if isinstance(block, (HighlightedCode, PlainCode)):
                yield CodeBlock(block, code_theme=self.code_theme)
            else:
                yield Static(
                    to_renderable(block, self.code_theme), classes="prose-segment"
                )
        if self.rendered.copy_text is not None:
            with Horizontal(id="copy-row"):
                yield Button("Copy", id="copy-btn")
                copied = Label("Copied", id="copied-label")
                copied.display = False
                yield copied

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle copy button click."""
        if event.button.id == "copy-btn" and self.rendered.copy_text is not None:
            event.stop()
            self.post_message(self.CopyRequested(self.index, self.rendered.copy_text))

    def set_copied(self, copied: bool) -> None:
        """Show or hide the transient "Copied" acknowledgment."""
        for label in self.query("#copied-label"):
            label.display = copied
