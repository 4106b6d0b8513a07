"""Prompt area and action buttons."""

from __future__ import annotations

from typing import Any

from textual import events
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Button, TextArea


class PromptArea(TextArea):
    """Multi-line prompt that submits on Enter and breaks lines on Shift+Enter."""

    NEWLINE_KEYS = frozenset({"shift+enter", "ctrl+j"})

    class Submitted(Message):
        """Posted when the user presses Enter."""

        def __init__(self, prompt_area: PromptArea, value: str) -> None:
            super().__init__()
            self.prompt_area = prompt_area
            self.value = value

        @property
        def control(self) -> PromptArea:
            return self.prompt_area

    def _on_key(self, event: events.Key) -> None:
        if event.key == "enter":
            event.stop()
            event.prevent_default()
            self.post_message(self.Submitted(self, self.text))
        elif event.key in self.NEWLINE_KEYS:
            event.stop()
            event.prevent_default()
            self.insert("\n")


class InputBox(Vertical):
    """Input region with the prompt area, Clear Chat and Send buttons."""

    DEFAULT_CSS = """
    InputBox {
        height: auto;
    }
    InputBox > #message_input {
        height: auto;
        min-height: 3;
    }
    InputBox > #send_row {
        height: auto;
        align-horizontal: right;
    }
    InputBox > #send_row > Button {
        margin-left: 1;
        min-width: 10;
    }
    """

    class ClearRequested(Message):
        """Posted when the user clicks Clear Chat."""

    class SendRequested(Message):
        """Posted when the user clicks Send or presses Enter."""

        def __init__(self, text: str) -> None:
            super().__init__()
            self.text = text

    def __init__(self, max_height: int = 12, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.max_height = max_height
        self._busy = False

    def compose(self) -> ComposeResult:
        yield PromptArea(id="message_input", soft_wrap=True, show_line_numbers=False)
        with Horizontal(id="send_row"):
            yield Button("Clear Chat", id="clear_button", variant="default")
            yield Button("Send", id="send_button", variant="success", disabled=True)

    def on_mount(self) -> None:
        self.prompt.styles.max_height = self.max_height

    @property
    def prompt(self) -> PromptArea:
        return self.query_one("#message_input", PromptArea)

    @property
    def text(self) -> str:
        return self.prompt.text

    def clear_text(self) -> None:
        self.prompt.clear()

    def set_busy(self, busy: bool) -> None:
        """Disable actions while a request is outstanding."""
        self._busy = busy
        self.query_one("#clear_button", Button).disabled = busy
        self._refresh_send_button()

    def _refresh_send_button(self) -> None:
        self.query_one("#send_button", Button).disabled = (
            self._busy or not self.text.strip()
        )

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        self._refresh_send_button()

    def on_prompt_area_submitted(self, event: PromptArea.Submitted) -> None:
        event.stop()
        self.post_message(self.SendRequested(event.value))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Forward button clicks as intent messages."""
        if event.button.id == "send_button":
            event.stop()
            self.post_message(self.SendRequested(self.text))
        elif event.button.id == "clear_button":
            event.stop()
            self.post_message(self.ClearRequested())
