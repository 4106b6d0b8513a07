"""Main Textual application for chatting with a remote completion endpoint."""

from __future__ import annotations

import logging
import sys
from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Footer, Header

from .clipboard import CopyFeedback
from .completion import CompletionClient, CompletionSettings
from .config import load_config, resolve_api_key
from .exceptions import ClipboardError
from .logging_utils import configure_logging
from .session import Completer, Session, SessionController, SubmitResult
from .widgets.activity_bar import ActivityBar
from .widgets.conversation import ConversationView
from .widgets.input_box import InputBox
from .widgets.message import MessageBubble

LOGGER = logging.getLogger(__name__)


class MarkchatApp(App[None]):
    """Single-conversation chat TUI backed by a chat-completion service."""

    CSS = """
    Screen {
        layout: vertical;
        background: $background;
    }

    #app-root {
        layout: vertical;
        width: 100%;
        height: 1fr;
        background: $background;
    }

    #conversation {
        height: 1fr;
        padding: 1;
    }

    InputBox {
        height: auto;
        padding: 0 1 1 1;
        border-top: solid $panel;
        background: $surface;
    }

    #activity_bar {
        height: 1;
        background: $surface;
    }

    MessageBubble {
        width: 85%;
        margin: 1 0;
        padding: 1 2;
        border: round $panel;
    }

    .message-user {
        background: $primary 30%;
    }

    .message-bot {
        background: $surface;
    }
    """

    DEFAULT_ACTION_DESCRIPTIONS: dict[str, str] = {
        "clear_chat": "Clear Chat",
        "quit": "Quit",
        "scroll_up": "Scroll Up",
        "scroll_down": "Scroll Down",
    }

    def __init__(
        self,
        config: dict[str, dict[str, Any]] | None = None,
        client: Completer | None = None,
    ) -> None:
        self.config = config if config is not None else load_config()
        configure_logging(self.config["logging"])
        LOGGER.info(
            "app.python",
            extra={
                "event": "app.python",
                "executable": sys.executable,
                "version": sys.version.split()[0],
            },
        )
        super().__init__()
        self.title = str(self.config["app"]["title"])
        self._binding_specs = self._binding_specs_from_config(self.config)

        completion_config = self.config["completion"]
        if client is None:
            client = CompletionClient(
                api_key=resolve_api_key(completion_config),
                settings=CompletionSettings.from_config(completion_config),
            )
        self.client = client
        self.controller = SessionController(client, Session())
        self.controller.subscribe(self._on_session_changed)

        ui_config = self.config["ui"]
        self.code_theme = str(ui_config["code_theme"])
        self.copy_feedback = CopyFeedback(
            writer=self._write_clipboard,
            scheduler=self.set_timer,
            delay=float(ui_config["copied_ack_seconds"]),
            on_change=self._on_copied_changed,
        )

    @classmethod
    def _binding_specs_from_config(
        cls, config: dict[str, dict[str, Any]]
    ) -> list[Binding]:
        keybinds = config.get("keybinds", {})
        bindings: list[Binding] = []
        for action_name, description in cls.DEFAULT_ACTION_DESCRIPTIONS.items():
            binding_key = keybinds.get(action_name)
            if isinstance(binding_key, str) and binding_key.strip():
                bindings.append(
                    Binding(
                        key=binding_key.strip(),
                        action=action_name,
                        description=description,
                        show=True,
                    )
                )
        return bindings

    def compose(self) -> ComposeResult:
        """Compose app widgets."""
        yield Header()
        with Container(id="app-root"):
            yield ConversationView(code_theme=self.code_theme, id="conversation")
            yield ActivityBar(
                shortcut_hints="enter send · shift+enter newline",
                id="activity_bar",
            )
            yield InputBox(max_height=int(self.config["ui"]["input_max_height"]))
        yield Footer()

    def on_mount(self) -> None:
        """Register configured keybindings and focus the prompt."""
        for binding in self._binding_specs:
            self.bind(
                binding.key,
                binding.action,
                description=binding.description,
                show=binding.show,
            )
        conversation = self.query_one(ConversationView)
        conversation.set_welcome_visible(bool(self.config["ui"]["show_welcome"]))
        self.query_one(InputBox).prompt.focus()

    def _on_session_changed(self, session: Session) -> None:
        self.call_later(self._refresh_view, session)

    async def _refresh_view(self, session: Session) -> None:
        """Re-render the conversation from the store and reflect the busy flag."""
        conversation = self.query_one(ConversationView)
        await conversation.sync(
            session.store.messages,
            started=session.started or not self.config["ui"]["show_welcome"],
        )
        conversation.show_copied(self.copy_feedback.copied_index)
        self.query_one(InputBox).set_busy(session.busy)
        activity = self.query_one("#activity_bar", ActivityBar)
        if session.busy:
            activity.start_activity()
        else:
            activity.stop_activity()

    async def on_input_box_send_requested(self, event: InputBox.SendRequested) -> None:
        """Hand the prompt to the controller without blocking the UI."""
        if self.controller.session.busy or not event.text.strip():
            return
        self.query_one(InputBox).clear_text()
        self.run_worker(self._submit(event.text), group="completion")

    async def _submit(self, text: str) -> None:
        result = await self.controller.submit(text)
        LOGGER.info(
            "app.submit.result",
            extra={"event": "app.submit.result", "result": result.value},
        )
        if result is SubmitResult.SENT:
            self.sub_title = ""

    async def on_input_box_clear_requested(
        self, _event: InputBox.ClearRequested
    ) -> None:
        await self.action_clear_chat()

    async def action_clear_chat(self) -> None:
        """Clear the conversation unless a reply is still pending."""
        if not self.controller.clear():
            self.sub_title = "Busy. Wait for the current reply."
            return
        self.copy_feedback.reset()
        self.query_one(InputBox).clear_text()

    def action_scroll_up(self) -> None:
        self.query_one(ConversationView).scroll_up()

    def action_scroll_down(self) -> None:
        self.query_one(ConversationView).scroll_down()

    def on_message_bubble_copy_requested(
        self, event: MessageBubble.CopyRequested
    ) -> None:
        event.stop()
        self.copy_feedback.copy(event.index, event.text)

    def _write_clipboard(self, text: str) -> None:
        try:
            self.copy_to_clipboard(text)
        except Exception as exc:  # noqa: BLE001 - driver-level failures vary.
            raise ClipboardError(f"Clipboard write failed: {exc}") from exc

    def _on_copied_changed(self, index: int | None) -> None:
        self.query_one(ConversationView).show_copied(index)

    async def on_unmount(self) -> None:
        close = getattr(self.client, "aclose", None)
        if close is not None:
            await close()
