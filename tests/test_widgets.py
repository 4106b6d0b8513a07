"""Unit tests for individual widget classes."""

from __future__ import annotations

import unittest

try:
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Button, Label

    from markchat.message_store import Message, Sender
    from markchat.rendering import HighlightedCode, PlainCode, render
    from markchat.widgets.activity_bar import ActivityBar
    from markchat.widgets.code_block import CodeBlock
    from markchat.widgets.conversation import ConversationView
    from markchat.widgets.input_box import InputBox, PromptArea
    from markchat.widgets.message import MessageBubble
except ModuleNotFoundError:
    App = None  # type: ignore[assignment,misc]
    MessageBubble = None  # type: ignore[assignment,misc]


if App is not None:

    class _InputBoxApp(App[None]):
        def __init__(self) -> None:
            super().__init__()
            self.sent: list[str] = []
            self.clears = 0

        def compose(self) -> ComposeResult:
            yield InputBox(max_height=6, id="ib")

        def on_input_box_send_requested(self, event: InputBox.SendRequested) -> None:
            self.sent.append(event.text)

        def on_input_box_clear_requested(
            self, _event: InputBox.ClearRequested
        ) -> None:
            self.clears += 1

    class _BubbleApp(App[None]):
        def __init__(self, message: Message) -> None:
            super().__init__()
            self.chat_message = message
            self.copy_requests: list[tuple[int, str]] = []

        def compose(self) -> ComposeResult:
            yield MessageBubble(render(self.chat_message), index=4, id="bubble")

        def on_message_bubble_copy_requested(
            self, event: MessageBubble.CopyRequested
        ) -> None:
            self.copy_requests.append((event.index, event.text))

    class _ConversationApp(App[None]):
        def compose(self) -> ComposeResult:
            yield ConversationView(id="conversation")

    class _ActivityApp(App[None]):
        def compose(self) -> ComposeResult:
            yield ActivityBar(shortcut_hints="enter send", id="activity")


@unittest.skipIf(MessageBubble is None, "textual is not installed")
class MessageBubbleTests(unittest.IsolatedAsyncioTestCase):
    """Validate MessageBubble composition and copy affordance."""

    def test_role_class_and_prefix(self) -> None:
        user = MessageBubble(render(Message("hi", Sender.USER)), index=0)
        bot = MessageBubble(render(Message("hi", Sender.BOT)), index=1)
        self.assertIn("role-user", user.classes)
        self.assertIn("role-bot", bot.classes)
        self.assertEqual(user.role_prefix, "You")
        self.assertEqual(bot.role_prefix, "Assistant")

    async def test_user_bubble_has_no_copy_button(self) -> None:
        app = _BubbleApp(Message("**literal**", Sender.USER))
        async with app.run_test() as pilot:
            await pilot.pause()
            self.assertEqual(len(app.query("#copy-btn")), 0)
            self.assertEqual(len(app.query(CodeBlock)), 0)

    async def test_bot_bubble_mixes_prose_and_code(self) -> None:
        text = "Look:\n```python\nprint(1)\n```\nand\n```\nraw\n```"
        app = _BubbleApp(Message(text, Sender.BOT))
        async with app.run_test() as pilot:
            await pilot.pause()
            blocks = list(app.query(CodeBlock))
            self.assertEqual([block.label for block in blocks], ["python", "code"])
            self.assertEqual(len(app.query(".prose-segment")), 2)

    async def test_copy_button_posts_raw_text(self) -> None:
        text = "**bold** reply"
        app = _BubbleApp(Message(text, Sender.BOT))
        async with app.run_test() as pilot:
            await pilot.click("#copy-btn")
            await pilot.pause()
            self.assertEqual(app.copy_requests, [(4, text)])

    async def test_set_copied_toggles_label(self) -> None:
        app = _BubbleApp(Message("reply", Sender.BOT))
        async with app.run_test() as pilot:
            await pilot.pause()
            bubble = app.query_one(MessageBubble)
            label = app.query_one("#copied-label", Label)
            self.assertFalse(label.display)
            bubble.set_copied(True)
            self.assertTrue(label.display)
            bubble.set_copied(False)
            self.assertFalse(label.display)


@unittest.skipIf(MessageBubble is None, "textual is not installed")
class CodeBlockTests(unittest.TestCase):
    """Validate CodeBlock header labels."""

    def test_label_uses_language(self) -> None:
        block = CodeBlock(HighlightedCode(code="x", language="python"))
        self.assertEqual(block.label, "python")

    def test_label_uses_unknown_tag(self) -> None:
        self.assertEqual(CodeBlock(PlainCode(code="x", tag="zzz")).label, "zzz")

    def test_label_defaults_to_code(self) -> None:
        self.assertEqual(CodeBlock(PlainCode(code="x")).label, "code")


@unittest.skipIf(MessageBubble is None, "textual is not installed")
class InputBoxTests(unittest.IsolatedAsyncioTestCase):
    """Validate prompt keys and button state."""

    def test_input_box_is_vertical(self) -> None:
        self.assertTrue(issubclass(InputBox, Vertical))

    async def test_enter_posts_send_request(self) -> None:
        app = _InputBoxApp()
        async with app.run_test() as pilot:
            app.query_one(PromptArea).focus()
            await pilot.press("h", "i", "enter")
            await pilot.pause()
            self.assertEqual(app.sent, ["hi"])
            self.assertEqual(app.query_one(PromptArea).text, "hi")

    async def test_shift_enter_inserts_newline(self) -> None:
        app = _InputBoxApp()
        async with app.run_test() as pilot:
            app.query_one(PromptArea).focus()
            await pilot.press("a", "shift+enter", "b")
            await pilot.pause()
            self.assertEqual(app.query_one(PromptArea).text, "a\nb")
            self.assertEqual(app.sent, [])

    async def test_send_button_disabled_until_text(self) -> None:
        app = _InputBoxApp()
        async with app.run_test() as pilot:
            send = app.query_one("#send_button", Button)
            self.assertTrue(send.disabled)
            app.query_one(PromptArea).text = "   "
            await pilot.pause()
            self.assertTrue(send.disabled)
            app.query_one(PromptArea).text = "question"
            await pilot.pause()
            self.assertFalse(send.disabled)

    async def test_busy_disables_buttons(self) -> None:
        app = _InputBoxApp()
        async with app.run_test() as pilot:
            box = app.query_one(InputBox)
            app.query_one(PromptArea).text = "question"
            await pilot.pause()
            box.set_busy(True)
            self.assertTrue(app.query_one("#send_button", Button).disabled)
            self.assertTrue(app.query_one("#clear_button", Button).disabled)
            box.set_busy(False)
            self.assertFalse(app.query_one("#send_button", Button).disabled)
            self.assertFalse(app.query_one("#clear_button", Button).disabled)

    async def test_buttons_post_intents(self) -> None:
        app = _InputBoxApp()
        async with app.run_test() as pilot:
            app.query_one(PromptArea).text = "hello"
            await pilot.pause()
            await pilot.click("#send_button")
            await pilot.click("#clear_button")
            await pilot.pause()
            self.assertEqual(app.sent, ["hello"])
            self.assertEqual(app.clears, 1)

    async def test_prompt_grows_until_max_height(self) -> None:
        app = _InputBoxApp()
        async with app.run_test() as pilot:
            prompt = app.query_one(PromptArea)
            prompt.text = "one\ntwo"
            await pilot.pause()
            short_height = prompt.region.height
            self.assertLess(short_height, 6)

            prompt.text = "\n".join(f"line {n}" for n in range(20))
            await pilot.pause()
            self.assertGreater(prompt.region.height, short_height)
            self.assertEqual(prompt.region.height, 6)

    async def test_clear_text_empties_prompt(self) -> None:
        app = _InputBoxApp()
        async with app.run_test() as pilot:
            box = app.query_one(InputBox)
            box.prompt.text = "draft"
            box.clear_text()
            await pilot.pause()
            self.assertEqual(box.text, "")


@unittest.skipIf(MessageBubble is None, "textual is not installed")
class ConversationViewTests(unittest.IsolatedAsyncioTestCase):
    """Validate welcome placeholder and bubble syncing."""

    async def test_welcome_shown_until_started(self) -> None:
        app = _ConversationApp()
        async with app.run_test() as pilot:
            view = app.query_one(ConversationView)
            welcome = app.query_one("#welcome")
            self.assertTrue(welcome.display)
            await view.sync([Message("q", Sender.USER)], started=True)
            await pilot.pause()
            self.assertFalse(welcome.display)

    async def test_sync_appends_then_clears(self) -> None:
        app = _ConversationApp()
        async with app.run_test() as pilot:
            view = app.query_one(ConversationView)
            first = [Message("q", Sender.USER)]
            await view.sync(first, started=True)
            both = first + [Message("a", Sender.BOT)]
            await view.sync(both, started=True)
            await pilot.pause()
            bubbles = view.bubbles
            self.assertEqual([bubble.index for bubble in bubbles], [0, 1])
            self.assertIn("message-user", bubbles[0].classes)
            self.assertIn("message-bot", bubbles[1].classes)

            await view.sync([], started=False)
            await pilot.pause()
            self.assertEqual(view.bubbles, [])
            self.assertTrue(app.query_one("#welcome").display)

    async def test_show_copied_targets_one_bubble(self) -> None:
        app = _ConversationApp()
        async with app.run_test() as pilot:
            view = app.query_one(ConversationView)
            replies = [Message("one", Sender.BOT), Message("two", Sender.BOT)]
            await view.sync(replies, started=True)
            await pilot.pause()
            view.show_copied(1)
            labels = [
                bubble.query_one("#copied-label", Label).display
                for bubble in view.bubbles
            ]
            self.assertEqual(labels, [False, True])


@unittest.skipIf(MessageBubble is None, "textual is not installed")
class ActivityBarTests(unittest.IsolatedAsyncioTestCase):
    """Validate the pending-reply indicator."""

    def _status(self, app: App) -> str:
        return str(app.query_one("#activity_left", Label).content)

    async def test_start_shows_hint_and_animates(self) -> None:
        app = _ActivityApp()
        async with app.run_test() as pilot:
            bar = app.query_one(ActivityBar)
            self.assertFalse(bar.active)
            self.assertEqual(self._status(app), "")
            bar.start_activity()
            first = self._status(app)
            self.assertTrue(first.startswith("Analyzing..."))
            await pilot.pause(0.3)
            self.assertTrue(bar.active)
            self.assertTrue(self._status(app).startswith("Analyzing..."))
            self.assertNotEqual(self._status(app), first)

    async def test_stop_clears_label(self) -> None:
        app = _ActivityApp()
        async with app.run_test() as pilot:
            bar = app.query_one(ActivityBar)
            bar.start_activity()
            await pilot.pause()
            bar.stop_activity()
            await pilot.pause(0.3)
            self.assertFalse(bar.active)
            self.assertEqual(self._status(app), "")

    async def test_start_is_idempotent(self) -> None:
        app = _ActivityApp()
        async with app.run_test() as pilot:
            bar = app.query_one(ActivityBar)
            bar.start_activity()
            bar.start_activity(hint="Other")
            await pilot.pause()
            self.assertTrue(self._status(app).startswith("Analyzing..."))
            bar.stop_activity()
            bar.start_activity()
            await pilot.pause(0.2)
            self.assertTrue(bar.active)
            bar.stop_activity()
            await pilot.pause()
            self.assertFalse(bar.active)


if __name__ == "__main__":
    unittest.main()
