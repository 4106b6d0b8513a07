"""Fenced code block widget with a language header."""

from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Label, Static

from ..rendering import HighlightedCode, PlainCode, to_renderable


class CodeBlock(Vertical):
    """Render one fenced code block; highlighted when its language is known."""

    DEFAULT_CSS = """
    CodeBlock {
        height: auto;
        margin: 1 0;
        border: solid $panel;
        background: $surface-darken-1;
    }
    CodeBlock > #code-header {
        height: 1;
        padding: 0 1;
        background: $panel;
        color: $text-muted;
    }
    CodeBlock > #code-body {
        height: auto;
        padding: 0 1;
    }
    """

    def __init__(
        self,
        block: HighlightedCode | PlainCode,
        code_theme: str = "monokai",
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.block = block
        self.code_theme = code_theme

    @property
    def label(self) -> str:
        if isinstance(self.block, HighlightedCode):
            return self.block.language
        return self.block.tag or "code"

    def compose(self) -> ComposeResult:
        """Compose header label and code body."""
        yield Label(self.label, id="code-header")
        yield Static(to_renderable(self.block, self.code_theme), id="code-body")
