"""Pure conversion of chat messages into rich renderables.

A message is first turned into a tuple of blocks (plain text, markdown prose,
highlighted code, plain code). Each block variant maps to exactly one rich
renderable in :func:`to_renderable`; widgets never inspect message text
themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
import re

from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound
from rich.console import RenderableType
from rich.markdown import Markdown
from rich.syntax import Syntax
from rich.text import Text

from .message_store import Message, Sender

# Opening and closing fences each occupy a whole line.
_FENCE_RE = re.compile(
    r"^(?P<fence>`{3,})(?P<lang>[^\n`]*)\n(?P<code>.*?)^(?P=fence)[ \t]*$",
    re.MULTILINE | re.DOTALL,
)
_LANG_TAG_RE = re.compile(r"\w+")


@dataclass(frozen=True)
class PlainText:
    text: str


@dataclass(frozen=True)
class MarkdownProse:
    text: str


@dataclass(frozen=True)
class HighlightedCode:
    code: str
    language: str


@dataclass(frozen=True)
class PlainCode:
    code: str
    tag: str = ""


Block = PlainText | MarkdownProse | HighlightedCode | PlainCode


@dataclass(frozen=True)
class RenderedMessage:
    """Display form of a message.

    ``copy_text`` holds the raw pre-render text for messages that offer a
    copy button, and is ``None`` otherwise.
    """

    sender: Sender
    blocks: tuple[Block, ...]
    copy_text: str | None = None


class BreaksMarkdown(Markdown):
    """Markdown with tables enabled and every newline treated as a line break."""

    def __init__(self, markup: str, code_theme: str = "monokai", **kwargs) -> None:
        super().__init__(markup, code_theme=code_theme, **kwargs)
        for token in self.parsed:
            for child in token.children or ():
                if child.type == "softbreak":
                    child.type = "hardbreak"
                    child.tag = "br"


def split_message(text: str) -> list[tuple[str, str | None]]:
    """Split *text* into alternating prose and code-block segments.

    Returns a list of ``(content, info)`` tuples where ``info`` is ``None``
    for prose segments and the fence info string (possibly empty) for code
    blocks.
    """
    segments: list[tuple[str, str | None]] = []
    cursor = 0
    for match in _FENCE_RE.finditer(text):
        start, end = match.span()
        if start > cursor:
            prose = text[cursor:start]
            if prose.strip():
                segments.append((prose, None))
        segments.append((match.group("code"), match.group("lang").strip()))
        cursor = end
    tail = text[cursor:]
    if tail.strip():
        segments.append((tail, None))
    return segments


def language_for(info: str) -> str | None:
    """Return the highlight language named by a fence info string, if known."""
    match = _LANG_TAG_RE.match(info)
    if match is None:
        return None
    language = match.group(0).lower()
    try:
        get_lexer_by_name(language)
    except ClassNotFound:
        return None
    return language


def code_block(code: str, info: str) -> HighlightedCode | PlainCode:
    """Build the code block variant for a fence body and its info string."""
    if code.endswith("\n"):
        code = code[:-1]
    language = language_for(info)
    if language is None:
        return PlainCode(code=code, tag=info)
    return HighlightedCode(code=code, language=language)


def render(message: Message) -> RenderedMessage:
    """Convert ``message`` into display blocks without touching any store."""
    if message.sender is Sender.USER:
        return RenderedMessage(sender=message.sender, blocks=(PlainText(message.text),))

    blocks: list[Block] = []
    for content, info in split_message(message.text):
        if info is None:
            blocks.append(MarkdownProse(content.strip("\n")))
        else:
            blocks.append(code_block(content, info))
    return RenderedMessage(
        sender=message.sender, blocks=tuple(blocks), copy_text=message.text
    )


def to_renderable(block: Block, code_theme: str = "monokai") -> RenderableType:
    """Map a block to the rich renderable that draws it."""
    if isinstance(block, PlainText):
        return Text(block.text)
    if isinstance(block, MarkdownProse):
        return BreaksMarkdown(block.text, code_theme=code_theme)
    if isinstance(block, HighlightedCode):
        return Syntax(
            block.code,
            block.language,
            theme=code_theme,
            line_numbers=False,
            word_wrap=True,
        )
    if isinstance(block, PlainCode):
        return Text(block.code, style="markdown.code_block", no_wrap=False)
    raise TypeError(f"Unsupported block type: {type(block).__name__}")
