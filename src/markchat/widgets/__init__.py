"""Widget exports for markchat UI."""

from .activity_bar import ActivityBar
from .code_block import CodeBlock
from .conversation import ConversationView
from .input_box import InputBox, PromptArea
from .message import MessageBubble

__all__ = [
    "ActivityBar",
    "CodeBlock",
    "ConversationView",
    "InputBox",
    "MessageBubble",
    "PromptArea",
]
