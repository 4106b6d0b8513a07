"""Top-level package for markchat."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .app import MarkchatApp
    from .completion import CompletionClient
    from .config import ensure_config_dir, load_config
    from .exceptions import (
        ClipboardError,
        CompletionError,
        ConfigValidationError,
        MarkchatError,
    )
    from .message_store import Message, MessageStore, Sender
    from .postprocess import process
    from .rendering import render
    from .session import Session, SessionController, SubmitResult

__all__ = [
    "ClipboardError",
    "CompletionClient",
    "CompletionError",
    "ConfigValidationError",
    "MarkchatApp",
    "MarkchatError",
    "Message",
    "MessageStore",
    "Sender",
    "Session",
    "SessionController",
    "SubmitResult",
    "ensure_config_dir",
    "load_config",
    "process",
    "render",
]

_LAZY_EXPORTS: dict[str, str] = {
    "MarkchatApp": ".app",
    "CompletionClient": ".completion",
    "ensure_config_dir": ".config",
    "load_config": ".config",
    "ClipboardError": ".exceptions",
    "CompletionError": ".exceptions",
    "ConfigValidationError": ".exceptions",
    "MarkchatError": ".exceptions",
    "Message": ".message_store",
    "MessageStore": ".message_store",
    "Sender": ".message_store",
    "process": ".postprocess",
    "render": ".rendering",
    "Session": ".session",
    "SessionController": ".session",
    "SubmitResult": ".session",
}


def __getattr__(name: str) -> Any:
    """Lazily import symbols to keep UI dependencies out of headless imports."""
    module_name = _LAZY_EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    from importlib import import_module

    return getattr(import_module(module_name, __name__), name)
