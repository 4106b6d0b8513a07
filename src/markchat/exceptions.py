"""Domain exception hierarchy for the markchat application."""

from __future__ import annotations


class MarkchatError(RuntimeError):
    """Base class for all domain-level chat errors."""


class CompletionError(MarkchatError):
    """Raised when the completion service cannot produce a reply."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ClipboardError(MarkchatError):
    """Raised when text cannot be written to the clipboard."""


class ConfigValidationError(MarkchatError):
    """Raised when configuration cannot be validated safely."""
