"""Tests for domain exception hierarchy."""

from __future__ import annotations

import unittest

from markchat.exceptions import (
    ClipboardError,
    CompletionError,
    ConfigValidationError,
    MarkchatError,
)


class ExceptionHierarchyTests(unittest.TestCase):
    """Validate exception inheritance contract."""

    def test_exception_hierarchy(self) -> None:
        self.assertTrue(issubclass(MarkchatError, RuntimeError))
        self.assertTrue(issubclass(CompletionError, MarkchatError))
        self.assertTrue(issubclass(ClipboardError, MarkchatError))
        self.assertTrue(issubclass(ConfigValidationError, MarkchatError))

    def test_completion_error_carries_status_code(self) -> None:
        error = CompletionError("unauthorized", status_code=401)
        self.assertEqual(error.status_code, 401)
        self.assertEqual(str(error), "unauthorized")
        self.assertIsNone(CompletionError("timeout").status_code)


if __name__ == "__main__":
    unittest.main()
