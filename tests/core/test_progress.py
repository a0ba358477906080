"""Tests for core/progress.py module.

Covers:
- _is_tty() function
- status() function
- spinner() context manager
- pluralize() function
- suppress_console_logs() / is_console_suppressed()
"""

from __future__ import annotations

import sys
from io import StringIO
from unittest.mock import patch

from typefit.core.progress import (
    _STYLES,
    _is_tty,
    is_console_suppressed,
    pluralize,
    spinner,
    status,
    suppress_console_logs,
)


class TestIsTty:
    """Tests for _is_tty function."""

    def test_false_for_stringio(self) -> None:
        """Returns False for non-TTY stderr."""
        original = sys.stderr
        try:
            sys.stderr = StringIO()
            assert _is_tty() is False
        finally:
            sys.stderr = original


class TestStatus:
    """Tests for status function."""

    def test_has_expected_styles(self) -> None:
        assert set(_STYLES) == {"success", "error", "info", "warning", "none"}

    def test_success_style(self) -> None:
        """Applies success style."""
        with patch("typefit.core.progress._console") as mock_console:
            status("Done", style="success")
            assert "✓" in mock_console.print.call_args[0][0]

    def test_with_indent(self) -> None:
        """Applies indentation."""
        with patch("typefit.core.progress._console") as mock_console:
            status("Indented", indent=4)
            assert "    Indented" in mock_console.print.call_args[0][0]


class TestPluralize:
    """Tests for pluralize function."""

    def test_singular(self) -> None:
        assert pluralize(1, "type") == "1 type"

    def test_plural(self) -> None:
        assert pluralize(3, "file") == "3 files"
        assert pluralize(0, "file") == "0 files"

    def test_custom_plural(self) -> None:
        assert pluralize(2, "match", "matches") == "2 matches"


class TestSpinner:
    """Tests for spinner and console suppression."""

    def test_non_tty_prints_plain_line(self) -> None:
        with (
            patch("typefit.core.progress._is_tty", return_value=False),
            patch("typefit.core.progress._console") as mock_console,
        ):
            with spinner("Scanning"):
                pass
            assert "Scanning..." in mock_console.print.call_args[0][0]

    def test_tty_suppresses_console_logs(self) -> None:
        with (
            patch("typefit.core.progress._is_tty", return_value=True),
            patch("typefit.core.progress._console"),
        ):
            with spinner("Scanning"):
                assert is_console_suppressed()
        assert not is_console_suppressed()

    def test_suppress_console_logs_resets(self) -> None:
        with suppress_console_logs():
            assert is_console_suppressed()
        assert not is_console_suppressed()
