"""Tests for terminal output helpers."""

import os
from io import StringIO
from unittest.mock import patch

from flowforge.utils.terminal import colorize, error, success, use_color, warning


class TestUseColor:
    def test_false_when_not_tty(self):
        assert use_color(StringIO()) is False

    def test_true_when_tty(self):
        stream = StringIO()
        stream.isatty = lambda: True
        assert use_color(stream) is True

    @patch.dict(os.environ, {"NO_COLOR": "1"})
    def test_no_color_env_disables_color(self):
        stream = StringIO()
        stream.isatty = lambda: True
        assert use_color(stream) is False

    def test_stream_without_isatty(self):
        class FakeStream:
            pass

        assert use_color(FakeStream()) is False


class TestColorize:
    def test_wraps_text_when_enabled(self):
        assert colorize("hello", "32", True) == "\033[32mhello\033[0m"

    def test_passthrough_when_disabled(self):
        assert colorize("hello", "32", False) == "hello"


class TestMessages:
    """capsys replaces stderr with a non-tty stream, so output is plain."""

    def test_error_prefix(self, capsys):
        error("boom")
        assert capsys.readouterr().err == "Error: boom\n"

    def test_warning_prefix(self, capsys):
        warning("careful")
        assert capsys.readouterr().err == "Warning: careful\n"

    def test_success_plain(self, capsys):
        success("done")
        captured = capsys.readouterr()
        assert captured.err == "done\n"
        assert captured.out == ""
