"""Tests for shared CLI error output."""

import io

from rich.console import Console

from lispy.cli import utils
from lispy.cli.utils import format_error, print_error
from lispy.exceptions import ParseError


class TestFormatError:
    """Tests for plain-text error formatting."""

    def test_lispy_error(self):
        err = ParseError("Unterminated string", position=3)
        text = format_error(err)
        assert text.startswith("Error: Unterminated string")
        assert "position: 3" in text

    def test_other_exception(self):
        assert format_error(ValueError("bad")) == "Error: ValueError: bad"


class TestPrintError:
    """Tests for printing errors to stderr."""

    def test_plain_text_when_not_a_terminal(self, capsys):
        print_error(ParseError("Unexpected ')'"), use_rich=False)
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.startswith("Error: Unexpected ')'")

    def test_rich_console(self, monkeypatch):
        buffer = io.StringIO()
        monkeypatch.setattr(utils, "_error_console", Console(file=buffer, color_system=None))
        print_error(ParseError("Unexpected ')'", suggestions=["Remove it"]), use_rich=True)
        output = buffer.getvalue()
        assert "Error: Unexpected ')'" in output
        assert "- Remove it" in output

    def test_rich_falls_back_for_other_exceptions(self, capsys):
        print_error(OSError("disk"), use_rich=True)
        assert capsys.readouterr().err == "Error: OSError: disk\n"
