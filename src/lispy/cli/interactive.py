"""
Interactive reader loop for lispy.

Reads one line at a time, prints its canonical form, and keeps a readline
history between sessions. Lines that cannot be parsed are echoed back
unchanged; typing ``exit`` or pressing Ctrl+D ends the session.
"""

import argparse
import cmd
import contextlib
import dataclasses
import logging
import readline
import sys
from dataclasses import dataclass
from pathlib import Path

from lispy.config import REPL_MODES, Config, ReplConfig
from lispy.exceptions import ConfigurationError, ParseError
from lispy.logging import enable_verbose
from lispy.reader import format_tokens, read, tokenize

from .utils import print_error

logger = logging.getLogger(__name__)

EXIT_COMMAND = "exit"


def normalize_line(line: str) -> str:
    """Treat commas as whitespace and trim the line."""
    return line.replace(",", " ").strip()


def render_line(line: str, mode: str = "parse") -> str:
    """
    Produce the output for one normalized input line.

    Args:
        line: Input with commas replaced and whitespace trimmed
        mode: "parse" for the canonical expression, "tokens" for the
            canonical token sequence, "echo" for the line itself

    Raises:
        ParseError: In parse mode, if the line is not a single expression
    """
    if mode == "parse":
        return read(line).to_string()
    if mode == "tokens":
        return format_tokens(tokenize(line))
    if mode == "echo":
        return line
    raise ValueError(f"Unknown mode: {mode}")


@dataclass
class ReaderSession:
    """Holds state for an interactive session."""

    mode: str = "parse"
    show_errors: bool = False
    lines_read: int = 0
    failures: int = 0

    def status_summary(self) -> str:
        """Return a brief status summary."""
        summary = f"{self.lines_read} line(s) read"
        if self.failures:
            summary += f", {self.failures} echoed unparsed"
        return summary


class ReaderShell(cmd.Cmd):
    """Line-at-a-time reader shell."""

    prompt = "lispy> "

    def __init__(self, config: ReplConfig | None = None, stdin=None, stdout=None):
        super().__init__(stdin=stdin, stdout=stdout)
        self.config = config or ReplConfig()
        self.session = ReaderSession(mode=self.config.mode, show_errors=self.config.show_errors)
        self.prompt = self.config.prompt
        if stdin is not None:
            self.use_rawinput = False

        # Set up readline history
        self.histfile: Path | None = self.config.history_path if self.config.history else None
        if self.histfile is not None:
            readline.set_history_length(self.config.history_length)
            with contextlib.suppress(FileNotFoundError, PermissionError, OSError):
                readline.read_history_file(self.histfile)

    def save_history(self) -> None:
        """Save line history."""
        if self.histfile is None:
            return
        try:
            readline.write_history_file(self.histfile)
        except OSError as e:
            logger.warning(f"Could not write history file {self.histfile}: {e}")

    def render(self, line: str) -> str:
        """Output for one normalized line, echoing it if it cannot be parsed."""
        self.session.lines_read += 1
        try:
            return render_line(line, self.session.mode)
        except ParseError as e:
            self.session.failures += 1
            logger.info(f"Could not parse {line!r}, echoing input")
            if self.session.show_errors:
                print_error(e)
            return line

    def onecmd(self, line: str) -> bool:
        """Handle one raw input line. Returns True to stop the loop."""
        if line == "EOF":
            return self.do_EOF("")

        line = normalize_line(line)
        if not line:
            return self.emptyline()
        if line == EXIT_COMMAND:
            return self.do_exit("")

        self.stdout.write(self.render(line) + "\n")
        return False

    def do_exit(self, arg: str) -> bool:
        """Exit the reader."""
        self.save_history()
        logger.debug(f"Session ended: {self.session.status_summary()}")
        return True

    def do_EOF(self, arg: str) -> bool:
        """Handle Ctrl+D."""
        if self.use_rawinput:
            self.stdout.write("\n")  # Newline for clean exit
        return self.do_exit(arg)

    def emptyline(self) -> bool:
        """Do nothing on empty line (don't repeat last line)."""
        return False


def add_repl_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the reader loop options to a parser."""
    parser.add_argument("--mode", choices=REPL_MODES, help="What to print for each line")
    parser.add_argument("--prompt", help="Prompt text")
    parser.add_argument("--history-file", help="Path of the line history file")
    parser.add_argument(
        "--no-history", action="store_true", help="Do not read or write a history file"
    )
    parser.add_argument(
        "--show-errors", action="store_true", help="Print parse errors for unparsed lines"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress warnings")


def run_repl(args: argparse.Namespace) -> int:
    """Run the reader loop with options from the command line and config files."""
    try:
        config = Config.load()
    except ConfigurationError as e:
        print_error(e)
        return 1

    overrides = {}
    if args.mode:
        overrides["mode"] = args.mode
    if args.prompt is not None:
        overrides["prompt"] = args.prompt
    if args.history_file:
        overrides["history_file"] = args.history_file
    if args.no_history:
        overrides["history"] = False
    if args.show_errors:
        overrides["show_errors"] = True
    repl_config = dataclasses.replace(config.repl, **overrides)

    if args.verbose or config.defaults.verbose:
        enable_verbose("DEBUG")
    quiet = args.quiet or config.defaults.quiet

    # Check if running in a TTY
    if not sys.stdin.isatty() and not quiet:
        print("Warning: Running in non-TTY mode (limited features)", file=sys.stderr)

    shell = ReaderShell(config=repl_config)

    try:
        shell.cmdloop()
    except KeyboardInterrupt:
        # Ctrl+C ends the session the same way as end of input
        shell.save_history()
        return 0
    except OSError as e:
        print_error(e)
        shell.save_history()
        return 1

    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for interactive mode."""
    parser = argparse.ArgumentParser(
        prog="lispy repl",
        description="Read lispy expressions and print them in canonical form",
    )
    add_repl_arguments(parser)
    args = parser.parse_args(argv)
    return run_repl(args)


if __name__ == "__main__":
    sys.exit(main())
