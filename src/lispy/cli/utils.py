"""Shared utilities for CLI commands."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from lispy.exceptions import LispyError

if TYPE_CHECKING:
    from rich.console import Console

__all__ = ["format_error", "print_error", "get_error_console"]

# Module-level console for error output, created lazily
_error_console: Console | None = None


def get_error_console() -> Console:
    """Get or create the Rich console for error output.

    The console writes to stderr and is cached for reuse.
    """
    global _error_console
    if _error_console is None:
        from rich.console import Console

        _error_console = Console(stderr=True, force_terminal=None)
    return _error_console


def print_error(e: Exception, use_rich: bool | None = None) -> None:
    """
    Print an exception to stderr.

    lispy errors are rendered through Rich on a terminal, with their
    context and suggestions styled. Pipes and captured output get the
    plain text from ``format_error``.

    Args:
        e: The exception to print
        use_rich: Override automatic TTY detection (None = auto-detect)
    """
    console = get_error_console()

    if use_rich is None:
        use_rich = console.is_terminal

    if use_rich and isinstance(e, LispyError):
        console.print(e)
    else:
        print(format_error(e), file=sys.stderr)


def format_error(e: Exception) -> str:
    """Format an exception as one plain-text message, prefixed with ``Error:``."""
    if isinstance(e, LispyError):
        return f"Error: {e}"
    return f"Error: {type(e).__name__}: {e}"
