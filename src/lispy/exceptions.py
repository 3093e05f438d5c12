"""
Custom exception hierarchy for lispy.

Provides consistent error handling with context, suggestions, and actionable guidance.
All exceptions include:
- Context information (input position, rule, config file, etc.)
- Suggestions for how to fix the issue
- Clear, formatted error messages

Example::

    from lispy.exceptions import ConfigurationError, ParseError

    raise ConfigurationError(
        "Invalid REPL mode",
        context={"file": ".lispy.toml", "mode": "eval"},
        suggestions=["Use one of: parse, tokens, echo"],
    )
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

if TYPE_CHECKING:
    from rich.console import Console, ConsoleOptions, RenderResult

# Remaining input is cut to this many characters in traces
_SNIPPET_LENGTH = 24


class LispyError(Exception):
    """
    Base exception for all lispy errors.

    Provides consistent formatting with context and suggestions.

    Attributes:
        context: Dictionary of contextual information (position, file, etc.)
        suggestions: List of actionable suggestions for fixing the error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context and suggestions."""
        parts = [self.message]

        if self.context:
            parts.append("\n\nContext:")
            for key, value in self.context.items():
                parts.append(f"\n  {key}: {value}")

        if self.suggestions:
            parts.append("\n\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"\n  - {suggestion}")

        return "".join(parts)

    def __str__(self) -> str:
        return self._format_message()

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        from rich.text import Text

        yield Text(f"Error: {self.message}", style="bold red")
        if self.context:
            yield Text("Context:", style="bold")
            for key, value in self.context.items():
                yield Text(f"  {key}: {value}")
        if self.suggestions:
            yield Text("Suggestions:", style="bold")
            for suggestion in self.suggestions:
                yield Text(f"  - {suggestion}", style="cyan")


@dataclass(frozen=True)
class ParseFrame:
    """One entry of a parse error trace: the rule that was active and where."""

    rule: str
    position: int
    remaining: str

    def describe(self) -> str:
        snippet = self.remaining
        if len(snippet) > _SNIPPET_LENGTH:
            snippet = snippet[:_SNIPPET_LENGTH] + "..."
        return f"in {self.rule} at {self.position}: {snippet!r}"


class ParseError(LispyError):
    """
    S-expression parsing failed.

    Raised when an input line matches none of the grammar alternatives,
    or when a structure (list, string, number) is malformed or unterminated.

    The error carries a stack of ``ParseFrame`` entries, outermost rule first,
    so the full path through the grammar can be shown to the user.

    Example::

        raise ParseError(
            "Expected ')'",
            position=6,
            frames=[ParseFrame("list", 0, "(+ 1 2")],
            suggestions=["Check for missing parentheses"],
        )

    Attributes:
        position: Offset into the input where parsing finally failed
        frames: Rule/position pairs active at the failure, outermost first
        attempted: Alternatives tried at the failing choice point, if any
    """

    def __init__(
        self,
        message: str,
        position: int = 0,
        frames: Optional[Sequence[ParseFrame]] = None,
        attempted: Optional[Sequence[str]] = None,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.position = position
        self.frames = list(frames or [])
        self.attempted = list(attempted or [])

        ctx = dict(context or {})
        if "position" not in ctx:
            ctx["position"] = position
        if self.attempted and "attempted" not in ctx:
            ctx["attempted"] = ", ".join(self.attempted)
        if self.frames and "trace" not in ctx:
            ctx["trace"] = "".join(f"\n    {frame.describe()}" for frame in self.frames)

        super().__init__(message, ctx, suggestions)

    @property
    def rules(self) -> List[str]:
        """Rule names of the trace, outermost first."""
        return [frame.rule for frame in self.frames]

    def within(self, rule: str, position: int, remaining: str) -> ParseError:
        """Return a copy of this error with an enclosing rule frame prepended."""
        context = {
            k: v for k, v in self.context.items() if k not in ("position", "attempted", "trace")
        }
        return ParseError(
            self.message,
            position=self.position,
            frames=[ParseFrame(rule, position, remaining), *self.frames],
            attempted=self.attempted,
            context=context,
            suggestions=self.suggestions,
        )

    def trace(self) -> str:
        """Format the stacked rule context, one frame per line."""
        lines = [f"{self.message} (at position {self.position})"]
        for depth, frame in enumerate(self.frames):
            lines.append("  " * (depth + 1) + frame.describe())
        if self.attempted:
            lines.append(f"  tried: {', '.join(self.attempted)}")
        return "\n".join(lines)


class ConfigurationError(LispyError):
    """
    Configuration or settings error.

    Raised when a config file is unreadable, is not valid TOML, or holds
    a value of the wrong type.

    Example::

        raise ConfigurationError(
            "Invalid TOML in config file",
            context={"file": "/home/me/.config/lispy/config.toml"},
            suggestions=["Run 'lispy config --init' to regenerate a template"],
        )
    """

    pass


__all__ = [
    "LispyError",
    "ParseFrame",
    "ParseError",
    "ConfigurationError",
]
