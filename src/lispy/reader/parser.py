"""
Recursive-descent parser for lispy expressions.

Grammar, alternatives tried in order:

    lisp_expr  := ws* expr ws*
    expr       := deref | number | string | symbol | list
    deref      := "@" alnum+                 -> (deref name)
    number     := "-"? digit+                -> Number
    string     := '"' [^"]* '"'              -> String
    symbol     := operator | alnum+          -> Symbol
    list       := "(" ws* (expr ws*)* ")"    -> List

Names and numbers end at the first character that is not alphanumeric, so
``(f(x))`` reads as ``(f (x))``, but ``-5abc`` is rejected rather than split.
Operators must be followed by whitespace, a closing parenthesis, or the end
of input; ``+foo`` is rejected.

When every alternative fails, the error from the alternative that got
furthest is reported, together with the chain of rules that led to it:

    >>> read("(+ 1 2")
    Traceback (most recent call last):
    ...
    lispy.exceptions.ParseError: Unterminated list: expected ')'

Usage:
    from lispy.reader.parser import parse, read

    result = parse("(+ 1 2) rest")
    result.expr       # List((Symbol('+'), Number(1), Number(2)))
    result.remaining  # 'rest'

    read("@x")        # List((Symbol('deref'), Symbol('x')))
"""

from __future__ import annotations

import functools
import logging
import string
from dataclasses import dataclass
from typing import Callable, TypeVar

from lispy.exceptions import ParseError, ParseFrame

from .expr import INT_MAX, INT_MIN, OPERATOR_CHARS, Expr, List, Number, String, Symbol, deref

logger = logging.getLogger(__name__)

ALNUM_CHARS = frozenset(string.ascii_letters + string.digits)
DIGIT_CHARS = frozenset(string.digits)

T = TypeVar("T")


@dataclass(frozen=True)
class ParseResult:
    """A parsed expression and the input left after it."""

    expr: Expr
    remaining: str


def _rule(name: str) -> Callable[[Callable[[Parser], T]], Callable[[Parser], T]]:
    """Name a grammar rule: on failure, rewind and add a frame to the error trace."""

    def decorator(method: Callable[[Parser], T]) -> Callable[[Parser], T]:
        @functools.wraps(method)
        def wrapper(self: Parser) -> T:
            start = self.pos
            try:
                return method(self)
            except ParseError as e:
                self.pos = start
                raise e.within(name, start, self.text[start:]) from None

        return wrapper

    return decorator


class Parser:
    """Parser for a single line of lispy input."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.length = len(text)

    def parse(self) -> ParseResult:
        """Parse one expression, returning it with the unconsumed input."""
        try:
            expr = self._parse_lisp_expr()
        except RecursionError:
            raise ParseError(
                "Expression nested too deeply",
                position=self.pos,
                suggestions=["Reduce the nesting depth of the expression"],
            ) from None
        except ParseError as e:
            logger.debug(f"Parse failed:\n{e.trace()}")
            raise
        return ParseResult(expr, self.text[self.pos :])

    def read(self) -> Expr:
        """Parse the whole input as exactly one expression."""
        result = self.parse()
        if result.remaining:
            raise ParseError(
                "Unexpected content after expression",
                position=self.pos,
                frames=[ParseFrame("lisp_expr", 0, self.text)],
                suggestions=[
                    "Enter a single expression per line",
                    "Wrap several expressions in a list: (a b c)",
                ],
            )
        return result.expr

    # -------------------------------------------------------------------------
    # Grammar rules
    # -------------------------------------------------------------------------

    @_rule("lisp_expr")
    def _parse_lisp_expr(self) -> Expr:
        self._skip_whitespace()
        if self.pos >= self.length:
            raise self._error("Unexpected end of input")
        expr = self._parse_expr()
        self._skip_whitespace()
        return expr

    @_rule("expr")
    def _parse_expr(self) -> Expr:
        return self._alt(
            ("deref", self._parse_deref),
            ("number", self._parse_number),
            ("string", self._parse_string),
            ("symbol", self._parse_symbol),
            ("list", self._parse_list),
        )

    @_rule("deref")
    def _parse_deref(self) -> Expr:
        self._expect("@")
        name = self._take_while(ALNUM_CHARS)
        if not name:
            raise self._error("Expected a name after '@'")
        return deref(name)

    @_rule("number")
    def _parse_number(self) -> Expr:
        start = self.pos
        if self._peek() == "-":
            self.pos += 1
        if not self._take_while(DIGIT_CHARS):
            raise self._error("Expected digits")
        self._expect_word_end("Number")

        value = int(self.text[start : self.pos])
        if not INT_MIN <= value <= INT_MAX:
            raise self._error(
                "Integer literal out of range",
                suggestions=[f"Numbers must be between {INT_MIN} and {INT_MAX}"],
            )
        return Number(value)

    @_rule("string")
    def _parse_string(self) -> Expr:
        self._expect('"')
        end = self.text.find('"', self.pos)
        if end < 0:
            self.pos = self.length
            raise self._error("Unterminated string", suggestions=["Add a closing '\"'"])
        text = self.text[self.pos : end]
        self.pos = end + 1
        return String(text)

    @_rule("symbol")
    def _parse_symbol(self) -> Expr:
        char = self._peek()
        if char is not None and char in OPERATOR_CHARS:
            self.pos += 1
            self._expect_boundary("Operator")
            return Symbol(char)

        start = self.pos
        name = self._take_while(ALNUM_CHARS)
        if not name:
            raise self._error("Expected a symbol")
        if name.isdigit():
            # All-digit runs belong to the number rule
            self.pos = start
            raise self._error("Expected a symbol, found a number")
        return Symbol(name)

    @_rule("list")
    def _parse_list(self) -> Expr:
        self._expect("(")
        items = []
        while True:
            self._skip_whitespace()
            if self.pos >= self.length:
                raise self._error(
                    "Unterminated list: expected ')'",
                    suggestions=["Check for missing parentheses"],
                )
            if self.text[self.pos] == ")":
                self.pos += 1
                return List(tuple(items))
            items.append(self._parse_expr())

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _alt(self, *alternatives: tuple[str, Callable[[], T]]) -> T:
        """Try alternatives in order; the first success wins."""
        start = self.pos
        failures = []
        for _name, rule in alternatives:
            try:
                return rule()
            except ParseError as e:
                self.pos = start
                failures.append(e)

        attempted = [name for name, _ in alternatives]
        furthest = max(reversed(failures), key=lambda e: e.position)
        if furthest.position == start:
            # Nothing got past the first character
            raise self._error(self._describe_unexpected(), attempted=attempted)
        raise ParseError(
            furthest.message,
            position=furthest.position,
            frames=furthest.frames,
            attempted=attempted,
            suggestions=furthest.suggestions,
        )

    def _describe_unexpected(self) -> str:
        char = self._peek()
        if char is None:
            return "Unexpected end of input"
        if char == ")":
            return "Unexpected ')'"
        return f"Unexpected character {char!r}"

    def _error(self, message: str, **kwargs) -> ParseError:
        return ParseError(message, position=self.pos, **kwargs)

    def _peek(self) -> str | None:
        if self.pos < self.length:
            return self.text[self.pos]
        return None

    def _expect(self, char: str) -> None:
        if self._peek() != char:
            raise self._error(f"Expected {char!r}")
        self.pos += 1

    def _expect_boundary(self, what: str) -> None:
        """Require whitespace, ')' or end of input at the current position."""
        char = self._peek()
        if char is None or char.isspace() or char == ")":
            return
        raise self._error(
            f"{what} must be followed by whitespace, ')' or end of input, found {char!r}",
            suggestions=["Separate atoms with spaces"],
        )

    def _expect_word_end(self, what: str) -> None:
        """Reject an alphanumeric character at the current position."""
        char = self._peek()
        if char is not None and char in ALNUM_CHARS:
            raise self._error(
                f"{what} must not run into {char!r}",
                suggestions=["Separate atoms with spaces"],
            )

    def _take_while(self, chars: frozenset[str]) -> str:
        start = self.pos
        while self.pos < self.length and self.text[self.pos] in chars:
            self.pos += 1
        return self.text[start : self.pos]

    def _skip_whitespace(self) -> None:
        while self.pos < self.length and self.text[self.pos].isspace():
            self.pos += 1


def parse(text: str) -> ParseResult:
    """Parse one expression from the start of ``text``."""
    return Parser(text).parse()


def read(text: str) -> Expr:
    """Parse ``text`` as exactly one expression."""
    return Parser(text).read()


__all__ = ["Parser", "ParseResult", "parse", "read"]
