"""
Whitespace tokenizer for lispy input.

The simplest way to read a line: pad parentheses with spaces, split on
whitespace, and classify each piece. Tokenizing never fails; anything that
is not a parenthesis or an integer is a symbol.

Usage:
    from lispy.reader.tokens import format_tokens, tokenize

    tokens = tokenize("(+  1 (- 3 2 ) )")
    format_tokens(tokens)  # '(+ 1 (- 3 2))'
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Union

from .expr import INT_MAX, INT_MIN

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


class TokenKind(Enum):
    """Kinds of token produced by the tokenizer."""

    LPAREN = "lparen"
    RPAREN = "rparen"
    INTEGER = "integer"
    SYMBOL = "symbol"


@dataclass(frozen=True)
class Token:
    """A single token. ``value`` is the int for INTEGER, the text for SYMBOL."""

    kind: TokenKind
    value: Optional[Union[int, str]] = None

    @classmethod
    def classify(cls, piece: str) -> Token:
        """Classify one whitespace-free piece of input."""
        if piece == "(":
            return LPAREN
        if piece == ")":
            return RPAREN
        number = _parse_integer(piece)
        if number is not None:
            return cls(TokenKind.INTEGER, number)
        return cls(TokenKind.SYMBOL, piece)

    def to_string(self) -> str:
        if self.kind is TokenKind.LPAREN:
            return "("
        if self.kind is TokenKind.RPAREN:
            return ")"
        return str(self.value)

    def __str__(self) -> str:
        return self.to_string()


LPAREN = Token(TokenKind.LPAREN)
RPAREN = Token(TokenKind.RPAREN)


def _parse_integer(piece: str) -> Optional[int]:
    """Parse a signed 64-bit decimal integer, or return None."""
    if not _INTEGER_RE.fullmatch(piece):
        return None
    value = int(piece)
    if not INT_MIN <= value <= INT_MAX:
        return None
    return value


def tokenize(line: str) -> list[Token]:
    """Split a line into tokens."""
    padded = line.replace("(", " ( ").replace(")", " ) ")
    return [Token.classify(piece) for piece in padded.split()]


def format_tokens(tokens: Iterable[Token]) -> str:
    """
    Print tokens in canonical form.

    Opening parentheses hug what follows, closing parentheses hug what
    precedes, and every other token is followed by one space unless the
    next token closes a list or the input ends.
    """
    tokens = list(tokens)
    parts = []
    for i, token in enumerate(tokens):
        parts.append(token.to_string())
        if token.kind in (TokenKind.LPAREN, TokenKind.RPAREN):
            continue
        following = tokens[i + 1] if i + 1 < len(tokens) else None
        if following is not None and following.kind is not TokenKind.RPAREN:
            parts.append(" ")
    return "".join(parts)


__all__ = [
    "Token",
    "TokenKind",
    "LPAREN",
    "RPAREN",
    "tokenize",
    "format_tokens",
]
