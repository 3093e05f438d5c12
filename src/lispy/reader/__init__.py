"""
Reader for the lispy S-expression language.

Turns one line of text into an expression tree and back into canonical text.

Usage:
    from lispy.reader import read, to_canonical, tokenize

    tree = read("(+  1 (- 3 2 ))")
    to_canonical(tree)              # '(+ 1 (- 3 2))'
    to_canonical(tokenize("(a b)"))  # '(a b)'
"""

from typing import Iterable, Union

from .expr import Expr, List, Number, String, Symbol, deref, format_expr
from .parser import Parser, ParseResult, parse, read
from .tokens import Token, TokenKind, format_tokens, tokenize


def to_canonical(obj: Union[Expr, Iterable[Token]]) -> str:
    """Canonical text for an expression tree or a token sequence."""
    if isinstance(obj, Expr):
        return format_expr(obj)
    return format_tokens(obj)


__all__ = [
    # Expression tree
    "Expr",
    "Number",
    "String",
    "Symbol",
    "List",
    "deref",
    "format_expr",
    # Tokenizer
    "Token",
    "TokenKind",
    "tokenize",
    "format_tokens",
    # Parser
    "Parser",
    "ParseResult",
    "parse",
    "read",
    "to_canonical",
]
