"""
lispy: a reader for a small S-expression language.

This package turns lines of lispy text into expression trees and prints
them back in canonical form. An interactive reader loop is included.

Modules:
    reader: Tokenizer, expression tree and recursive-descent parser
    config: TOML configuration loading
    exceptions: Error hierarchy with context and suggestions
    cli: Command line and interactive reader loop

Quick Start::

    from lispy import read

    tree = read("(+ (- 3 2) 4)")
    tree.to_string()  # '(+ (- 3 2) 4)'
"""

__version__ = "0.1.0"

from lispy.exceptions import LispyError, ParseError
from lispy.reader import (
    Expr,
    List,
    Number,
    String,
    Symbol,
    parse,
    read,
    to_canonical,
    tokenize,
)

__all__ = [
    # Version
    "__version__",
    # Errors
    "LispyError",
    "ParseError",
    # Reader
    "Expr",
    "Number",
    "String",
    "Symbol",
    "List",
    "parse",
    "read",
    "to_canonical",
    "tokenize",
]
