"""
Parse and tokenize commands for lispy CLI.

Usage:
    lispy parse "(+ 1 2)"                 Print canonical form
    lispy parse "(+ 1 2)" --format json   Print the tree as JSON
    lispy parse "(+ 1 2)" --format tree   Print the tree as an outline
    lispy parse < lines.txt               Parse each line of stdin
    lispy tokens "(+ 1 2)" --format table Show the token list
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import TYPE_CHECKING, Iterable

from lispy.exceptions import ParseError
from lispy.reader import Expr, List, Number, String, Symbol, format_tokens, parse, read, tokenize

from .interactive import normalize_line
from .utils import print_error

if TYPE_CHECKING:
    from rich.tree import Tree


def add_parse_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "expression",
        nargs="?",
        help="Expression to parse (default: read lines from stdin)",
    )
    parser.add_argument("--format", choices=["text", "json", "tree"], default="text")
    parser.add_argument(
        "--allow-trailing",
        action="store_true",
        help="Parse the first expression and ignore anything after it",
    )


def add_tokens_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "line",
        nargs="?",
        help="Line to tokenize (default: read lines from stdin)",
    )
    parser.add_argument("--format", choices=["text", "table"], default="text")


def _input_lines(text: str | None) -> Iterable[str]:
    if text is not None:
        yield normalize_line(text)
        return
    for line in sys.stdin:
        line = normalize_line(line)
        if line:
            yield line


def run_parse(args: argparse.Namespace) -> int:
    """Parse each input line and print it in the requested format."""
    failed = False
    for line in _input_lines(args.expression):
        try:
            if args.allow_trailing:
                expr = parse(line).expr
            else:
                expr = read(line)
        except ParseError as e:
            print_error(e)
            failed = True
            continue
        _print_expr(expr, args.format)
    return 1 if failed else 0


def run_tokens(args: argparse.Namespace) -> int:
    """Tokenize each input line and print the tokens."""
    for line in _input_lines(args.line):
        tokens = tokenize(line)
        if args.format == "table":
            from rich.console import Console
            from rich.markup import escape
            from rich.table import Table

            table = Table(title=escape(f"Tokens: {line}"))
            table.add_column("#", justify="right")
            table.add_column("Kind")
            table.add_column("Value")
            for i, token in enumerate(tokens):
                table.add_row(str(i), token.kind.value, escape(token.to_string()))
            Console().print(table)
        else:
            print(format_tokens(tokens))
    return 0


def _print_expr(expr: Expr, fmt: str) -> None:
    if fmt == "json":
        print(json.dumps(expr.to_data()))
    elif fmt == "tree":
        from rich.console import Console

        Console().print(build_tree(expr))
    else:
        print(expr.to_string())


def build_tree(expr: Expr, parent: Tree | None = None) -> Tree:
    """Build a Rich tree outline of an expression."""
    from rich.tree import Tree

    label = _tree_label(expr)
    node = Tree(label) if parent is None else parent.add(label)
    if isinstance(expr, List):
        for item in expr:
            build_tree(item, node)
    return node


def _tree_label(expr: Expr) -> str:
    from rich.markup import escape

    if isinstance(expr, Number):
        return f"Number {expr.value}"
    if isinstance(expr, String):
        return escape(f'String "{expr.text}"')
    if isinstance(expr, Symbol):
        return f"Symbol {expr.name}"
    return f"List ({len(expr)} items)"
