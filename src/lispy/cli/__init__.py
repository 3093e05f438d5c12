"""
Command-line interface for lispy.

Provides the `lispy` command:

    lispy                      - Start the interactive reader
    lispy repl                 - Start the interactive reader (with options)
    lispy parse <expr>         - Print the canonical form of an expression
    lispy tokens <line>        - Show how a line is tokenized
    lispy config               - Show or create configuration

Examples:
    lispy repl --mode tokens --no-history
    lispy parse "(+  1 (- 3 2 ))"
    lispy parse "@counter" --format json
    lispy parse --format tree < expressions.txt
    lispy tokens "(+ 1 2)" --format table
    lispy config --init
"""

import argparse
import sys
from typing import List, Optional

from lispy import __version__
from lispy.logging import enable_verbose

from .config_cmd import add_config_arguments, run_config
from .interactive import add_repl_arguments, run_repl
from .parse_cmd import add_parse_arguments, add_tokens_arguments, run_parse, run_tokens

__all__ = ["main"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lispy",
        description="Reader for the lispy S-expression language",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--version", action="version", version=f"lispy {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    repl_parser = subparsers.add_parser("repl", help="Start the interactive reader")
    add_repl_arguments(repl_parser)

    parse_parser = subparsers.add_parser("parse", help="Parse expressions")
    add_parse_arguments(parse_parser)
    parse_parser.add_argument("-v", "--verbose", action="store_true", help="Log parse traces")

    tokens_parser = subparsers.add_parser("tokens", help="Tokenize lines")
    add_tokens_arguments(tokens_parser)

    config_parser = subparsers.add_parser("config", help="Manage configuration")
    add_config_arguments(config_parser)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for lispy CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        # No subcommand: start the reader with default options
        args = parser.parse_args(["repl"])

    if args.command == "repl":
        return run_repl(args)
    if args.command == "parse":
        if args.verbose:
            enable_verbose("DEBUG")
        return run_parse(args)
    if args.command == "tokens":
        return run_tokens(args)
    if args.command == "config":
        return run_config(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
