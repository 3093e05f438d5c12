"""
Config command for lispy CLI.

Provides commands to view and initialize configuration.

Usage:
    lispy config --show          Show effective configuration with sources
    lispy config --init          Create template config file
    lispy config --paths         Show config file locations
    lispy config get <key>       Get a specific config value
"""

import argparse
import sys
from dataclasses import fields
from pathlib import Path

from lispy import config as lispy_config
from lispy.config import (
    CONFIG_FILENAMES,
    KNOWN_KEYS,
    Config,
    generate_template,
    get_config_paths,
)
from lispy.exceptions import ConfigurationError

from .utils import print_error


def add_config_arguments(parser: argparse.ArgumentParser) -> None:
    """Add config command options to a parser."""
    action_group = parser.add_mutually_exclusive_group()
    action_group.add_argument(
        "--show",
        action="store_true",
        help="Show effective configuration with sources",
    )
    action_group.add_argument(
        "--init",
        action="store_true",
        help="Create template config file in current directory",
    )
    action_group.add_argument(
        "--paths",
        action="store_true",
        help="Show config file paths",
    )

    parser.add_argument("action", nargs="?", choices=["get"], help="Config action")
    parser.add_argument("key", nargs="?", help="Config key (e.g., repl.prompt)")

    parser.add_argument(
        "--user",
        action="store_true",
        help="Use user config (~/.config/lispy/config.toml) for --init",
    )


def run_config(args: argparse.Namespace) -> int:
    try:
        if args.init:
            return _init_config(args.user)
        if args.paths:
            return _show_paths()
        if args.action == "get":
            if not args.key:
                print("Error: 'get' requires a key argument", file=sys.stderr)
                return 1
            return _get_config(args.key)
        return _show_config()

    except ConfigurationError as e:
        print_error(e)
        return 1


def _show_config() -> int:
    """Show effective configuration with sources."""
    config = Config.load()

    print("# Effective lispy configuration")
    for section in KNOWN_KEYS:
        print()
        print(f"[{section}]")
        section_obj = getattr(config, section)
        for f in fields(section_obj):
            key = f"{section}.{f.name}"
            _print_value(f.name, getattr(section_obj, f.name), config.get_source(key))

    return 0


def _format_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f'"{value}"'
    return str(value)


def _print_value(key: str, value, source: str) -> None:
    """Print a config value with its source."""
    # Show just filename for brevity
    source_display = Path(source).name if source != "default" else source
    print(f"{key} = {_format_value(value)}  # from: {source_display}")


def _show_paths() -> int:
    """Show config file paths."""
    paths = get_config_paths()

    print("Config file paths:")
    print()

    print(f"User config: {lispy_config.USER_CONFIG_PATH}")
    print("  Status: exists" if paths["user"] else "  Status: not found")
    print()

    print(f"Project config search: {', '.join(CONFIG_FILENAMES)}")
    if paths["project"]:
        print(f"  Found: {paths['project']}")
    else:
        print("  Status: not found")

    return 0


def _init_config(user: bool = False) -> int:
    """Create a template config file."""
    if user:
        target = lispy_config.USER_CONFIG_PATH
        target.parent.mkdir(parents=True, exist_ok=True)
    else:
        target = Path.cwd() / CONFIG_FILENAMES[0]  # .lispy.toml

    if target.exists():
        print(f"Error: Config file already exists: {target}", file=sys.stderr)
        print("Remove it first or edit manually.", file=sys.stderr)
        return 1

    try:
        target.write_text(generate_template())
    except OSError as e:
        print(f"Error writing config file: {e}", file=sys.stderr)
        return 1

    print(f"Created config template: {target}")
    return 0


def _get_config(key: str) -> int:
    """Get a specific config value."""
    config = Config.load()

    parts = key.split(".")
    if len(parts) != 2:
        print(f"Error: Invalid key format '{key}'. Use 'section.key' format.", file=sys.stderr)
        return 1

    section, attr = parts
    if section not in KNOWN_KEYS:
        print(f"Error: Unknown config section '{section}'", file=sys.stderr)
        return 1
    section_obj = getattr(config, section)
    if attr not in KNOWN_KEYS[section]:
        print(f"Error: Unknown key '{attr}' in section '{section}'", file=sys.stderr)
        return 1

    value = getattr(section_obj, attr)
    print(value if isinstance(value, str) else _format_value(value))

    source = config.get_source(key)
    if source != "default":
        print(f"# source: {source}", file=sys.stderr)

    return 0
