"""
Configuration file support for lispy.

Provides hierarchical configuration loading from:
1. Project config: .lispy.toml or lispy.toml in the current directory or a parent
2. User config: ~/.config/lispy/config.toml

CLI arguments override config file values, and project config overrides user config.
"""

import sys
import warnings
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from lispy.exceptions import ConfigurationError

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

# Config file names to search for in project directories
CONFIG_FILENAMES = [".lispy.toml", "lispy.toml"]

# User-level config path
USER_CONFIG_PATH = Path.home() / ".config" / "lispy" / "config.toml"

# Output modes understood by the REPL
REPL_MODES = ("parse", "tokens", "echo")


@dataclass
class DefaultsConfig:
    """Default options for CLI commands."""

    verbose: bool = False
    quiet: bool = False


@dataclass
class ReplConfig:
    """Interactive reader configuration."""

    prompt: str = "lispy> "
    mode: str = "parse"
    history: bool = True
    history_file: str = "~/.lispy_history"
    history_length: int = 1000
    show_errors: bool = False

    @property
    def history_path(self) -> Path:
        return Path(self.history_file).expanduser()


# All known config keys for validation, with their expected types
KNOWN_KEYS: dict[str, dict[str, type]] = {
    "defaults": {f.name: f.type for f in fields(DefaultsConfig)},
    "repl": {f.name: f.type for f in fields(ReplConfig)},
}


@dataclass
class Config:
    """Merged configuration from all sources."""

    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    repl: ReplConfig = field(default_factory=ReplConfig)

    # Track which file each setting came from (for --show)
    _sources: dict = field(default_factory=dict, repr=False)

    @classmethod
    def load(cls, start_dir: Path | None = None) -> "Config":
        """
        Load configuration with precedence: project > user > defaults.

        Args:
            start_dir: Directory to start searching from (default: current directory)

        Returns:
            Merged configuration object

        Raises:
            ConfigurationError: If a config file is unreadable or holds bad values
        """
        if start_dir is None:
            start_dir = Path.cwd()

        config = cls()
        sources: dict[str, str] = {}

        # Load user config first (lower precedence)
        if USER_CONFIG_PATH.exists():
            user_data = _load_toml_file(USER_CONFIG_PATH)
            if user_data:
                _merge_config(config, user_data, str(USER_CONFIG_PATH), sources)

        # Load project config (higher precedence)
        project_config = _find_project_config(start_dir)
        if project_config:
            project_data = _load_toml_file(project_config)
            if project_data:
                _merge_config(config, project_data, str(project_config), sources)

        config._sources = sources
        return config

    def get_source(self, key: str) -> str:
        """Get the source file for a config key."""
        return self._sources.get(key, "default")


def _find_project_config(start_dir: Path) -> Path | None:
    """
    Find project config by walking up the directory tree.

    Stops at .git directory or filesystem root.

    Args:
        start_dir: Directory to start searching from

    Returns:
        Path to config file if found, None otherwise
    """
    current = start_dir.resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        # Stop at .git directory (project root)
        if (current / ".git").exists():
            break

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _load_toml_file(path: Path) -> dict[str, Any] | None:
    """
    Load a TOML file safely.

    Args:
        path: Path to TOML file

    Returns:
        Parsed TOML data or None if TOML support is unavailable

    Raises:
        ConfigurationError: If TOML is invalid or the file is unreadable
    """
    if tomllib is None:
        warnings.warn(
            "tomli package not installed. Config file support requires 'pip install tomli' for Python < 3.11.",
            stacklevel=2,
        )
        return None

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(
            "Invalid TOML in config file",
            context={"file": str(path), "reason": str(e)},
            suggestions=["Run 'lispy config --init' in an empty directory to see a valid template"],
        ) from e
    except OSError as e:
        raise ConfigurationError(
            "Cannot read config file", context={"file": str(path), "reason": str(e)}
        ) from e


def _merge_config(
    config: Config, data: dict[str, Any], source: str, sources: dict[str, str]
) -> None:
    """
    Merge loaded config data into Config object.

    Args:
        config: Config object to update
        data: Raw config data from TOML
        source: Source file path (for tracking)
        sources: Dict to update with source info
    """
    for key in data:
        if key not in KNOWN_KEYS:
            warnings.warn(f"Unknown config key '{key}' in {source}", stacklevel=3)

    for section, known in KNOWN_KEYS.items():
        if section not in data:
            continue
        section_data = data[section]
        if not isinstance(section_data, dict):
            raise ConfigurationError(
                f"Config section '{section}' must be a table",
                context={"file": source},
            )
        _warn_unknown_keys(section_data, set(known), section, source)

        target = getattr(config, section)
        for key, expected in known.items():
            if key not in section_data:
                continue
            value = section_data[key]
            _check_type(value, expected, f"{section}.{key}", source)
            setattr(target, key, value)
            sources[f"{section}.{key}"] = source

    if config.repl.mode not in REPL_MODES:
        raise ConfigurationError(
            f"Unknown REPL mode '{config.repl.mode}'",
            context={"file": sources.get("repl.mode", source), "key": "repl.mode"},
            suggestions=[f"Use one of: {', '.join(REPL_MODES)}"],
        )
    if config.repl.history_length < 0:
        raise ConfigurationError(
            "repl.history_length must not be negative",
            context={
                "file": sources.get("repl.history_length", source),
                "value": config.repl.history_length,
            },
        )


def _check_type(value: Any, expected: type, key: str, source: str) -> None:
    # bool is a subclass of int
    if expected is int and isinstance(value, bool):
        ok = False
    else:
        ok = isinstance(value, expected)
    if not ok:
        raise ConfigurationError(
            f"Config key '{key}' must be of type {expected.__name__}",
            context={"file": source, "value": repr(value)},
        )


def _warn_unknown_keys(data: dict[str, Any], known: set[str], section: str, source: str) -> None:
    """Warn about unknown keys in a config section."""
    for key in data:
        if key not in known:
            warnings.warn(f"Unknown config key '{section}.{key}' in {source}", stacklevel=4)


def generate_template() -> str:
    """
    Generate a template config file with all options documented.

    Returns:
        Template TOML string
    """
    return """# lispy configuration file
# Place as .lispy.toml in project root or ~/.config/lispy/config.toml for user defaults

[defaults]
# Enable verbose (debug) logging by default
# verbose = false

# Enable quiet mode by default (no notices on stderr)
# quiet = false

[repl]
# Prompt shown before each input line
# prompt = "lispy> "

# What to print for each line: parse, tokens, echo
# mode = "parse"

# Keep a history file between sessions
# history = true
# history_file = "~/.lispy_history"
# history_length = 1000

# Print the parser's error trace when a line cannot be parsed
# show_errors = false
"""


def get_config_paths() -> dict[str, Path | None]:
    """
    Get paths to config files that would be loaded.

    Returns:
        Dict with 'user' and 'project' keys
    """
    project_config = _find_project_config(Path.cwd())

    return {
        "user": USER_CONFIG_PATH if USER_CONFIG_PATH.exists() else None,
        "project": project_config,
    }
