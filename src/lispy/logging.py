"""
Logging configuration for lispy.

All modules log under the ``lispy`` namespace. Nothing is printed unless
verbose logging is switched on, either from the CLI (``-v``) or in code:

    from lispy.logging import enable_verbose

    enable_verbose("DEBUG")
    read("(+ 1")  # parse failures now log their rule trace
"""

import logging

_logger = logging.getLogger("lispy")
_logger.addHandler(logging.NullHandler())  # Default: no output


def enable_verbose(level: str = "INFO", format: str | None = None) -> None:
    """Enable verbose logging for debugging.

    Args:
        level: Logging level - "DEBUG", "INFO", "WARNING", "ERROR"
        format: Optional custom format string
    """
    _logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    for handler in _logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            _logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(getattr(logging, level.upper()))

    if format is None:
        format = "[%(levelname)s] %(message)s"

    handler.setFormatter(logging.Formatter(format))
    _logger.addHandler(handler)


def disable_verbose() -> None:
    """Disable verbose logging."""
    _logger.setLevel(logging.WARNING)
    for handler in _logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            _logger.removeHandler(handler)
