"""
Custom logging configuration for the RBF-DRT CLI.

Provides formatters and handlers for clean CLI output:
- INFO: no prefix (clean output)
- WARNING: "! " prefix
- ERROR: "!! " prefix
- DEBUG: "[DEBUG] " prefix
"""

import argparse
import logging
import sys


# =============================================================================
# Custom Formatters
# =============================================================================

class PrefixFormatter(logging.Formatter):
    """Formatter that puts a fixed prefix in front of the message."""

    def __init__(self, prefix: str = ""):
        super().__init__()
        self.prefix = prefix

    def format(self, record):
        return f"{self.prefix}{record.getMessage()}"


class LevelFilter(logging.Filter):
    """Filter that accepts only specific log levels."""

    def __init__(self, levels):
        super().__init__()
        self.levels = levels if isinstance(levels, (list, tuple)) else [levels]

    def filter(self, record):
        return record.levelno in self.levels


# =============================================================================
# Setup Functions
# =============================================================================

def _add_handler(root_logger, stream, level, prefix, only_level=True):
    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    if only_level:
        handler.addFilter(LevelFilter(level))
    handler.setFormatter(PrefixFormatter(prefix))
    root_logger.addHandler(handler)


def setup_logging(args: argparse.Namespace) -> None:
    """
    Configure logging based on command line arguments.

    Output behavior:
    - Default: INFO + WARNING on stdout, ERROR on stderr
    - Quiet (-q): WARNING on stdout, ERROR on stderr (no INFO)
    - Verbose (-v): DEBUG on stderr + default behavior

    Parameters
    ----------
    args : argparse.Namespace
        Parsed command line arguments with 'quiet' and 'verbose' attributes
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Allow all levels, filter per handler
    root_logger.handlers.clear()

    if not args.quiet:
        _add_handler(root_logger, sys.stdout, logging.INFO, "")
    _add_handler(root_logger, sys.stdout, logging.WARNING, "! ")
    _add_handler(root_logger, sys.stderr, logging.ERROR, "!! ", only_level=False)
    if args.verbose >= 1:
        _add_handler(root_logger, sys.stderr, logging.DEBUG, "[DEBUG] ")


def log_separator(length: int = 50, char: str = "=") -> None:
    """Log a separator line for visual clarity."""
    logging.getLogger(__name__).info(char * length)
