"""Logging setup for the orgpulse CLI."""

import sys

from loguru import logger


def configure_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Route loguru to stderr.

    ``verbose`` shows generation and aggregation details; ``quiet`` keeps
    only warnings and errors so JSON output on stdout stays clean.
    """
    logger.remove()
    if verbose:
        level = "DEBUG"
    elif quiet:
        level = "WARNING"
    else:
        level = "INFO"
    logger.add(sys.stderr, level=level, format="{level.icon} [{name}] {message}")
