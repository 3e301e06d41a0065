# src/issue_engagement/config/logging_config.py

"""Logging setup for the command line."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbose: bool = False) -> None:
    """Route log records through rich, on stderr so JSON output stays clean."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )

    # Silence noisy libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
