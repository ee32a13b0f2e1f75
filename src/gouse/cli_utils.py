"""Shared CLI utilities for gouse.

This module contains exit codes, the stderr console singleton, and helper
functions used by the CLI. Standard output is reserved for toggled code, so
every message and log record goes to stderr.
"""

import logging
import os
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

# Exit codes following Unix conventions
EXIT_SUCCESS: int = 0
EXIT_ERROR: int = 1  # Runtime error (I/O, build, diagnostic parsing)
EXIT_CONFIG_ERROR: int = 2  # Configuration/usage error
EXIT_SIGINT: int = 130  # 128 + SIGINT (2) - Interrupted by Ctrl+C

# TTY detection for Rich markup
_is_tty = sys.stderr.isatty()

# Rich console for messages (stderr)
console = Console(stderr=True, force_terminal=_is_tty, no_color=not _is_tty)

LOG_LEVEL_ENV_VAR = "GOUSE_LOG_LEVEL"


def _error(message: str) -> None:
    """Display error message with red styling.

    Args:
        message: Error message to display.

    """
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False, soft_wrap=True)


def _warning(message: str) -> None:
    """Display warning message with yellow styling.

    Args:
        message: Warning message to display.

    """
    console.print(f"[yellow]Warning:[/yellow] {escape(message)}", highlight=False, soft_wrap=True)


def _setup_logging(verbose: bool, quiet: bool) -> None:
    """Configure logging based on verbosity flags.

    Args:
        verbose: If True, set DEBUG level.
        quiet: If True, set ERROR level.

    Note:
        verbose and quiet are mutually exclusive. If both are True,
        verbose takes precedence.

        GOUSE_LOG_LEVEL env var overrides both flags.

    """
    env_level = os.environ.get(LOG_LEVEL_ENV_VAR, "").upper()
    if env_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
        level = getattr(logging, env_level)
    elif verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    # Clear any existing handlers to avoid duplicates
    logging.root.handlers.clear()

    # Create handler with explicit level (basicConfig doesn't set handler level)
    handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
    handler.setLevel(level)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
    )
