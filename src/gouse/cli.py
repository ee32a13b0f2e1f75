"""Command-line interface for gouse.

Usage:
    gouse [-w] [FILE ...]

By default gouse reads code from stdin and writes the toggled version to
stdout. With one path and no -w it writes the toggled file to stdout; with
-w it writes every given file back in place.

Examples:
    gouse < main.go
    gouse main.go
    gouse -w main.go io.go core.go

"""

import contextlib
import logging
import signal
import threading
from collections.abc import Iterator
from pathlib import Path

import typer

from gouse import __version__
from gouse.cli_utils import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    EXIT_SIGINT,
    EXIT_SUCCESS,
    _error,
    _setup_logging,
    _warning,
)
from gouse.core.cancellation import CancellationContext
from gouse.core.config import load_config
from gouse.core.exceptions import ConfigError, GouseError
from gouse.engine.toggle import Toggler

logger = logging.getLogger(__name__)

ERR_CANNOT_WRITE_TO_STDIN = "cannot use -w with standard input"
ERR_MUST_WRITE_TO_FILES = "must use -w with multiple paths"

app = typer.Typer(
    name="gouse",
    help="Toggle 'declared and not used' errors in Go code with fake usages.",
    add_completion=False,
)


@contextlib.contextmanager
def _cancel_on_sigint(cancel: CancellationContext) -> Iterator[None]:
    """Turn the first Ctrl+C into a cancellation request.

    A second Ctrl+C raises KeyboardInterrupt as usual. Outside the main
    thread signal handlers cannot be installed and nothing is changed.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def handler(signum: int, frame: object) -> None:
        if cancel.is_cancelled:
            raise KeyboardInterrupt
        cancel.request_cancel()

    previous = signal.signal(signal.SIGINT, handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def _write_stdout(data: bytes) -> None:
    stdout = typer.get_binary_stream("stdout")
    stdout.write(data)
    stdout.flush()


def toggle_stream(toggler: Toggler, cancel: CancellationContext) -> None:
    """Toggle code from stdin and write it to stdout."""
    code = typer.get_binary_stream("stdin").read()
    _write_stdout(toggler.toggle(code, cancel=cancel))


def toggle_file(toggler: Toggler, path: Path, write: bool, cancel: CancellationContext) -> None:
    """Toggle one file.

    Args:
        toggler: Toggler to use.
        path: Go file path.
        write: If True, replace the file contents; otherwise print to stdout.
        cancel: Cancellation token.

    Raises:
        OSError: If the file cannot be read or written.
        GouseError: If toggling fails. The file is left untouched.

    """
    with path.open("r+b" if write else "rb") as f:
        code = f.read()
        toggled = toggler.toggle(code, cancel=cancel)
        if not write:
            _write_stdout(toggled)
            return
        f.seek(0)
        f.truncate()
        f.write(toggled)
    logger.info("Toggled %s", path)


@app.command()
def main(
    paths: list[Path] | None = typer.Argument(
        None,
        help="Go files to toggle (stdin if omitted)",
        show_default=False,
    ),
    write: bool = typer.Option(
        False,
        "--write",
        "-w",
        help="Write results to files",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to YAML config (default: $GOUSE_CONFIG)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors",
    ),
) -> None:
    """Toggle 'declared and not used' errors by adding or removing fake usages.

    First tries to remove fake usages. If there is nothing to remove, builds
    the code and adds `_ = name /* TODO: gouse */` for every unused variable.
    """
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=EXIT_SUCCESS)

    _setup_logging(verbose=verbose, quiet=quiet)

    paths = paths or []
    if not paths and write:
        _error(ERR_CANNOT_WRITE_TO_STDIN)
        raise typer.Exit(code=EXIT_CONFIG_ERROR)
    if len(paths) > 1 and not write:
        _error(ERR_MUST_WRITE_TO_FILES)
        raise typer.Exit(code=EXIT_CONFIG_ERROR)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from None

    toggler = Toggler(config)
    cancel = CancellationContext()

    try:
        with _cancel_on_sigint(cancel):
            if not paths:
                toggle_stream(toggler, cancel)
            for path in paths:
                if cancel.is_cancelled:
                    break
                toggle_file(toggler, path, write, cancel)
    except KeyboardInterrupt:
        _warning("Interrupted")
        raise typer.Exit(code=EXIT_SIGINT) from None
    except (GouseError, OSError) as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_ERROR) from None

    if cancel.is_cancelled:
        _warning("Interrupted")
        raise typer.Exit(code=EXIT_SIGINT)
