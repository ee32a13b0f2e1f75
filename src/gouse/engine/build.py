"""Build-and-report capability backed by the Go toolchain.

The toggle engine only needs "build this code, tell me whether it compiled
and what the compiler said". BuildReporter is that narrow interface, so the
diagnostic grammar can be tested against recorded output with a fake, and
GoBuildReporter is the real implementation running ``go build``.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from gouse.core.config import GouseConfig
from gouse.core.exceptions import BuildError, BuildIOError
from gouse.engine.diagnostics import GO_FILE_EXT

logger = logging.getLogger(__name__)

_TEMP_PREFIX = "gouse"


@dataclass(frozen=True)
class BuildReport:
    """Outcome of a single build.

    Attributes:
        success: True if the build exited with status 0.
        output: Combined stdout and stderr of the build.

    """

    success: bool
    output: str

    @property
    def lines(self) -> list[str]:
        """Build output split into lines."""
        return self.output.split("\n")


class BuildReporter(Protocol):
    """Anything that can build Go code and report diagnostics."""

    def build(self, code: bytes) -> BuildReport:
        """Build code and return the result."""
        ...


class GoBuildReporter:
    """Builds code with ``go build`` in a disposable temporary directory.

    Every call gets its own temporary directory, so concurrent calls never
    collide, and the directory is removed on every exit path.

    Example:
        >>> reporter = GoBuildReporter(GouseConfig(timeout=60))
        >>> reporter.build(b"package main\\n\\nfunc main() {}\\n").success
        True

    """

    def __init__(self, config: GouseConfig | None = None) -> None:
        """Initialize reporter.

        Args:
            config: Build configuration. Defaults to GouseConfig().

        """
        self._config = config or GouseConfig()

    def command(self, source_path: Path) -> list[str]:
        """Return the build command for a source file."""
        return [
            self._config.go_binary,
            "build",
            "-o",
            os.devnull,
            *self._config.build_flags,
            str(source_path),
        ]

    def build(self, code: bytes) -> BuildReport:
        """Write code to a temporary file and build it.

        Args:
            code: Go source.

        Returns:
            BuildReport with success flag and combined output.

        Raises:
            BuildIOError: If the temporary directory or file cannot be created,
                written or removed.
            BuildError: If the Go executable cannot be run or times out.

        """
        try:
            temp_dir = tempfile.TemporaryDirectory(prefix=_TEMP_PREFIX, dir=self._config.temp_dir)
        except OSError as e:
            raise BuildIOError(f"build: cannot create temporary directory: {e}") from e

        try:
            source_path = self._write_source(Path(temp_dir.name), code)
            return self._run(source_path)
        finally:
            try:
                temp_dir.cleanup()
            except OSError as e:
                raise BuildIOError(f"build: cannot remove temporary directory: {e}") from e

    def _write_source(self, temp_path: Path, code: bytes) -> Path:
        try:
            fd, name = tempfile.mkstemp(suffix=GO_FILE_EXT, dir=temp_path)
            with os.fdopen(fd, "wb") as f:
                f.write(code)
        except OSError as e:
            raise BuildIOError(f"build: cannot write temporary source file: {e}") from e
        return Path(name)

    def _run(self, source_path: Path) -> BuildReport:
        cmd = self.command(source_path)
        logger.debug("Running: %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                cwd=self._config.workdir,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                timeout=self._config.timeout,
            )
        except FileNotFoundError as e:
            raise BuildError(f"build: cannot run {self._config.go_binary}: {e}") from e
        except PermissionError as e:
            raise BuildError(f"build: cannot execute {self._config.go_binary}: {e}") from e
        except subprocess.TimeoutExpired as e:
            raise BuildError(f"build: go build timed out after {self._config.timeout}s") from e

        output = result.stdout or ""
        logger.debug("go build exited with %d (%d output lines)", result.returncode, output.count("\n"))
        return BuildReport(success=result.returncode == 0, output=output)
