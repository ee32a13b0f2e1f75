"""Go build diagnostic grammar and symbol extraction.

Only two diagnostic classes are understood. Everything else the compiler
prints (syntax errors, type errors, "# command-line-arguments" headers) is
ignored rather than reported.

Examples of recognized lines:

    ./main.go:4:2: declared and not used: notUsed
    ./main.go:4:2: notUsed declared but not used          (Go < 1.20)
    ./main.go:3:8: no required module provides package example.com/x; to add it:
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from gouse.core.exceptions import DiagnosticParseError

if TYPE_CHECKING:
    from gouse.core.cancellation import CancellationContext
    from gouse.engine.build import BuildReporter

logger = logging.getLogger(__name__)

GO_FILE_EXT = ".go"

# Position prefix of a build error: ``<file>.go:<line>:<col>: ``.
# The line field accepts any token; non-integers raise DiagnosticParseError.
POSITION_REGEXP = re.escape(GO_FILE_EXT) + r":(?P<line>[^:\s]+):(?P<col>\d+): "


@dataclass(frozen=True)
class SymbolInfo:
    """Name and zero-based line number of a symbol named by a build error."""

    name: str
    line_num: int


@dataclass(frozen=True)
class DiagnosticClass:
    """A family of build errors recognized by message pattern.

    Attributes:
        name: Human-readable class name used in logs.
        patterns: Compiled patterns; each defines ``line`` and ``name`` groups.

    """

    name: str
    patterns: tuple[re.Pattern[str], ...]

    def match(self, diagnostic: str) -> re.Match[str] | None:
        """Return the first pattern match for a diagnostic line, if any."""
        for pattern in self.patterns:
            m = pattern.search(diagnostic)
            if m is not None:
                return m
        return None


def _diagnostic_class(name: str, *messages: str) -> DiagnosticClass:
    return DiagnosticClass(
        name=name,
        patterns=tuple(re.compile(POSITION_REGEXP + message) for message in messages),
    )


MISSING_PROVIDER = _diagnostic_class(
    "missing import provider",
    r"no required module provides package (?P<name>[^\s:;]+)",
)

DECLARED_NOT_USED = _diagnostic_class(
    "declared and not used",
    r"declared and not used: (?P<name>\w+)",
    r"(?P<name>\w+) declared (?:and|but) not used",
)


def parse_diagnostics(lines: Iterable[str], diagnostic: DiagnosticClass) -> list[SymbolInfo]:
    """Parse build output into symbols of one diagnostic class.

    Args:
        lines: Output lines of a failed build.
        diagnostic: Diagnostic class to collect.

    Returns:
        Symbols in the order the compiler reported them (source order).

    Raises:
        DiagnosticParseError: If a matching line has a non-integer or
            non-positive line number.

    """
    symbols: list[SymbolInfo] = []
    for line in lines:
        m = diagnostic.match(line)
        if m is None:
            continue
        raw_line_num = m.group("line")
        try:
            line_num = int(raw_line_num)
        except ValueError:
            raise DiagnosticParseError(
                f"parse_diagnostics: invalid line number {raw_line_num!r} in: {line}",
                diagnostic=line,
            ) from None
        if line_num < 1:
            raise DiagnosticParseError(
                f"parse_diagnostics: line number {line_num} out of range in: {line}",
                diagnostic=line,
            )
        # -1 converts the compiler's 1-based lines to buffer indexes
        symbols.append(SymbolInfo(name=m.group("name"), line_num=line_num - 1))
    return symbols


def extract_symbols(
    code: bytes,
    diagnostic: DiagnosticClass,
    reporter: BuildReporter,
    cancel: CancellationContext | None = None,
) -> list[SymbolInfo]:
    """Build code and collect symbols named by one class of build errors.

    Cancellation is only checked on entry; a build that has started runs
    to completion.

    Args:
        code: Go source to build.
        diagnostic: Diagnostic class to collect.
        reporter: Build-and-report capability.
        cancel: Optional cancellation token.

    Returns:
        Symbols in report order. Empty if cancelled or the build succeeded.

    Raises:
        BuildError: If the build could not be run.
        BuildIOError: If the temporary workspace could not be prepared.
        DiagnosticParseError: If a diagnostic position is malformed.

    """
    if cancel is not None and cancel.is_cancelled:
        logger.debug("Cancelled before extracting %r diagnostics", diagnostic.name)
        return []

    report = reporter.build(code)
    if report.success:
        logger.debug("Build succeeded, no %r diagnostics", diagnostic.name)
        return []

    symbols = parse_diagnostics(report.lines, diagnostic)
    logger.debug("Found %d %r diagnostic(s)", len(symbols), diagnostic.name)
    return symbols
