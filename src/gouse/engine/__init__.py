"""Toggle engine: markers, diagnostics, line rewriting and orchestration."""

from gouse.engine.build import BuildReport, BuildReporter, GoBuildReporter
from gouse.engine.diagnostics import (
    DECLARED_NOT_USED,
    MISSING_PROVIDER,
    DiagnosticClass,
    SymbolInfo,
    extract_symbols,
    parse_diagnostics,
)
from gouse.engine.markers import Marker
from gouse.engine.toggle import Toggler, toggle

__all__ = [
    "BuildReport",
    "BuildReporter",
    "DECLARED_NOT_USED",
    "DiagnosticClass",
    "GoBuildReporter",
    "MISSING_PROVIDER",
    "Marker",
    "SymbolInfo",
    "Toggler",
    "extract_symbols",
    "parse_diagnostics",
    "toggle",
]
