"""Toggle orchestration.

A toggle either removes fake usages (if the code has any) or adds them for
every "declared and not used" error reported by the compiler:

    CheckMarkers ─┬─> Stripped
                  └─> CommentProblematicImports -> DetectUnused
                      -> ApplyMarkersAndUncomment

go build stops at the first class of errors it meets, so an import without
a module provider hides every unused variable. Those imports are commented
out for the second build and restored afterwards.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gouse.core.config import GouseConfig
from gouse.engine.build import BuildReporter, GoBuildReporter
from gouse.engine.diagnostics import DECLARED_NOT_USED, MISSING_PROVIDER, extract_symbols
from gouse.engine.markers import Marker
from gouse.engine.rewriter import (
    append_usages,
    comment_out,
    join_lines,
    split_lines,
    uncomment,
)

if TYPE_CHECKING:
    from gouse.core.cancellation import CancellationContext

logger = logging.getLogger(__name__)


class Toggler:
    """Toggles fake usages in Go source.

    Holds no per-call state, so one instance can serve concurrent calls on
    distinct inputs.

    Example:
        >>> toggler = Toggler()
        >>> toggled = toggler.toggle(code)
        >>> toggler.toggle(toggled) == code
        True

    """

    def __init__(
        self,
        config: GouseConfig | None = None,
        reporter: BuildReporter | None = None,
    ) -> None:
        """Initialize Toggler.

        Args:
            config: Engine configuration. Defaults to GouseConfig().
            reporter: Build-and-report capability. Defaults to a
                GoBuildReporter using config.

        """
        self.config = config or GouseConfig()
        self.reporter = reporter or GoBuildReporter(self.config)
        self.marker = Marker(self.config.tool_name)

    def toggle(self, code: bytes, cancel: CancellationContext | None = None) -> bytes:
        """Return toggled code.

        First tries to remove previously created fake usages. If there is
        nothing to remove, creates them.

        Args:
            code: Go source.
            cancel: Optional cancellation token, checked before each build.

        Returns:
            Toggled source.

        Raises:
            BuildError: If go build could not be run.
            BuildIOError: If the temporary build workspace failed.
            DiagnosticParseError: If a diagnostic does not fit the source.

        """
        stripped = self.marker.strip(code)
        if stripped is not None:
            return stripped

        lines = split_lines(code)

        # Comment out imports without a module provider so the next build
        # reaches the "declared and not used" check.
        no_provider = extract_symbols(code, MISSING_PROVIDER, self.reporter, cancel)
        commented = comment_out(lines, (info.line_num for info in no_provider))
        if commented:
            logger.debug("Commented out %d import(s) without provider", len(commented))

        not_used = extract_symbols(join_lines(lines), DECLARED_NOT_USED, self.reporter, cancel)
        append_usages(lines, not_used, self.marker)
        uncomment(lines, commented)

        if not_used:
            logger.info(
                "Added %d fake usage(s): %s",
                len(not_used),
                ", ".join(info.name for info in not_used),
            )
        return join_lines(lines)


def toggle(
    code: bytes,
    *,
    cancel: CancellationContext | None = None,
    config: GouseConfig | None = None,
    reporter: BuildReporter | None = None,
) -> bytes:
    """Toggle fake usages in code with a one-off Toggler.

    See Toggler.toggle() for details.
    """
    return Toggler(config=config, reporter=reporter).toggle(code, cancel=cancel)
