"""Fake usage markers: rendering and recognition.

A fake usage silences Go's "declared and not used" error without changing
program behavior:

    notUsed := false; _ = notUsed /* TODO: gouse */

After gofmt the statement is moved onto its own line, so two surface forms
are recognized:

    canonical:  ``; _ = notUsed /* TODO: gouse */`` (appended to a line)
    gofmted:    ``\\n\\t_ = notUsed /* TODO: gouse */`` (own line)
"""

import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

USAGE_PREFIX = b"; _ ="


@dataclass(frozen=True)
class Marker:
    """Marker text for one tool name.

    Attributes:
        tool_name: Tag used in the TODO comment.

    """

    tool_name: str = "gouse"
    _canonical: re.Pattern[bytes] = field(init=False, repr=False, compare=False)
    _gofmted: re.Pattern[bytes] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Compile both recognition patterns for this tool name."""
        escaped_suffix = re.escape(self.suffix)
        object.__setattr__(
            self, "_canonical", re.compile(re.escape(USAGE_PREFIX) + b".*" + escaped_suffix)
        )
        # Identifiers may be non-ASCII, which bytes \w does not match.
        object.__setattr__(
            self, "_gofmted", re.compile(rb"\s*_\s*= [^\s;=]*\s*" + escaped_suffix)
        )

    @property
    def suffix(self) -> bytes:
        """Comment closing every fake usage, e.g. `` /* TODO: gouse */``."""
        return f" /* TODO: {self.tool_name} */".encode()

    def render(self, name: str) -> bytes:
        """Build the canonical fake usage for a symbol.

        Args:
            name: Unused symbol name.

        Returns:
            Marker bytes such as ``b"; _ = v /* TODO: gouse */"``.

        """
        return USAGE_PREFIX + b" " + name.encode() + self.suffix

    def strip(self, code: bytes) -> bytes | None:
        """Remove all fake usages from code.

        The canonical form must be checked before the gofmted one because it
        also removes the leading ``;`` that gofmt would otherwise leave alone.

        Args:
            code: Full source text.

        Returns:
            Code without fake usages, or None when there was nothing to remove.

        """
        for form, pattern in (("canonical", self._canonical), ("gofmted", self._gofmted)):
            stripped, count = pattern.subn(b"", code)
            if count:
                logger.info("Removed %d %s fake usage(s)", count, form)
                return stripped
        return None
