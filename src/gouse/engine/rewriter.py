"""In-place line edits on a source buffer.

The buffer is a list of byte lines split on ``\\n``. Every edit keeps the
line count unchanged and touches only the targeted lines.
"""

from collections.abc import Iterable

from gouse.core.exceptions import DiagnosticParseError
from gouse.engine.diagnostics import SymbolInfo
from gouse.engine.markers import Marker

COMMENT_PREFIX = "// "

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def split_lines(code: bytes) -> list[bytes]:
    """Split code into a line buffer."""
    return code.split(b"\n")


def join_lines(lines: list[bytes]) -> bytes:
    """Join a line buffer back into code."""
    return b"\n".join(lines)


def _check_line(lines: list[bytes], line_num: int) -> None:
    if not 0 <= line_num < len(lines):
        raise DiagnosticParseError(
            f"rewrite: line {line_num + 1} is outside the source ({len(lines)} lines)"
        )


def comment_out(lines: list[bytes], line_nums: Iterable[int]) -> list[int]:
    """Prefix lines with a line comment.

    Args:
        lines: Line buffer, modified in place.
        line_nums: Zero-based line numbers to comment out.

    Returns:
        Commented line numbers in application order, for uncomment().

    """
    commented = []
    prefix = COMMENT_PREFIX.encode()
    for line_num in line_nums:
        _check_line(lines, line_num)
        lines[line_num] = prefix + lines[line_num]
        commented.append(line_num)
    return commented


def append_usages(lines: list[bytes], symbols: Iterable[SymbolInfo], marker: Marker) -> None:
    """Append a fake usage to the line of every symbol.

    On CRLF sources the usage goes before the trailing carriage return.

    Args:
        lines: Line buffer, modified in place.
        symbols: Unused symbols in report order.
        marker: Marker to render.

    """
    for info in symbols:
        _check_line(lines, info.line_num)
        line = lines[info.line_num]
        usage = marker.render(info.name)
        if line.endswith(b"\r"):
            lines[info.line_num] = line[:-1] + usage + b"\r"
        else:
            lines[info.line_num] = line + usage


def uncomment(lines: list[bytes], line_nums: Iterable[int]) -> None:
    """Remove the comment prefix added by comment_out().

    The prefix length is measured in characters, not bytes.

    Args:
        lines: Line buffer, modified in place.
        line_nums: Line numbers returned by comment_out().

    """
    for line_num in line_nums:
        _check_line(lines, line_num)
        text = lines[line_num].decode(_ENCODING, _ERRORS)
        lines[line_num] = text[len(COMMENT_PREFIX) :].encode(_ENCODING, _ERRORS)
