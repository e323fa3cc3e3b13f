"""
Line scanner and cursor for TOON documents.

The scanner turns raw text into structural lines annotated with their
nesting depth, setting blank lines aside for strict-mode validation. The
cursor is the single-owner, forward-only read head the decoder walks.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeAlias

from ._errors import ToonIndentationError
from ._literals import CARRIAGE_RETURN
from ._literals import NEWLINE
from ._literals import SPACE
from ._literals import TAB
from ._profiling import ProfileContext

Depth: TypeAlias = int


@dataclass(frozen=True, slots=True)
class ParsedLine:
    """
    One non-blank physical line of a TOON document.

    Created once by the scanner and never mutated afterwards.
    """

    raw: str
    depth: Depth
    indent: int
    content: str
    line_number: int


@dataclass(frozen=True, slots=True)
class BlankLineInfo:
    """Position of a blank line, kept only for strict-mode validation."""

    line_number: int
    indent: int
    depth: Depth


@dataclass(frozen=True, slots=True)
class ScanResult:
    lines: tuple[ParsedLine, ...]
    blank_lines: tuple[BlankLineInfo, ...]


def compute_depth(indent: int, indent_size: int) -> Depth:
    return indent // indent_size


def _leading_spaces(raw: str) -> int:
    count = 0
    length = len(raw)
    while count < length and raw[count] == SPACE:
        count += 1
    return count


def _check_indentation(
    raw: str, indent: int, indent_size: int, line_number: int
) -> None:
    """Applies the strict-mode rules to one non-blank line."""
    ws_end = indent
    length = len(raw)
    while ws_end < length and raw[ws_end] in (SPACE, TAB):
        ws_end += 1
    if TAB in raw[:ws_end]:
        raise ToonIndentationError(
            "Tabs are not allowed in indentation in strict mode",
            line_number,
            raw,
        )

    if indent % indent_size:
        raise ToonIndentationError(
            f"Indentation must be an exact multiple of {indent_size}, "
            f"but found {indent} spaces",
            line_number,
            raw,
        )


def _check_blank_lines(
    lines: Sequence[ParsedLine], blank_lines: Sequence[BlankLineInfo]
) -> None:
    """
    Rejects blank lines whose depth never reappears further down.

    Walks both sequences backwards once, collecting the depths seen below
    each blank line; the first orphan in document order is reported.
    """
    depths_below: set[int] = set()
    orphan: BlankLineInfo | None = None
    index = len(lines) - 1
    for blank in reversed(blank_lines):
        while index >= 0 and lines[index].line_number > blank.line_number:
            depths_below.add(lines[index].depth)
            index -= 1
        if blank.depth not in depths_below:
            orphan = blank

    if orphan is not None:
        raise ToonIndentationError(
            f"Blank line at depth {orphan.depth} with no subsequent "
            "content at that depth",
            orphan.line_number,
        )


def to_parsed_lines(source: str, indent_size: int, strict: bool) -> ScanResult:
    """
    Splits a document into structural lines and blank-line records.

    Depth is the leading-space count divided (floor) by ``indent_size``.
    Blank lines trailing the last content line are ignored. In strict mode,
    tabs in leading whitespace, widths that are not a multiple of the indent
    unit, and orphaned blank lines are rejected.
    """
    with ProfileContext("to_parsed_lines", len(source)):
        if not source.strip():
            return ScanResult((), ())

        body = source.rstrip()
        parsed: list[ParsedLine] = []
        blank_lines: list[BlankLineInfo] = []

        for index, raw in enumerate(body.split(NEWLINE)):
            line_number = index + 1
            if raw.endswith(CARRIAGE_RETURN):
                raw = raw[:-1]

            indent = _leading_spaces(raw)
            content = raw[indent:]
            depth = compute_depth(indent, indent_size)

            if not content.strip():
                blank_lines.append(BlankLineInfo(line_number, indent, depth))
                continue

            if strict:
                _check_indentation(raw, indent, indent_size, line_number)

            parsed.append(
                ParsedLine(raw, depth, indent, content, line_number)
            )

        if strict and blank_lines:
            _check_blank_lines(parsed, blank_lines)

        return ScanResult(tuple(parsed), tuple(blank_lines))


class LineCursor:
    """
    Forward-only read head over scanned lines.

    Owned by exactly one decode call. The decoder may look at the current
    line without consuming it, but can never step back past it.
    """

    def __init__(
        self,
        lines: Sequence[ParsedLine],
        blank_lines: Sequence[BlankLineInfo] = (),
    ) -> None:
        self._lines = lines
        self._blank_lines = blank_lines
        self._index = 0

    @property
    def blank_lines(self) -> Sequence[BlankLineInfo]:
        return self._blank_lines

    def peek(self) -> ParsedLine | None:
        """Returns the current line without advancing."""
        if self._index >= len(self._lines):
            return None
        return self._lines[self._index]

    def next(self) -> ParsedLine | None:
        """Returns the current line and advances past it."""
        line = self.peek()
        if line is not None:
            self._index += 1
        return line

    def current(self) -> ParsedLine | None:
        """Returns the most recently consumed line."""
        if self._index == 0:
            return None
        return self._lines[self._index - 1]

    def advance(self) -> None:
        if self._index < len(self._lines):
            self._index += 1

    def at_end(self) -> bool:
        return self._index >= len(self._lines)

    def __len__(self) -> int:
        return len(self._lines)
