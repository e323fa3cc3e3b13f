"""
Exception hierarchy for TOON encoding and decoding.

Every failure is terminal for the call that raised it; nothing here is
caught and retried by the package itself.
"""

from typing import TypeAlias

LineNumber: TypeAlias = int


class ToonError(ValueError):
    """Base class for all TOON errors."""


class ToonDecodeError(ToonError):
    """
    Handles TOON parsing failures with line information.

    Carries the bare message, the 1-based line number where the problem was
    found (when known) and the offending line content, so callers can point
    users at the exact spot in the document.
    """

    def __init__(
        self, msg: str, lineno: LineNumber | None = None, line: str = ""
    ) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if lineno is not None and (not isinstance(lineno, int) or lineno < 1):
            raise ValueError("lineno must be a positive integer")

        self.msg = msg
        self.lineno = lineno
        self.line = line

        super().__init__(self._format())

    def _format(self) -> str:
        if self.lineno is None:
            return self.msg
        return f"{self.msg} at line {self.lineno}"

    def locate(self, lineno: LineNumber, line: str = "") -> None:
        """
        Pins an error raised below the line level to the line being decoded.

        Errors that already know their line are left untouched.
        """
        if self.lineno is not None:
            return
        self.lineno = lineno
        self.line = line
        self.args = (self._format(),)


class ToonIndentationError(ToonDecodeError):
    """Strict-mode indentation failure (tabs, odd widths, orphaned blanks)."""


class ToonCountMismatchError(ToonDecodeError):
    """Declared array length differs from the number of decoded entries."""

    def __init__(
        self,
        expected: int,
        actual: int,
        context: str,
        lineno: LineNumber | None = None,
        line: str = "",
    ) -> None:
        self.expected = expected
        self.actual = actual
        self.context = context
        super().__init__(
            f"Expected {expected} {context}, but got {actual}", lineno, line
        )


class ToonInputError(ToonDecodeError):
    """The document is empty or not decodable input at all."""


class ToonEncodeError(ToonError):
    """A value cannot be represented in the notation."""


class ToonConfigError(ToonError):
    """Invalid encode or decode option values."""
