"""
Literal and string utilities shared by the TOON decoder and encoder.

Covers the escape table, quote-aware scanning, the "needs quoting"
predicate used by the encoder, and primitive token parsing used by the
decoder. The same numeric predicate drives both sides so that any string
the decoder would read back as a number is always quoted on the way out.
"""

import math
import re
from typing import Any
from typing import Final

from ._errors import ToonDecodeError
from ._profiling import ProfileContext

# Structural characters
COMMA: Final = ","
COLON: Final = ":"
SPACE: Final = " "
PIPE: Final = "|"
HASH: Final = "#"
TAB: Final = "\t"

OPEN_BRACKET: Final = "["
CLOSE_BRACKET: Final = "]"
OPEN_BRACE: Final = "{"
CLOSE_BRACE: Final = "}"

LIST_ITEM_MARKER: Final = "-"
LIST_ITEM_PREFIX: Final = "- "

NULL_LITERAL: Final = "null"
TRUE_LITERAL: Final = "true"
FALSE_LITERAL: Final = "false"

BACKSLASH: Final = "\\"
DOUBLE_QUOTE: Final = '"'
NEWLINE: Final = "\n"
CARRIAGE_RETURN: Final = "\r"

DELIMITERS: Final[dict[str, str]] = {"comma": COMMA, "tab": TAB, "pipe": PIPE}

DEFAULT_INDENT: Final = 2
DEFAULT_DELIMITER: Final = COMMA
DEFAULT_LENGTH_MARKER: Final = ""

_ESCAPES: Final[dict[str, str]] = {
    BACKSLASH: BACKSLASH + BACKSLASH,
    DOUBLE_QUOTE: BACKSLASH + DOUBLE_QUOTE,
    NEWLINE: BACKSLASH + "n",
    CARRIAGE_RETURN: BACKSLASH + "r",
    TAB: BACKSLASH + "t",
}

_UNESCAPES: Final[dict[str, str]] = {
    "n": NEWLINE,
    "t": TAB,
    "r": CARRIAGE_RETURN,
    BACKSLASH: BACKSLASH,
    DOUBLE_QUOTE: DOUBLE_QUOTE,
}

_STRUCTURAL_CHARS: Final = frozenset(",:[]{}|\t\n\r\"\\")
_KEYWORDS: Final = frozenset((NULL_LITERAL, TRUE_LITERAL, FALSE_LITERAL))
_NUMERIC_RE: Final = re.compile(
    r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII
)


def escape_string(value: str) -> str:
    """Escapes backslash, quote, LF, CR and TAB for a quoted string."""
    if not any(char in _ESCAPES for char in value):
        return value
    return "".join(_ESCAPES.get(char, char) for char in value)


def unescape_string(value: str) -> str:
    """
    Resolves escape sequences in the body of a quoted string.

    Only the five sequences produced by ``escape_string`` are legal; anything
    else, including a lone trailing backslash, is a decode error.
    """
    with ProfileContext("unescape_string", len(value)):
        if BACKSLASH not in value:
            return value

        result = []
        i = 0
        length = len(value)
        while i < length:
            char = value[i]
            if char != BACKSLASH:
                result.append(char)
                i += 1
                continue

            if i + 1 >= length:
                raise ToonDecodeError(
                    "Invalid escape sequence: backslash at end of string"
                )
            next_char = value[i + 1]
            if next_char not in _UNESCAPES:
                raise ToonDecodeError(
                    f"Invalid escape sequence: \\{next_char}"
                )
            result.append(_UNESCAPES[next_char])
            i += 2

        return "".join(result)


def find_closing_quote(content: str, start: int) -> int:
    """
    Returns the index of the quote closing the one at ``start``.

    Backslash escapes are skipped. Returns -1 when the string is unterminated.
    """
    i = start + 1
    length = len(content)
    while i < length:
        char = content[i]
        if char == BACKSLASH and i + 1 < length:
            i += 2
            continue
        if char == DOUBLE_QUOTE:
            return i
        i += 1
    return -1


def find_unquoted_char(content: str, char: str, start: int = 0) -> int:
    """Returns the first index of ``char`` outside double-quoted spans."""
    in_quotes = False
    i = start
    length = len(content)
    while i < length:
        current = content[i]
        if in_quotes and current == BACKSLASH and i + 1 < length:
            i += 2
            continue
        if current == DOUBLE_QUOTE:
            in_quotes = not in_quotes
        elif not in_quotes and current == char:
            return i
        i += 1
    return -1


def is_numeric_like(value: str) -> bool:
    """True for strings a decoder would read back as a number."""
    return _NUMERIC_RE.fullmatch(value) is not None


def needs_quotes(value: str) -> bool:
    """
    Decides whether a string must be quoted to survive a round trip.

    Quoting is required for the empty string, anything holding a structural
    character, leading or trailing whitespace, the three keywords, numeric
    lookalikes, and strings starting with the list-item marker. The active
    delimiter is checked separately by the encoder.
    """
    if not value:
        return True
    if any(char in _STRUCTURAL_CHARS for char in value):
        return True
    if value != value.strip():
        return True
    if value in _KEYWORDS:
        return True
    if is_numeric_like(value):
        return True
    return value.startswith(LIST_ITEM_MARKER)


def quote_string(value: str) -> str:
    return f"{DOUBLE_QUOTE}{escape_string(value)}{DOUBLE_QUOTE}"


def parse_quoted_string(token: str) -> str:
    """Returns the unescaped body of a token wrapped in double quotes."""
    if len(token) < 2 or token[0] != DOUBLE_QUOTE:
        raise ToonDecodeError(f"Invalid quoted string: {token}")

    closing = find_closing_quote(token, 0)
    if closing == -1:
        raise ToonDecodeError(f"Unterminated string: {token}")
    if closing != len(token) - 1:
        raise ToonDecodeError(
            f"Unexpected characters after closing quote: {token}"
        )

    return unescape_string(token[1:-1])


def parse_number(token: str) -> int | float:
    """Parses a numeric literal; a fraction or exponent makes it a float."""
    if "." in token or "e" in token or "E" in token:
        result = float(token)
        if not math.isfinite(result):
            raise ToonDecodeError(f"Number out of range: {token[:20]}")
        return result
    try:
        return int(token)
    except ValueError as e:
        # Python's int conversion limit for very long digit strings
        raise ToonDecodeError(f"Number too large: {token[:20]}...") from e


def parse_primitive(token: str) -> Any:
    """
    Parses a single primitive token: null, boolean, number or string.

    Quoted tokens are unescaped; unquoted tokens that are neither keywords
    nor numbers come back as bare strings.
    """
    with ProfileContext("parse_primitive", len(token)):
        trimmed = token.strip()

        if not trimmed:
            raise ToonDecodeError("Cannot parse empty token")

        if trimmed == NULL_LITERAL:
            return None
        if trimmed == TRUE_LITERAL:
            return True
        if trimmed == FALSE_LITERAL:
            return False

        if trimmed[0] == DOUBLE_QUOTE:
            return parse_quoted_string(trimmed)

        if is_numeric_like(trimmed):
            return parse_number(trimmed)

        return trimmed


def is_primitive(value: Any) -> bool:
    return value is None or isinstance(value, str | bool | int | float)


def is_array(value: Any) -> bool:
    """True for lists and tuples, and for empty dicts (see ``is_object``)."""
    if isinstance(value, list | tuple):
        return True
    return isinstance(value, dict) and not value


def is_object(value: Any) -> bool:
    """
    True for non-empty dicts.

    The notation cannot tell an empty map from an empty list, so an empty
    dict is classified as an empty array on the encode side.
    """
    return isinstance(value, dict) and bool(value)
