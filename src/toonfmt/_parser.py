"""
Single-line token parsing for TOON documents.

Recognizes array headers (``key[#N|]{a|b}: inline``), key tokens and
string literals, and splits delimited value runs. Everything here works on
one line of content at a time; depth and line ownership belong to the
decoder.
"""

from dataclasses import dataclass

from ._errors import ToonDecodeError
from ._literals import BACKSLASH
from ._literals import CLOSE_BRACE
from ._literals import CLOSE_BRACKET
from ._literals import COLON
from ._literals import DOUBLE_QUOTE
from ._literals import HASH
from ._literals import OPEN_BRACE
from ._literals import OPEN_BRACKET
from ._literals import PIPE
from ._literals import SPACE
from ._literals import TAB
from ._literals import find_closing_quote
from ._literals import find_unquoted_char
from ._literals import parse_quoted_string
from ._profiling import ProfileContext


@dataclass(frozen=True, slots=True)
class ArrayHeaderInfo:
    """
    Parsed ``key[N]{fields}:`` header.

    An empty ``key`` marks an unkeyed array (the document root or a list
    item). ``fields`` is set only for tabular arrays.
    """

    key: str
    length: int
    delimiter: str
    fields: tuple[str, ...] | None = None
    has_length_marker: bool = False


def parse_string_literal(token: str) -> str:
    """Returns the unescaped body of a quoted token, or the trimmed token."""
    trimmed = token.strip()
    if trimmed.startswith(DOUBLE_QUOTE):
        return parse_quoted_string(trimmed)
    return trimmed


def _parse_bracket_segment(
    segment: str, default_delimiter: str
) -> tuple[int, str, bool]:
    """Parses ``N``, ``#N``, ``N|`` or ``N<TAB>`` into length and flags."""
    body = segment
    has_length_marker = body.startswith(HASH)
    if has_length_marker:
        body = body[1:]

    delimiter = default_delimiter
    if body.endswith(TAB):
        delimiter = TAB
        body = body[:-1]
    elif body.endswith(PIPE):
        delimiter = PIPE
        body = body[:-1]

    if not (body.isascii() and body.isdigit()) or str(int(body)) != body:
        raise ToonDecodeError(f"Invalid array length: [{segment}]")

    return int(body), delimiter, has_length_marker


def _find_bracket_start(content: str) -> int:
    """
    Locates the ``[`` that opens a header's bracket segment.

    Returns -1 when the line cannot be a header: an unterminated or
    non-adjacent quoted key, or an unquoted key segment that already holds a
    colon or a quote (the bracket then belongs to a value).
    """
    trimmed = content.lstrip(SPACE)
    if trimmed.startswith(DOUBLE_QUOTE):
        closing = find_closing_quote(trimmed, 0)
        if closing == -1 or not trimmed.startswith(OPEN_BRACKET, closing + 1):
            return -1
        return len(content) - len(trimmed) + closing + 1

    bracket_start = content.find(OPEN_BRACKET)
    if bracket_start == -1:
        return -1
    key_segment = content[:bracket_start]
    if COLON in key_segment or DOUBLE_QUOTE in key_segment:
        return -1
    return bracket_start


def parse_array_header_line(
    content: str, default_delimiter: str
) -> tuple[ArrayHeaderInfo | None, str]:
    """
    Detects and parses an array header on a single line.

    Returns ``(header, inline_values)`` where ``inline_values`` is the
    trimmed text after the header's colon, or ``(None, "")`` when the line
    is not a header. A header whose length segment is not a non-negative
    integer raises ``ToonDecodeError``.
    """
    with ProfileContext("parse_array_header_line", len(content)):
        bracket_start = _find_bracket_start(content)
        if bracket_start == -1:
            return None, ""

        bracket_end = content.find(CLOSE_BRACKET, bracket_start)
        if bracket_end == -1:
            return None, ""

        position = bracket_end + 1
        fields_segment: str | None = None
        if content.startswith(OPEN_BRACE, position):
            brace_end = find_unquoted_char(content, CLOSE_BRACE, position)
            if brace_end == -1:
                return None, ""
            fields_segment = content[position + 1 : brace_end]
            position = brace_end + 1

        if not content.startswith(COLON, position):
            return None, ""

        key = ""
        if bracket_start > 0:
            key = parse_string_literal(content[:bracket_start])

        length, delimiter, has_length_marker = _parse_bracket_segment(
            content[bracket_start + 1 : bracket_end], default_delimiter
        )

        fields: tuple[str, ...] | None = None
        if fields_segment is not None:
            fields = tuple(
                parse_string_literal(field)
                for field in parse_delimited_values(fields_segment, delimiter)
            )

        header = ArrayHeaderInfo(
            key, length, delimiter, fields, has_length_marker
        )
        return header, content[position + 1 :].strip()


def parse_delimited_values(text: str, delimiter: str) -> list[str]:
    """
    Splits ``text`` on ``delimiter`` outside of double-quoted spans.

    Quotes and escapes are kept in the tokens so that each one can be
    handed to the primitive parser as-is. Tokens are trimmed; a trailing
    delimiter produces a trailing empty token.
    """
    with ProfileContext("parse_delimited_values", len(text)):
        values: list[str] = []
        current: list[str] = []
        in_quotes = False
        i = 0
        length = len(text)

        while i < length:
            char = text[i]
            if in_quotes and char == BACKSLASH and i + 1 < length:
                current.append(text[i : i + 2])
                i += 2
                continue
            if char == DOUBLE_QUOTE:
                in_quotes = not in_quotes
                current.append(char)
            elif char == delimiter and not in_quotes:
                values.append("".join(current).strip())
                current = []
            else:
                current.append(char)
            i += 1

        if current or values:
            values.append("".join(current).strip())

        return values


def parse_key_token(content: str) -> tuple[str, int]:
    """
    Extracts the key of a ``key: value`` line.

    Returns the key and the index just past its colon. Quoted keys are
    unescaped; unquoted keys run up to the first colon outside quotes.
    """
    if content.startswith(DOUBLE_QUOTE):
        closing = find_closing_quote(content, 0)
        if closing == -1:
            raise ToonDecodeError("Unterminated quoted key")

        key = parse_quoted_string(content[: closing + 1])
        colon = content.find(COLON, closing + 1)
        if colon == -1:
            raise ToonDecodeError("Missing colon after key")
        if content[closing + 1 : colon].strip():
            raise ToonDecodeError("Unexpected characters after quoted key")
        return key, colon + 1

    colon = find_unquoted_char(content, COLON)
    if colon == -1:
        raise ToonDecodeError("Missing colon after key")

    key = content[:colon].strip()
    if not key:
        raise ToonDecodeError("Empty key")
    return key, colon + 1


def is_key_value_line(content: str) -> bool:
    """True when ``content`` has the shape ``key: ...`` with a usable key."""
    if content.startswith(DOUBLE_QUOTE):
        closing = find_closing_quote(content, 0)
        if closing == -1:
            return False
        return content[closing + 1 :].lstrip().startswith(COLON)

    colon = find_unquoted_char(content, COLON)
    return colon > 0 and bool(content[:colon].strip())
