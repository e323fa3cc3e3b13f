"""
TOON (Token-Oriented Object Notation) encoding and decoding.

Converts between JSON-like Python values and a compact, indentation-based
text notation that spends far fewer tokens than JSON on uniform data. The
API mirrors the standard library json module: ``encode``/``decode`` (also
available as ``dumps``/``loads``) and the file-object helpers ``dump`` and
``load``.
"""

import logging
from dataclasses import dataclass
from typing import IO
from typing import Any
from typing import TypeVar

from ._decoder import LineDecoder
from ._decoder import decode_value_from_lines
from ._encoder import ArrayShape
from ._encoder import LineWriter
from ._encoder import ShapeEncoder
from ._encoder import classify_array
from ._encoder import encode_value
from ._errors import ToonConfigError
from ._errors import ToonCountMismatchError
from ._errors import ToonDecodeError
from ._errors import ToonEncodeError
from ._errors import ToonError
from ._errors import ToonIndentationError
from ._errors import ToonInputError
from ._literals import COMMA
from ._literals import DEFAULT_DELIMITER
from ._literals import DEFAULT_INDENT
from ._literals import DEFAULT_LENGTH_MARKER
from ._literals import DELIMITERS
from ._literals import HASH
from ._literals import PIPE
from ._literals import TAB
from ._parser import ArrayHeaderInfo
from ._parser import parse_array_header_line
from ._parser import parse_delimited_values
from ._parser import parse_key_token
from ._parser import parse_string_literal
from ._profiling import HotPathStats
from ._profiling import ProfileContext
from ._profiling import clear_hot_path_stats
from ._profiling import format_hot_path_report
from ._profiling import get_hot_path_stats
from ._scanner import BlankLineInfo
from ._scanner import LineCursor
from ._scanner import ParsedLine
from ._scanner import ScanResult
from ._scanner import to_parsed_lines

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

# Canonical value model - recursive definition
ToonValue = (
    str | int | float | bool | None | dict[str, "ToonValue"] | list["ToonValue"]
)

_VALID_DELIMITERS = frozenset((COMMA, TAB, PIPE))
_VALID_LENGTH_MARKERS = frozenset(("", HASH))


def _check_indent(indent: Any) -> None:
    if not isinstance(indent, int) or isinstance(indent, bool):
        raise TypeError("indent must be an integer")
    if indent < 1:
        raise ToonConfigError(f"Indent must be at least 1, got {indent}")


@dataclass(frozen=True)
class EncodeOptions:
    """
    Configures TOON encoding with immutable, validated settings.

    ``delimiter`` accepts the character itself or one of the names in
    ``DELIMITERS`` (``"comma"``, ``"tab"``, ``"pipe"``); names are resolved
    to characters on construction.
    """

    indent: int = DEFAULT_INDENT
    delimiter: str = DEFAULT_DELIMITER
    length_marker: str = DEFAULT_LENGTH_MARKER

    def __post_init__(self) -> None:
        _check_indent(self.indent)
        if not isinstance(self.delimiter, str):
            raise TypeError("delimiter must be a string")
        if not isinstance(self.length_marker, str):
            raise TypeError("length_marker must be a string")

        delimiter = DELIMITERS.get(self.delimiter, self.delimiter)
        if delimiter not in _VALID_DELIMITERS:
            raise ToonConfigError(
                f"Invalid delimiter {self.delimiter!r}: must be comma, tab, "
                "or pipe"
            )
        object.__setattr__(self, "delimiter", delimiter)

        if self.length_marker not in _VALID_LENGTH_MARKERS:
            raise ToonConfigError(
                "Length marker must be empty or '#', "
                f"got {self.length_marker!r}"
            )


@dataclass(frozen=True)
class DecodeOptions:
    """
    Configures TOON decoding with immutable, validated settings.

    ``strict`` enforces indentation rules and declared array lengths.
    """

    indent: int = DEFAULT_INDENT
    strict: bool = True

    def __post_init__(self) -> None:
        _check_indent(self.indent)
        if not isinstance(self.strict, bool):
            raise TypeError("strict must be a boolean")


T = TypeVar("T")


def _resolve(
    options: T | None, factory: type[T], kwargs: dict[str, Any]
) -> T:
    if options is None:
        return factory(**kwargs)
    if kwargs:
        raise TypeError("pass either an options object or keyword options")
    if not isinstance(options, factory):
        raise TypeError(
            f"options must be {factory.__name__}, "
            f"not {type(options).__name__}"
        )
    return options


def encode(
    value: Any, options: EncodeOptions | None = None, **kwargs: Any
) -> str:
    """
    Serializes a canonical value to TOON text.

    Options come either as an ``EncodeOptions`` instance or as keyword
    arguments (``indent``, ``delimiter``, ``length_marker``); invalid values
    fail before any encoding work starts.
    """
    opts = _resolve(options, EncodeOptions, kwargs)

    with ProfileContext("encode"):
        text = encode_value(
            value, opts.indent, opts.delimiter, opts.length_marker
        )

    logger.debug(
        "Encoded %s into %d lines (%d chars)",
        type(value).__name__,
        text.count("\n") + 1,
        len(text),
    )
    return text


def decode(
    text: str, options: DecodeOptions | None = None, **kwargs: Any
) -> ToonValue:
    """
    Parses TOON text into Python objects.

    The whole document is scanned into lines first, then decoded by
    recursive descent. Options come either as a ``DecodeOptions`` instance
    or as keyword arguments (``indent``, ``strict``).
    """
    if not isinstance(text, str):
        raise TypeError(
            f"the TOON document must be str, not {type(text).__name__}"
        )

    opts = _resolve(options, DecodeOptions, kwargs)

    with ProfileContext("decode", len(text)):
        scan = to_parsed_lines(text, opts.indent, opts.strict)
        if not scan.lines:
            raise ToonInputError(
                "Cannot decode empty input: input must be a non-empty string"
            )

        logger.debug(
            "Scanned %d structural lines and %d blank lines",
            len(scan.lines),
            len(scan.blank_lines),
        )

        cursor = LineCursor(scan.lines, scan.blank_lines)
        return decode_value_from_lines(
            cursor, opts.indent, opts.strict, DEFAULT_DELIMITER
        )


def dumps(value: Any, **kwargs: Any) -> str:
    """Alias of ``encode`` taking keyword options, like ``json.dumps``."""
    return encode(value, **kwargs)


def loads(s: str, **kwargs: Any) -> ToonValue:
    """Alias of ``decode`` taking keyword options, like ``json.loads``."""
    return decode(s, **kwargs)


def load(fp: IO[str], **kwargs: Any) -> ToonValue:
    """
    Parses a TOON document from a file-like object.
    """
    if not hasattr(fp, "read"):
        raise TypeError("fp must have a read() method")

    return decode(fp.read(), **kwargs)


def dump(value: Any, fp: IO[str], **kwargs: Any) -> None:
    """
    Serializes a value as TOON into a file-like object.
    """
    if not hasattr(fp, "write"):
        raise TypeError("fp must have a write() method")

    fp.write(encode(value, **kwargs))


def stringify(value: Any) -> str:
    """Encodes with default options."""
    return encode(value)


def parse(text: str) -> ToonValue:
    """Decodes with default options."""
    return decode(text)


__all__ = [
    "DELIMITERS",
    "ArrayHeaderInfo",
    "ArrayShape",
    "BlankLineInfo",
    "DecodeOptions",
    "EncodeOptions",
    "HotPathStats",
    "LineCursor",
    "LineDecoder",
    "LineWriter",
    "ParsedLine",
    "ScanResult",
    "ShapeEncoder",
    "ToonConfigError",
    "ToonCountMismatchError",
    "ToonDecodeError",
    "ToonEncodeError",
    "ToonError",
    "ToonIndentationError",
    "ToonInputError",
    "ToonValue",
    "classify_array",
    "clear_hot_path_stats",
    "decode",
    "dump",
    "dumps",
    "encode",
    "format_hot_path_report",
    "get_hot_path_stats",
    "load",
    "loads",
    "parse",
    "parse_array_header_line",
    "parse_delimited_values",
    "parse_key_token",
    "parse_string_literal",
    "stringify",
    "to_parsed_lines",
]
