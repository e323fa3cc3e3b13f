"""
Recursive-descent decoder over scanned TOON lines.

Rebuilds the canonical value model from a ``LineCursor``, dispatching
between objects, inline primitive arrays, tabular arrays and list arrays.
Every decision is made from the current line plus, at most, the depth of
the line after it.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from ._errors import ToonCountMismatchError
from ._errors import ToonDecodeError
from ._errors import ToonInputError
from ._literals import LIST_ITEM_MARKER
from ._literals import LIST_ITEM_PREFIX
from ._literals import parse_primitive
from ._parser import ArrayHeaderInfo
from ._parser import is_key_value_line
from ._parser import parse_array_header_line
from ._parser import parse_delimited_values
from ._parser import parse_key_token
from ._profiling import ProfileContext
from ._scanner import Depth
from ._scanner import LineCursor
from ._scanner import ParsedLine

logger = logging.getLogger(__name__)


@contextmanager
def _located(line: ParsedLine) -> Iterator[None]:
    """Attaches the line number to errors raised while reading one line."""
    try:
        yield
    except ToonDecodeError as err:
        err.locate(line.line_number, line.content)
        raise


class LineDecoder:
    """
    Decodes one document from a cursor it owns for the duration of a call.

    ``indent`` is the indent unit the lines were scanned with and ``strict``
    turns declared-length mismatches and trailing content into errors.
    """

    def __init__(self, cursor: LineCursor, indent: int, strict: bool) -> None:
        self.cursor = cursor
        self.indent = indent
        self.strict = strict

    def decode_value(self, default_delimiter: str) -> Any:
        """
        Decodes the root value: an unkeyed array, a lone primitive, or an
        object.
        """
        first = self.cursor.peek()
        if first is None:
            raise ToonInputError("No content to decode")

        with _located(first):
            header, inline = parse_array_header_line(
                first.content, default_delimiter
            )

        if header is not None and not header.key:
            logger.debug(
                "Decoding root as an unkeyed array of %d", header.length
            )
            self.cursor.advance()
            value = self.decode_array_from_header(header, inline, first, 0)
        elif (
            header is None
            and len(self.cursor) == 1
            and not is_key_value_line(first.content)
        ):
            logger.debug("Decoding root as a single primitive")
            self.cursor.advance()
            with _located(first):
                value = parse_primitive(first.content)
        else:
            logger.debug("Decoding root as an object")
            value = self.decode_object(first.depth, default_delimiter)

        self._check_exhausted()
        return value

    def decode_object(
        self, base_depth: Depth, delimiter: str
    ) -> dict[str, Any]:
        """
        Decodes consecutive ``key: value`` lines into a dict.

        The first line at or below ``base_depth`` fixes the object's depth;
        a line at any other depth ends the object.
        """
        with ProfileContext("decode_object"):
            obj: dict[str, Any] = {}
            computed_depth: Depth | None = None

            while (line := self.cursor.peek()) is not None:
                if line.depth < base_depth:
                    break
                if computed_depth is None:
                    computed_depth = line.depth
                if line.depth != computed_depth:
                    break

                self.cursor.advance()
                key, value = self.decode_key_value(
                    line, line.content, computed_depth, delimiter
                )
                obj[key] = value

            return obj

    def decode_key_value(
        self,
        line: ParsedLine,
        content: str,
        base_depth: Depth,
        delimiter: str,
    ) -> tuple[str, Any]:
        """Decodes one already-consumed key line and whatever it owns."""
        with _located(line):
            header, inline = parse_array_header_line(content, delimiter)
        if header is not None and header.key:
            value = self.decode_array_from_header(
                header, inline, line, base_depth
            )
            return header.key, value

        with _located(line):
            key, end = parse_key_token(content)
            rest = content[end:].strip()
            if rest:
                return key, parse_primitive(rest)

        return key, self._decode_nested_object(base_depth, delimiter)

    def _decode_nested_object(
        self, parent_depth: Depth, delimiter: str
    ) -> dict[str, Any]:
        """Decodes the object under a bare ``key:`` line, if there is one."""
        following = self.cursor.peek()
        if following is not None and following.depth > parent_depth:
            return self.decode_object(parent_depth + 1, delimiter)
        return {}

    def decode_array_from_header(
        self,
        header: ArrayHeaderInfo,
        inline_values: str,
        line: ParsedLine,
        base_depth: Depth,
    ) -> list[Any]:
        """
        Decodes the body of an array whose header has been consumed.

        Inline values win over a field list, which wins over list items.
        """
        if inline_values:
            return self._decode_inline_array(header, inline_values, line)
        if header.fields:
            return self._decode_tabular_array(header, line, base_depth)
        return self._decode_list_array(header, line, base_depth)

    def _decode_inline_array(
        self, header: ArrayHeaderInfo, inline_values: str, line: ParsedLine
    ) -> list[Any]:
        with ProfileContext("decode_inline_array", len(inline_values)):
            with _located(line):
                values = [
                    parse_primitive(token)
                    for token in parse_delimited_values(
                        inline_values, header.delimiter
                    )
                    if token
                ]
            self._expect_count(len(values), header, "inline array items", line)
            return values

    def _decode_tabular_array(
        self, header: ArrayHeaderInfo, line: ParsedLine, base_depth: Depth
    ) -> list[dict[str, Any]]:
        with ProfileContext("decode_tabular_array"):
            fields = header.fields or ()
            row_depth = base_depth + 1
            rows: list[dict[str, Any]] = []

            while (row := self.cursor.peek()) is not None:
                if row.depth != row_depth:
                    break
                self.cursor.advance()

                with _located(row):
                    tokens = parse_delimited_values(
                        row.content, header.delimiter
                    )
                    if self.strict and len(tokens) > len(fields):
                        raise ToonCountMismatchError(
                            len(fields), len(tokens), "tabular row values"
                        )
                    rows.append(
                        {
                            field: parse_primitive(tokens[i])
                            if i < len(tokens)
                            else None
                            for i, field in enumerate(fields)
                        }
                    )

            self._expect_count(len(rows), header, "tabular array rows", line)
            return rows

    def _decode_list_array(
        self, header: ArrayHeaderInfo, line: ParsedLine, base_depth: Depth
    ) -> list[Any]:
        with ProfileContext("decode_list_array"):
            item_depth = base_depth + 1
            items: list[Any] = []

            while (item := self.cursor.peek()) is not None:
                if item.depth != item_depth:
                    break
                self.cursor.advance()
                items.append(
                    self.decode_list_item(item, item_depth, header.delimiter)
                )

            self._expect_count(len(items), header, "list array items", line)
            return items

    def decode_list_item(
        self, line: ParsedLine, base_depth: Depth, delimiter: str
    ) -> Any:
        """
        Decodes one consumed ``- ...`` line.

        A bare marker is an empty object, an unkeyed header is a nested
        array, a key line starts an object, and anything else is a
        primitive.
        """
        content = line.content
        if content.startswith(LIST_ITEM_PREFIX):
            content = content[len(LIST_ITEM_PREFIX) :]
        elif content == LIST_ITEM_MARKER:
            content = ""
        if not content.strip():
            return {}

        with _located(line):
            header, inline = parse_array_header_line(content, delimiter)
        if header is not None and not header.key:
            return self.decode_array_from_header(
                header, inline, line, base_depth
            )

        if header is not None or is_key_value_line(content):
            return self._decode_list_item_object(
                line, content, base_depth, header, inline, delimiter
            )

        with _located(line):
            return parse_primitive(content)

    def _decode_list_item_object(
        self,
        line: ParsedLine,
        content: str,
        base_depth: Depth,
        header: ArrayHeaderInfo | None,
        inline_values: str,
        delimiter: str,
    ) -> dict[str, Any]:
        """
        Decodes an object that opens on a list-item line.

        Its further keys sit one level below the marker; nested content of
        the first key sits one level below those.
        """
        field_depth = base_depth + 1
        obj: dict[str, Any] = {}

        if header is not None:
            obj[header.key] = self.decode_array_from_header(
                header, inline_values, line, field_depth
            )
        else:
            with _located(line):
                key, end = parse_key_token(content)
                rest = content[end:].strip()
                if rest:
                    obj[key] = parse_primitive(rest)
            if not rest:
                obj[key] = self._decode_nested_object(field_depth, delimiter)

        while (sibling := self.cursor.peek()) is not None:
            if sibling.depth != field_depth:
                break
            self.cursor.advance()
            key, value = self.decode_key_value(
                sibling, sibling.content, field_depth, delimiter
            )
            obj[key] = value

        return obj

    def _expect_count(
        self,
        actual: int,
        header: ArrayHeaderInfo,
        context: str,
        line: ParsedLine,
    ) -> None:
        if self.strict and actual != header.length:
            raise ToonCountMismatchError(
                header.length, actual, context, line.line_number, line.content
            )

    def _check_exhausted(self) -> None:
        leftover = self.cursor.peek()
        if self.strict and leftover is not None:
            raise ToonDecodeError(
                "Unexpected content after the root value",
                leftover.line_number,
                leftover.content,
            )


def decode_value_from_lines(
    cursor: LineCursor, indent: int, strict: bool, default_delimiter: str
) -> Any:
    """Decodes a whole document from a fresh cursor."""
    return LineDecoder(cursor, indent, strict).decode_value(default_delimiter)
