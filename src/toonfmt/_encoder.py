"""
Shape-driven TOON encoder and layout writer.

Each array is classified by shape and rendered in the most compact layout
that still decodes back to the same value: inline primitives, a tabular
block for uniform records, list items of inline arrays, or fully expanded
list items as the fallback.
"""

import math
from collections.abc import Mapping
from collections.abc import Sequence
from enum import Enum
from typing import Any

from ._errors import ToonEncodeError
from ._literals import CLOSE_BRACE
from ._literals import CLOSE_BRACKET
from ._literals import COLON
from ._literals import COMMA
from ._literals import FALSE_LITERAL
from ._literals import LIST_ITEM_PREFIX
from ._literals import NEWLINE
from ._literals import NULL_LITERAL
from ._literals import OPEN_BRACE
from ._literals import OPEN_BRACKET
from ._literals import SPACE
from ._literals import TRUE_LITERAL
from ._literals import is_array
from ._literals import is_object
from ._literals import is_primitive
from ._literals import needs_quotes
from ._literals import quote_string
from ._profiling import ProfileContext
from ._scanner import Depth


class ArrayShape(Enum):
    """
    Layouts an array can take, in the order they are tried.

    ``EXPANDED`` is the catch-all for heterogeneous arrays.
    """

    EMPTY = "empty"
    INLINE = "inline"
    TABULAR = "tabular"
    NESTED_INLINE = "nested_inline"
    EXPANDED = "expanded"


class LineWriter:
    """Accumulates indented output lines."""

    def __init__(self, indent: int) -> None:
        self._unit = SPACE * indent
        self._indent_cache: dict[Depth, str] = {0: ""}
        self._lines: list[str] = []

    def _indentation(self, depth: Depth) -> str:
        if depth not in self._indent_cache:
            self._indent_cache[depth] = self._unit * depth
        return self._indent_cache[depth]

    def push(self, depth: Depth, content: str) -> None:
        self._lines.append(self._indentation(depth) + content)

    def push_list_item(self, depth: Depth, content: str) -> None:
        self._lines.append(
            self._indentation(depth) + LIST_ITEM_PREFIX + content
        )

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def to_string(self) -> str:
        return NEWLINE.join(self._lines)


def _not_serializable(value: Any) -> TypeError:
    return TypeError(
        f"Object of type {type(value).__name__} is not TOON serializable"
    )


def encode_string(value: str, delimiter: str) -> str:
    """Quotes a string when it is ambiguous or holds the active delimiter."""
    if needs_quotes(value) or delimiter in value:
        return quote_string(value)
    return value


def encode_primitive(value: Any, delimiter: str) -> str:
    """Renders null, booleans, numbers and strings."""
    if value is None:
        return NULL_LITERAL
    if value is True:
        return TRUE_LITERAL
    if value is False:
        return FALSE_LITERAL
    if isinstance(value, str):
        return encode_string(value, delimiter)
    if isinstance(value, int):
        try:
            return str(int(value))
        except ValueError as e:
            # Python's int conversion limit for very long digit strings
            raise ToonEncodeError(
                f"Integer too large: {value.bit_length()} bits"
            ) from e
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ToonEncodeError(
                f"Out of range float values are not TOON compliant: {value!r}"
            )
        return repr(float(value))
    raise _not_serializable(value)


def encode_key(key: Any) -> str:
    """Renders an object key; quoting does not depend on the delimiter."""
    if not isinstance(key, str):
        raise TypeError(f"keys must be strings, not {type(key).__name__}")
    if needs_quotes(key):
        return quote_string(key)
    return key


def encode_and_join(values: Sequence[Any], delimiter: str) -> str:
    return delimiter.join(
        encode_primitive(value, delimiter) for value in values
    )


def format_header(
    length: int,
    key: str | None,
    fields: Sequence[str] | None,
    delimiter: str,
    length_marker: str,
) -> str:
    """
    Builds ``key[<marker>N<delim>]{f1<delim>f2}:``.

    The delimiter suffix is omitted for commas. Field names are joined with
    the active delimiter so the decoder can split them back apart.
    """
    parts = []
    if key is not None:
        parts.append(encode_key(key))

    parts.append(OPEN_BRACKET)
    parts.append(length_marker)
    parts.append(str(length))
    if delimiter != COMMA:
        parts.append(delimiter)
    parts.append(CLOSE_BRACKET)

    if fields:
        parts.append(OPEN_BRACE)
        parts.append(delimiter.join(encode_key(field) for field in fields))
        parts.append(CLOSE_BRACE)

    parts.append(COLON)
    return "".join(parts)


def is_array_of_primitives(items: Any) -> bool:
    return all(is_primitive(item) for item in items)


def tabular_fields(items: Sequence[Any]) -> tuple[str, ...] | None:
    """
    Returns the shared field order if ``items`` can be rendered as a table.

    Every element must be a non-empty dict with exactly the first element's
    keys and only primitive values.
    """
    if not items or not all(is_object(item) for item in items):
        return None

    fields = tuple(items[0])
    field_set = set(fields)
    for item in items:
        if len(item) != len(fields) or item.keys() != field_set:
            return None
        if not all(is_primitive(value) for value in item.values()):
            return None
    return fields


def classify_array(items: Sequence[Any]) -> ArrayShape:
    """Picks the first layout whose preconditions ``items`` meets."""
    if not items:
        return ArrayShape.EMPTY
    if is_array_of_primitives(items):
        return ArrayShape.INLINE
    if tabular_fields(items) is not None:
        return ArrayShape.TABULAR
    if all(
        is_array(item) and is_array_of_primitives(_as_items(item))
        for item in items
    ):
        return ArrayShape.NESTED_INLINE
    return ArrayShape.EXPANDED


def _as_items(value: Any) -> Sequence[Any]:
    """Views an array-shaped value (list, tuple or empty dict) as items."""
    if isinstance(value, dict):
        return ()
    return value


class ShapeEncoder:
    """
    Walks a value and writes its layout through a ``LineWriter``.

    One instance serves a single ``encode`` call.
    """

    def __init__(
        self, writer: LineWriter, delimiter: str, length_marker: str
    ) -> None:
        self.writer = writer
        self.delimiter = delimiter
        self.length_marker = length_marker

    def header(
        self,
        length: int,
        key: str | None,
        fields: Sequence[str] | None = None,
    ) -> str:
        return format_header(
            length, key, fields, self.delimiter, self.length_marker
        )

    def inline_line(self, key: str | None, items: Sequence[Any]) -> str:
        header = self.header(len(items), key)
        if not items:
            return header
        return f"{header} {encode_and_join(items, self.delimiter)}"

    def encode_object(self, obj: Mapping[str, Any], depth: Depth) -> None:
        for key, value in obj.items():
            self.encode_key_value(key, value, depth)

    def encode_key_value(self, key: str, value: Any, depth: Depth) -> None:
        encoded_key = encode_key(key)
        if is_primitive(value):
            self.writer.push(
                depth,
                f"{encoded_key}: {encode_primitive(value, self.delimiter)}",
            )
        elif is_array(value):
            if not key:
                raise ToonEncodeError(
                    "An empty key cannot hold an array: the header would "
                    "read as an unkeyed array"
                )
            self.encode_array(key, _as_items(value), depth)
        elif is_object(value):
            self.writer.push(depth, f"{encoded_key}{COLON}")
            self.encode_object(value, depth + 1)
        else:
            raise _not_serializable(value)

    def encode_array(
        self,
        key: str | None,
        items: Sequence[Any],
        depth: Depth,
        list_item: bool = False,
        body_depth: Depth | None = None,
    ) -> None:
        """
        Writes an array's header line at ``depth`` and its body below it.

        With ``list_item`` the header goes on a ``- `` line. ``body_depth``
        defaults to one level below the header.
        """
        with ProfileContext("encode_array", len(items)):
            if body_depth is None:
                body_depth = depth + 1
            push = self.writer.push_list_item if list_item else self.writer.push
            shape = classify_array(items)

            if shape in (ArrayShape.EMPTY, ArrayShape.INLINE):
                push(depth, self.inline_line(key, items))

            elif shape is ArrayShape.TABULAR:
                fields = tabular_fields(items) or ()
                push(depth, self.header(len(items), key, fields))
                for item in items:
                    self.writer.push(
                        body_depth,
                        encode_and_join(
                            [item[field] for field in fields], self.delimiter
                        ),
                    )

            elif shape is ArrayShape.NESTED_INLINE:
                push(depth, self.header(len(items), key))
                for item in items:
                    self.writer.push_list_item(
                        body_depth, self.inline_line(None, _as_items(item))
                    )

            else:
                push(depth, self.header(len(items), key))
                for item in items:
                    self.encode_list_item(item, body_depth)

    def encode_list_item(self, value: Any, depth: Depth) -> None:
        """Writes one element of an expanded array as a ``- `` item."""
        if is_primitive(value):
            self.writer.push_list_item(
                depth, encode_primitive(value, self.delimiter)
            )
        elif is_array(value):
            items = _as_items(value)
            if is_array_of_primitives(items):
                self.writer.push_list_item(depth, self.inline_line(None, items))
            else:
                self.writer.push_list_item(depth, self.header(len(items), None))
                for item in items:
                    self.encode_list_item(item, depth + 1)
        elif is_object(value):
            self.encode_list_item_object(value, depth)
        else:
            raise _not_serializable(value)

    def encode_list_item_object(
        self, obj: Mapping[str, Any], depth: Depth
    ) -> None:
        """
        Writes an object whose first key shares the ``- `` line.

        The remaining keys go one level down; a nested body of the first key
        goes two levels down so it stays apart from those keys.
        """
        entries = iter(obj.items())
        first_key, first_value = next(entries)
        encoded_key = encode_key(first_key)

        if is_primitive(first_value):
            encoded_value = encode_primitive(first_value, self.delimiter)
            self.writer.push_list_item(
                depth, f"{encoded_key}: {encoded_value}"
            )
        elif is_array(first_value):
            if not first_key:
                raise ToonEncodeError(
                    "An empty key cannot hold an array: the header would "
                    "read as an unkeyed array"
                )
            self.encode_array(
                first_key,
                _as_items(first_value),
                depth,
                list_item=True,
                body_depth=depth + 2,
            )
        elif is_object(first_value):
            self.writer.push_list_item(depth, f"{encoded_key}{COLON}")
            self.encode_object(first_value, depth + 2)
        else:
            raise _not_serializable(first_value)

        for key, value in entries:
            self.encode_key_value(key, value, depth + 1)


def encode_value(
    value: Any, indent: int, delimiter: str, length_marker: str
) -> str:
    """
    Encodes a canonical value to TOON text.

    Primitives render on their own; arrays and objects go through a
    ``LineWriter``. An empty dict encodes as an empty array.
    """
    if is_primitive(value):
        return encode_primitive(value, delimiter)

    writer = LineWriter(indent)
    encoder = ShapeEncoder(writer, delimiter, length_marker)

    if is_array(value):
        encoder.encode_array(None, _as_items(value), 0)
    elif is_object(value):
        encoder.encode_object(value, 0)
    else:
        raise _not_serializable(value)

    return writer.to_string()
