"""
Pytest configuration and shared fixtures for toonfmt tests.

Provides immutable test case records pairing TOON documents with the
Python values they stand for, plus the malformed documents that must be
rejected.
"""

from dataclasses import dataclass
from dataclasses import field
from typing import Any

import pytest

import toonfmt


@dataclass(frozen=True)
class ToonTestCase:
    """
    Immutable container for a TOON document and its canonical value.

    ``options`` holds keyword options for whichever direction the test
    exercises.
    """

    description: str
    toon: str
    value: Any = None
    options: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ToonFailCase:
    """A document that must fail to decode, with the expected error."""

    description: str
    toon: str
    error: type[Exception]
    match: str
    lineno: int | None = None


@pytest.fixture
def primitive_cases() -> list[ToonTestCase]:
    """
    Provides root primitives in both directions.

    Covers every primitive kind plus strings that only survive quoted.
    """
    return [
        ToonTestCase("null", "null", None),
        ToonTestCase("true", "true", True),
        ToonTestCase("false", "false", False),
        ToonTestCase("integer", "42", 42),
        ToonTestCase("negative integer", "-17", -17),
        ToonTestCase("float", "3.14", 3.14),
        ToonTestCase("bare string", "hello", "hello"),
        ToonTestCase("string with spaces", "hello world", "hello world"),
        ToonTestCase("empty string", '""', ""),
        ToonTestCase("keyword lookalike", '"true"', "true"),
        ToonTestCase("numeric lookalike", '"42"', "42"),
        ToonTestCase("list marker lookalike", '"- item"', "- item"),
        ToonTestCase("colon in string", '"a: b"', "a: b"),
        ToonTestCase("escaped newline", '"line1\\nline2"', "line1\nline2"),
    ]


@pytest.fixture
def document_cases() -> list[ToonTestCase]:
    """
    Provides canonical documents whose encoding is exactly ``toon``.

    Each case also decodes back to ``value``.
    """
    return [
        ToonTestCase(
            "simple object",
            "name: Alice\nage: 30",
            {"name": "Alice", "age": 30},
        ),
        ToonTestCase(
            "inline primitive array",
            "numbers[5]: 1,2,3,4,5",
            {"numbers": [1, 2, 3, 4, 5]},
        ),
        ToonTestCase(
            "tabular array",
            "users[2]{id,name}:\n  1,Alice\n  2,Bob",
            {"users": [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]},
        ),
        ToonTestCase(
            "nested object",
            "user:\n  name: A\n  address:\n    city: NYC",
            {"user": {"name": "A", "address": {"city": "NYC"}}},
        ),
        ToonTestCase("empty array", "items[0]:", {"items": []}),
        ToonTestCase(
            "array of primitive arrays",
            "pairs[2]:\n  - [2]: 1,2\n  - [2]: 3,4",
            {"pairs": [[1, 2], [3, 4]]},
        ),
        ToonTestCase(
            "heterogeneous list items",
            "items[2]:\n  - 1\n  - a: 1",
            {"items": [1, {"a": 1}]},
        ),
        ToonTestCase(
            "list item object with tabular first key",
            "groups[2]:\n  - members[2]{id}:\n      1\n      2\n"
            "    name: x\n  - 5",
            {"groups": [{"members": [{"id": 1}, {"id": 2}], "name": "x"}, 5]},
        ),
        ToonTestCase(
            "list item object with nested first key",
            "items[2]:\n  - meta:\n      a: 1\n    b: 2\n  - 1",
            {"items": [{"meta": {"a": 1}, "b": 2}, 1]},
        ),
        ToonTestCase(
            "root tabular array",
            "[2]{id,ok}:\n  1,true\n  2,false",
            [{"id": 1, "ok": True}, {"id": 2, "ok": False}],
        ),
        ToonTestCase("root inline array", "[3]: a,b,c", ["a", "b", "c"]),
        ToonTestCase(
            "pipe delimiter",
            "tags[2|]: a|b",
            {"tags": ["a", "b"]},
            {"delimiter": "|"},
        ),
        ToonTestCase(
            "tab delimiter tabular",
            "users[2\t]{id\tname}:\n  1\tAlice\n  2\tBob",
            {"users": [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]},
            {"delimiter": "\t"},
        ),
        ToonTestCase(
            "length marker",
            "numbers[#3]: 1,2,3",
            {"numbers": [1, 2, 3]},
            {"length_marker": "#"},
        ),
        ToonTestCase(
            "indent of four",
            "user:\n    value: 42",
            {"user": {"value": 42}},
            {"indent": 4},
        ),
    ]


@pytest.fixture
def fail_cases() -> list[ToonFailCase]:
    """
    Provides documents that strict decoding must reject.

    ``lineno`` is the line the error must point at, when it has one.
    """
    return [
        ToonFailCase(
            "inline count too low",
            "numbers[3]: 1,2",
            toonfmt.ToonCountMismatchError,
            r"Expected 3 inline array items, but got 2",
            1,
        ),
        ToonFailCase(
            "tabular rows missing",
            "users[3]{id,name}:\n  1,A\n  2,B",
            toonfmt.ToonCountMismatchError,
            r"Expected 3 tabular array rows, but got 2",
            1,
        ),
        ToonFailCase(
            "list items missing",
            "items[2]:\n  - a",
            toonfmt.ToonCountMismatchError,
            r"Expected 2 list array items, but got 1",
            1,
        ),
        ToonFailCase(
            "extra row values",
            "users[1]{id,name}:\n  1,A,x",
            toonfmt.ToonCountMismatchError,
            r"Expected 2 tabular row values, but got 3",
            2,
        ),
        ToonFailCase(
            "odd indentation",
            "a:\n   b: 1",
            toonfmt.ToonIndentationError,
            r"exact multiple of 2, but found 3 spaces",
            2,
        ),
        ToonFailCase(
            "tab indentation",
            "a:\n\tb: 1",
            toonfmt.ToonIndentationError,
            r"Tabs are not allowed",
            2,
        ),
        ToonFailCase(
            "orphaned blank line",
            "a:\n  b: 1\n    \nc: 2",
            toonfmt.ToonIndentationError,
            r"Blank line at depth 2",
            3,
        ),
        ToonFailCase(
            "invalid length",
            "items[x]: 1",
            toonfmt.ToonDecodeError,
            r"Invalid array length: \[x\]",
            1,
        ),
        ToonFailCase(
            "leading zero length",
            "items[01]: 1",
            toonfmt.ToonDecodeError,
            r"Invalid array length: \[01\]",
            1,
        ),
        ToonFailCase(
            "invalid escape",
            'a: "bad\\x"',
            toonfmt.ToonDecodeError,
            r"Invalid escape sequence: \\x",
            1,
        ),
        ToonFailCase(
            "unterminated string",
            'a: 1\nb: "abc',
            toonfmt.ToonDecodeError,
            r"Unterminated string",
            2,
        ),
        ToonFailCase(
            "trailing content after root array",
            "[1]: a\nb: 2",
            toonfmt.ToonDecodeError,
            r"Unexpected content after the root value",
            2,
        ),
        ToonFailCase(
            "stray deeper line",
            "a: 1\n    b: 2",
            toonfmt.ToonDecodeError,
            r"Unexpected content after the root value",
            2,
        ),
        ToonFailCase(
            "missing colon inside object",
            "a: 1\nb",
            toonfmt.ToonDecodeError,
            r"Missing colon after key",
            2,
        ),
        ToonFailCase(
            "empty document",
            "   \n  ",
            toonfmt.ToonInputError,
            r"Cannot decode empty input",
        ),
    ]
