"""
Literal and string utility tests.

Validates escaping, quote-aware scanning, the quoting predicate shared with
the encoder, and primitive token parsing shared with the decoder.
"""

import pytest

from toonfmt import ToonDecodeError
from toonfmt._literals import escape_string
from toonfmt._literals import find_closing_quote
from toonfmt._literals import find_unquoted_char
from toonfmt._literals import is_array
from toonfmt._literals import is_numeric_like
from toonfmt._literals import is_object
from toonfmt._literals import is_primitive
from toonfmt._literals import needs_quotes
from toonfmt._literals import parse_number
from toonfmt._literals import parse_primitive
from toonfmt._literals import quote_string
from toonfmt._literals import unescape_string


def test_escape_string_covers_all_five_sequences() -> None:
    """
    Validates backslash, quote, LF, CR and TAB are escaped.
    """
    assert escape_string('a"b\\c\nd\re\tf') == 'a\\"b\\\\c\\nd\\re\\tf'
    assert escape_string("plain") == "plain"


def test_unescape_inverts_escape() -> None:
    """
    Validates unescaping restores the original characters.
    """
    original = 'quote " slash \\ lf \n cr \r tab \t'
    assert unescape_string(escape_string(original)) == original


@pytest.mark.parametrize(
    "body,expected_msg",
    [
        ("abc\\", r"backslash at end of string"),
        ("\\u0041", r"Invalid escape sequence: \\u"),
        ("\\/", r"Invalid escape sequence: \\/"),
    ],
)
def test_unescape_rejects_unknown_sequences(
    body: str, expected_msg: str
) -> None:
    """
    Validates only the five known escapes are accepted.
    """
    with pytest.raises(ToonDecodeError, match=expected_msg):
        unescape_string(body)


def test_find_closing_quote_skips_escapes() -> None:
    """
    Validates escaped quotes do not close a string.
    """
    assert find_closing_quote('"ab\\"c"', 0) == 6
    assert find_closing_quote('x "y" z', 2) == 4
    assert find_closing_quote('"abc', 0) == -1


def test_find_unquoted_char_ignores_quoted_spans() -> None:
    """
    Validates characters inside quotes are not matched.
    """
    assert find_unquoted_char('"a:b":c', ":") == 5
    assert find_unquoted_char('"a\\":b":c', ":") == 7
    assert find_unquoted_char("abc", ":") == -1
    assert find_unquoted_char("a:b:c", ":", 2) == 3


@pytest.mark.parametrize(
    "value", ["42", "-3.5", "+7", "1e10", "1E-5", ".5", "5.", "0", "-0.0"]
)
def test_numeric_like_accepts_numbers(value: str) -> None:
    """
    Validates decimal and exponent forms count as numeric.
    """
    assert is_numeric_like(value)


@pytest.mark.parametrize(
    "value", ["", "abc", "1.2.3", "0x10", "1e", "--1", "1 2", "٣"]
)
def test_numeric_like_rejects_non_numbers(value: str) -> None:
    """
    Validates non-numeric strings, including non-ASCII digits, are rejected.
    """
    assert not is_numeric_like(value)


@pytest.mark.parametrize(
    "value,expected",
    [
        ("", True),
        ("hello", False),
        ("hello world", False),
        ("café", False),
        ("#tag", False),
        (" padded", True),
        ("padded ", True),
        ("true", True),
        ("false", True),
        ("null", True),
        ("True", False),
        ("123", True),
        ("1e5", True),
        ("-", True),
        ("-x", True),
        ("a:b", True),
        ("a,b", True),
        ("a|b", True),
        ("a[b", True),
        ("a{b", True),
        ('say "hi"', True),
        ("back\\slash", True),
        ("tab\there", True),
    ],
)
def test_needs_quotes(value: str, expected: bool) -> None:
    """
    Validates which strings must be quoted to survive decoding.
    """
    assert needs_quotes(value) is expected


def test_quote_string_escapes_content() -> None:
    """
    Validates quoted strings are wrapped and escaped.
    """
    assert quote_string('a"b') == '"a\\"b"'
    assert quote_string("") == '""'


@pytest.mark.parametrize(
    "token,expected",
    [
        ("null", None),
        ("true", True),
        ("false", False),
        ("42", 42),
        ("-7", -7),
        ("3.14", 3.14),
        ("1e3", 1000.0),
        ("  12  ", 12),
        ('"quoted"', "quoted"),
        ('"42"', "42"),
        ('"a\\nb"', "a\nb"),
        ("plain text", "plain text"),
        ("Null", "Null"),
    ],
)
def test_parse_primitive(token: str, expected: object) -> None:
    """
    Validates each token kind parses to the right Python value and type.
    """
    result = parse_primitive(token)

    assert result == expected
    assert type(result) is type(expected)


@pytest.mark.parametrize(
    "token,expected_msg",
    [
        ("", r"Cannot parse empty token"),
        ("   ", r"Cannot parse empty token"),
        ('"abc', r"Unterminated string"),
        ('"ab"c', r"Unexpected characters after closing quote"),
    ],
)
def test_parse_primitive_failures(token: str, expected_msg: str) -> None:
    """
    Validates malformed tokens raise decode errors.
    """
    with pytest.raises(ToonDecodeError, match=expected_msg):
        parse_primitive(token)


def test_parse_number_kinds() -> None:
    """
    Validates a fraction or exponent makes a float, anything else an int.
    """
    assert type(parse_number("10")) is int
    assert type(parse_number("10.0")) is float
    assert type(parse_number("1e2")) is float
    assert parse_number("007") == 7


@pytest.mark.parametrize("token", ["1e999", "-1E400", "9" * 400 + ".0"])
def test_parse_number_rejects_non_finite(token: str) -> None:
    """
    Validates numbers overflowing to infinity raise instead of decoding.
    """
    with pytest.raises(ToonDecodeError, match=r"Number out of range"):
        parse_number(token)


def test_shape_predicates() -> None:
    """
    Validates empty dicts are arrays, not objects, and bools are primitive.
    """
    assert is_primitive(True)
    assert is_primitive(None)
    assert is_primitive(1.5)
    assert not is_primitive([])

    assert is_array([])
    assert is_array((1, 2))
    assert is_array({})
    assert not is_array({"a": 1})

    assert is_object({"a": 1})
    assert not is_object({})
    assert not is_object([])
