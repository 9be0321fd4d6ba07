"""
Tests for the line-level lexical helpers and value coercion.
"""

import math
from pathlib import Path

import pytest

from inigo.config.lexer import (
    LexerError,
    ValueParseError,
    is_valid_param_name,
    match_directive,
    parse_bool,
    parse_float,
    parse_include_path,
    parse_int,
    parse_key_value,
    parse_quoted_value,
    parse_section_header,
    parse_value,
    resolve_path,
    strip_comment,
)


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("key = value", "key = value"),
        ("# full line comment", ""),
        ("key = value # comment", "key = value "),
        ("key = 'val#ue'", "key = 'val#ue'"),
        ("key = 'val#ue' # comment", "key = 'val#ue' "),
        ("key = 'it''s' # comment", "key = 'it''s' "),
        ("key = 'it\\'s' # comment", "key = 'it\\'s' "),
        ("", ""),
        ("#comment", ""),
    ],
)
def test_strip_comment(line: str, expected: str) -> None:
    assert strip_comment(line) == expected


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("[myservice]", "myservice"),
        ("[  myservice  ]", "myservice"),
        ("[my service]", "my service"),
    ],
)
def test_parse_section_header(line: str, expected: str) -> None:
    assert parse_section_header(line) == expected


@pytest.mark.parametrize(
    ("line", "message"),
    [
        ("[myservice", "unterminated section header"),
        ("[]", "empty section name"),
        ("[   ]", "empty section name"),
    ],
)
def test_parse_section_header_errors(line: str, message: str) -> None:
    with pytest.raises(LexerError, match=message):
        parse_section_header(line)


@pytest.mark.parametrize(
    ("name", "valid"),
    [
        ("host", True),
        ("_private", True),
        ("port5432", True),
        ("var$1", True),
        ("my_var", True),
        ("HOST", True),
        ("myHost", True),
        ("1host", False),
        ("$var", False),
        ("my-var", False),
        ("my var", False),
        ("my.var", False),
        ("héte", False),
        ("", False),
    ],
)
def test_is_valid_param_name(name: str, valid: bool) -> None:
    assert is_valid_param_name(name) is valid


@pytest.mark.parametrize(
    ("line", "key", "value"),
    [
        ("host = localhost", "host", "localhost"),
        ("host=localhost", "host", "localhost"),
        ("host =", "host", ""),
        ("host", "host", ""),
        ("name = 'hello world'", "name", "hello world"),
        ("cmd = a=b", "cmd", "a=b"),
        ("msg = 'it''s'", "msg", "it's"),
        ("msg = 'it\\'s'", "msg", "it's"),
        ("key = value ", "key", "value"),
    ],
)
def test_parse_key_value(line: str, key: str, value: str) -> None:
    assert parse_key_value(line) == (key, value)


@pytest.mark.parametrize("line", ["1bad = val", " = val", "my-var = 1"])
def test_parse_key_value_invalid_name(line: str) -> None:
    with pytest.raises(LexerError, match="invalid parameter name"):
        parse_key_value(line)


def test_parse_key_value_unterminated_quote_names_param() -> None:
    with pytest.raises(LexerError, match="parameter 'msg': unterminated"):
        parse_key_value("msg = 'oops")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("'hello'", "hello"),
        ("''", ""),
        ("'hello world'", "hello world"),
        ("'it''s'", "it's"),
        ("'it\\'s'", "it's"),
        ("'a''b''c'", "a'b'c"),
        ("'val#ue'", "val#ue"),
        ("'a\\b'", "a\\b"),
        ("'done' trailing", "done"),
    ],
)
def test_parse_quoted_value(raw: str, expected: str) -> None:
    assert parse_quoted_value(raw) == expected


def test_parse_quoted_value_unterminated() -> None:
    with pytest.raises(LexerError, match="unterminated single-quoted string"):
        parse_quoted_value("'hello")


def test_escape_forms_decode_identically() -> None:
    """Doubled and backslash-escaped quotes produce the same value."""
    doubled = parse_quoted_value("'a''b''c''d'")
    backslashed = parse_quoted_value("'a\\'b\\'c\\'d'")
    assert doubled == backslashed == "a'b'c'd"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("", ""),
        ("localhost", "localhost"),
        ("'hello'", "hello"),
        ("5432", "5432"),
        ("a=b=c", "a=b=c"),
        ("it's", "it's"),
    ],
)
def test_parse_value(raw: str, expected: str) -> None:
    assert parse_value(raw) == expected


def test_parse_value_unterminated() -> None:
    with pytest.raises(LexerError):
        parse_value("'oops")


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("include 'f.conf'", ("include", "'f.conf'")),
        ("include\t'f.conf'", ("include", "'f.conf'")),
        ("include'f.conf'", ("include", "'f.conf'")),
        ("INCLUDE 'f.conf'", ("include", "'f.conf'")),
        ("include_dir '/etc'", ("include_dir", "'/etc'")),
        ("include_if_exists 'f'", ("include_if_exists", "'f'")),
        ("include  f.conf  ", ("include", "f.conf")),
    ],
)
def test_match_directive(line: str, expected: tuple[str, str]) -> None:
    assert match_directive(line) == expected


@pytest.mark.parametrize(
    "line",
    [
        "included = true",
        "include_var = 5",
        "include",
        "include_dir",
        "something else",
        "include=5",
    ],
)
def test_match_directive_no_match(line: str) -> None:
    assert match_directive(line) is None


@pytest.mark.parametrize(
    ("argument", "expected"),
    [
        ("'/etc/pg.conf'", "/etc/pg.conf"),
        ("/etc/pg.conf", "/etc/pg.conf"),
        ("/etc/pg.conf extra", "/etc/pg.conf"),
        ("'path with spaces/file.conf'", "path with spaces/file.conf"),
        ("'it''s.conf'", "it"),
    ],
)
def test_parse_include_path(argument: str, expected: str) -> None:
    assert parse_include_path(argument) == expected


@pytest.mark.parametrize(
    ("argument", "message"),
    [
        ("", "missing path"),
        ("   ", "missing path"),
        ("'/etc/pg.conf", "unterminated quoted path"),
    ],
)
def test_parse_include_path_errors(argument: str, message: str) -> None:
    with pytest.raises(LexerError, match=message):
        parse_include_path(argument)


@pytest.mark.parametrize(
    ("path", "base_dir", "expected"),
    [
        ("/etc/pg.conf", "/home/user", "/etc/pg.conf"),
        ("pg.conf", "/etc", "/etc/pg.conf"),
        ("conf.d/extra.conf", "/etc", "/etc/conf.d/extra.conf"),
    ],
)
def test_resolve_path(path: str, base_dir: str, expected: str) -> None:
    assert resolve_path(path, base_dir) == Path(expected)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("on", True),
        ("off", False),
        ("true", True),
        ("false", False),
        ("yes", True),
        ("no", False),
        ("1", True),
        ("0", False),
        ("ON", True),
        ("False", False),
        ("t", True),
        ("tru", True),
        ("f", False),
        ("fal", False),
        ("y", True),
        ("n", False),
        ("of", False),
        ("  true", True),
        ("true  ", True),
    ],
)
def test_parse_bool(value: str, expected: bool) -> None:
    assert parse_bool(value) is expected


@pytest.mark.parametrize(
    ("value", "message"),
    [
        ("o", "ambiguous boolean value"),
        ("O", "ambiguous boolean value"),
        ("", "empty boolean value"),
        ("   ", "empty boolean value"),
        ("maybe", "invalid boolean value"),
        ("2", "invalid boolean value"),
        ("onn", "invalid boolean value"),
    ],
)
def test_parse_bool_errors(value: str, message: str) -> None:
    with pytest.raises(ValueParseError, match=message):
        parse_bool(value)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("42", 42),
        ("-7", -7),
        ("+7", 7),
        ("0", 0),
        ("0xFF", 255),
        ("0xff", 255),
        ("-0x10", -16),
        ("010", 8),
        ("08", 8),
        ("3.2", 3),
        ("3.7", 4),
        ("2.5", 3),
        ("-2.5", -3),
        ("-1.6", -2),
        ("0.49999999999999994", 0),
        ("1e3", 1000),
        ("  42  ", 42),
        ("9223372036854775807", 2**63 - 1),
    ],
)
def test_parse_int(value: str, expected: int) -> None:
    assert parse_int(value) == expected


@pytest.mark.parametrize(
    ("value", "message"),
    [
        ("", "empty integer value"),
        ("abc", "invalid integer value"),
        ("0x", "invalid integer value"),
        ("1_000", "invalid integer value"),
        ("inf", "invalid integer value"),
        ("9223372036854775808", "invalid integer value"),
    ],
)
def test_parse_int_errors(value: str, message: str) -> None:
    with pytest.raises(ValueParseError, match=message):
        parse_int(value)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("42", 42.0),
        ("3.14", 3.14),
        ("-2.5", -2.5),
        ("  1.5  ", 1.5),
        ("1e-3", 0.001),
        (".5", 0.5),
    ],
)
def test_parse_float(value: str, expected: float) -> None:
    assert parse_float(value) == expected


@pytest.mark.parametrize(
    ("value", "message"),
    [
        ("", "empty numeric value"),
        ("abc", "invalid numeric value"),
        ("1.2.3", "invalid numeric value"),
        ("0x10", "invalid numeric value"),
        ("1e400", "invalid numeric value"),
        ("-1e400", "out of range"),
    ],
)
def test_parse_float_errors(value: str, message: str) -> None:
    with pytest.raises(ValueParseError, match=message):
        parse_float(value)


def test_parse_float_special_values() -> None:
    assert parse_float("inf") == math.inf
    assert parse_float("-Infinity") == -math.inf
    assert math.isnan(parse_float("NaN"))
    assert parse_float("1e-400") == 0.0


def test_value_parse_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        parse_int("nope")
