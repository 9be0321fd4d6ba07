"""
Line-level lexical helpers for the pg_service-style configuration syntax.

Supports:
- Comments (# to end of line, except inside single quotes)
- Section headers ([name])
- Parameters (name, name =, name = value)
- Single-quoted values with '' and \\' escapes
- Include directives (include, include_if_exists, include_dir)
- Typed value coercion (booleans, integers, floats)

All functions here are pure and operate on a single line of text.
"""

import math
import re
from pathlib import Path


class LexerError(Exception):
    """Exception raised for malformed lines."""

    pass


class ValueParseError(ValueError):
    """Exception raised when a raw value cannot be coerced to a type."""

    pass


QUOTE = "'"
COMMENT = "#"

# Longest first so "include" does not shadow the longer names
DIRECTIVES = ("include_if_exists", "include_dir", "include")

# Characters that may follow a directive keyword
DIRECTIVE_SEPARATORS = (" ", "\t", QUOTE)

TRUE_WORDS = ("on", "true", "yes")
FALSE_WORDS = ("off", "false", "no")

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# C-style integer literal: decimal, 0x hexadecimal, leading-zero octal
_INT_RE = re.compile(r"([+-]?)(?:0[xX]([0-9a-fA-F]+)|0([0-7]+)|([0-9]+))")

# Decimal float literal with optional fraction and exponent
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

_SPECIAL_FLOATS = {"inf", "+inf", "-inf", "infinity", "+infinity", "-infinity", "nan", "+nan", "-nan"}


def strip_comment(line: str) -> str:
    """
    Remove the comment portion of a line.

    A '#' outside single quotes starts a comment. Inside quotes, escaped
    quotes ('' and \\') are skipped so they do not end the quoted run.
    """
    in_quote = False
    i = 0
    length = len(line)

    while i < length:
        char = line[i]
        if in_quote:
            if char == "\\" and i + 1 < length and line[i + 1] == QUOTE:
                i += 1  # backslash-escaped quote
            elif char == QUOTE:
                if i + 1 < length and line[i + 1] == QUOTE:
                    i += 1  # doubled quote
                else:
                    in_quote = False
        elif char == QUOTE:
            in_quote = True
        elif char == COMMENT:
            return line[:i]
        i += 1

    return line


def parse_section_header(line: str) -> str:
    """Extract the section name from a "[name]" line."""
    end = line.find("]")
    if end < 0:
        raise LexerError(f"unterminated section header: {line!r}")

    name = line[1:end].strip()
    if not name:
        raise LexerError("empty section name")

    return name


def is_valid_param_name(name: str) -> bool:
    """
    Check that a parameter name follows the naming rules.

    The first character is an ASCII letter or underscore, the rest are
    ASCII letters, digits, underscores or '$'.
    """
    if not name:
        return False

    first = name[0]
    if not (_is_alpha(first) or first == "_"):
        return False

    for char in name[1:]:
        if not (_is_alpha(char) or _is_digit(char) or char in "_$"):
            return False

    return True


def parse_key_value(line: str) -> tuple[str, str]:
    """
    Split a line into parameter name and decoded value.

    Only the first '=' is a delimiter. A line without '=' is a bare
    parameter with an empty value.
    """
    name_part, has_equals, value_part = line.partition("=")
    name = name_part.strip()

    if not is_valid_param_name(name):
        raise LexerError(f"invalid parameter name: {name!r}")

    if not has_equals:
        return name, ""

    try:
        value = parse_value(value_part.strip())
    except LexerError as e:
        raise LexerError(f"parameter {name!r}: {e}") from e

    return name, value


def parse_value(raw: str) -> str:
    """Decode a raw value; quoted values are unescaped, others pass through."""
    if not raw:
        return ""
    if raw[0] == QUOTE:
        return parse_quoted_value(raw)
    return raw


def parse_quoted_value(raw: str) -> str:
    """
    Decode a single-quoted string value.

    Embedded quotes may be written doubled ('') or backslash-escaped (\\').
    Anything after the closing quote is ignored.
    """
    result = []
    i = 1  # skip opening quote
    length = len(raw)

    while i < length:
        char = raw[i]
        if char == "\\" and i + 1 < length and raw[i + 1] == QUOTE:
            result.append(QUOTE)
            i += 2
        elif char == QUOTE:
            if i + 1 < length and raw[i + 1] == QUOTE:
                result.append(QUOTE)
                i += 2
            else:
                return "".join(result)
        else:
            result.append(char)
            i += 1

    raise LexerError("unterminated single-quoted string")


def match_directive(line: str) -> tuple[str, str] | None:
    """
    Match an include directive at the start of a line.

    Returns (directive, argument) or None. The keyword must be followed by
    whitespace or a quote, so a parameter such as "include_var = 1" is not
    mistaken for a directive.
    """
    lower = line.lower()

    for name in DIRECTIVES:
        if not lower.startswith(name) or len(line) <= len(name):
            continue
        if line[len(name)] not in DIRECTIVE_SEPARATORS:
            continue
        return name, line[len(name):].strip()

    return None


def parse_include_path(argument: str) -> str:
    """
    Extract a file path from an include directive argument.

    Quoted paths run to the next quote (no escapes); bare paths run to the
    first whitespace.
    """
    argument = argument.strip()
    if not argument:
        raise LexerError("missing path")

    if argument[0] == QUOTE:
        end = argument.find(QUOTE, 1)
        if end < 0:
            raise LexerError("unterminated quoted path")
        return argument[1:end]

    return argument.split(maxsplit=1)[0]


def resolve_path(path: str, base_dir: str | Path) -> Path:
    """Make a relative include path absolute using the including file's directory."""
    candidate = Path(path)
    if candidate.is_absolute():
        return candidate
    return Path(base_dir) / candidate


def parse_bool(value: str) -> bool:
    """
    Interpret a string as a boolean.

    Accepts on/off, true/false, yes/no, 1/0 (case-insensitive), or any
    unambiguous prefix of those words. "o" is ambiguous (on/off).
    """
    value = value.strip().lower()
    if not value:
        raise ValueParseError("empty boolean value")
    if value == "1":
        return True
    if value == "0":
        return False

    matches_true = any(word.startswith(value) for word in TRUE_WORDS)
    matches_false = any(word.startswith(value) for word in FALSE_WORDS)

    if matches_true and matches_false:
        raise ValueParseError(f"ambiguous boolean value: {value!r}")
    if matches_true:
        return True
    if matches_false:
        return False
    raise ValueParseError(f"invalid boolean value: {value!r}")


def parse_int(value: str) -> int:
    """
    Interpret a string as a signed 64-bit integer.

    Supports decimal, hexadecimal (0x prefix) and octal (leading 0).
    Fractional values are rounded half away from zero.
    """
    value = value.strip()
    if not value:
        raise ValueParseError("empty integer value")

    result = _parse_int_literal(value)
    if result is None:
        result = _round_float_literal(value)
    if result is None or not INT64_MIN <= result <= INT64_MAX:
        raise ValueParseError(f"invalid integer value: {value!r}")

    return result


def parse_float(value: str) -> float:
    """Interpret a string as a floating-point number."""
    value = value.strip()
    if not value:
        raise ValueParseError("empty numeric value")

    if not (_FLOAT_RE.fullmatch(value) or value.lower() in _SPECIAL_FLOATS):
        raise ValueParseError(f"invalid numeric value: {value!r}")

    try:
        result = float(value)
    except ValueError as e:
        raise ValueParseError(f"invalid numeric value: {value!r}") from e

    # Out-of-range literals overflow to inf; only the spelled-out forms may be non-finite
    if not math.isfinite(result) and value.lower() not in _SPECIAL_FLOATS:
        raise ValueParseError(f"invalid numeric value: {value!r} (out of range)")

    return result


def _parse_int_literal(value: str) -> int | None:
    match = _INT_RE.fullmatch(value)
    if match is None:
        return None

    sign, hex_digits, oct_digits, dec_digits = match.groups()
    if hex_digits is not None:
        result = int(hex_digits, 16)
    elif oct_digits is not None:
        result = int(oct_digits, 8)
    else:
        result = int(dec_digits, 10)

    return -result if sign == "-" else result


def _round_float_literal(value: str) -> int | None:
    if not _FLOAT_RE.fullmatch(value):
        return None

    number = float(value)
    if not math.isfinite(number):
        return None

    # Round half away from zero; x - floor(x) is exact for doubles
    magnitude = abs(number)
    floor = math.floor(magnitude)
    rounded = floor + 1 if magnitude - floor >= 0.5 else floor

    return -rounded if number < 0 else rounded


def _is_alpha(char: str) -> bool:
    return "a" <= char <= "z" or "A" <= char <= "Z"


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"
