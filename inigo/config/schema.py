"""
Mapping between parsed sections and dataclasses.

Fields are bound to parameters through dataclass field metadata:

    @dataclass
    class Database:
        host: str = ini_field("host", default="")
        port: int = ini_field("port", default=0)
        max_conns: int = ini_field("max_conns", default=0, unsigned=True)
        note: str = ""  # no "ini" metadata, skipped

Supported field types: str, bool, int, float.
"""

import dataclasses
import typing
from pathlib import Path
from typing import Any

from ..const import ENCODING, ENCODING_ERRORS
from ..logging import get_logger
from .lexer import ValueParseError
from .parser import Config, Param, load
from .loader import ConfigError


logger = get_logger("config.schema")

# Metadata keys
INI_KEY = "ini"
UNSIGNED_KEY = "unsigned"

SKIP_TAG = "-"

# Characters that force a string value to be quoted on output
QUOTE_TRIGGERS = frozenset(" \t#='")

COMMENT_CHAR = "#"


def ini_field(name: str, *, unsigned: bool = False, **kwargs: Any) -> Any:
    """
    Declare a dataclass field bound to a configuration parameter.

    Args:
        name: Parameter name; anything after a comma is ignored
        unsigned: Reject negative values for int fields
        **kwargs: Passed through to dataclasses.field (default, etc.)
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[INI_KEY] = name
    if unsigned:
        metadata[UNSIGNED_KEY] = True
    return dataclasses.field(metadata=metadata, **kwargs)


def _param_name(f: dataclasses.Field) -> str | None:
    """Get the parameter name a field is bound to, or None if it is skipped."""
    tag = f.metadata.get(INI_KEY)
    if not tag or tag == SKIP_TAG:
        return None
    name = tag.split(",", 1)[0].strip()
    return name or None


def _mapped_fields(obj: Any, role: str) -> list[tuple[dataclasses.Field, str, Any]]:
    """List (field, parameter name, resolved type) for every bound field of a dataclass instance."""
    if obj is None or not dataclasses.is_dataclass(obj) or isinstance(obj, type):
        raise ConfigError(f"{role} must be a dataclass instance, got {type(obj).__name__}")

    hints = typing.get_type_hints(type(obj))
    result = []
    for f in dataclasses.fields(obj):
        name = _param_name(f)
        if name is None:
            continue
        result.append((f, name, hints.get(f.name, f.type)))
    return result


def _convert(param: Param, field_type: Any, unsigned: bool) -> Any:
    """Convert a Param to the Python type of a field."""
    if field_type is str:
        return param.string()
    if field_type is bool:
        return param.as_bool()
    if field_type is int:
        value = param.as_int()
        if unsigned and value < 0:
            raise ValueParseError(f"negative value {value} for unsigned field")
        return value
    if field_type is float:
        return param.as_float()
    raise TypeError(f"unsupported field type: {field_type!r}")


def _format(value: Any) -> str:
    """Format a field value for output."""
    if isinstance(value, bool):
        return "on" if value else "off"
    if isinstance(value, str):
        return quote_value(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    raise TypeError(f"unsupported field type: {type(value).__name__}")


def quote_value(value: str) -> str:
    """
    Quote a string value if needed.

    Values containing whitespace, '#', '=' or quotes are single-quoted with
    embedded quotes doubled. Simple identifiers and numbers pass through.

    The quoted form has no escape for a backslash, so a backslash directly
    before a quote would read back as an escaped quote. Such values are
    written bare when the bare form parses back unchanged.

    Raises:
        ValueError: If the value has no form that parses back unchanged
    """
    if not value:
        return "''"
    if not any(char in QUOTE_TRIGGERS for char in value):
        return value

    quoted = "'" + value.replace("'", "''") + "'"
    if "\\'" not in quoted:
        return quoted

    if value[0] != "'" and COMMENT_CHAR not in value and value == value.strip():
        return value
    raise ValueError(f"value cannot be written without changing it: {value!r}")


def apply_into(config: Config, section: str, target: Any) -> None:
    """
    Fill a dataclass instance from a section of a parsed Config.

    Parameters missing from the section leave the field untouched.

    Args:
        config: Parsed configuration
        section: Section name ("" for the default section)
        target: Dataclass instance to populate

    Raises:
        ConfigError: If the target is not a dataclass instance, the section
            does not exist, or a value cannot be converted
    """
    fields = _mapped_fields(target, "target")

    sec = config.section(section)
    if sec is None:
        raise ConfigError(f"section {section!r} not found")

    for f, name, field_type in fields:
        if not sec.has_param(name):
            continue

        try:
            value = _convert(sec.get_param(name), field_type, bool(f.metadata.get(UNSIGNED_KEY)))
        except (ValueParseError, TypeError) as e:
            raise ConfigError(f"field {f.name} (param {name!r}): {e}") from e

        setattr(target, f.name, value)


def load_into(path: str | Path, section: str, target: Any) -> None:
    """
    Load a configuration file and fill a dataclass instance from one section.

    See apply_into for the mapping rules.
    """
    apply_into(load(path), section, target)


def marshal(source: Any, section: str = "") -> str:
    """
    Serialize a dataclass instance to configuration text.

    Only bound fields with a non-zero value are written. A "[section]"
    header is emitted unless section is empty.

    Raises:
        ConfigError: If the source is not a dataclass instance or a field
            has an unsupported type
    """
    fields = _mapped_fields(source, "source")

    lines = []
    if section:
        lines.append(f"[{section}]")

    for f, name, _field_type in fields:
        value = getattr(source, f.name)
        if not value:
            continue

        try:
            lines.append(f"{name} = {_format(value)}")
        except (TypeError, ValueError) as e:
            raise ConfigError(f"field {f.name} (param {name!r}): {e}") from e

    return "".join(f"{line}\n" for line in lines)


def save_from(source: Any, section: str, path: str | Path) -> None:
    """
    Write a dataclass instance to a configuration file.

    The file is created or truncated. See marshal for the output format.
    """
    content = marshal(source, section)
    Path(path).write_text(content, encoding=ENCODING, errors=ENCODING_ERRORS)
    logger.debug(f"Wrote section {section!r} to {path}")
