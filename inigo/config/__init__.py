"""
Configuration parsing module with pg_service-style syntax support.
"""

from .lexer import LexerError, ValueParseError
from .loader import ConfigError, ConfigLoader, load_config, require_dir, require_file
from .parser import CircularIncludeError, Config, ConfigParser, Param, ParseError, Section, load, parse
from .schema import apply_into, ini_field, load_into, marshal, quote_value, save_from

__all__ = [
    "Config",
    "Section",
    "Param",
    "ConfigParser",
    "parse",
    "load",
    "ConfigLoader",
    "load_config",
    "require_file",
    "require_dir",
    "apply_into",
    "load_into",
    "marshal",
    "save_from",
    "quote_value",
    "ini_field",
    "LexerError",
    "ValueParseError",
    "ParseError",
    "CircularIncludeError",
    "ConfigError",
]
