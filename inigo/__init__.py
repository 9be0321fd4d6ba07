"""
inigo - parser for pg_service-style configuration files.

Usage:
    import inigo

    config = inigo.load("/etc/pg_service.conf")
    section = config.section("mydb")
    port = section.get_param("port").as_int()
"""

from .config import (
    CircularIncludeError,
    Config,
    ConfigError,
    ConfigLoader,
    LexerError,
    Param,
    ParseError,
    Section,
    ValueParseError,
    apply_into,
    ini_field,
    load,
    load_into,
    marshal,
    parse,
    require_dir,
    require_file,
    save_from,
)
from .const import APP_VERSION as __version__

__all__ = [
    "__version__",
    "Config",
    "Section",
    "Param",
    "parse",
    "load",
    "ConfigLoader",
    "require_file",
    "require_dir",
    "apply_into",
    "load_into",
    "marshal",
    "save_from",
    "ini_field",
    "LexerError",
    "ValueParseError",
    "ParseError",
    "CircularIncludeError",
    "ConfigError",
]
