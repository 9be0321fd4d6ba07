"""
Line-oriented parser for pg_service-style configuration files.

Parses lines into a section-scoped key/value model and splices in other
files through include directives, as if their content had been inserted
at the directive's position.
"""

import io
import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, TextIO

from ..const import CONFIG_SUFFIX, DEFAULT_SECTION, ENCODING, ENCODING_ERRORS
from ..logging import get_logger
from .lexer import (
    LexerError,
    match_directive,
    parse_bool,
    parse_float,
    parse_include_path,
    parse_int,
    parse_key_value,
    parse_section_header,
    resolve_path,
    strip_comment,
)


logger = get_logger("config.parser")


class ParseError(Exception):
    """Exception raised when a source cannot be parsed or loaded."""

    def __init__(self, message: str, filename: str | None = None, line: int | None = None):
        self.filename = filename
        self.line = line
        if filename is not None and line is not None:
            super().__init__(f"{filename}, line {line}: {message}")
        else:
            super().__init__(message)


class CircularIncludeError(ParseError):
    """Exception raised when a file includes itself, directly or transitively."""

    pass


@dataclass(frozen=True)
class Param:
    """
    A single parameter with its originally-cased name and raw value.

    Examples:
        host = localhost   -> Param(name="host", value="localhost")
        Port = '5432'      -> Param(name="Port", value="5432")
        sslmode            -> Param(name="sslmode", value="")
    """
    name: str
    value: str = ""

    def __str__(self) -> str:
        return self.value

    def string(self) -> str:
        """Get the raw string value."""
        return self.value

    def as_bool(self) -> bool:
        """Interpret the value as a boolean (on/off, true/false, yes/no, 1/0 or a prefix)."""
        return parse_bool(self.value)

    def as_int(self) -> int:
        """Interpret the value as an integer; fractions are rounded."""
        return parse_int(self.value)

    def as_float(self) -> float:
        """Interpret the value as a floating-point number."""
        return parse_float(self.value)


@dataclass
class Section:
    """
    A named group of parameters.

    Parameters are keyed by their lower-cased name, so lookups are
    case-insensitive while the Param keeps the name as written.
    """
    name: str
    params: dict[str, Param] = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"Section({self.name!r}, params={len(self.params)})"

    def has_param(self, name: str) -> bool:
        """Check whether the section contains the named parameter."""
        return name.lower() in self.params

    def get_param(self, name: str) -> Param:
        """Get a parameter by name, or an empty Param if it is not set."""
        return self.params.get(name.lower(), Param(name=name))

    def all_params(self) -> list[str]:
        """Get all (lower-cased) parameter names, sorted."""
        return sorted(self.params)

    def set_param(self, name: str, value: str) -> None:
        """Insert or replace a parameter; the last assignment wins."""
        self.params[name.lower()] = Param(name=name, value=value)


@dataclass
class Config:
    """
    Root of a parsed configuration.

    Parameters before the first section header live in the default
    section, named "", which always exists.
    """
    sections: dict[str, Section] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.sections.setdefault(DEFAULT_SECTION, Section(name=DEFAULT_SECTION))

    @property
    def default_section(self) -> Section:
        """Get the unnamed default section."""
        return self.sections[DEFAULT_SECTION]

    def section(self, name: str) -> Section | None:
        """Get the section with the given name, or None."""
        return self.sections.get(name)

    def has_section(self, name: str) -> bool:
        """Check whether the named section exists."""
        return name in self.sections

    def section_names(self) -> list[str]:
        """Get all section names except the default one, sorted."""
        return sorted(name for name in self.sections if name != DEFAULT_SECTION)

    def enter_section(self, name: str) -> Section:
        """Get an existing section or create it; re-entered sections are merged."""
        section = self.sections.get(name)
        if section is None:
            section = Section(name=name)
            self.sections[name] = section
        return section


class ConfigParser:
    """
    Stateful driver shared by a top-level source and all files it includes.

    Grammar (one construct per line):
        line       := [comment] | header | directive | assignment
        header     := '[' name ']'
        directive  := ('include' | 'include_if_exists' | 'include_dir') path
        assignment := NAME ['=' [value]]
        value      := QUOTED | BARE
    """

    def __init__(self):
        self.config = Config()
        self.section = self.config.default_section
        self.visited: set[str] = set()

    def load_file(self, path: str | Path) -> None:
        """Parse a file, tracking visited paths to prevent circular includes."""
        abs_path = os.path.abspath(path)

        if abs_path in self.visited:
            raise CircularIncludeError(f"circular include detected: {abs_path!r}")
        self.visited.add(abs_path)

        try:
            handle = open(abs_path, encoding=ENCODING, errors=ENCODING_ERRORS)
        except OSError as e:
            raise ParseError(f"failed to open {abs_path!r}: {e.strerror or e}") from e

        logger.debug(f"Parsing {abs_path}")
        with handle:
            self.parse(handle, filename=abs_path, base_dir=os.path.dirname(abs_path))

    def parse(
        self,
        lines: Iterable[str | bytes],
        filename: str = "<string>",
        base_dir: str | None = None,
    ) -> None:
        """
        Parse lines into the current config.

        Args:
            lines: Source lines (a text or binary stream, or any iterable of
                strings or bytes)
            filename: Name used in error messages
            base_dir: Directory for resolving include paths; includes are
                rejected when it is None
        """
        for lineno, raw_line in enumerate(lines, start=1):
            if isinstance(raw_line, bytes):
                raw_line = raw_line.decode(ENCODING, ENCODING_ERRORS)
            line = strip_comment(raw_line).strip()
            if not line:
                continue

            try:
                if line.startswith("["):
                    name = parse_section_header(line)
                    self.section = self.config.enter_section(name)
                    continue

                directive = match_directive(line)
                if directive is not None:
                    self._handle_include(*directive, base_dir=base_dir, filename=filename, lineno=lineno)
                    continue

                name, value = parse_key_value(line)
            except LexerError as e:
                raise ParseError(str(e), filename, lineno) from e

            self.section.set_param(name, value)

    def _handle_include(
        self,
        directive: str,
        argument: str,
        base_dir: str | None,
        filename: str,
        lineno: int,
    ) -> None:
        """Resolve an include directive and parse the file(s) it names."""
        if base_dir is None:
            raise ParseError(
                f"{directive}: cannot resolve paths without a base directory",
                filename,
                lineno,
            )

        try:
            path = parse_include_path(argument)
        except LexerError as e:
            raise ParseError(f"{directive}: {e}", filename, lineno) from e

        resolved = resolve_path(path, base_dir)

        if directive == "include_if_exists" and not resolved.exists():
            logger.debug(f"Skipping missing optional include: {resolved}")
            return

        if directive == "include_dir":
            self._load_dir(resolved)
        else:
            self.load_file(resolved)

    def _load_dir(self, directory: Path) -> None:
        """Include all visible .conf files in a directory, in code-point order."""
        try:
            entries = list(directory.iterdir())
        except OSError as e:
            raise ParseError(f"failed to read directory {str(directory)!r}: {e.strerror or e}") from e

        names = sorted(
            entry.name
            for entry in entries
            if entry.is_file()
            and not entry.name.startswith(".")
            and entry.name.endswith(CONFIG_SUFFIX)
        )
        logger.debug(f"Including {len(names)} file(s) from {directory}")

        for name in names:
            self.load_file(directory / name)


def parse(source: str | bytes | TextIO | BinaryIO | Iterable[str], filename: str = "<string>") -> Config:
    """
    Parse configuration from a string, bytes or an open text or binary stream.

    Include directives are not supported since there is no base directory
    to resolve them against.

    Args:
        source: Configuration text or bytes, or a stream/iterable of lines;
            bytes are decoded as UTF-8 with undecodable bytes preserved
        filename: Name used in error messages

    Returns:
        Parsed Config
    """
    if isinstance(source, bytes):
        source = source.decode(ENCODING, ENCODING_ERRORS)
    if isinstance(source, str):
        source = io.StringIO(source)

    parser = ConfigParser()
    parser.parse(source, filename=filename)
    return parser.config


def load(path: str | Path) -> Config:
    """
    Parse a configuration file.

    Include directives are resolved relative to the directory of the file
    that contains them.

    Args:
        path: Path to the configuration file

    Returns:
        Parsed Config
    """
    parser = ConfigParser()
    parser.load_file(path)
    return parser.config
