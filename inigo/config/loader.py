"""
Configuration loader with file checks and error wrapping.
"""

from pathlib import Path

from ..logging import get_logger
from .lexer import LexerError
from .parser import Config, ParseError, load, parse


logger = get_logger("config.loader")


class ConfigError(Exception):
    """Exception raised for configuration errors."""

    pass


def require_file(path: str | Path, name: str) -> None:
    """
    Verify that a regular file exists at path.

    Args:
        path: Path to check
        name: What the path represents, used in error messages

    Raises:
        ConfigError: If the path is missing or is a directory
    """
    path = Path(path)

    if not path.exists():
        raise ConfigError(f"{name} not found: {path}")

    if path.is_dir():
        raise ConfigError(f"{name} is a directory, expected a file: {path}")


def require_dir(path: str | Path, name: str) -> None:
    """
    Verify that a directory exists at path.

    Args:
        path: Path to check
        name: What the path represents, used in error messages

    Raises:
        ConfigError: If the path is missing or is not a directory
    """
    path = Path(path)

    if not path.exists():
        raise ConfigError(f"{name} not found: {path}")

    if not path.is_dir():
        raise ConfigError(f"{name} is a file, expected a directory: {path}")


class ConfigLoader:
    """
    Loads configuration from files or strings.

    Usage:
        loader = ConfigLoader()
        config = loader.load_file("/etc/pg_service.conf")
        # or
        config = loader.load_string(config_text)
    """

    def __init__(self):
        self.last_config: Config | None = None

    def load_file(self, path: str | Path) -> Config:
        """
        Load configuration from a file.

        Args:
            path: Path to the configuration file

        Returns:
            Parsed Config object

        Raises:
            ConfigError: If file cannot be read or parsed
        """
        require_file(path, "configuration file")

        try:
            config = load(path)
        except (LexerError, ParseError) as e:
            raise ConfigError(f"Failed to parse configuration: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration: {e}") from e

        logger.info(f"Loaded configuration from {path} ({len(config.section_names())} sections)")
        self.last_config = config
        return config

    # Same name as the module-level load()
    def load(self, path: str | Path) -> Config:
        """
        Alias for load_file.

        Args:
            path: Path to the configuration file

        Returns:
            Parsed Config object
        """
        return self.load_file(path)

    def load_string(self, source: str, filename: str = "<string>") -> Config:
        """
        Load configuration from a string.

        Include directives are rejected since a string has no base directory.

        Args:
            source: Configuration source text
            filename: Filename for error messages

        Returns:
            Parsed Config object

        Raises:
            ConfigError: If configuration cannot be parsed
        """
        try:
            config = parse(source, filename)
        except (LexerError, ParseError) as e:
            raise ConfigError(f"Failed to parse configuration: {e}") from e

        logger.debug(f"Parsed configuration from {filename}")
        self.last_config = config
        return config


def load_config(path: str | Path) -> Config:
    """
    Convenience function to load configuration from a file.

    Args:
        path: Path to the configuration file

    Returns:
        Parsed Config object
    """
    loader = ConfigLoader()
    return loader.load_file(path)
