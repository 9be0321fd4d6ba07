"""
Entry point for the inigo command.

Loads one section of a configuration file into environment variables and
replaces the current process with a command.

Usage:
    inigo --prefix PG pg_service.conf mydb -- psql
    python -m inigo --help
"""

import argparse
import os
import shutil
import sys
from collections.abc import Mapping

from .config.loader import ConfigError, ConfigLoader
from .config.parser import Section
from .const import (
    APP_NAME,
    APP_VERSION,
    EXIT_COMMAND_NOT_FOUND,
    EXIT_EXEC_FAILED,
    EXIT_FAILURE,
)
from .logging import get_logger, setup_logging_from_args


logger = get_logger("cli")

COMMAND_SEPARATOR = "--"

EPILOG = """\
Params from the section are converted to uppercase environment
variables. With --prefix PG, param "host" becomes PGHOST.

Example:
  inigo --prefix PG pg_service.conf mydb -- psql
"""


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for everything before the "--" separator."""
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        usage="%(prog)s [flags] <ini-file> <section> -- <command> [args...]",
        description="Load INI config params as environment variables and exec a command.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("ini_file", metavar="ini-file", help="Path to the configuration file")
    parser.add_argument("section", help="Section whose params are exported")

    parser.add_argument(
        "-p", "--prefix",
        default="",
        type=str.upper,
        metavar="PREFIX",
        help="Prepend PREFIX to env var names (e.g. --prefix PG)",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging (INFO level)",
    )

    parser.add_argument(
        "-d", "--debug",
        action="store_true",
        help="Enable debug logging (DEBUG level)",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Quiet mode (only errors)",
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {APP_VERSION}",
    )

    return parser


def split_command(argv: list[str]) -> tuple[list[str], bool, list[str]]:
    """Split argv at the first "--" into (flags, separator found, command)."""
    if COMMAND_SEPARATOR not in argv:
        return argv, False, []
    index = argv.index(COMMAND_SEPARATOR)
    return argv[:index], True, argv[index + 1:]


def build_env(section: Section, prefix: str = "") -> dict[str, str]:
    """Convert the params of a section into environment variables."""
    return {
        f"{prefix}{name.upper()}": section.get_param(name).string()
        for name in section.all_params()
    }


def merge_env(current: Mapping[str, str], overlay: Mapping[str, str]) -> dict[str, str]:
    """Overlay variables on the current environment; existing names keep their position."""
    env = dict(current)
    env.update(overlay)
    return env


def exec_command(command: list[str], env: dict[str, str]) -> int:
    """
    Replace the current process with command.

    Only returns (with an exit code) if the command cannot be started.
    """
    binary = shutil.which(command[0])
    if binary is None:
        print(f"{APP_NAME}: {command[0]}: command not found", file=sys.stderr)
        return EXIT_COMMAND_NOT_FOUND

    logger.debug(f"Executing {binary} with {len(command) - 1} argument(s)")
    try:
        os.execve(binary, command, env)
    except OSError as e:
        print(f"{APP_NAME}: exec: {e}", file=sys.stderr)
        return EXIT_EXEC_FAILED

    return EXIT_EXEC_FAILED


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    flags, has_separator, command = split_command(argv)

    # Parsed before the separator checks so --help and --version work alone
    args = parser.parse_args(flags)

    if not has_separator:
        parser.error("missing -- separator before command")
    if not command:
        parser.error("missing command after --")

    setup_logging_from_args(
        verbose=args.verbose,
        debug=args.debug,
        quiet=args.quiet,
        colors=not args.no_color,
    )

    try:
        config = ConfigLoader().load_file(args.ini_file)
    except ConfigError as e:
        print(f"{APP_NAME}: {e}", file=sys.stderr)
        return EXIT_FAILURE

    section = config.section(args.section)
    if section is None:
        print(f"{APP_NAME}: section {args.section!r} not found in {args.ini_file}", file=sys.stderr)
        return EXIT_FAILURE

    overlay = build_env(section, args.prefix)
    logger.info(f"Exporting {len(overlay)} variable(s) from section {args.section!r}")

    return exec_command(command, merge_env(os.environ, overlay))


if __name__ == "__main__":
    sys.exit(main())
