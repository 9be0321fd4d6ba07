"""
Application constants and metadata.
"""

# Application info
APP_NAME = "inigo"
APP_VERSION = "0.1.0"
APP_URL = "https://github.com/thesmart/inigo"

# Parsing
DEFAULT_SECTION = ""
CONFIG_SUFFIX = ".conf"

# Undecodable bytes survive as lone surrogates and are restored on output
ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"

# Command-line exit codes
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_EXEC_FAILED = 126
EXIT_COMMAND_NOT_FOUND = 127
