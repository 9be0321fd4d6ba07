"""
Pytest configuration and fixtures.
"""

from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture
def write_conf(tmp_path: Path) -> Callable[[str, str], Path]:
    """Factory writing a file relative to tmp_path and returning its path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def example_config_path(write_conf) -> Path:
    """A pg_service-style file with a default section and two services."""
    return write_conf(
        "pg_service.conf",
        """\
# global defaults
sslmode = prefer

[mydb]
host = db.example.com
port = 5432
dbname = production
user = 'app user'

[test]
host = localhost
port = 5433
""",
    )
