"""Shared fixtures for the dotconf test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from dotconf import Config


@pytest.fixture
def config() -> Config:
    """An empty Config with default settings."""
    return Config()


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Factory writing *content* to *name* under tmp_path and returning the path."""

    def factory(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return factory


@pytest.fixture
def server_ini() -> str:
    return """
# Global settings
app_name = "demo service"
debug = yes

[server]
host = localhost
port = 8080
timeout = 30s
features = auth, metrics, tracing

[database]
url = 'postgres://db:5432/app'
pool = 10
ratio = 0.75
"""


@pytest.fixture
def server_data() -> dict[str, Any]:
    return {
        "app_name": "demo",
        "server": {"host": "localhost", "port": 8080, "tls": {"enabled": True}},
        "tags": ["a", "b"],
    }
