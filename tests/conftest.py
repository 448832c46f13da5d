"""Pytest configuration and shared fixtures for IniConf tests."""

import tempfile
from pathlib import Path
from typing import Any, Dict, Iterator

import pytest
import yaml

from iniconf import Config


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def environ() -> Dict[str, str]:
    """Isolated environment for ``${NAME}`` references."""
    return {"HOME": "/home/gopher", "USER": "gopher"}


@pytest.fixture
def config(environ: Dict[str, str]) -> Config:
    """Store with a default section and a section overriding and referencing it."""
    return Config(
        {
            "DEFAULT": {
                "host": "localhost",
                "protocol": "http",
                "base-url": "%(protocol)s://%(host)s",
                "debug": "off",
            },
            "web": {
                "url": "http://%(host)s:%(port)s",
                "port": "8080",
                "home": "${HOME}/www",
                "debug": "Yes",
            },
            "db": {
                "host": "db.internal",
                "dsn": "%(base-url)s/db",
                "pool": "4",
            },
        },
        environ=environ,
    )


def write_yaml_file(file_path: Path, data: Dict[str, Any]) -> None:
    """Write data to YAML file.

    Args:
        file_path: Path to write file
        data: Data to write
    """
    with open(file_path, "w") as f:
        yaml.dump(data, f, default_flow_style=False)


def write_ini_file(file_path: Path, content: str) -> None:
    """Write INI content to file.

    Args:
        file_path: Path to write file
        content: INI text
    """
    with open(file_path, "w") as f:
        f.write(content)
