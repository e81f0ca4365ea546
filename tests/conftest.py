"""
Root pytest configuration and shared fixtures.

Every test runs with a clean OPENSDK_* environment, a private
XDG_CONFIG_HOME and no system-wide config directory, so the host's
configuration never leaks into a test.
"""

import logging
import os
from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Isolate the process environment and config locations."""
    for name in list(os.environ):
        if name.startswith("OPENSDK_"):
            monkeypatch.delenv(name, raising=False)

    config_home = tmp_path / "xdg"
    config_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setattr("opensdk.config.SYSTEM_CONFIG_DIR", tmp_path / "etc" / "opensdk")
    return config_home


@pytest.fixture
def config_dir(isolated_config) -> Path:
    """The per-user opensdk config directory (created)."""
    directory = isolated_config / "opensdk"
    directory.mkdir()
    return directory


@pytest.fixture
def cli_runner():
    """Create a Click CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop the handler and level a CLI invocation installed on ``opensdk``."""
    yield
    logger = logging.getLogger("opensdk")
    for handler in list(logger.handlers):
        if getattr(handler, "_opensdk_handler", False):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
