"""Shared pytest configuration and fixtures for the reposync test suite.

This module provides:
- An isolated git environment (HOME with its own .gitconfig)
- Test configuration (paths, markers)
"""
import shutil
import sys
from pathlib import Path

import pytest


# Add src/ to path so test modules can import the reposync package
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))


HAS_GIT = shutil.which("git") is not None


@pytest.fixture
def git_home(tmp_path, monkeypatch):
    """Isolated HOME whose global gitconfig has an identity and default branch."""
    home = tmp_path / "home"
    home.mkdir()
    (home / ".gitconfig").write_text(
        "[user]\n"
        "\tname = Test User\n"
        "\temail = test@example.com\n"
        "[init]\n"
        "\tdefaultBranch = main\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.delenv("GIT_CONFIG_GLOBAL", raising=False)
    return home


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test (fast, isolated)"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (runs git)"
    )


def pytest_collection_modifyitems(config, items):
    """Auto-mark tests based on their location."""
    skip_git = pytest.mark.skip(reason="git executable not available")
    for item in items:
        if "integration" not in item.nodeid:
            item.add_marker(pytest.mark.unit)
            continue
        item.add_marker(pytest.mark.integration)
        if not HAS_GIT:
            item.add_marker(skip_git)
