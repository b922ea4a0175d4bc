"""Unit tests configuration file."""

import pytest


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep user settings from leaking into tests."""
    monkeypatch.delenv("DAPSERDE_MAX_DEPTH", raising=False)
    monkeypatch.delenv("DAPSERDE_LOG_LEVEL", raising=False)
