"""Pytest configuration and fixtures."""

import os

import pytest

if "UPARSE_LOG_LEVEL" not in os.environ:
    os.environ["UPARSE_LOG_LEVEL"] = "WARNING"

from uparse import Scanner, TerminalRegistry, get_settings  # noqa: E402


@pytest.fixture
def registry():
    """A registry of user terminals private to one test."""
    return TerminalRegistry(capacity=6)


@pytest.fixture
def scan(registry):
    """Build a scanner over ``line`` that uses the test's registry."""

    def _scan(line, **kwargs):
        return Scanner(line, registry=registry, **kwargs)

    return _scan


@pytest.fixture
def fresh_settings(monkeypatch):
    """Clear the settings cache so UPARSE_* env changes are seen."""
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()
