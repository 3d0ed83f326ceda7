"""Tests for settings and logging configuration."""

import logging

from uparse import Scanner, configure_logging, get_settings
from uparse import core, terminals
from uparse.log import get_logger


def test_defaults(fresh_settings):
    fresh_settings.delenv("UPARSE_MAX_CAPTURES", raising=False)
    settings = get_settings()
    assert settings.max_captures == 10
    assert settings.max_message == 120


def test_env_overrides(fresh_settings, registry):
    fresh_settings.setenv("UPARSE_MAX_CAPTURES", "3")
    fresh_settings.setenv("UPARSE_MAX_MESSAGE", "40")
    s = Scanner("x", registry=registry)
    assert len(s.captures) == 3
    assert s.max_message == 40


def test_keyword_overrides_settings(registry):
    s = Scanner("x", registry=registry, max_captures=4)
    assert len(s.captures) == 4


def test_configure_logging():
    configure_logging(level="DEBUG", format="json", force=True)
    assert logging.getLogger("uparse").level == logging.DEBUG
    configure_logging(level="WARNING", force=True)
    assert logging.getLogger("uparse").level == logging.WARNING


def test_modules_share_cached_loggers():
    assert core.logger is get_logger("uparse.core")
    assert terminals.logger is get_logger("uparse.terminals")
