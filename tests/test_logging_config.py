"""Tests for logging setup."""

import logging

import pytest
import structlog

from zenledger.logging_config import configure_logging


def test_configure_sets_root_level():
    configure_logging("debug")

    assert logging.getLogger().level == logging.DEBUG


def test_unknown_level_rejected():
    with pytest.raises(ValueError):
        configure_logging("chatty")


def test_events_reach_stdlib(caplog):
    with caplog.at_level(logging.INFO):
        structlog.get_logger("zenledger.test").info("something_happened", answer=42)

    assert "something_happened" in caplog.text
    assert "answer=42" in caplog.text
