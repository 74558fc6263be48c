"""Tests for logging configuration."""

import logging

import pytest

from airwatch.utils.logging import configure_logging, resolve_level


@pytest.fixture
def loggers():
    watched = [logging.getLogger("urllib3"), logging.getLogger("airwatch")]
    previous = [logger.level for logger in watched]
    yield dict(zip(["urllib3", "airwatch"], watched))
    for logger, level in zip(watched, previous):
        logger.setLevel(level)


def test_debug_keeps_urllib3_quiet(loggers):
    configure_logging(logging.DEBUG)
    assert loggers["urllib3"].level == logging.WARNING
    assert loggers["airwatch"].level == logging.DEBUG


def test_level_name_from_settings(loggers):
    configure_logging("error")
    assert loggers["airwatch"].level == logging.ERROR
    assert loggers["urllib3"].level == logging.ERROR


@pytest.mark.parametrize("level, expected", [("INFO", logging.INFO), (" debug ", logging.DEBUG), (30, 30)])
def test_resolve_level(level, expected):
    assert resolve_level(level) == expected


def test_unknown_level_is_rejected():
    with pytest.raises(RuntimeError, match="chatty"):
        resolve_level("chatty")
