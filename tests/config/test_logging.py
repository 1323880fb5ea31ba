"""Tests for logging configuration."""

import logging

import structlog

from brewledger.config import command_context, configure_logging, get_logger


def test_command_context_binds_and_unbinds():
    with command_context("status", year="2024", today=None):
        bound = structlog.contextvars.get_contextvars()
        assert bound == {"command": "status", "year": "2024"}

    assert not {"command", "year"} & set(structlog.contextvars.get_contextvars())


def test_command_context_unbinds_on_error():
    try:
        with command_context("import"):
            raise ValueError("bad backup")
    except ValueError:
        pass

    assert "command" not in structlog.contextvars.get_contextvars()


def test_configure_logging_quiets_aiosqlite():
    configure_logging("DEBUG")

    assert logging.getLogger("aiosqlite").level == logging.WARNING
    assert get_logger(__name__) is not None
