"""Configuration module."""

from brewledger.config.logging import command_context, configure_logging, get_logger
from brewledger.config.settings import (
    LedgerSettings,
    Settings,
    StorageSettings,
    get_settings,
    reset_settings,
)

__all__ = [
    "Settings",
    "StorageSettings",
    "LedgerSettings",
    "get_settings",
    "reset_settings",
    "command_context",
    "configure_logging",
    "get_logger",
]
