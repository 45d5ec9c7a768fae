"""Utility functions and helpers."""

from esplora_client.utils.logging import get_logger, setup_logging, setup_logging_from_settings

__all__ = [
    "get_logger",
    "setup_logging",
    "setup_logging_from_settings",
]
