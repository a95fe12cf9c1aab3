"""Logging module for the gateway."""

from .setup import LOGGER_NAME, logger, mask_secret, setup_logging

__all__ = [
    "LOGGER_NAME",
    "logger",
    "mask_secret",
    "setup_logging",
]
