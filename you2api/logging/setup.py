"""Logging configuration for the gateway."""

import logging
import sys

LOGGER_NAME = "you2api"


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Set up the gateway logger with a stdout handler."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Clear any existing handlers so repeated setup does not duplicate output
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Propagate so pytest's caplog and uvicorn's root handlers still see records
    logger.propagate = True

    return logger


def mask_secret(value: str, visible: int = 4) -> str:
    """Mask a secret for log output, keeping only a short prefix."""
    if not value:
        return ""
    if len(value) <= visible:
        return "*" * len(value)
    return f"{value[:visible]}{'*' * 8}"


# Global logger instance
logger = setup_logging()
