"""Utility functions for slack-lists-cli."""

import sys

from loguru import logger


def setup_logging(level: str = "WARNING") -> None:
    """Send log output to stderr so stdout stays parseable JSON."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name} - {message}",
    )


def split_list(value: str) -> list[str]:
    """Split a comma-separated value, dropping blanks."""
    return [entry.strip() for entry in value.split(",") if entry.strip()]
