"""Environment-variable-based configuration."""

import logging
import os
import sys


def get_log_level() -> str:
    """Return the logging level from STEPCURSOR_LOG_LEVEL."""
    return os.environ.get("STEPCURSOR_LOG_LEVEL", "WARNING").upper()


def configure_logging() -> None:
    """Send stepcursor logs to stderr at the configured level."""
    logging.basicConfig(
        level=getattr(logging, get_log_level(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )
