"""Logging setup for the API process.

Application modules log through ``logging.getLogger(__name__)``; this module
only wires the root logger once at startup.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname).1s | %(name)-30.30s | %(message)s"

# Third-party loggers that flood the output below WARNING
NOISY_LOGGERS = ("aiosqlite", "sqlalchemy.engine")


def resolve_level(level: str | int) -> int:
    """Turn ``"info"``, ``" DEBUG "`` or ``20`` into a logging level number."""
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def setup_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Send application logs to stdout at ``level``."""
    level = resolve_level(level)

    logger = logging.getLogger()
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logger
