"""Logging setup for campus events.

Handlers are attached once to the ``campus_events`` logger; module loggers
created with ``logging.getLogger(__name__)`` propagate to it.
"""

import logging
import logging.handlers
import os
from typing import Optional

from campus_events.core.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def setup_logger(
    settings: Optional[Settings] = None,
    name: str = "campus_events",
    console: bool = True,
) -> logging.Logger:
    """Configure the package logger from settings.

    ``log_level`` sets the level, and ``log_to_file`` adds a rotating
    ``<log_dir>/<name>.log`` file. Calling again only updates the level.

    Raises:
        ValueError: If ``log_level`` is not a standard level name
    """
    settings = settings or get_settings()
    level = settings.log_level.upper()
    if level not in LEVELS:
        raise ValueError(f"Invalid log level: {settings.log_level}. Must be one of: {', '.join(LEVELS)}")

    logger = logging.getLogger(name)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = []
    if settings.log_to_file:
        os.makedirs(settings.log_dir, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            os.path.join(settings.log_dir, f"{name}.log"),
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUPS,
        ))
    if console:
        handlers.append(logging.StreamHandler())

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
