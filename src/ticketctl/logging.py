"""Centralized logging configuration for ticketctl.

Console output goes to stderr so command results on stdout stay clean.
Rotating file logs are written only when a log directory is configured.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Default configuration
DEFAULT_LOG_FILE = "ticketctl.log"
DEFAULT_MAX_BYTES = 1024 * 1024  # 1MB
DEFAULT_BACKUP_COUNT = 3
DEFAULT_LOG_LEVEL = "WARNING"

# Log format
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    log_dir: str | Path | None = None,
    log_file: str = DEFAULT_LOG_FILE,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    level: str = DEFAULT_LOG_LEVEL,
    console: bool = True,
) -> logging.Logger:
    """Set up the ticketctl logger.

    Args:
        log_dir: Directory for rotating log files. No file handler is
                 installed when None.
        log_file: Log file name. Defaults to 'ticketctl.log'.
        max_bytes: Maximum size per log file before rotation.
        backup_count: Number of backup files to keep.
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        console: Whether to also log to stderr.

    Returns:
        The root ticketctl logger.
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)

    logger = logging.getLogger("ticketctl")
    logger.setLevel(log_level)
    logger.propagate = False

    # Remove existing handlers to avoid duplicates
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    logger.debug("ticketctl logging initialized (level=%s, dir=%s)", level, log_dir)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a component.

    Args:
        name: Component name (e.g., 'store', 'service').
              Will be prefixed with 'ticketctl.'.

    Returns:
        Logger instance for the component.
    """
    if not name.startswith("ticketctl."):
        name = f"ticketctl.{name}"
    return logging.getLogger(name)
