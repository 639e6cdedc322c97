"""
Logging configuration
=====================

A console handler on stderr (stdout carries the printed tables) plus,
optionally, a rotating log file. The CLI calls
setup_logger("stormrep") once; library modules just use
logging.getLogger(__name__) and inherit it.

Usage:
    from stormrep.logging_config import setup_logger
    logger = setup_logger("stormrep", log_dir=Path("logs"))
    logger.info("Loading dataset...")
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE = "stormrep.log"

# Rotation settings: 5 MB per file, 3 backups
MAX_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 3


def setup_logger(
    name: str,
    level: int = logging.DEBUG,
    log_dir: Optional[Path] = None,
    console_level: int = logging.INFO,
) -> logging.Logger:
    """
    Create and configure a logger with a console handler and an optional
    rotating file handler.

    Args:
        name: Logger name (usually the package name)
        level: Logger level (default DEBUG)
        log_dir: Directory for the rotating log file; None for console only
        console_level: Minimum level printed to stderr

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding duplicate handlers if called multiple times
    if logger.handlers:
        return logger

    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / LOG_FILE, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
