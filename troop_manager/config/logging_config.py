# troop_manager/config/logging_config.py
"""
Logging configuration for the troop management API
"""

import sys
from pathlib import Path
from loguru import logger

from .settings import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logging(level: str = None, log_to_file: bool = None, log_dir: str = None):
    """
    Configure loguru for console and (optionally) file logging

    Args:
        level: Console log level, defaults to settings.LOG_LEVEL
        log_to_file: Whether to add rotating file sinks, defaults to settings.LOG_TO_FILE
        log_dir: Directory for log files, defaults to settings.LOG_DIR
    """
    level = (level or settings.LOG_LEVEL).upper()
    log_to_file = settings.LOG_TO_FILE if log_to_file is None else log_to_file
    log_dir = Path(log_dir or settings.LOG_DIR)

    # Remove default handler
    logger.remove()

    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level)

    if log_to_file:
        log_dir.mkdir(parents=True, exist_ok=True)

        # Application log - daily rotation
        logger.add(
            str(log_dir / "app_{time:YYYY-MM-DD}.log"),
            format=FILE_FORMAT,
            rotation="1 day",
            retention="30 days",
            level="DEBUG",
            compression="zip"
        )

        # Error-specific log file, kept longer
        logger.add(
            str(log_dir / "errors_{time:YYYY-MM-DD}.log"),
            format=FILE_FORMAT,
            level="ERROR",
            rotation="1 day",
            retention="60 days",
            compression="zip"
        )

    logger.info(f"Logging configured with level: {level}")
    return logger
