"""
Logging configuration utilities.

This module provides standardized logging setup for the accrange CLI.
Log records go to stderr by default so they never interleave with the
lookup report mirrored on stdout.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO, Union

DEFAULT_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def resolve_level(level: Union[int, str]) -> int:
    """
    Convert a level name ("info", "DEBUG") or number to a logging level.

    Unknown names fall back to INFO.
    """
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(
    name: str = None,
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Path] = None,
    console: bool = True,
    stream: Optional[TextIO] = None,
    format_string: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """
    Set up logging with optional file and console handlers.

    Args:
        name: Logger name (defaults to root logger if None)
        level: Logging level, as a number or a level name
        log_file: Path to log file (optional); parent directories are created
        console: Whether to add console handler (default: True)
        stream: Console stream (default: sys.stderr)
        format_string: Log message format

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logging("accrange", log_file=Path("run.log"))
        >>> logger.info("Run started")
    """
    level = resolve_level(level)
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Clear existing handlers to avoid duplicates
    logger.handlers.clear()

    formatter = logging.Formatter(format_string)

    if console:
        console_handler = logging.StreamHandler(stream or sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
