"""
Logging configuration and utilities.
"""
import logging
import sys
from pathlib import Path


def setup_logging(level="INFO", log_file=None, format_string=None):
    """
    Configure the root logger for the application.

    Args:
        level (str): Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file (str): Optional log file path
        format_string (str): Optional custom format string
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=format_string,
        handlers=handlers,
        force=True
    )


def get_logger(name):
    """Get a logger instance (typically for ``__name__``)."""
    return logging.getLogger(name)
