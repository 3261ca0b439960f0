"""
Logging configuration for the subtitle fix suite.

Everything logs through ``get_logger(__name__)``; ``setup_logging`` configures
the root logger once, from the CLI.
"""

import logging
import sys
from .constants import DEFAULT_LOG_FORMAT, DEFAULT_LOG_DATE_FORMAT


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        log_color = self.COLORS.get(record.levelname, self.RESET)
        # Work on a copy so other handlers see the plain level name
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{log_color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logging(level: int = logging.INFO, use_colors: bool = True) -> logging.Logger:
    """
    Configure the root logger with a single stdout handler.

    Colors are only used when stdout is a terminal. Calling this again
    replaces the previous handler instead of adding a second one.

    Args:
        level: Logging level (e.g., logging.DEBUG, logging.INFO)
        use_colors: Whether to color the level name

    Returns:
        The root logger
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    if use_colors and sys.stdout.isatty():
        formatter = ColoredFormatter(DEFAULT_LOG_FORMAT, datefmt=DEFAULT_LOG_DATE_FORMAT)
    else:
        formatter = logging.Formatter(DEFAULT_LOG_FORMAT, datefmt=DEFAULT_LOG_DATE_FORMAT)

    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    return logger


def get_logger(name: str = "subfix") -> logging.Logger:
    """Get a named logger; it inherits the root configuration."""
    return logging.getLogger(name)


def level_from_name(name: str, default: int = logging.WARNING) -> int:
    """Map a level name like 'debug' to its logging constant."""
    level = logging.getLevelName(name.strip().upper()) if name else default
    return level if isinstance(level, int) else default
