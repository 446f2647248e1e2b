"""Human-readable colored log output."""

import logging
import sys
from typing import Optional, TextIO

from colorama import Fore, Style, just_fix_windows_console

PACKAGE_LOGGER = "ossdist"

LEVEL_COLORS = {
    logging.DEBUG: Fore.CYAN,
    logging.INFO: Fore.GREEN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED + Style.BRIGHT,
}


class ColoredFormatter(logging.Formatter):
    """Colors the whole line by level: green for success, red for failure"""

    def __init__(self, fmt: Optional[str] = None, use_color: bool = True):
        super().__init__(fmt or '%(asctime)s - %(levelname)s - %(message)s', datefmt='%H:%M:%S')
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if not self.use_color:
            return message
        return f"{LEVEL_COLORS.get(record.levelno, '')}{message}{Style.RESET_ALL}"


def setup_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> logging.Logger:
    """Attach a colored handler to the package logger. Safe to call twice."""
    just_fix_windows_console()
    stream = stream or sys.stderr
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    for handler in list(logger.handlers):
        if getattr(handler, "_ossdist", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(ColoredFormatter(use_color=stream.isatty()))
    handler._ossdist = True
    logger.addHandler(handler)
    return logger
