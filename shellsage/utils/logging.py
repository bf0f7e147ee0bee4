"""
Logging utilities for ShellSage.

Modules log through ``logging.getLogger(__name__)``; this module only
configures the ``shellsage`` package logger those names roll up to.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

from shellsage.config.settings import settings
from shellsage.executor import platform_utils

PACKAGE_LOGGER = "shellsage"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
FALLBACK_LEVEL = "INFO"

# Third-party loggers that are noisy at DEBUG
QUIET_LOGGERS = ("httpx", "httpcore")

ANSI_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[35m",
}


class LogFormatter(logging.Formatter):
    """Formatter that can wrap the level name in an ANSI color."""

    def __init__(self, use_colors: bool = True):
        super().__init__(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        color = LEVEL_COLORS.get(record.levelno) if self.use_colors else None
        if color is None:
            return super().format(record)

        # The record is shared with other handlers, so restore it afterwards.
        plain = record.levelname
        record.levelname = f"{color}{plain}{ANSI_RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


def _resolve_level(log_level: Optional[str]) -> str:
    name = (log_level or FALLBACK_LEVEL).upper()
    if not isinstance(logging.getLevelName(name), int):
        return FALLBACK_LEVEL
    return name


def _add_handler(
    logger: logging.Logger, handler: logging.Handler, level: int, use_colors: bool
) -> None:
    handler.setLevel(level)
    handler.setFormatter(LogFormatter(use_colors=use_colors))
    logger.addHandler(handler)


def setup_logging(
    log_level: str = FALLBACK_LEVEL,
    log_file: Optional[Union[str, Path]] = None,
    use_colors: bool = True,
) -> logging.Logger:
    """
    Configure the package logger, replacing any handlers it already has.

    Args:
        log_level (str): Level name; unknown names fall back to INFO.
        log_file (Optional[Union[str, Path]]): Also write plain-text records
            here. Parent directories are created.
        use_colors (bool): Color the console level names when the terminal
            supports ANSI escapes.

    Returns:
        logging.Logger: The ``shellsage`` logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    level_name = _resolve_level(log_level)
    level = logging.getLevelName(level_name)
    logger.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _add_handler(
        logger,
        logging.StreamHandler(sys.stdout),
        level,
        use_colors and platform_utils.supports_ansi_colors(),
    )

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        _add_handler(logger, logging.FileHandler(path, encoding="utf-8"), level, False)

    logger.debug(f"Logging initialized at level {level_name}")
    return logger


def initialize_logging(default_level: str = "WARNING") -> logging.Logger:
    """Configure logging from the ``advanced`` settings section."""
    return setup_logging(
        log_level=settings.get("advanced", "log_level", default_level),
        log_file=settings.get_log_file_path(),
    )
