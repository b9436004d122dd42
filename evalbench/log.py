"""Logging setup for evalbench.

Diagnostic messages (input validation warnings, runner progress) go through
the standard `logging` module under the `evalbench` namespace. This is not to
be confused with `evalbench.loggers`, which records evaluation data.
"""

import logging
from os import environ

from colorama import Fore, Style, just_fix_windows_console

__all__ = ["get_logger", "configure_logging"]

ROOT_LOGGER = "evalbench"
_FORMAT = "[%(asctime)s] %(levelname)s | %(name)s | %(message)s"


class ColorFormatter(logging.Formatter):
    """Formatter that colours the level and logger name."""

    COLORS = {
        "DEBUG": Fore.BLUE,
        "INFO": Fore.CYAN,
        "WARNING": Fore.YELLOW,
        "ERROR": Fore.RED,
        "CRITICAL": Fore.RED + Style.BRIGHT,
    }

    def format(self, record: logging.LogRecord) -> str:
        # Work on a copy so other handlers see the plain record.
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, Fore.WHITE)
        record.levelname = f"{color}{record.levelname}{Style.RESET_ALL}"
        record.name = f"{Fore.MAGENTA}{record.name}{Style.RESET_ALL}"
        return super().format(record)


def _default_level() -> int:
    if environ.get("DEBUG"):
        return logging.DEBUG
    name = environ.get("EVALBENCH_LOG_LEVEL", "WARNING").upper()
    return logging.getLevelNamesMapping().get(name, logging.WARNING)


def configure_logging(level: int | str | None = None, logfile: str | None = None) -> logging.Logger:
    """Attach console (and optional file) handlers to the package logger.

    Safe to call more than once; handlers are only added the first time,
    the level is always updated.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    if level is None:
        level = _default_level()
    logger.setLevel(level)

    if not logger.handlers:
        just_fix_windows_console()
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(ColorFormatter(_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(console_handler)

        if logfile:
            file_handler = logging.FileHandler(logfile, encoding="utf-8")
            file_handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
            logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a child of the package logger.

    Handlers are not installed here; applications call `configure_logging`.
    """
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
