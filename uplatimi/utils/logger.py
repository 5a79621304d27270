"""Logging setup for uplatimi: one named logger, level taken from UPLATIMI_LOG_LEVEL."""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

from uplatimi.utils.config import log_level

LOGGER_NAME = "uplatimi"

# requests logs every connection through urllib3 at DEBUG
_CHATTY_LOGGERS = ("urllib3",)


def resolve_level(level: Union[int, str, None]) -> int:
    """Level number for an int, a name like "debug", or None (configured level). Unknown names give INFO."""
    if level is None:
        level = log_level()
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logger(
    name: str = LOGGER_NAME,
    level: Union[int, str, None] = None,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure and return the application logger.

    Safe to call on every Streamlit rerun: handlers are attached once.

    Args:
        name: Logger name.
        level: Level number or name; None uses UPLATIMI_LOG_LEVEL.
        log_file: Optional path to log file. If None, logs to stderr only.

    Returns:
        Configured logger.
    """
    log = logging.getLogger(name)
    if log.handlers:
        return log

    numeric = resolve_level(level)
    log.setLevel(numeric)
    for chatty in _CHATTY_LOGGERS:
        logging.getLogger(chatty).setLevel(max(numeric, logging.WARNING))

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for h in handlers:
        h.setFormatter(fmt)
        log.addHandler(h)

    return log


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Return the application logger. Use after setup_logger has been called."""
    return logging.getLogger(name)
