from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from colorama import Fore, Style

_LOGGER_NAME = "gridcrawler"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if name:
        return logging.getLogger(f"{_LOGGER_NAME}.{name}")
    return logging.getLogger(_LOGGER_NAME)


def log_success(message: str, logger: Optional[logging.Logger] = None) -> None:
    """Log a success message in green."""
    (logger or get_logger()).info(f"{Fore.GREEN}{message}{Style.RESET_ALL}")


def setup_logger(log_file: Optional[Path] = None, *, verbose: bool = False) -> logging.Logger:
    """
    Configure the root 'gridcrawler' logger:
      - INFO to console (DEBUG with verbose)
      - DEBUG to log_file, when given (parent dirs are created)
    Idempotent: safe to call multiple times.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    if getattr(setup_logger, "_configured", False):
        return logger

    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Remove any pre-existing handlers (only for our logger)
    for h in list(logger.handlers):
        logger.removeHandler(h)

    fmt = logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s")

    ch = logging.StreamHandler()
    ch.setLevel(logging.DEBUG if verbose else logging.INFO)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    setup_logger._configured = True  # type: ignore[attr-defined]
    return logger


def reset_logger() -> None:
    """Drop our handlers so setup_logger() can run again (used by tests)."""
    logger = logging.getLogger(_LOGGER_NAME)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    setup_logger._configured = False  # type: ignore[attr-defined]
