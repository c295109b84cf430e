"""Runtime logging helpers for RA Hash Mapper."""

from __future__ import annotations

import logging
import sys
import traceback
from datetime import date
from pathlib import Path
from typing import Optional

LOGGER_NAME = "rahashmapper"

_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _default_log_path() -> Path:
    from .shared_config import LOGS_DIR

    base = Path(LOGS_DIR)
    base.mkdir(parents=True, exist_ok=True)
    return base / f"run-{date.today().isoformat()}.log"


def setup_monitoring(log_file: Optional[str] = None, echo: bool = False,
                     level: int = logging.INFO) -> logging.Logger:
    """
    Configure the package logger.

    Handlers are replaced on every call, so a second call (another CLI run in
    the same process, or a test) starts from a clean logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    path = Path(log_file) if log_file else _default_log_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(path, encoding="utf-8")
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if echo:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(formatter)
        logger.addHandler(console)

    _install_exception_hook(logger)
    logger.info("Logging to %s", path)
    return logger


def _install_exception_hook(logger: logging.Logger) -> None:
    def _sys_hook(exc_type, exc_value, exc_tb):
        if exc_type and issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_tb)
            return
        logger.critical("Unhandled exception", exc_info=(exc_type, exc_value, exc_tb))
        stream = getattr(sys, "__stderr__", None) or sys.stderr
        if stream is not None:
            print("[rahashmapper] Unhandled exception", file=stream)
            traceback.print_exception(exc_type, exc_value, exc_tb, file=stream)

    sys.excepthook = _sys_hook


def log_event(event: str, message: str, level: int = logging.INFO) -> None:
    """Emit one event line: '<event> | <message>'."""
    logging.getLogger(LOGGER_NAME).log(level, "%s | %s", event, message)
