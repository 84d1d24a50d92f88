# backend/tour_planner/core/logger.py

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from tour_planner.core.config_loader import settings


LOGGER_NAME = "tour_planner"

# backend/logs, next to the package
LOG_DIR = Path(__file__).resolve().parents[2] / "logs"
LOG_FILE = LOG_DIR / "tour_planner.log"

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"


# -------------------------------------------------------------------
# HANDLERS
# -------------------------------------------------------------------
def _rotating_file_handler(formatter: logging.Formatter) -> RotatingFileHandler:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        LOG_FILE,
        maxBytes=settings.log_file_max_mb * 1024 * 1024,
        backupCount=settings.log_file_backups,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    handler.setLevel(logging.INFO)
    return handler


def _console_handler(formatter: logging.Formatter) -> logging.StreamHandler:
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler.setLevel(settings.log_level.upper())
    return handler


# -------------------------------------------------------------------
# SETUP
# -------------------------------------------------------------------
def configure_logging() -> logging.Logger:
    """
    Attach the file + console handlers to the package logger once.

    Safe to call again (uvicorn reload, test sessions): a logger that already
    has handlers is returned untouched.
    """
    root = logging.getLogger(LOGGER_NAME)
    if root.handlers:
        return root

    formatter = logging.Formatter(LOG_FORMAT)
    root.setLevel(logging.DEBUG)
    root.addHandler(_rotating_file_handler(formatter))
    root.addHandler(_console_handler(formatter))
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Package logger, or a `tour_planner.<name>` child that shares its handlers."""
    configure_logging()
    return logging.getLogger(f"{LOGGER_NAME}.{name}" if name else LOGGER_NAME)


logger = get_logger()
logger.debug(f"Logging to {LOG_FILE} (console level {settings.log_level.upper()})")
