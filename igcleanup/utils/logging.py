"""
Logging setup for the job API and background job runner.
"""
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from config import settings

ROOT_LOGGER_NAME = "igcleanup"

CONSOLE_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
# The file also records which module and thread (HTTP or job-runner) logged
FILE_FORMAT = "[%(asctime)s] %(levelname)s %(name)s [%(threadName)s]: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that report every request at INFO
NOISY_LOGGERS = ["werkzeug", "asyncio"]


def setup_logging(log_level: Optional[str] = None, log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Configure the igcleanup logger: console at INFO, timestamped file at DEBUG.

    Module loggers from get_logger(__name__) propagate here. Flask's request
    log is raised to WARNING unless log_level is DEBUG.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
                   Defaults to settings.LOG_LEVEL
        log_dir: Directory for the log file. Defaults to settings.LOG_DIR

    Returns:
        Configured logger instance
    """
    log_level = (log_level or settings.LOG_LEVEL).upper()
    log_dir = Path(log_dir or settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level, logging.INFO))
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(console_handler)

    log_file = log_dir / f"igcleanup_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(file_handler)

    third_party_level = logging.DEBUG if log_level == "DEBUG" else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)

    logger.info(f"Logging initialized. Log file: {log_file}")
    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    return logging.getLogger(name)
