"""
error_log.py - Error Log File
==============================
Besides the console, every error hit during a run is written to a log file
whose name carries the run's start time:

    logError_2025-03-14_09-30-00.log

Each entry is a single line "Error: <message>". The file is only created
when the first error is logged, so a clean run leaves no log file behind.
"""

import logging
from datetime import datetime
from pathlib import Path


# The processor, transport and loader all log below this name
PACKAGE_LOGGER = "creditpos"


def error_log_path(directory: str, started_at: datetime) -> Path:
    """Log file path for a run that started at `started_at`."""
    return Path(directory) / f"logError_{started_at:%Y-%m-%d_%H-%M-%S}.log"


def attach_error_log(path) -> logging.Handler:
    """
    Send ERROR records of the package loggers to `path`, one line each.

    Returns the handler so the caller can remove and close it at the end of
    the run.
    """
    # delay=True: do not create the file until something is logged
    handler = logging.FileHandler(path, mode="a", encoding="utf-8", delay=True)
    handler.setLevel(logging.ERROR)
    handler.setFormatter(logging.Formatter("%(message)s"))

    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    pkg_logger.addHandler(handler)
    if pkg_logger.getEffectiveLevel() > logging.ERROR:
        pkg_logger.setLevel(logging.ERROR)
    return handler


def detach_error_log(handler: logging.Handler):
    logging.getLogger(PACKAGE_LOGGER).removeHandler(handler)
    handler.close()
