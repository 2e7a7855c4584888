"""
Logging setup for the DR report runner.

Library modules only create named loggers (logging.getLogger(__name__)) under the
"dr_reporting" namespace and never touch handlers, so building a report performs
no file I/O. The runner calls configure_logging() once at startup to attach the
log file and console output to that namespace.
"""

import logging
from pathlib import Path
from typing import List, Optional

from dr_reporting.config import LOGS_DIR, LOG_FILENAME

PACKAGE_LOGGER = "dr_reporting"

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Handlers installed by configure_logging, replaced on reconfiguration
_installed_handlers: List[logging.Handler] = []


def configure_logging(logs_dir: Optional[str] = None, console_level: int = logging.INFO) -> Path:
    """
    Attach a file handler (DEBUG) and a console handler to the package logger.

    Calling it again replaces the handlers from the previous call instead of
    stacking duplicates.

    Args:
        logs_dir: Directory for the log file (default: config.LOGS_DIR)
        console_level: Minimum level echoed to the console

    Returns:
        Path of the log file
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)

    for handler in _installed_handlers:
        package_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    logs_path = Path(logs_dir or LOGS_DIR)
    logs_path.mkdir(parents=True, exist_ok=True)
    log_file_path = logs_path / LOG_FILENAME

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    file_handler = logging.FileHandler(log_file_path, mode="a", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)

    for handler in (file_handler, console_handler):
        package_logger.addHandler(handler)
        _installed_handlers.append(handler)
    package_logger.setLevel(logging.DEBUG)

    return log_file_path
