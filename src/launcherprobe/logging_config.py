"""Logging configuration for launcherprobe.

The library only ever logs through the ``launcherprobe`` logger tree. Nothing is
emitted unless the consuming process configures handlers, either on its own or
through :func:`setup_logging`.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "launcherprobe"


def setup_logging(debug: bool = False, log_file: Optional[Path] = None) -> logging.Logger:
    """Configure logging for the launcherprobe logger tree.

    Args:
        debug: If True, log to console at DEBUG level, otherwise at INFO
        log_file: Optional file that receives every record at DEBUG level

    Returns:
        The root logger for the library
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    # Clear any existing handlers
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    console_handler.setFormatter(logging.Formatter("%(levelname)s - %(name)s - %(message)s"))
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger for a specific module.

    Args:
        name: Module name (e.g., 'evidence', 'launchers.ubisoft')

    Returns:
        A logger instance for the module
    """
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
