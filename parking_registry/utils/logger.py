# parking_registry/utils/logger.py
"""
Centralised logging configuration for the entire application.
Logs to console and, when LOG_DIR is set, to a rotating file.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

FORMATTER = logging.Formatter(
    fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

_configured = False
_file_handler = None


def _configure_root_logger():
    global _configured
    if _configured:
        return
    _configured = True

    console = logging.StreamHandler()
    console.setFormatter(FORMATTER)

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    root.addHandler(console)


def configure_logging(level: str = "INFO", log_dir: str = None):
    """Apply LOG_LEVEL / LOG_DIR from settings. Called once from create_app()."""
    global _file_handler
    _configure_root_logger()
    level = level.upper()
    root = logging.getLogger()
    root.setLevel(level)

    if log_dir and _file_handler is None:
        os.makedirs(log_dir, exist_ok=True)
        # Rotating file handler: keeps last 10 × 5MB log files
        _file_handler = RotatingFileHandler(
            filename=os.path.join(log_dir, "parking.log"),
            maxBytes=5 * 1024 * 1024,
            backupCount=10,
            encoding="utf-8",
        )
        _file_handler.setFormatter(FORMATTER)
        root.addHandler(_file_handler)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Call this at the top of every module."""
    _configure_root_logger()
    return logging.getLogger(name)
