# File: clinic_agenda/utils/logger.py
"""
Centralized logging configuration for the clinic agenda engine.
"""

import logging
import os
import sys
from pathlib import Path
from datetime import datetime


def _file_logging_enabled() -> bool:
    return os.getenv("AGENDA_LOG_TO_FILE", "1").strip().lower() not in ("0", "false", "no", "off")


def setup_logger(name: str = "clinic_agenda", level: int = logging.INFO) -> logging.Logger:
    """
    Configure and return a logger instance.

    Args:
        name: Logger name
        level: Logging level (default: INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_format = logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    if _file_logging_enabled():
        log_dir = Path(os.getenv("AGENDA_LOG_DIR", "logs"))
        log_dir.mkdir(parents=True, exist_ok=True)

        log_file = log_dir / f"clinic_agenda_{datetime.now().strftime('%Y%m%d')}.log"
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)

        # More detailed format for file
        file_format = logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    return logger
