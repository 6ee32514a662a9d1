"""
Logging setup for wordharvest.

Diagnostics go to standard error so that wordlists written to standard
output stay clean.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

from .config import LoggingConfig


DATE_FORMAT = '%H:%M:%S'

THIRD_PARTY_LOGGERS = {
    'aiohttp': logging.WARNING,
    'asyncio': logging.WARNING,
    'urllib3': logging.WARNING,
    'chardet': logging.WARNING,
    'charset_normalizer': logging.WARNING,
}


def setup_logging(config: Optional[LoggingConfig] = None, debug: bool = False) -> logging.Logger:
    """
    Configure the root logger.

    Args:
        config: Logging configuration, defaults when omitted
        debug: Force DEBUG level regardless of the configured level

    Returns:
        Configured root logger
    """
    config = config or LoggingConfig()
    level = logging.DEBUG if debug else getattr(logging, config.level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    formatter = logging.Formatter(config.format, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if config.file:
        log_file = Path(config.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=50 * 1024 * 1024,  # 50MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        root_logger.addHandler(file_handler)
        # The file receives everything the handlers let through
        root_logger.setLevel(logging.DEBUG)

    for logger_name, third_party_level in THIRD_PARTY_LOGGERS.items():
        logging.getLogger(logger_name).setLevel(third_party_level)

    root_logger.debug(f"Logging initialized at level {logging.getLevelName(level)}")
    return root_logger
