"""
Logging setup for applications embedding the scheduling core.

Library modules only create module loggers; the host application calls
setup_logging() once.
"""

import logging
import os
from typing import Optional


LOGGER_NAME = "vocab_srs"
FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(log_level: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger with a single console handler.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR (default: LOG_LEVEL env or INFO)

    Returns:
        Configured package logger
    """
    log_level = log_level or os.getenv("LOG_LEVEL", "INFO")
    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Clear existing handlers so repeated calls don't duplicate output
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    logger.propagate = False

    return logger
