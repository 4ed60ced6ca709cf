"""Logging configuration for templadoc"""

import logging
import sys
from typing import Optional


def setup_logger(name: Optional[str] = None) -> logging.Logger:
    """Setup and return a configured logger"""
    logger = logging.getLogger(name or __name__)

    # Only configure if no handlers exist anywhere up the chain
    if not logger.hasHandlers():
        handler = logging.StreamHandler(sys.stderr)

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)

        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

    return logger


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure the root logger for command line use"""
    level = logging.DEBUG if verbose else logging.INFO

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    return logging.getLogger('templadoc')
