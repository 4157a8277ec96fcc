"""
Logging configuration for the dish finder service.
"""
from __future__ import annotations

import logging
import os
import sys


def setup_logging(level_name: str | None = None) -> logging.Logger:
    """Attach a stdout handler to the ``dishfinder`` logger tree."""
    level_name = level_name or os.getenv("LOG_LEVEL", "INFO")
    log_level = getattr(logging, str(level_name).upper(), logging.INFO)

    logger = logging.getLogger("dishfinder")
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplicate logs on reload
    logger.handlers.clear()
    logger.propagate = False

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    return logger
