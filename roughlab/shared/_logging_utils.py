#!/usr/bin/env python3
"""Shared logging utilities for roughlab modules."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def verbosity_to_level(verbosity: int) -> int:
    """Map a small verbosity integer to a logging level."""
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def setup_logger(name: str, verbosity: int) -> logging.Logger:
    level = verbosity_to_level(verbosity)
    logger = logging.getLogger(name)
    logger.setLevel(level)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    return logger
