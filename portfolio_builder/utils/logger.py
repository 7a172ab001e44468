"""Logging configuration for Portfolio Builder."""

import logging
import sys

_FORMAT = "%(asctime)s | %(name)-20s | %(levelname)-7s | %(message)s"


def setup_logger(name: str = "portfolio_builder", level: str = "INFO") -> logging.Logger:
    """Create and configure a namespaced logger writing to stderr."""
    qualified = name if name.startswith("portfolio_builder") else f"portfolio_builder.{name}"
    logger = logging.getLogger(qualified)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger


def set_level(level: str) -> None:
    """Apply *level* to every logger already created by :func:`setup_logger`."""
    resolved = getattr(logging, level.upper(), logging.INFO)
    for name, logger in logging.Logger.manager.loggerDict.items():
        if name.startswith("portfolio_builder") and isinstance(logger, logging.Logger):
            logger.setLevel(resolved)
