"""Logging setup for command-line entry points.

Library modules never configure logging; they log through
``logging.getLogger(__name__)`` or ``structlog.get_logger()``.
"""

from __future__ import annotations

import logging
import sys

import structlog


def configure_logging(level: str = "INFO") -> None:
    """Send stdlib and structlog output to stderr at ``level``."""
    numeric = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=numeric, stream=sys.stderr)
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        # resolve sys.stderr per logger so redirected streams are honoured
        logger_factory=lambda *args: structlog.PrintLogger(file=sys.stderr),
    )
