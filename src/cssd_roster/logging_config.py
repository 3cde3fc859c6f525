from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach one stdout handler to the package logger (idempotent)."""

    logger = logging.getLogger("cssd_roster")
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    # Prevent duplicate handlers if the app factory runs more than once
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)

    return logger
