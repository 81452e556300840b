"""Shared logger for the Tiffin client."""
from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure the ``tiffin`` logger once and return it."""
    log = logging.getLogger("tiffin")
    level_name = (level or os.getenv("TIFFIN_LOG_LEVEL", "INFO")).upper()
    log.setLevel(getattr(logging, level_name, logging.INFO))

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
    return log


logger = setup_logging()
