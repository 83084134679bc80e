"""Logging setup for the CLI."""

from __future__ import annotations

import logging
from pathlib import Path


def setup_file_logger(log_path: str | Path) -> logging.Logger:
    """Attach a file handler to the package logger and return it."""
    log_path = Path(log_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("strbridge")
    logger.setLevel(logging.DEBUG)

    if not any(
        isinstance(h, logging.FileHandler) and Path(h.baseFilename) == log_path.resolve()
        for h in logger.handlers
    ):
        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    return logger
