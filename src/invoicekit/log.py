"""Logging set-up shared by the command line tools."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_FILENAME = "invoicekit.log"


def configure_logging(verbose: bool = False, log_dir: Path | None = None) -> logging.Logger:
    """Configure the ``invoicekit`` logger with console and rotating file output.

    Calling it twice does not duplicate handlers.
    """

    logger = logging.getLogger("invoicekit")
    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)

    if not logger.handlers:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(console)

        if log_dir is not None:
            log_dir.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                log_dir / LOG_FILENAME,
                maxBytes=1_000_000,
                backupCount=5,
                encoding="utf-8",
            )
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            logger.addHandler(handler)
        logger.propagate = False

    for handler in logger.handlers:
        if not isinstance(handler, RotatingFileHandler):
            handler.setLevel(level)

    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.captureWarnings(True)
    return logger


__all__ = ["LOG_FORMAT", "configure_logging"]
