"""Logging setup: a file log in the data directory, stderr when verbose."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

logger = logging.getLogger("boostly")


def setup_logging(log_path: Path | None = None, verbose: bool = False) -> logging.Logger:
    """Configure the ``boostly`` logger. Calling it again replaces earlier handlers."""
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT)

    if log_path is not None:
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
        except OSError as e:
            print(f"Warning: cannot write log file {log_path}: {e}", file=sys.stderr)
        else:
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    if verbose:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    return logger
