"""Logging configuration for the step executor."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def configure_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Configure the root logger with a single console handler.

    Logs go to stderr so that stdout stays reserved for the error line the
    CLI prints on failure.
    """
    logger = logging.getLogger()
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    # Clear existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    # boto's own debug output drowns the step log
    for name in ("boto3", "botocore", "s3transfer", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger
