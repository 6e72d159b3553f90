"""
Logging configuration.

Gives the worker and the command line one consistent log format.
Logs go to stderr so command output on stdout stays machine readable.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    component: str = "cluster-orchestrator",
    level: int = logging.INFO,
    log_file: Path | None = None,
) -> logging.Logger:
    """
    Configure root logging with a stderr handler and an optional file handler.

    Returns the component logger.
    """
    format_string = f"[%(asctime)s] [{component.upper()}] %(levelname)s %(name)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_string,
        datefmt=DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(format_string, datefmt=DATE_FORMAT))
        logging.getLogger().addHandler(file_handler)

    logger = logging.getLogger(component)
    logger.debug("logging initialized at level %s", logging.getLevelName(level))
    return logger
