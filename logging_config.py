"""
Logging Configuration

Centralized logging configuration for the orbit translator.
Library modules log through ``logging.getLogger(__name__)``; applications
call ``configure_logging`` once at startup.

Log records go to stderr so that command-line output on stdout (JSON
records) stays machine-readable.

Usage:
    from logging_config import configure_logging, get_logger

    configure_logging(verbose=True)
    logger = get_logger(__name__)
    logger.info("Propagation finished")
    logger.warning("Propagation truncated at decay")
"""

import logging
import sys
from typing import Optional

# Default logging format
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    level: int = logging.INFO, log_file: Optional[str] = None, verbose: bool = False
) -> None:
    """
    Configure logging for the entire application.

    Parameters
    ----------
    level : int
        Logging level (e.g., logging.DEBUG, logging.INFO)
    log_file : str, optional
        Path to log file. If None, logs only to stderr.
    verbose : bool
        Shortcut for ``level=logging.DEBUG``
    """
    if verbose:
        level = logging.DEBUG

    handlers = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Parameters
    ----------
    name : str
        Name of the logger (typically __name__)

    Returns
    -------
    logging.Logger
        Logger instance
    """
    return logging.getLogger(name)
