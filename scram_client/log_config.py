# SPDX-License-Identifier: LGPL-3.0-or-later
"""Logging configuration for the scram-client command."""
import logging
import sys


def setup_logging(log_file=None, debug=False):
    """Set up logging for the command line driver.

    Args:
        log_file: Optional path to log file. If None, log to stderr.
        debug: Log conversation state transitions as well as failures.

    Returns:
        str: The log file path being used, or None when logging to stderr.
    """
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if log_file is not None:
        try:
            handler = logging.FileHandler(log_file)
            handler.setFormatter(formatter)
            logger.addHandler(handler)
            return log_file
        except OSError as e:
            # Fall back to stderr if we can't write to file
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(formatter)
            logger.addHandler(handler)
            logger.error("Failed to open log file %s: %s. Logging to stderr.", log_file, e)
            return None

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return None
