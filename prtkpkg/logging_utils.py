"""
Logging setup shared by the CLI and the tests.
"""

import logging
import sys

LOGGER_NAME = "prtkpkg"


def setup_logger(log_level: int = logging.WARNING) -> logging.Logger:
    """
    Configure the ``prtkpkg`` logger with a single stderr StreamHandler.

    Calling it again adjusts the level and rebinds the handler to the
    current ``sys.stderr``, so repeated CLI invocations in one process (as
    in tests) neither stack handlers nor write to a closed stream.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            handler.setStream(sys.stderr)
        handler.setLevel(log_level)
    return logger
