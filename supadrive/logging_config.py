"""
Package logging configuration.

Every module obtains the shared ``supadrive`` logger through
``setup_logging()`` so adapter failures and storage moves end up in one
consistently formatted stream.
"""
import logging
import sys


def setup_logging() -> logging.Logger:
    """
    Configure and return the package logger.

    The logger outputs to stdout with a structured format including:
    - Timestamp
    - Logger name
    - Log level
    - Message

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger("supadrive")
    logger.setLevel(logging.INFO)

    # Prevent duplicate handlers if called multiple times
    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)

        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger
