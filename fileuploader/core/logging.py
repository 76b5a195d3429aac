"""Logging utilities for fileuploader modules."""

import logging

ROOT_LOGGER_NAME = 'fileuploader'


def get_logger(name: str = '') -> logging.Logger:
    """Get a logger that automatically inherits from root logger.

    This ensures that loggers work with basicConfig() without needing
    explicit setup_logging() calls. The logger will:
    - Live under the ``fileuploader`` namespace
    - Propagate to root logger (default behavior)
    - Only set a default level if root logger has no handlers

    Args:
        name: Dotted suffix below ``fileuploader`` (e.g. ``upload.executor``)

    Returns:
        Configured logger instance
    """
    full_name = f"{ROOT_LOGGER_NAME}.{name}" if name else ROOT_LOGGER_NAME
    logger = logging.getLogger(full_name)
    logger.propagate = True

    # Only set default level if root logger has no handlers
    # (i.e., basicConfig hasn't been called yet)
    root_logger = logging.getLogger()
    if not root_logger.handlers and logger.level == logging.NOTSET:
        logger.setLevel(logging.WARNING)

    return logger
