import logging
from logging import Logger
from typing import Optional, Union

from .settings import get_settings


def setup_logging(
        name: Optional[str] = "capwire",
        level: Optional[Union[int, str]] = None
) -> Logger:
    """
    Set up and configure a logger.

    :param name: Name for the logger. If None, returns root logger.
    :param level: Logging level. If None, the configured ``log_level`` is used.
    :return: Configured logger instance.
    """
    if level is None:
        level = get_settings().log_level

    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(level)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
