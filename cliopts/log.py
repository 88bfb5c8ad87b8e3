"""Logging configuration for cliopts using loguru."""

import sys
from typing import Optional

from loguru import logger

LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"


def setup_logger(log_level: str = "DEBUG", sink=None, colorize: bool = False) -> int:
    """
    Enable cliopts logging, which is disabled on import.

    Args:
        log_level: Logging level (TRACE, DEBUG, INFO, WARNING, ERROR)
        sink: Where to write records, stderr if None
        colorize: Whether to use colors

    Returns:
        The loguru handler id, to give to reset_logger()
    """
    handler_id = logger.add(
        sink if sink is not None else sys.stderr,
        level=log_level.upper(),
        format=LOG_FORMAT,
        filter="cliopts",
        colorize=colorize,
    )
    logger.enable("cliopts")
    return handler_id


def reset_logger(handler_id: Optional[int] = None) -> None:
    if handler_id is not None:
        logger.remove(handler_id)
    logger.disable("cliopts")

