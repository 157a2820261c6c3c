"""Logging helper shared by the tiling modules.

Every ``tilegrid`` logger prints through one stream handler with a
common format.  Library code only logs at DEBUG (grid shape, tile cap
truncation, config loading); set ``TILEGRID_LOG_LEVEL=DEBUG`` or pass
``level`` to see those messages.
"""

import logging
import os
from typing import Optional, Union

LOG_LEVEL_ENV = "TILEGRID_LOG_LEVEL"


def _resolve_level(level: Optional[Union[str, int]]) -> int:
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    return level


def get_logger(name: str, level: Optional[Union[str, int]] = None) -> logging.Logger:
    """Return a logger with the tilegrid handler and format attached.

    Parameters
    ----------
    name : str
        Logger name, normally ``__name__``.
    level : str or int, optional
        Level name or number.  Defaults to ``$TILEGRID_LOG_LEVEL`` or
        INFO.  Only applied the first time a logger is configured,
        unless given explicitly.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            fmt='[%(asctime)s] [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(handler)
        logger.setLevel(_resolve_level(level))
    elif level is not None:
        logger.setLevel(_resolve_level(level))
    return logger
