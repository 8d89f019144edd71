"""
Logging setup.

Modules log through `logging.getLogger(__name__)`; hosts call
`setup_logging()` once to get a single formatted stream handler.
"""

import logging
from typing import Optional, Union

from signalpro.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
DATE_FORMAT = "%H:%M:%S"


def setup_logging(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """Configure the package logger and return it."""
    level = level if level is not None else settings.log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    root = logging.getLogger("signalpro")
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)
    return root
