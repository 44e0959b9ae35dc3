from __future__ import annotations

import logging
import sys
from typing import TextIO

from watson.config import get_log_level

LOGGER_NAME = 'watson'
LOG_FORMAT = '%(levelname)s %(name)s: %(message)s'


def setup_logging(level: int | None = None, stream: TextIO | None = None) -> logging.Logger:
    """Install a single stream handler on the package logger.

    Calling it again replaces the previous handler instead of stacking a new one.
    """
    if level is None:
        level = get_log_level()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(level)
    logger.addHandler(handler)
    logger.propagate = False
    return logger
