"""Logger factory for querynorm, configured from ``LOGLEVEL``/``LOGFILE``."""

import logging
from typing import Any

from querynorm import config

default_format = '%(asctime)s - %(name)s - %(levelname)s: %(message)s'
default_level = config.LOGLEVEL
LOGFILE = config.LOGFILE


def getLogger(name: str, fmt: str = default_format,
              level: int = default_level) -> logging.Logger:
    """
    Get a logger with the querynorm level and (optional) log file applied.

    When ``LOGFILE`` is set, records go only to that file, formatted with
    ``fmt``.

    Parameters
    ----------
    name : str
    fmt : str
    level : int

    Returns
    -------
    :class:`logging.Logger`
    """
    logging.basicConfig(format=fmt)
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if LOGFILE is not None:
        handler = logging.FileHandler(LOGFILE)
        handler.setFormatter(logging.Formatter(fmt))
        logger.handlers = [handler]
        logger.propagate = False
    return logger


def log_default(logger: logging.Logger, param: str, value: Any,
                default: Any) -> None:
    """Record that request parameter ``param`` was replaced by ``default``."""
    logger.debug("Invalid %s %r; using %r", param, value, default)
