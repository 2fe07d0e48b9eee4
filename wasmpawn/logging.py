"""Logging helpers. All wasmpawn loggers live under the `wasmpawn` namespace."""

from __future__ import annotations

import logging
from typing import Optional, Union

from wasmpawn.env import get_wasmpawn_log_level

_ROOT_LOGGER_NAME = "wasmpawn"
_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"

_handler: Optional[logging.Handler] = None


def get_logger(name: str) -> logging.Logger:
    """Get a logger below the package root logger.

    Parameters
    ----------
    name : str
        Short component name, e.g. "Lifecycle".

    Returns
    -------
    logging.Logger
        The logger named `wasmpawn.<name>`.
    """
    return logging.getLogger(f"{_ROOT_LOGGER_NAME}.{name}")


def configure_logging(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """Attach a stream handler to the package root logger.

    Calling this more than once replaces the level but never stacks handlers.

    Parameters
    ----------
    level : Optional[Union[int, str]]
        Log level. If None, WASMPAWN_LOG_LEVEL is used, falling back to INFO.

    Returns
    -------
    logging.Logger
        The package root logger.
    """
    global _handler

    if level is None:
        level = get_wasmpawn_log_level() or logging.INFO

    root = logging.getLogger(_ROOT_LOGGER_NAME)
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(_handler)
    root.setLevel(level)
    return root
