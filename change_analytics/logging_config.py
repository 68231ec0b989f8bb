"""
Logging configuration shared by the dashboard and the analytics engine.
"""

from __future__ import annotations

import logging
from typing import Union

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
ROOT_LOGGER_NAME = "change_analytics"

_HANDLER_FLAG = "_change_analytics_handler"


def configure_logging(level: Union[str, int] = "INFO") -> logging.Logger:
    """Attach a single stream handler to the package logger.

    Repeated calls (Streamlit reruns the script on every interaction) only
    update the level.
    """
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            resolved = logging.INFO
        level = resolved
    package_logger.setLevel(level)

    if not any(getattr(handler, _HANDLER_FLAG, False) for handler in package_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        setattr(handler, _HANDLER_FLAG, True)
        package_logger.addHandler(handler)
        package_logger.propagate = False
    return package_logger
