import logging
import os
from typing import Optional


_BASE_LOGGER_NAME = "prbridge"
_LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def _configure_base(level: str) -> logging.Logger:
    base = logging.getLogger(_BASE_LOGGER_NAME)

    if not base.handlers:
        base.setLevel(level)

        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        base.addHandler(handler)

        # Uvicorn configures the root logger too
        base.propagate = False

    return base


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Returns a logger under the shared ``prbridge`` namespace.

    - Handler lives on the base logger only
    - Child loggers propagate to it
    - Safe to call multiple times
    """
    base = _configure_base(os.getenv("LOG_LEVEL", "INFO").upper())

    if not name or name == _BASE_LOGGER_NAME:
        return base

    if not name.startswith(_BASE_LOGGER_NAME + "."):
        name = f"{_BASE_LOGGER_NAME}.{name}"

    return logging.getLogger(name)


def set_log_level(level: str) -> None:
    """Apply the configured level to the base logger."""
    _configure_base(level.upper()).setLevel(level.upper())
