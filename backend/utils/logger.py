"""Process-wide logging setup driven by Settings."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from backend.utils.config import Settings, get_settings


_LOGGER_INITIALIZED = False


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Install the stdout handler once; later calls only adjust the level.

    ``create_app`` passes its own settings, so an app built with overrides
    logs at the level it was given even after module import configured
    defaults.
    """

    global _LOGGER_INITIALIZED
    resolved = settings or get_settings()
    level = resolved.log_level.upper()

    if _LOGGER_INITIALIZED:
        if settings is not None:
            logging.getLogger().setLevel(level)
        return

    logging.basicConfig(
        level=level,
        format=resolved.log_format,
        stream=sys.stdout,
    )
    _LOGGER_INITIALIZED = True


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)
