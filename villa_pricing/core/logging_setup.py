"""Logging setup shared by library consumers and scripts."""

from __future__ import annotations

import logging

from villa_pricing.core.config import Settings, get_settings
from villa_pricing.security.logging_filters import SensitiveFilter

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Settings | None = None) -> logging.Logger:
    """Configure the package logger and attach the redaction filter."""
    settings = settings or get_settings()
    logger = logging.getLogger("villa_pricing")
    logger.setLevel(settings.log_level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)
    for handler in logger.handlers:
        if not any(isinstance(flt, SensitiveFilter) for flt in handler.filters):
            handler.addFilter(SensitiveFilter())
    return logger
