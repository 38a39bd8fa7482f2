"""Core configuration and logging."""

from villa_pricing.core.config import MissingRatePolicy, Settings, get_settings
from villa_pricing.core.logging_setup import configure_logging

__all__ = ["MissingRatePolicy", "Settings", "configure_logging", "get_settings"]
