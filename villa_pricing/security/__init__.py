"""Security helpers."""

from .logging_filters import SensitiveFilter, redact

__all__ = ["SensitiveFilter", "redact"]
