"""ISO date parsing shared by schemas and services."""

from __future__ import annotations

import datetime
from typing import Any


def parse_iso_date(value: Any) -> datetime.date:
    """Accept a ``date``, ``datetime`` or ISO string; time parts are dropped."""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        try:
            return datetime.date.fromisoformat(value.strip()[:10])
        except ValueError as exc:
            raise ValueError(f"Invalid ISO date: {value!r}") from exc
    raise ValueError(f"Invalid ISO date: {value!r}")
