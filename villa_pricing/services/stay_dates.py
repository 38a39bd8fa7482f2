"""Date helpers shared by pricing and minimum-stay services."""

from __future__ import annotations

import datetime
from collections.abc import Iterable, Iterator

from villa_pricing.core.dates import parse_iso_date
from villa_pricing.services.errors import InvalidDate, InvalidRange

ONE_DAY = datetime.timedelta(days=1)


def coerce_date(value: datetime.date | str) -> datetime.date:
    """Accept a ``date`` or an ISO string; unparseable input raises ``InvalidDate``."""
    try:
        return parse_iso_date(value)
    except ValueError as exc:
        raise InvalidDate(value) from exc


def validate_range(
    check_in: datetime.date | str, check_out: datetime.date | str
) -> tuple[datetime.date, datetime.date]:
    start = coerce_date(check_in)
    end = coerce_date(check_out)
    if end <= start:
        raise InvalidRange(start, end)
    return start, end


def iter_stay_dates(
    check_in: datetime.date, check_out: datetime.date
) -> Iterator[datetime.date]:
    """Yield each night of the stay: check-in inclusive, check-out exclusive."""
    current = check_in
    while current < check_out:
        yield current
        current += ONE_DAY


def count_nights(check_in: datetime.date, check_out: datetime.date) -> int:
    return max(0, (check_out - check_in).days)


def is_weekend(value: datetime.date) -> bool:
    """Saturday and Sunday count as weekend days."""
    return value.weekday() >= 5


def normalise_booked(booked_dates: Iterable[datetime.date | str]) -> frozenset[str]:
    return frozenset(coerce_date(item).isoformat() for item in booked_dates)
