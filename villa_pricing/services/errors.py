"""Errors raised by the rate estimation services."""

from __future__ import annotations

import datetime
from collections.abc import Iterable


class RateEstimationError(ValueError):
    """Base class for failures that abort a rate estimate."""

    error_type = "calculation"


class InvalidDate(RateEstimationError):
    """Raised when a stay date cannot be parsed."""

    error_type = "invalid_date"

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Invalid date: {value!r}")


class InvalidRange(RateEstimationError):
    """Raised when check-out is not strictly after check-in."""

    error_type = "invalid_range"

    def __init__(self, check_in: datetime.date, check_out: datetime.date) -> None:
        self.check_in = check_in
        self.check_out = check_out
        super().__init__(
            f"Check-out {check_out.isoformat()} must be after check-in {check_in.isoformat()}"
        )


class InvalidGuestCount(RateEstimationError):
    """Raised when fewer than one guest is requested."""

    error_type = "invalid_guest_count"

    def __init__(self, guest_count: int) -> None:
        self.guest_count = guest_count
        super().__init__(f"Guest count must be at least 1, got {guest_count}")


class DatesUnavailable(RateEstimationError):
    """Raised when the stay overlaps dates that are already booked."""

    error_type = "dates_unavailable"

    def __init__(self, conflicting_dates: Iterable[str]) -> None:
        self.conflicting_dates = tuple(sorted(conflicting_dates))
        super().__init__(
            "Property is not available for the selected dates: "
            + ", ".join(self.conflicting_dates)
        )


class MissingRateData(RateEstimationError):
    """Raised when the rate table has no entry for a stay date."""

    error_type = "missing_rate_data"

    def __init__(self, missing_dates: Iterable[str]) -> None:
        self.missing_dates = tuple(sorted(missing_dates))
        super().__init__("No rate data for: " + ", ".join(self.missing_dates))


__all__ = [
    "DatesUnavailable",
    "InvalidDate",
    "InvalidGuestCount",
    "InvalidRange",
    "MissingRateData",
    "RateEstimationError",
]
