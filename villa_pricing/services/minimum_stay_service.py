"""Minimum-stay resolution for a candidate stay."""

from __future__ import annotations

import datetime
import enum
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from villa_pricing.schemas.availability import (
    DailyRate,
    PropertyPricingConfig,
    SeasonalRateApplied,
)
from villa_pricing.services.stay_dates import (
    ONE_DAY,
    count_nights,
    is_weekend,
    normalise_booked,
    validate_range,
)

logger = logging.getLogger(__name__)

MAX_RUN_SCAN_DAYS = 30

PeakSeasonHook = Callable[[datetime.date, datetime.date], bool]


class MinStayReason(str, enum.Enum):
    """Which rule produced the effective minimum stay."""

    SEASONAL_RATE = "seasonal_rate"
    SANDWICHED_BETWEEN_BOOKINGS = "sandwiched_between_bookings"
    PEAK_SEASON = "peak_season"
    WEEKEND = "weekend"
    WEEKDAY = "weekday"


@dataclass(frozen=True, slots=True)
class MinimumStay:
    """Effective minimum stay and the rule it came from."""

    min_stay: int
    reason: MinStayReason
    seasonal_rate_applied: tuple[SeasonalRateApplied, ...] | None = None
    max_available_nights: int | None = None

    def is_met_by(self, nights: int) -> bool:
        return nights >= self.min_stay

    def to_dict(self) -> dict[str, Any]:
        seasonal = None
        if self.seasonal_rate_applied is not None:
            seasonal = [rate.model_dump(mode="json") for rate in self.seasonal_rate_applied]
        return {
            "min_stay": self.min_stay,
            "reason": self.reason.value,
            "seasonal_rate_applied": seasonal,
            "max_available_nights": self.max_available_nights,
        }


def resolve_minimum_stay(
    config: PropertyPricingConfig,
    daily_rates: Mapping[str, DailyRate],
    booked_dates: Iterable[datetime.date | str],
    *,
    check_in: datetime.date | str,
    check_out: datetime.date | str,
    peak_season: PeakSeasonHook | None = None,
) -> MinimumStay:
    """Return the minimum stay that applies to ``[check_in, check_out)``.

    Rules are tried in order: a seasonal rule on the check-in date, then
    neighbouring bookings on either side, then the weekday/weekend default
    (or ``min_stay_peak`` when a ``peak_season`` hook reports the range as
    peak).
    """
    start, end = validate_range(check_in, check_out)
    booked = normalise_booked(booked_dates)

    check_in_rate = daily_rates.get(start.isoformat())
    if (
        check_in_rate is not None
        and check_in_rate.seasonal_premium > 0
        and check_in_rate.seasonal_rate_applied
        and check_in_rate.seasonal_rate_applied[0].min_stay_nights is not None
    ):
        return MinimumStay(
            min_stay=check_in_rate.seasonal_rate_applied[0].min_stay_nights,
            reason=MinStayReason.SEASONAL_RATE,
            seasonal_rate_applied=check_in_rate.seasonal_rate_applied,
        )

    normal_min_stay, normal_reason = _calendar_default(config, start, end, peak_season)

    day_before = (start - ONE_DAY).isoformat()
    day_after = (end + ONE_DAY).isoformat()
    if day_before in booked or day_after in booked:
        max_run = _max_unbooked_run(start, booked)
        flexible = max(1, min(normal_min_stay, max_run))
        logger.debug(
            "Stay sits next to existing bookings",
            extra={
                "normal_min_stay": normal_min_stay,
                "max_available_nights": max_run,
                "min_stay": flexible,
            },
        )
        return MinimumStay(
            min_stay=flexible,
            reason=MinStayReason.SANDWICHED_BETWEEN_BOOKINGS,
            max_available_nights=max_run,
        )

    return MinimumStay(min_stay=normal_min_stay, reason=normal_reason)


def meets_minimum_stay(
    resolution: MinimumStay,
    check_in: datetime.date | str,
    check_out: datetime.date | str,
) -> bool:
    """Whether the stay spans at least ``resolution.min_stay`` nights."""
    start, end = validate_range(check_in, check_out)
    return resolution.is_met_by(count_nights(start, end))


def peak_months(months: Iterable[int] = (7, 8, 12)) -> PeakSeasonHook:
    """Build a hook that marks a stay as peak when any night falls in ``months``."""
    selected = frozenset(months)
    invalid = [month for month in selected if not 1 <= month <= 12]
    if invalid:
        raise ValueError(f"Invalid months: {sorted(invalid)}")

    def _is_peak(check_in: datetime.date, check_out: datetime.date) -> bool:
        current = check_in
        while current < check_out:
            if current.month in selected:
                return True
            current += ONE_DAY
        return False

    return _is_peak


def _calendar_default(
    config: PropertyPricingConfig,
    check_in: datetime.date,
    check_out: datetime.date,
    peak_season: PeakSeasonHook | None,
) -> tuple[int, MinStayReason]:
    if peak_season is not None and peak_season(check_in, check_out):
        return config.min_stay_peak, MinStayReason.PEAK_SEASON
    if is_weekend(check_in):
        return config.min_stay_weekend, MinStayReason.WEEKEND
    return config.min_stay_weekday, MinStayReason.WEEKDAY


def _max_unbooked_run(check_in: datetime.date, booked: frozenset[str]) -> int:
    run = 0
    current = check_in
    while run < MAX_RUN_SCAN_DAYS and current.isoformat() not in booked:
        run += 1
        current += ONE_DAY
    return run
