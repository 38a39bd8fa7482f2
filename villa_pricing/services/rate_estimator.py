"""Rate estimation for a property stay.

Pricing works over the per-date rate table supplied by the availability
provider. Each night contributes its base rate, any seasonal premium the
provider resolved for it, and a weekend premium computed on that night's own
base rate. Extra beds are charged per night for every guest above capacity,
cleaning is charged once, and an 11% tax is added on top.

Every component is rounded half-up to whole currency units before the
subtotal is formed, so ``tax_amount == round(subtotal * 0.11)`` holds for the
itemised values returned to callers.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from villa_pricing.core.config import MissingRatePolicy, get_settings
from villa_pricing.schemas.availability import DailyRate, PropertyPricingConfig
from villa_pricing.services.errors import (
    DatesUnavailable,
    InvalidGuestCount,
    MissingRateData,
)
from villa_pricing.services.stay_dates import (
    iter_stay_dates,
    normalise_booked,
    validate_range,
)

logger = logging.getLogger(__name__)

TAX_PERCENT = Decimal("11")
WHOLE_UNITS = Decimal("1")
_ZERO = Decimal("0")


def to_units(value: Decimal | int | float | str) -> int:
    """Round half-up to a whole currency unit."""
    return int(Decimal(value).quantize(WHOLE_UNITS, rounding=ROUND_HALF_UP))


@dataclass(frozen=True, slots=True)
class NightlyRate:
    """Contribution of a single night to the stay price."""

    date: datetime.date
    base_rate: Decimal
    weekend_premium: Decimal
    seasonal_premium: Decimal
    seasonal_rate_name: str | None = None
    rate_missing: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "base_rate": to_units(self.base_rate),
            "weekend_premium": to_units(self.weekend_premium),
            "seasonal_premium": to_units(self.seasonal_premium),
            "seasonal_rate": self.seasonal_rate_name,
            "rate_missing": self.rate_missing,
        }


@dataclass(frozen=True, slots=True)
class RateCalculation:
    """Price breakdown for one stay. Amounts are whole currency units."""

    nights: int
    base_amount: int
    weekend_premium: int
    seasonal_premium: int
    extra_bed_amount: int
    cleaning_fee: int
    tax_amount: int
    total_amount: int
    extra_beds: int
    breakdown: tuple[NightlyRate, ...] = ()
    seasonal_rates_applied: tuple[str, ...] = ()

    @property
    def subtotal(self) -> int:
        return (
            self.base_amount
            + self.weekend_premium
            + self.seasonal_premium
            + self.extra_bed_amount
            + self.cleaning_fee
        )

    @property
    def tax_percent(self) -> Decimal:
        return TAX_PERCENT

    @property
    def has_seasonal_rates(self) -> bool:
        return self.seasonal_premium > 0

    @property
    def has_weekend_premium(self) -> bool:
        return self.weekend_premium > 0

    @property
    def requires_extra_beds(self) -> bool:
        return self.extra_beds > 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize the calculation to plain types for responses."""
        return {
            "nights": self.nights,
            "base_amount": self.base_amount,
            "weekend_premium": self.weekend_premium,
            "seasonal_premium": self.seasonal_premium,
            "extra_bed_amount": self.extra_bed_amount,
            "cleaning_fee": self.cleaning_fee,
            "subtotal": self.subtotal,
            "tax_amount": self.tax_amount,
            "total_amount": self.total_amount,
            "extra_beds": self.extra_beds,
            "breakdown": [line.to_dict() for line in self.breakdown],
            "seasonal_rates_applied": list(self.seasonal_rates_applied),
        }


def estimate(
    config: PropertyPricingConfig,
    daily_rates: Mapping[str, DailyRate],
    booked_dates: Iterable[datetime.date | str],
    *,
    check_in: datetime.date | str,
    check_out: datetime.date | str,
    guest_count: int,
    missing_rate_policy: MissingRatePolicy | None = None,
) -> RateCalculation:
    """Price a stay from the provider's rate table.

    Raises ``InvalidRange``, ``InvalidGuestCount``, ``DatesUnavailable`` or
    ``MissingRateData`` before anything is computed; no partial result is
    ever returned.
    """
    start, end = validate_range(check_in, check_out)
    if guest_count < 1:
        raise InvalidGuestCount(guest_count)
    if missing_rate_policy is None:
        missing_rate_policy = get_settings().missing_rate_policy

    stay = list(iter_stay_dates(start, end))
    nights = len(stay)

    booked = normalise_booked(booked_dates)
    conflicts = [day.isoformat() for day in stay if day.isoformat() in booked]
    if conflicts:
        raise DatesUnavailable(conflicts)

    missing = [day.isoformat() for day in stay if day.isoformat() not in daily_rates]
    if missing:
        if missing_rate_policy is MissingRatePolicy.FAIL:
            raise MissingRateData(missing)
        logger.warning(
            "Rate data missing for stay dates; pricing them at zero",
            extra={"missing_dates": missing},
        )

    breakdown = tuple(
        _price_night(day, daily_rates.get(day.isoformat()), config) for day in stay
    )

    base_amount = sum((line.base_rate for line in breakdown), _ZERO)
    weekend_premium = sum((line.weekend_premium for line in breakdown), _ZERO)
    seasonal_premium = sum((line.seasonal_premium for line in breakdown), _ZERO)

    extra_beds = max(0, guest_count - config.capacity)
    extra_bed_amount = Decimal(extra_beds) * config.extra_bed_rate * nights

    components = {
        "base_amount": to_units(base_amount),
        "weekend_premium": to_units(weekend_premium),
        "seasonal_premium": to_units(seasonal_premium),
        "extra_bed_amount": to_units(extra_bed_amount),
        "cleaning_fee": to_units(config.cleaning_fee),
    }
    subtotal = sum(components.values())
    tax_amount = to_units(Decimal(subtotal) * TAX_PERCENT / Decimal("100"))
    total_amount = subtotal + tax_amount

    calculation = RateCalculation(
        nights=nights,
        tax_amount=tax_amount,
        total_amount=total_amount,
        extra_beds=extra_beds,
        breakdown=breakdown,
        seasonal_rates_applied=_seasonal_rule_names(breakdown),
        **components,
    )

    ceiling = get_settings().rate_sanity_ceiling
    if total_amount > ceiling:
        logger.warning(
            "Total amount exceeds sanity ceiling",
            extra={
                "total_amount": total_amount,
                "nights": nights,
                "guest_count": guest_count,
                "capacity": config.capacity,
            },
        )
    return calculation


def _price_night(
    day: datetime.date,
    rate: DailyRate | None,
    config: PropertyPricingConfig,
) -> NightlyRate:
    if rate is None:
        return NightlyRate(
            date=day,
            base_rate=_ZERO,
            weekend_premium=_ZERO,
            seasonal_premium=_ZERO,
            rate_missing=True,
        )

    weekend_premium = _ZERO
    if rate.weekend_premium:
        weekend_premium = rate.base_rate * config.weekend_premium_percent / Decimal("100")

    seasonal_premium = _ZERO
    seasonal_name = None
    if rate.seasonal_premium > 0:
        seasonal_premium = rate.seasonal_premium
        effective = rate.effective_seasonal_rate
        seasonal_name = effective.name if effective else None

    return NightlyRate(
        date=day,
        base_rate=rate.base_rate,
        weekend_premium=weekend_premium,
        seasonal_premium=seasonal_premium,
        seasonal_rate_name=seasonal_name,
    )


def _seasonal_rule_names(breakdown: Iterable[NightlyRate]) -> tuple[str, ...]:
    names: list[str] = []
    for line in breakdown:
        if line.seasonal_rate_name and line.seasonal_rate_name not in names:
            names.append(line.seasonal_rate_name)
    return tuple(names)
