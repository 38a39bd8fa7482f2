"""Currency formatting for rate calculations."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from villa_pricing.core.config import get_settings
from villa_pricing.schemas.availability import SeasonalRateApplied
from villa_pricing.services.rate_estimator import RateCalculation, to_units


@dataclass(frozen=True, slots=True)
class FormattedRate:
    """Display strings for a calculation."""

    total_amount: str
    per_night: str

    def to_dict(self) -> dict[str, str]:
        return {"total_amount": self.total_amount, "per_night": self.per_night}


def format_currency(amount: Decimal | int | float, prefix: str | None = None) -> str:
    """Render ``amount`` as whole units with dot grouping, e.g. ``Rp 1.165.500``."""
    if prefix is None:
        prefix = get_settings().currency_prefix
    units = to_units(Decimal(str(amount)))
    sign = "-" if units < 0 else ""
    grouped = f"{abs(units):,}".replace(",", ".")
    return f"{prefix} {sign}{grouped}" if prefix else f"{sign}{grouped}"


def format_rate_calculation(
    calculation: RateCalculation, prefix: str | None = None
) -> FormattedRate:
    per_night = Decimal(calculation.total_amount) / Decimal(calculation.nights)
    return FormattedRate(
        total_amount=format_currency(calculation.total_amount, prefix),
        per_night=format_currency(per_night, prefix),
    )


def describe_seasonal_rate(rate: SeasonalRateApplied, prefix: str | None = None) -> str:
    """Human readable summary of a seasonal rule."""
    value = rate.rate_value.normalize()
    if rate.rate_type == "percentage":
        return f"+{value:f}% of base rate"
    if rate.rate_type == "fixed":
        return f"{format_currency(rate.rate_value, prefix)} per night"
    if rate.rate_type == "multiplier":
        return f"{value:f}x base rate"
    return rate.description or "Special rate"
