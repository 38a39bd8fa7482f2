"""Availability and rate table schema definitions."""

from __future__ import annotations

import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from villa_pricing.core.dates import parse_iso_date


def _normalise_iso_date(value: Any) -> str:
    return parse_iso_date(value).isoformat()


class PropertyPricingConfig(BaseModel):
    """Static pricing configuration for a single property."""

    capacity: int = Field(ge=1)
    cleaning_fee: Decimal = Field(default=Decimal("0"), ge=0)
    extra_bed_rate: Decimal = Field(default=Decimal("0"), ge=0)
    weekend_premium_percent: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    min_stay_weekday: int = Field(default=1, ge=1)
    min_stay_weekend: int = Field(default=1, ge=1)
    min_stay_peak: int = Field(default=1, ge=1)
    base_rate: Decimal | None = Field(default=None, ge=0)
    capacity_max: int | None = Field(default=None, ge=1)

    model_config = ConfigDict(frozen=True)


class SeasonalRateApplied(BaseModel):
    """Seasonal rule the provider resolved for a date."""

    name: str
    rate_type: str
    rate_value: Decimal
    description: str | None = None
    min_stay_nights: int | None = Field(default=None, ge=1)

    model_config = ConfigDict(frozen=True)


class DailyRate(BaseModel):
    """Resolved pricing for one calendar date."""

    base_rate: Decimal = Field(ge=0)
    weekend_premium: bool = False
    seasonal_premium: Decimal = Field(default=Decimal("0"), ge=0)
    seasonal_rate_applied: tuple[SeasonalRateApplied, ...] = ()
    is_weekend: bool | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("seasonal_rate_applied", mode="before")
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        if value is None:
            return ()
        return value

    @field_validator("seasonal_premium", mode="before")
    @classmethod
    def _null_premium(cls, value: Any) -> Any:
        if value is None:
            return Decimal("0")
        return value

    @property
    def effective_seasonal_rate(self) -> SeasonalRateApplied | None:
        """First applied seasonal rule, which the provider ranks highest."""
        return self.seasonal_rate_applied[0] if self.seasonal_rate_applied else None


class DateWindow(BaseModel):
    """Window of dates a provider response covers."""

    start: datetime.date
    end: datetime.date

    model_config = ConfigDict(frozen=True)


class AvailabilityPayload(BaseModel):
    """Provider response with booked dates, per-date rates and property config."""

    success: bool = True
    property_id: int | str | None = None
    property_slug: str | None = None
    date_range: DateWindow | None = None
    guest_count: int | None = Field(default=None, ge=1)
    booked_dates: frozenset[str] = frozenset()
    booked_periods: tuple[tuple[str, ...], ...] = ()
    rates: dict[str, DailyRate] = Field(default_factory=dict)
    property_info: PropertyPricingConfig

    model_config = ConfigDict(frozen=True)

    @field_validator("booked_dates", mode="before")
    @classmethod
    def _normalise_booked(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        return frozenset(_normalise_iso_date(item) for item in value)

    @field_validator("rates", mode="before")
    @classmethod
    def _normalise_rate_keys(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, list):
            # Empty tables serialize as JSON arrays on the provider side.
            if value:
                raise ValueError("Rate table must be an object keyed by date")
            return {}
        return {_normalise_iso_date(key): rate for key, rate in value.items()}

    def with_minimum_stays(
        self,
        *,
        weekday: int | None = None,
        weekend: int | None = None,
        peak: int | None = None,
    ) -> AvailabilityPayload:
        """Return a copy whose property config carries minimum-stay values."""
        updates: dict[str, int] = {}
        if weekday is not None:
            updates["min_stay_weekday"] = weekday
        if weekend is not None:
            updates["min_stay_weekend"] = weekend
        if peak is not None:
            updates["min_stay_peak"] = peak
        if not updates:
            return self
        config = PropertyPricingConfig.model_validate(
            {**self.property_info.model_dump(), **updates}
        )
        return self.model_copy(update={"property_info": config})
