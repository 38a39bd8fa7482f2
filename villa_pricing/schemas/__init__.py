"""Pydantic schemas for provider payloads."""

from .availability import (
    AvailabilityPayload,
    DailyRate,
    DateWindow,
    PropertyPricingConfig,
    SeasonalRateApplied,
)

__all__ = [
    "AvailabilityPayload",
    "DailyRate",
    "DateWindow",
    "PropertyPricingConfig",
    "SeasonalRateApplied",
]
