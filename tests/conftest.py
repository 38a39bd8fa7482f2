"""Test fixtures for the villa pricing package."""
from __future__ import annotations

import datetime
import os
from collections.abc import Iterator
from decimal import Decimal
from typing import Any

import pytest

os.environ.setdefault("APP_ENV", "test")

from villa_pricing.core.config import get_settings
from villa_pricing.schemas import AvailabilityPayload, DailyRate, PropertyPricingConfig


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Clear cached settings so each test sees its own environment."""
    for name in (
        "MISSING_RATE_POLICY",
        "DEFAULT_DP_PERCENTAGE",
        "RATE_SANITY_CEILING",
        "CURRENCY_PREFIX",
        "PROVIDER_BASE_URL",
        "PROVIDER_API_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def pricing_config() -> PropertyPricingConfig:
    """Villa with room for two, weekend premium of 20%."""
    return PropertyPricingConfig(
        capacity=2,
        cleaning_fee=Decimal("50000"),
        extra_bed_rate=Decimal("75000"),
        weekend_premium_percent=Decimal("20"),
        min_stay_weekday=2,
        min_stay_weekend=3,
        min_stay_peak=5,
    )


def build_rates(
    start: datetime.date,
    end: datetime.date,
    *,
    base_rate: str = "500000",
    weekend_dates: frozenset[str] = frozenset(),
    overrides: dict[str, dict[str, Any]] | None = None,
) -> dict[str, DailyRate]:
    """Rate table with one entry per night in ``[start, end)``."""
    overrides = overrides or {}
    rates: dict[str, DailyRate] = {}
    current = start
    while current < end:
        key = current.isoformat()
        data: dict[str, Any] = {
            "base_rate": base_rate,
            "weekend_premium": key in weekend_dates,
            "seasonal_premium": "0",
        }
        data.update(overrides.get(key, {}))
        rates[key] = DailyRate.model_validate(data)
        current += datetime.timedelta(days=1)
    return rates


@pytest.fixture()
def june_rates() -> dict[str, DailyRate]:
    """Flat 500k nightly rates for June 2024, premiums flagged on Saturdays."""
    saturdays = frozenset({"2024-06-01", "2024-06-08", "2024-06-15", "2024-06-22", "2024-06-29"})
    return build_rates(
        datetime.date(2024, 6, 1),
        datetime.date(2024, 7, 1),
        weekend_dates=saturdays,
    )


@pytest.fixture()
def availability_payload(pricing_config: PropertyPricingConfig, june_rates) -> AvailabilityPayload:
    return AvailabilityPayload(
        property_id=7,
        property_slug="villa-sunset",
        booked_dates=frozenset({"2024-06-20", "2024-06-21"}),
        rates=june_rates,
        property_info=pricing_config,
    )


@pytest.fixture()
def rate_table():
    """Factory for rate tables covering arbitrary windows."""
    return build_rates
