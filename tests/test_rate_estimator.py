"""Tests for the rate estimator."""

from __future__ import annotations

import datetime
import logging
from decimal import ROUND_HALF_UP, Decimal

import pytest

from villa_pricing.core.config import MissingRatePolicy
from villa_pricing.schemas import AvailabilityPayload, PropertyPricingConfig
from villa_pricing.services.errors import (
    DatesUnavailable,
    InvalidDate,
    InvalidGuestCount,
    InvalidRange,
    MissingRateData,
)
from villa_pricing.services.rate_estimator import estimate


def test_weekday_stay_base_case(pricing_config, june_rates) -> None:
    calculation = estimate(
        pricing_config,
        june_rates,
        [],
        check_in=datetime.date(2024, 6, 3),
        check_out=datetime.date(2024, 6, 5),
        guest_count=2,
    )

    assert calculation.nights == 2
    assert calculation.base_amount == 1_000_000
    assert calculation.weekend_premium == 0
    assert calculation.seasonal_premium == 0
    assert calculation.extra_bed_amount == 0
    assert calculation.extra_beds == 0
    assert calculation.cleaning_fee == 50_000
    assert calculation.subtotal == 1_050_000
    assert calculation.tax_amount == 115_500
    assert calculation.total_amount == 1_165_500


def test_weekend_night_and_extra_guest(pricing_config, june_rates) -> None:
    calculation = estimate(
        pricing_config,
        june_rates,
        [],
        check_in="2024-06-07",
        check_out="2024-06-09",
        guest_count=3,
    )

    assert calculation.nights == 2
    assert calculation.extra_beds == 1
    assert calculation.extra_bed_amount == 150_000
    # Only Saturday carries the premium, on its own base rate.
    assert calculation.weekend_premium == 100_000
    assert calculation.base_amount == 1_000_000
    assert calculation.subtotal == 1_300_000
    assert calculation.tax_amount == 143_000
    assert calculation.total_amount == 1_443_000
    assert calculation.has_weekend_premium
    assert calculation.requires_extra_beds
    assert not calculation.has_seasonal_rates


def test_weekend_premium_uses_each_nights_base_rate(pricing_config, rate_table) -> None:
    rates = rate_table(
        datetime.date(2024, 6, 7),
        datetime.date(2024, 6, 10),
        weekend_dates=frozenset({"2024-06-08", "2024-06-09"}),
        overrides={
            "2024-06-08": {"base_rate": "600000"},
            "2024-06-09": {"base_rate": "400000"},
        },
    )
    calculation = estimate(
        pricing_config,
        rates,
        [],
        check_in="2024-06-07",
        check_out="2024-06-10",
        guest_count=1,
    )

    assert calculation.base_amount == 1_500_000
    assert calculation.weekend_premium == 120_000 + 80_000


def test_seasonal_premium_is_added_per_night(pricing_config, rate_table) -> None:
    seasonal = {
        "seasonal_premium": "250000",
        "seasonal_rate_applied": [
            {
                "name": "Lebaran",
                "rate_type": "fixed",
                "rate_value": "750000",
                "description": "Holiday week",
                "min_stay_nights": 3,
            }
        ],
    }
    rates = rate_table(
        datetime.date(2024, 6, 10),
        datetime.date(2024, 6, 13),
        overrides={"2024-06-10": seasonal, "2024-06-11": seasonal},
    )
    calculation = estimate(
        pricing_config,
        rates,
        [],
        check_in="2024-06-10",
        check_out="2024-06-13",
        guest_count=2,
    )

    assert calculation.seasonal_premium == 500_000
    assert calculation.seasonal_rates_applied == ("Lebaran",)
    assert [line.seasonal_rate_name for line in calculation.breakdown] == [
        "Lebaran",
        "Lebaran",
        None,
    ]
    assert calculation.has_seasonal_rates


def test_components_are_rounded_before_tax(rate_table) -> None:
    config = PropertyPricingConfig(capacity=2, cleaning_fee=Decimal("0"))
    rates = rate_table(
        datetime.date(2024, 6, 3),
        datetime.date(2024, 6, 6),
        base_rate="100000.4",
    )
    calculation = estimate(
        config, rates, [], check_in="2024-06-03", check_out="2024-06-06", guest_count=1
    )

    assert calculation.base_amount == 300_001
    assert calculation.tax_amount == 33_000
    assert calculation.total_amount == 333_001


def test_tax_rounds_half_up(rate_table) -> None:
    config = PropertyPricingConfig(capacity=1, cleaning_fee=Decimal("50"))
    rates = rate_table(datetime.date(2024, 6, 3), datetime.date(2024, 6, 4), base_rate="0")
    calculation = estimate(
        config, rates, [], check_in="2024-06-03", check_out="2024-06-04", guest_count=1
    )

    assert calculation.subtotal == 50
    assert calculation.tax_amount == 6
    assert calculation.total_amount == 56


def test_tax_and_total_invariants_hold(pricing_config, june_rates) -> None:
    calculation = estimate(
        pricing_config,
        june_rates,
        [],
        check_in="2024-06-05",
        check_out="2024-06-16",
        guest_count=5,
    )

    subtotal = (
        calculation.base_amount
        + calculation.weekend_premium
        + calculation.seasonal_premium
        + calculation.extra_bed_amount
        + calculation.cleaning_fee
    )
    expected_tax = int((Decimal(subtotal) * Decimal("0.11")).to_integral_value(rounding=ROUND_HALF_UP))
    assert calculation.nights == 11
    assert calculation.tax_amount == expected_tax
    assert calculation.total_amount == subtotal + calculation.tax_amount
    assert calculation.extra_beds == 3
    assert all(
        value >= 0
        for value in (
            calculation.base_amount,
            calculation.weekend_premium,
            calculation.seasonal_premium,
            calculation.extra_bed_amount,
            calculation.cleaning_fee,
            calculation.tax_amount,
            calculation.total_amount,
        )
    )


def test_estimate_is_deterministic(pricing_config, june_rates) -> None:
    kwargs = {"check_in": "2024-06-07", "check_out": "2024-06-12", "guest_count": 4}
    first = estimate(pricing_config, june_rates, [], **kwargs)
    second = estimate(pricing_config, june_rates, [], **kwargs)

    assert first == second
    assert first.to_dict() == second.to_dict()


@pytest.mark.parametrize(
    ("check_in", "check_out"),
    [("2024-06-05", "2024-06-05"), ("2024-06-06", "2024-06-05")],
)
def test_invalid_range(pricing_config, june_rates, check_in, check_out) -> None:
    with pytest.raises(InvalidRange) as excinfo:
        estimate(
            pricing_config,
            june_rates,
            [],
            check_in=check_in,
            check_out=check_out,
            guest_count=2,
        )
    assert excinfo.value.error_type == "invalid_range"


def test_guest_count_must_be_positive(pricing_config, june_rates) -> None:
    with pytest.raises(InvalidGuestCount):
        estimate(
            pricing_config,
            june_rates,
            [],
            check_in="2024-06-03",
            check_out="2024-06-05",
            guest_count=0,
        )


def test_booked_date_blocks_estimate(pricing_config, june_rates) -> None:
    with pytest.raises(DatesUnavailable) as excinfo:
        estimate(
            pricing_config,
            june_rates,
            ["2024-06-04", "2024-06-20"],
            check_in="2024-06-03",
            check_out="2024-06-06",
            guest_count=2,
        )
    assert excinfo.value.conflicting_dates == ("2024-06-04",)


def test_checkout_date_may_be_booked(pricing_config, june_rates) -> None:
    calculation = estimate(
        pricing_config,
        june_rates,
        [datetime.date(2024, 6, 5)],
        check_in="2024-06-03",
        check_out="2024-06-05",
        guest_count=2,
    )
    assert calculation.nights == 2


def test_missing_rate_fails_by_default(pricing_config, rate_table) -> None:
    rates = rate_table(datetime.date(2024, 6, 3), datetime.date(2024, 6, 4))
    with pytest.raises(MissingRateData) as excinfo:
        estimate(
            pricing_config,
            rates,
            [],
            check_in="2024-06-03",
            check_out="2024-06-05",
            guest_count=2,
        )
    assert excinfo.value.missing_dates == ("2024-06-04",)


def test_missing_rate_skip_policy_prices_zero(pricing_config, rate_table, caplog) -> None:
    rates = rate_table(datetime.date(2024, 6, 3), datetime.date(2024, 6, 4))
    with caplog.at_level(logging.WARNING, logger="villa_pricing"):
        calculation = estimate(
            pricing_config,
            rates,
            [],
            check_in="2024-06-03",
            check_out="2024-06-05",
            guest_count=2,
            missing_rate_policy=MissingRatePolicy.SKIP,
        )

    assert calculation.nights == 2
    assert calculation.base_amount == 500_000
    assert calculation.breakdown[1].rate_missing
    assert "Rate data missing" in caplog.text


def test_missing_rate_policy_read_from_settings(pricing_config, rate_table, monkeypatch) -> None:
    monkeypatch.setenv("MISSING_RATE_POLICY", "skip")
    rates = rate_table(datetime.date(2024, 6, 3), datetime.date(2024, 6, 4))
    calculation = estimate(
        pricing_config,
        rates,
        [],
        check_in="2024-06-03",
        check_out="2024-06-05",
        guest_count=2,
    )
    assert calculation.base_amount == 500_000


def test_high_total_is_logged(pricing_config, june_rates, monkeypatch, caplog) -> None:
    monkeypatch.setenv("RATE_SANITY_CEILING", "1000000")
    with caplog.at_level(logging.WARNING, logger="villa_pricing"):
        calculation = estimate(
            pricing_config,
            june_rates,
            [],
            check_in="2024-06-03",
            check_out="2024-06-05",
            guest_count=2,
        )
    assert calculation.total_amount == 1_165_500
    assert "sanity ceiling" in caplog.text


def test_to_dict_shape(pricing_config, june_rates) -> None:
    data = estimate(
        pricing_config,
        june_rates,
        [],
        check_in="2024-06-07",
        check_out="2024-06-09",
        guest_count=2,
    ).to_dict()

    assert data["total_amount"] == 1_276_500
    assert data["subtotal"] == 1_150_000
    assert data["breakdown"][1] == {
        "date": "2024-06-08",
        "base_rate": 500_000,
        "weekend_premium": 100_000,
        "seasonal_premium": 0,
        "seasonal_rate": None,
        "rate_missing": False,
    }
    assert data["seasonal_rates_applied"] == []


def test_malformed_check_in_raises_typed_error(pricing_config, june_rates) -> None:
    with pytest.raises(InvalidDate) as excinfo:
        estimate(
            pricing_config,
            june_rates,
            [],
            check_in="not-a-date",
            check_out="2024-06-05",
            guest_count=2,
        )
    assert excinfo.value.error_type == "invalid_date"


def test_booked_timestamps_match_payload_normalisation(pricing_config, june_rates) -> None:
    booked = ["2024-06-04T00:00:00", "2024-06-20"]
    payload = AvailabilityPayload(
        booked_dates=booked, rates=june_rates, property_info=pricing_config
    )

    with pytest.raises(DatesUnavailable) as excinfo:
        estimate(
            pricing_config,
            june_rates,
            booked,
            check_in="2024-06-03",
            check_out="2024-06-06",
            guest_count=2,
        )
    assert excinfo.value.conflicting_dates == ("2024-06-04",)
    assert "2024-06-04" in payload.booked_dates
