"""Rate estimation for villa and property bookings."""

from villa_pricing.schemas.availability import (
    AvailabilityPayload,
    DailyRate,
    PropertyPricingConfig,
    SeasonalRateApplied,
)
from villa_pricing.services.errors import (
    DatesUnavailable,
    InvalidDate,
    InvalidGuestCount,
    InvalidRange,
    MissingRateData,
    RateEstimationError,
)
from villa_pricing.services.minimum_stay_service import (
    MinimumStay,
    MinStayReason,
    meets_minimum_stay,
    peak_months,
    resolve_minimum_stay,
)
from villa_pricing.services.quote_service import QuoteSession, StayQuote, quote_stay
from villa_pricing.services.rate_estimator import RateCalculation, estimate

__all__ = [
    "AvailabilityPayload",
    "DailyRate",
    "DatesUnavailable",
    "InvalidDate",
    "InvalidGuestCount",
    "InvalidRange",
    "MinStayReason",
    "MinimumStay",
    "MissingRateData",
    "PropertyPricingConfig",
    "QuoteSession",
    "RateCalculation",
    "RateEstimationError",
    "SeasonalRateApplied",
    "StayQuote",
    "estimate",
    "meets_minimum_stay",
    "peak_months",
    "quote_stay",
    "resolve_minimum_stay",
]
