"""Service layer exports."""
from villa_pricing.services import (
    down_payment_service,
    formatting_service,
    minimum_stay_service,
    quote_service,
    rate_estimator,
)

__all__ = [
    "down_payment_service",
    "formatting_service",
    "minimum_stay_service",
    "quote_service",
    "rate_estimator",
]
