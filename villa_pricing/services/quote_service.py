"""Stay quotes combining price, minimum stay and down payment."""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from typing import Any

from villa_pricing.core.config import Settings, get_settings
from villa_pricing.schemas.availability import AvailabilityPayload
from villa_pricing.services.down_payment_service import DownPayment, split_down_payment
from villa_pricing.services.errors import RateEstimationError
from villa_pricing.services.formatting_service import (
    FormattedRate,
    format_rate_calculation,
)
from villa_pricing.services.minimum_stay_service import (
    MinimumStay,
    PeakSeasonHook,
    resolve_minimum_stay,
)
from villa_pricing.services.rate_estimator import RateCalculation, estimate
from villa_pricing.services.stay_dates import coerce_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StayQuote:
    """Everything a booking form needs to show for one stay selection."""

    check_in: datetime.date
    check_out: datetime.date
    guest_count: int
    calculation: RateCalculation
    formatted: FormattedRate
    minimum_stay: MinimumStay
    down_payment: DownPayment

    @property
    def meets_minimum_stay(self) -> bool:
        return self.minimum_stay.is_met_by(self.calculation.nights)

    def to_dict(self) -> dict[str, Any]:
        payload = self.calculation.to_dict()
        payload["formatted"] = self.formatted.to_dict()
        payload["minimum_stay"] = self.minimum_stay.to_dict()
        payload["meets_minimum_stay"] = self.meets_minimum_stay
        payload["down_payment"] = self.down_payment.to_dict()
        return payload


def quote_stay(
    payload: AvailabilityPayload,
    *,
    check_in: datetime.date | str,
    check_out: datetime.date | str,
    guest_count: int,
    dp_percentage: int | None = None,
    peak_season: PeakSeasonHook | None = None,
    settings: Settings | None = None,
) -> StayQuote:
    """Price a stay and resolve its minimum-stay requirement."""
    settings = settings or get_settings()
    start = coerce_date(check_in)
    end = coerce_date(check_out)

    calculation = estimate(
        payload.property_info,
        payload.rates,
        payload.booked_dates,
        check_in=start,
        check_out=end,
        guest_count=guest_count,
        missing_rate_policy=settings.missing_rate_policy,
    )
    minimum_stay = resolve_minimum_stay(
        payload.property_info,
        payload.rates,
        payload.booked_dates,
        check_in=start,
        check_out=end,
        peak_season=peak_season,
    )
    if dp_percentage is None:
        dp_percentage = settings.default_dp_percentage

    return StayQuote(
        check_in=start,
        check_out=end,
        guest_count=guest_count,
        calculation=calculation,
        formatted=format_rate_calculation(calculation, settings.currency_prefix),
        minimum_stay=minimum_stay,
        down_payment=split_down_payment(calculation.total_amount, dp_percentage),
    )


def quote_stay_response(
    payload: AvailabilityPayload,
    *,
    check_in: datetime.date | str,
    check_out: datetime.date | str,
    guest_count: int,
    dp_percentage: int | None = None,
    peak_season: PeakSeasonHook | None = None,
    settings: Settings | None = None,
) -> dict[str, Any]:
    """Quote a stay and wrap the outcome in a success/error envelope."""
    context = {
        "property_id": payload.property_id,
        "check_in": str(check_in),
        "check_out": str(check_out),
        "guest_count": guest_count,
    }
    try:
        quote = quote_stay(
            payload,
            check_in=check_in,
            check_out=check_out,
            guest_count=guest_count,
            dp_percentage=dp_percentage,
            peak_season=peak_season,
            settings=settings,
        )
    except RateEstimationError as exc:
        logger.error(
            "Rate calculation failed",
            extra={**context, "error_type": exc.error_type, "error": str(exc)},
        )
        return {
            "success": False,
            "error_type": exc.error_type,
            "message": str(exc),
            **context,
        }
    return {"success": True, "calculation": quote.to_dict(), **context}


class QuoteSession:
    """Holds the provider payload for one viewing session.

    The payload is replaced wholesale when the provider is queried again; the
    last quote is reused while its inputs do not change.
    """

    def __init__(
        self,
        payload: AvailabilityPayload,
        *,
        peak_season: PeakSeasonHook | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._payload = payload
        self._peak_season = peak_season
        self._settings = settings
        self._last_key: tuple[Any, ...] | None = None
        self._last_quote: StayQuote | None = None

    @property
    def payload(self) -> AvailabilityPayload:
        return self._payload

    def replace_payload(self, payload: AvailabilityPayload) -> None:
        self._payload = payload
        self._last_key = None
        self._last_quote = None

    def quote(
        self,
        *,
        check_in: datetime.date | str,
        check_out: datetime.date | str,
        guest_count: int,
        dp_percentage: int | None = None,
    ) -> StayQuote:
        key = (coerce_date(check_in), coerce_date(check_out), guest_count, dp_percentage)
        if key == self._last_key and self._last_quote is not None:
            return self._last_quote
        quote = quote_stay(
            self._payload,
            check_in=key[0],
            check_out=key[1],
            guest_count=guest_count,
            dp_percentage=dp_percentage,
            peak_season=self._peak_season,
            settings=self._settings,
        )
        self._last_key = key
        self._last_quote = quote
        return quote
