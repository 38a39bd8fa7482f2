"""Down payment split for a quoted total."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from villa_pricing.services.rate_estimator import to_units


@dataclass(frozen=True, slots=True)
class DownPayment:
    """Amount due up front and the balance left for later."""

    dp_percentage: int
    dp_amount: int
    remaining_amount: int

    def to_dict(self) -> dict[str, int]:
        return {
            "dp_percentage": self.dp_percentage,
            "dp_amount": self.dp_amount,
            "remaining_amount": self.remaining_amount,
        }


def split_down_payment(total_amount: int, dp_percentage: int) -> DownPayment:
    if not 0 <= dp_percentage <= 100:
        raise ValueError("Down payment percentage must be between 0 and 100")
    if total_amount < 0:
        raise ValueError("Total amount cannot be negative")
    dp_amount = to_units(Decimal(total_amount) * Decimal(dp_percentage) / Decimal("100"))
    return DownPayment(
        dp_percentage=dp_percentage,
        dp_amount=dp_amount,
        remaining_amount=total_amount - dp_amount,
    )
