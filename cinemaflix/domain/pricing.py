"""Booking price breakdown.

Amounts are kept as exact decimals; rounding happens only in `rounded()`
for display.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from cinemaflix.domain.entities.seat import Seat

CONVENIENCE_FEE_RATE = Decimal("0.02")
TAX_RATE = Decimal("0.18")

_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class PricingBreakdown:
    base_price: Decimal
    convenience_fee: Decimal
    tax: Decimal
    total: Decimal

    def rounded(self) -> PricingBreakdown:
        return PricingBreakdown(
            base_price=_to_cents(self.base_price),
            convenience_fee=_to_cents(self.convenience_fee),
            tax=_to_cents(self.tax),
            total=_to_cents(self.total),
        )


def compute_pricing(seats: Iterable[Seat]) -> PricingBreakdown:
    base_price = sum((Decimal(seat.price) for seat in seats), Decimal("0"))
    convenience_fee = base_price * CONVENIENCE_FEE_RATE
    tax = (base_price + convenience_fee) * TAX_RATE
    return PricingBreakdown(
        base_price=base_price,
        convenience_fee=convenience_fee,
        tax=tax,
        total=base_price + convenience_fee + tax,
    )


def _to_cents(amount: Decimal) -> Decimal:
    return amount.quantize(_CENTS, rounding=ROUND_HALF_UP)
