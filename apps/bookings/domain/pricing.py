"""
Stay Pricing

All amounts are integers in minor currency units; no floating point is
involved anywhere in the calculation.

    nights          = ceil((check_out - check_in) in days)
    base_amount     = nights * nightly_rate
    add_ons_amount  = sum(unit_price * quantity)
    total_amount    = base_amount + add_ons_amount
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable

from shared.domain.exceptions import ValidationError

ONE_DAY = timedelta(days=1)

# Largest amount a booking row can store (signed 64-bit)
MAX_AMOUNT = 2 ** 63 - 1


@dataclass(frozen=True)
class AddOn:
    """Extra charge attached to a booking (firewood, breakfast, ...)."""
    name: str
    unit_price: int
    quantity: int = 1

    def __post_init__(self):
        if not _is_int(self.unit_price) or self.unit_price < 0:
            raise ValidationError("Add-on price must be a non-negative integer amount", field="add_ons")
        if not _is_int(self.quantity) or self.quantity < 1:
            raise ValidationError("Add-on quantity must be at least 1", field="add_ons")

    @property
    def amount(self) -> int:
        return self.unit_price * self.quantity

    def to_dict(self) -> dict:
        return {"name": self.name, "unit_price": self.unit_price, "quantity": self.quantity}


@dataclass(frozen=True)
class PriceQuote:
    nights: int
    nightly_rate: int
    base_amount: int
    add_ons_amount: int
    total_amount: int

    def to_dict(self) -> dict:
        return {
            "nights": self.nights,
            "nightly_rate": self.nightly_rate,
            "base_amount": self.base_amount,
            "add_ons_amount": self.add_ons_amount,
            "total_amount": self.total_amount,
        }


def count_nights(check_in: date | datetime, check_out: date | datetime) -> int:
    """Whole nights between the two points, rounding partial days up."""
    span = check_out - check_in
    nights = span.days + (1 if span % ONE_DAY else 0)
    if nights < 1:
        raise ValidationError("Booking must be at least 1 night", field="check_out")
    return nights


def quote_stay(
    nightly_rate: int,
    check_in: date | datetime,
    check_out: date | datetime,
    add_ons: Iterable[AddOn] = (),
) -> PriceQuote:
    if not _is_int(nightly_rate) or nightly_rate < 0:
        raise ValidationError("Nightly rate must be a non-negative integer amount")

    nights = count_nights(check_in, check_out)
    base_amount = nights * nightly_rate
    add_ons_amount = sum(add_on.amount for add_on in add_ons)
    if base_amount + add_ons_amount > MAX_AMOUNT:
        raise ValidationError("Booking total exceeds the largest supported amount")
    return PriceQuote(
        nights=nights,
        nightly_rate=nightly_rate,
        base_amount=base_amount,
        add_ons_amount=add_ons_amount,
        total_amount=base_amount + add_ons_amount,
    )


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
