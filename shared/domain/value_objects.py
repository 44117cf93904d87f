"""
Common Value Objects

- ranges_overlap: the half-open interval overlap predicate
- DateRange: a stay period (check-in inclusive, check-out exclusive)
- Money: an amount in integer minor currency units
"""

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from shared.domain.base import ValueObject

# Minor units per major unit
CURRENCY_FACTORS = {
    'PKR': 100,
    'USD': 100,
    'EUR': 100,
    'GBP': 100,
    'JPY': 1,
}

# ISO 4217 codes not listed above use two decimal places
DEFAULT_CURRENCY_FACTOR = 100


def ranges_overlap(a_start, a_end, b_start, b_end) -> bool:
    """
    Half-open overlap test for [a_start, a_end) and [b_start, b_end)

    Adjacent ranges (one ends on the day the other starts) do not overlap,
    and an empty range such as [d, d) overlaps nothing.
    """
    if a_start >= a_end or b_start >= b_end:
        return False
    return a_start < b_end and b_start < a_end


def currency_factor(currency: str) -> int:
    """Minor units per major unit for a three-letter ISO currency code"""
    if not isinstance(currency, str) or len(currency) != 3 or not currency.isalpha() or not currency.isupper():
        raise ValueError(f"Invalid currency code: {currency!r}")
    return CURRENCY_FACTORS.get(currency, DEFAULT_CURRENCY_FACTOR)


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents a range from start_date (inclusive) to end_date (exclusive).
    Used for booking periods and availability checks.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date >= self.end_date:
            raise ValueError(f"Start date ({self.start_date}) must be before end date ({self.end_date})")

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Check if this range overlaps with another

        Examples:
            - DateRange(1, 5) overlaps with DateRange(2, 3) -> True
            - DateRange(1, 3) overlaps with DateRange(3, 5) -> False (same-day turnover)
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")
        return ranges_overlap(self.start_date, self.end_date, other.start_date, other.end_date)

    def contains(self, check_date: date) -> bool:
        """Start is inclusive, end is exclusive"""
        return self.start_date <= check_date < self.end_date

    def __len__(self) -> int:
        """Number of nights"""
        return (self.end_date - self.start_date).days

    def __str__(self):
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Amounts are stored as integers in minor units (cents, paisas).
    Conversion to major units only happens at the presentation edge.
    """
    amount: int
    currency: str = 'PKR'

    def __post_init__(self):
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise TypeError("Money amount must be an integer number of minor units")
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        currency_factor(self.currency)

    @classmethod
    def from_major(cls, amount, currency: str = 'PKR') -> 'Money':
        """Build from a major-unit amount, e.g. 45000 PKR -> 4500000 paisas"""
        factor = currency_factor(currency)
        minor = (Decimal(str(amount)) * factor).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
        return cls(int(minor), currency)

    def to_major(self) -> Decimal:
        return Decimal(self.amount) / currency_factor(self.currency)

    def __add__(self, other: 'Money') -> 'Money':
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        if self.currency != other.currency:
            raise ValueError(f"Cannot add different currencies: {self.currency} and {other.currency}")
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int) -> 'Money':
        if isinstance(factor, bool) or not isinstance(factor, int):
            raise TypeError("Can only multiply Money by an integer")
        return Money(self.amount * factor, self.currency)

    def __str__(self):
        return f"{self.currency} {self.to_major():,.2f}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"
