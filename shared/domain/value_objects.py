"""
Common Value Objects

Value objects used across the catalog and sales apps:
- Money: Signed monetary amount with two fraction digits
- DateRange: Inclusive range of dates (trip window, transport leg)
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

from shared.domain.base import ValueObject

CENT = Decimal('0.01')


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Amounts are quantized to cents on construction. Negative values are
    allowed so the same type carries both totals and price adjustments;
    callers decide whether a negative result is acceptable.
    """
    amount: Decimal

    def __post_init__(self):
        try:
            quantized = Decimal(str(self.amount)).quantize(CENT, rounding=ROUND_HALF_UP)
        except (InvalidOperation, ValueError) as exc:
            raise ValueError(f"Invalid monetary amount: {self.amount!r}") from exc
        if not quantized.is_finite():
            raise ValueError(f"Invalid monetary amount: {self.amount!r}")
        object.__setattr__(self, 'amount', quantized)

    @classmethod
    def of(cls, value) -> 'Money':
        if isinstance(value, Money):
            return value
        return cls(value)

    @property
    def is_negative(self) -> bool:
        return self.amount < 0

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    def __add__(self, other: 'Money') -> 'Money':
        """Add two money objects"""
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        return Money(self.amount + other.amount)

    def __sub__(self, other: 'Money') -> 'Money':
        """Subtract two money objects"""
        if not isinstance(other, Money):
            raise TypeError("Can only subtract Money from Money")
        return Money(self.amount - other.amount)

    def __str__(self):
        return f"{self.amount:,.2f}"

    def __repr__(self):
        return f"Money({self.amount})"


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents a closed range: both start_date and end_date are inclusive.
    A single-day range (start == end) is valid.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date > self.end_date:
            raise ValueError(f"Start date ({self.start_date}) must not be after end date ({self.end_date})")

    def contains(self, check_date: date) -> bool:
        """Check if a date is within this range (both ends inclusive)"""
        return self.start_date <= check_date <= self.end_date

    def contains_range(self, other: 'DateRange') -> bool:
        """
        Check if another range lies entirely inside this one

        Examples:
            - DateRange(1, 10) contains DateRange(2, 9) -> True
            - DateRange(1, 10) contains DateRange(1, 10) -> True
            - DateRange(1, 10) contains DateRange(2, 12) -> False
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check containment of another DateRange")
        return other.start_date >= self.start_date and other.end_date <= self.end_date

    def __len__(self) -> int:
        """Number of calendar days covered by the range"""
        return (self.end_date - self.start_date).days + 1

    def __str__(self):
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
