"""
Sale Validation Rules

Pure predicates over proposed changes to a sale aggregate. They take plain
values (or value objects) and never touch the database, so the service can
call them inside its transaction and tests can call them without one.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Tuple, Union

from shared.domain.value_objects import Money

AmountLike = Union[Money, Decimal, int, str]

# Largest magnitude a DecimalField(max_digits=12, decimal_places=2) holds.
MAX_AMOUNT = Decimal("9999999999.99")


def date_within_window(leg_start: date, leg_end: date, window_start: date, window_end: date) -> bool:
    """
    True iff the leg [leg_start, leg_end] lies inside [window_start, window_end]

    Both ends are inclusive: a leg that departs on the first day of the trip
    and arrives on the last day is accepted.
    """
    return leg_start >= window_start and leg_end <= window_end


def is_unique_order(sale_id: int, order_in_trip: int, existing_orders: Iterable[Tuple[int, int]]) -> bool:
    """
    True iff no existing (sale_id, order_in_trip) pair collides with the proposal

    ``existing_orders`` may contain pairs of other sales; only pairs of the
    same sale count, since orders are numbered independently per sale.
    """
    return not any(
        existing_sale == sale_id and existing_order == order_in_trip
        for existing_sale, existing_order in existing_orders
    )


def is_positive_order(order_in_trip) -> bool:
    return isinstance(order_in_trip, int) and not isinstance(order_in_trip, bool) and order_in_trip > 0


def is_non_negative(amount: AmountLike) -> bool:
    return not Money.of(amount).is_negative


def is_storable_amount(amount: AmountLike) -> bool:
    return abs(Money.of(amount).amount) <= MAX_AMOUNT


def is_not_future(value: date, today: date) -> bool:
    return value <= today
