"""
Sales Domain Events

Published after the transaction that produced them commits.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from shared.domain.base import DomainEvent


@dataclass
class SaleRecorded(DomainEvent):
    sale_id: int = 0
    customer_id: int = 0
    seller_id: int = 0
    destination_id: int = 0
    total_amount: Decimal = Decimal('0.00')


@dataclass
class SalePriceChanged(DomainEvent):
    """
    Event: A sale's total amount changed

    Emitted only when the amount actually changed, together with the
    audit row.
    """
    sale_id: int = 0
    old_amount: Decimal = Decimal('0.00')
    new_amount: Decimal = Decimal('0.00')
    changed_by: int = 0


@dataclass
class TransportAttached(DomainEvent):
    sale_id: int = 0
    transport_id: int = 0
    order_in_trip: int = 0
    assigned_date: Optional[date] = None
    created: bool = True


@dataclass
class LegAttached(DomainEvent):
    """Event: A hotel or flight was attached to (or reordered in) a sale"""
    sale_id: int = 0
    kind: str = ''
    leg_id: int = 0
    order_in_trip: int = 0
    created: bool = True
