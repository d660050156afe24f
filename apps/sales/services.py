"""
Mutation service for the sale aggregate.

Every function here is one transaction: rows are loaded (the sale row under
a lock), the rules in ``domain.rules`` are checked, and only then is anything
written. A failure at any step raises a ``SalesServiceError`` subclass and
rolls the whole transaction back. Nothing is retried here; ``ConflictError``
and ``StoreTimeoutError`` are marked retryable for the caller to decide.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable, List, Optional, Tuple, Type

from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction
from django.db.models import F, Model
from django.utils import timezone

from apps.catalog.models import Customer
from shared.application.uow import DjangoUnitOfWork
from shared.domain.value_objects import Money

from . import store
from .audit import record_price_change
from .domain import rules
from .domain.actor import ActorLike, require_actor
from .domain.events import LegAttached, SalePriceChanged, SaleRecorded, TransportAttached
from .exceptions import ConflictError, ConstraintViolationError
from .models import Sale, SaleFlight, SaleHotel, SaleTransport

logger = logging.getLogger(__name__)


def _parse_amount(value, field: str) -> Money:
    if isinstance(value, bool):
        raise ConstraintViolationError(f"{field} must be a number", rule="amount_format")
    try:
        return Money.of(value)
    except ValueError as exc:
        raise ConstraintViolationError(
            f"{field} is not a valid amount: {value!r}",
            rule="amount_format",
        ) from exc


def _require_storable(amount: Money, field: str, **details) -> None:
    if not rules.is_storable_amount(amount):
        raise ConstraintViolationError(
            f"{field} {amount} exceeds the largest storable amount {rules.MAX_AMOUNT}",
            rule="amount_range",
            details={**details, "amount": str(amount.amount)},
        )


def _require_positive_order(order_in_trip) -> None:
    if not rules.is_positive_order(order_in_trip):
        raise ConstraintViolationError(
            f"OrderInTrip must be a positive integer, got {order_in_trip!r}",
            rule="order_in_trip_positive",
            details={"order_in_trip": order_in_trip},
        )


# ===== Sales =====

def record_sale(
    customer_id: int,
    seller_id: int,
    destination_id: int,
    total_amount,
    sale_date: Optional[date] = None,
) -> Sale:
    """
    Create a sale.

    ``sale_date`` defaults to today and may not lie in the future;
    ``total_amount`` may not be negative.
    """

    amount = _parse_amount(total_amount, "TotalAmount")
    today = timezone.localdate()
    sale_date = sale_date or today

    if not rules.is_non_negative(amount):
        raise ConstraintViolationError(
            f"TotalAmount cannot be negative: {amount}",
            rule="total_non_negative",
        )
    _require_storable(amount, "TotalAmount")
    if not rules.is_not_future(sale_date, today):
        raise ConstraintViolationError(
            f"SaleDate {sale_date} is in the future",
            rule="sale_date_not_future",
            details={"sale_date": sale_date.isoformat(), "today": today.isoformat()},
        )

    with store.store_errors("record sale"):
        with DjangoUnitOfWork() as uow:
            customer = store.get_customer(customer_id)
            seller = store.get_seller(seller_id)
            destination = store.get_destination(destination_id)

            sale = Sale.objects.create(
                customer=customer,
                seller=seller,
                destination=destination,
                sale_date=sale_date,
                total_amount=amount.amount,
            )
            uow.collect_event(SaleRecorded(
                aggregate_id=sale.pk,
                sale_id=sale.pk,
                customer_id=customer.pk,
                seller_id=seller.pk,
                destination_id=destination.pk,
                total_amount=sale.total_amount,
            ))

    logger.info(f"Sale {sale.pk} recorded for customer {customer.pk} by seller {seller.pk}")
    return sale


def change_sale_price(sale_id: int, amount_delta, actor: ActorLike) -> Sale:
    """
    Add ``amount_delta`` (may be negative) to a sale's total.

    The acting seller is required even when the delta is zero. When the
    amount actually changes, exactly one audit row is written in the same
    transaction; a zero delta returns the sale untouched and writes nothing.

    Raises:
        ConstraintViolationError: no actor, malformed delta, result negative or too large
        NotFoundError: unknown sale or acting seller
        ConflictError: the sale row changed under us (version mismatch)
        StoreTimeoutError: the database did not respond in time
    """

    actor = require_actor(actor)
    delta = _parse_amount(amount_delta, "AmountChange")

    with store.store_errors("change sale price"):
        with DjangoUnitOfWork() as uow:
            sale = store.get_sale(sale_id, lock=True)
            seller = store.get_seller(actor.seller_id)

            old_amount = Money.of(sale.total_amount)
            new_amount = old_amount + delta

            if not rules.is_non_negative(new_amount):
                logger.warning(
                    f"Rejected price change on sale {sale.pk}: {old_amount} + {delta} is negative"
                )
                raise ConstraintViolationError(
                    f"TotalAmount of sale {sale.pk} would become negative ({new_amount})",
                    rule="total_non_negative",
                    details={
                        "sale_id": sale.pk,
                        "old_amount": str(old_amount.amount),
                        "amount_delta": str(delta.amount),
                    },
                )
            _require_storable(new_amount, "TotalAmount", sale_id=sale.pk)

            if new_amount == old_amount:
                logger.debug(f"Price change on sale {sale.pk} is a no-op")
                return sale

            updated = Sale.objects.filter(pk=sale.pk, version=sale.version).update(
                total_amount=new_amount.amount,
                version=F("version") + 1,
            )
            if not updated:
                raise ConflictError(sale.pk, expected_version=sale.version)

            record_price_change(sale.pk, old_amount.amount, new_amount.amount, actor, seller=seller)
            uow.collect_event(SalePriceChanged(
                aggregate_id=sale.pk,
                sale_id=sale.pk,
                old_amount=old_amount.amount,
                new_amount=new_amount.amount,
                changed_by=actor.seller_id,
            ))
            sale.refresh_from_db()

    logger.info(f"Sale {sale.pk} total changed {old_amount} -> {new_amount}")
    return sale


# ===== Itinerary legs =====

def _save_leg(
    model: Type[Model],
    sale: Sale,
    leg_field: str,
    leg: Model,
    order_in_trip: int,
    list_orders: Callable[..., List[Tuple[int, int]]],
    **values,
) -> Tuple[Model, bool]:
    """Insert or update the (sale, leg) junction row after the order check."""

    link = store.find_leg_link(model, sale, leg_field, leg)
    existing_orders = list_orders(sale.pk, exclude_pk=link.pk if link else None)
    if not rules.is_unique_order(sale.pk, order_in_trip, existing_orders):
        logger.warning(
            f"Rejected {model.__name__} for sale {sale.pk}: order {order_in_trip} already used"
        )
        raise ConstraintViolationError(
            f"OrderInTrip {order_in_trip} is already used by sale {sale.pk}",
            rule="order_in_trip_unique",
            details={"sale_id": sale.pk, "order_in_trip": order_in_trip, "table": model.__name__},
        )

    created = link is None
    if created:
        link = model(sale=sale, **{leg_field: leg})
    link.order_in_trip = order_in_trip
    for name, value in values.items():
        if value is not None:
            setattr(link, name, value)

    # A concurrent insert of the same order surfaces here as IntegrityError;
    # store_errors turns it into ConstraintViolationError.
    with transaction.atomic():
        link.save()
    return link, created


def attach_transport(
    sale_id: int,
    transport_id: int,
    order_in_trip: int,
    assigned_date: Optional[date] = None,
) -> SaleTransport:
    """
    Link a transport leg to a sale, or update the existing link.

    The transport's [departure, arrival] must lie inside the sale
    destination's [start, end] window, and ``order_in_trip`` must be positive
    and free among the sale's other transport legs. Both checks run on every
    call, whether it inserts or updates. ``assigned_date`` defaults to today
    on insert and is left unchanged on update when omitted.
    """

    _require_positive_order(order_in_trip)

    with store.store_errors("attach transport"):
        with DjangoUnitOfWork() as uow:
            sale = store.get_sale(sale_id, lock=True)
            transport = store.get_transport(transport_id)
            destination = store.get_destination_for_sale(sale)

            if not rules.date_within_window(
                transport.departure_date,
                transport.arrival_date,
                destination.start_date,
                destination.end_date,
            ):
                logger.warning(
                    f"Rejected transport {transport.pk} for sale {sale.pk}: "
                    f"{transport.travel_dates} outside {destination.window}"
                )
                raise ConstraintViolationError(
                    f"Transport {transport.pk} dates {transport.travel_dates} fall outside "
                    f"destination window {destination.window}",
                    rule="transport_within_destination",
                    details={
                        "sale_id": sale.pk,
                        "transport_id": transport.pk,
                        "departure_date": transport.departure_date.isoformat(),
                        "arrival_date": transport.arrival_date.isoformat(),
                        "window_start": destination.start_date.isoformat(),
                        "window_end": destination.end_date.isoformat(),
                    },
                )

            link, created = _save_leg(
                SaleTransport,
                sale,
                "transport",
                transport,
                order_in_trip,
                store.list_transport_orders,
                assigned_date=assigned_date,
            )
            uow.collect_event(TransportAttached(
                aggregate_id=sale.pk,
                sale_id=sale.pk,
                transport_id=transport.pk,
                order_in_trip=link.order_in_trip,
                assigned_date=link.assigned_date,
                created=created,
            ))

    logger.info(
        f"Transport {transport.pk} {'attached to' if created else 'updated on'} "
        f"sale {sale.pk} at position {order_in_trip}"
    )
    return link


def attach_hotel(
    sale_id: int,
    hotel_id: int,
    order_in_trip: int,
    check_in_date: Optional[date] = None,
    check_out_date: Optional[date] = None,
) -> SaleHotel:
    """Link a hotel stay to a sale, or update the existing link."""

    _require_positive_order(order_in_trip)

    with store.store_errors("attach hotel"):
        with DjangoUnitOfWork() as uow:
            sale = store.get_sale(sale_id, lock=True)
            hotel = store.get_hotel(hotel_id)

            current = store.find_leg_link(SaleHotel, sale, "hotel", hotel)
            effective_in = check_in_date or (current.check_in_date if current else None)
            effective_out = check_out_date or (current.check_out_date if current else None)
            if effective_in and effective_out and effective_in > effective_out:
                raise ConstraintViolationError(
                    f"Hotel check-in {effective_in} is after check-out {effective_out}",
                    rule="hotel_stay_dates",
                )

            link, created = _save_leg(
                SaleHotel,
                sale,
                "hotel",
                hotel,
                order_in_trip,
                store.list_hotel_orders,
                check_in_date=check_in_date,
                check_out_date=check_out_date,
            )
            uow.collect_event(LegAttached(
                aggregate_id=sale.pk,
                sale_id=sale.pk,
                kind="hotel",
                leg_id=hotel.pk,
                order_in_trip=order_in_trip,
                created=created,
            ))

    return link


def attach_flight(sale_id: int, flight_id: int, order_in_trip: int) -> SaleFlight:
    """Link a flight to a sale, or update the existing link."""

    _require_positive_order(order_in_trip)

    with store.store_errors("attach flight"):
        with DjangoUnitOfWork() as uow:
            sale = store.get_sale(sale_id, lock=True)
            flight = store.get_flight(flight_id)
            link, created = _save_leg(
                SaleFlight,
                sale,
                "flight",
                flight,
                order_in_trip,
                store.list_flight_orders,
            )
            uow.collect_event(LegAttached(
                aggregate_id=sale.pk,
                sale_id=sale.pk,
                kind="flight",
                leg_id=flight.pk,
                order_in_trip=order_in_trip,
                created=created,
            ))

    return link


# ===== Customers =====

class RegistrationStatus(str, Enum):
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"


@dataclass(frozen=True)
class CustomerRegistration:
    """Outcome of ``register_customer``; a duplicate email is not an error."""

    customer: Customer
    status: RegistrationStatus

    @property
    def created(self) -> bool:
        return self.status is RegistrationStatus.CREATED


def register_customer(first_name: str, last_name: str, email: str, phone: str = "") -> CustomerRegistration:
    """
    Register a customer unless one with the same email already exists.

    A duplicate returns the existing customer with status ALREADY_EXISTS.
    """

    email = (email or "").strip()
    try:
        validate_email(email)
    except ValidationError as exc:
        raise ConstraintViolationError(f"Invalid email address: {email!r}", rule="customer_email") from exc
    if not first_name or not last_name:
        raise ConstraintViolationError("Customer first and last name are required", rule="customer_name")

    with store.store_errors("register customer"):
        with transaction.atomic():
            existing = Customer.objects.filter(email__iexact=email).first()
            if existing is None:
                try:
                    with transaction.atomic():
                        customer = Customer.objects.create(
                            first_name=first_name,
                            last_name=last_name,
                            email=email,
                            phone=phone or "",
                        )
                except IntegrityError:
                    # Lost a race against an identical registration.
                    existing = Customer.objects.filter(email__iexact=email).first()
                    if existing is None:
                        raise

    if existing is not None:
        logger.warning(f"Customer with email {email} already exists (id {existing.pk})")
        return CustomerRegistration(customer=existing, status=RegistrationStatus.ALREADY_EXISTS)

    logger.info(f"Customer {customer.pk} registered")
    return CustomerRegistration(customer=customer, status=RegistrationStatus.CREATED)
