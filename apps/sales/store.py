"""
Relational store access for the sales service.

Row lookups the mutation service needs, row locking, and translation of
Django database errors into the sales error types. Lookups raise
``NotFoundError`` instead of returning ``None``.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple, Type

from django.db import DatabaseError, DataError, IntegrityError, OperationalError, transaction
from django.db.models import Model, QuerySet
from django.db.utils import NotSupportedError

from apps.catalog.models import Customer, Destination, Flight, Hotel, Seller, Transport

from .exceptions import ConstraintViolationError, NotFoundError, StoreTimeoutError
from .models import Sale, SaleFlight, SaleHotel, SaleTransport

logger = logging.getLogger(__name__)

# Fragments of driver messages that mean "gave up waiting".
_TIMEOUT_MARKERS = (
    "database is locked",
    "database table is locked",
    "canceling statement due to statement timeout",
    "canceling statement due to lock timeout",
    "lock timeout",
    "lock wait timeout",
    "could not obtain lock",
)


def _lock_queryset_if_possible(queryset: QuerySet) -> QuerySet:
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def is_timeout_error(exc: BaseException) -> bool:
    message = str(exc).lower()
    return any(marker in message for marker in _TIMEOUT_MARKERS)


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """
    Translate database failures raised inside the block

    IntegrityError -> ConstraintViolationError (unique/check/foreign key),
    DataError -> ConstraintViolationError (value does not fit its column),
    lock and statement timeouts -> StoreTimeoutError. Anything else is
    re-raised untouched.
    """
    try:
        yield
    except IntegrityError as exc:
        logger.warning(f"{operation}: integrity error: {exc}")
        raise ConstraintViolationError(
            f"{operation} rejected by the database: {exc}",
            rule="database_constraint",
        ) from exc
    except DataError as exc:
        logger.warning(f"{operation}: data error: {exc}")
        raise ConstraintViolationError(
            f"{operation} rejected by the database: {exc}",
            rule="value_out_of_range",
        ) from exc
    except OperationalError as exc:
        if is_timeout_error(exc):
            logger.warning(f"{operation}: store timeout: {exc}")
            raise StoreTimeoutError(operation) from exc
        raise
    except DatabaseError as exc:
        if is_timeout_error(exc):
            logger.warning(f"{operation}: store timeout: {exc}")
            raise StoreTimeoutError(operation) from exc
        raise


def _get(model: Type[Model], pk, *, label: Optional[str] = None, queryset: Optional[QuerySet] = None):
    queryset = queryset if queryset is not None else model.objects.all()
    try:
        return queryset.get(pk=pk)
    except (model.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(label or model.__name__, pk)


def get_sale(sale_id, *, lock: bool = False) -> Sale:
    """Fetch a sale with its destination; ``lock`` takes a row lock."""

    queryset = Sale.objects.select_related("destination")
    if lock:
        queryset = _lock_queryset_if_possible(queryset)
    return _get(Sale, sale_id, queryset=queryset)


def get_destination_for_sale(sale: Sale) -> Destination:
    destination = sale.destination
    if destination is None:  # pragma: no cover - FK is non-nullable
        raise NotFoundError("Destination", sale.destination_id)
    return destination


def get_transport(transport_id) -> Transport:
    return _get(Transport, transport_id)


def get_hotel(hotel_id) -> Hotel:
    return _get(Hotel, hotel_id)


def get_flight(flight_id) -> Flight:
    return _get(Flight, flight_id)


def get_seller(seller_id) -> Seller:
    return _get(Seller, seller_id)


def get_customer(customer_id) -> Customer:
    return _get(Customer, customer_id)


def get_destination(destination_id) -> Destination:
    return _get(Destination, destination_id)


def _list_orders(model: Type[Model], sale_id, exclude_pk=None) -> List[Tuple[int, int]]:
    queryset = model.objects.filter(sale_id=sale_id)
    if exclude_pk is not None:
        queryset = queryset.exclude(pk=exclude_pk)
    return list(queryset.values_list("sale_id", "order_in_trip"))


def list_transport_orders(sale_id, exclude_pk=None) -> List[Tuple[int, int]]:
    return _list_orders(SaleTransport, sale_id, exclude_pk)


def list_hotel_orders(sale_id, exclude_pk=None) -> List[Tuple[int, int]]:
    return _list_orders(SaleHotel, sale_id, exclude_pk)


def list_flight_orders(sale_id, exclude_pk=None) -> List[Tuple[int, int]]:
    return _list_orders(SaleFlight, sale_id, exclude_pk)


def find_leg_link(model: Type[Model], sale: Sale, leg_field: str, leg: Model):
    """Return the locked (sale, leg) junction row, or None when not linked yet."""

    queryset = model.objects.filter(sale=sale, **{leg_field: leg})
    return _lock_queryset_if_possible(queryset).first()
