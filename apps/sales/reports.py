"""
Read-side queries over sales.

Summaries per seller and per destination, plus per-sale and per-customer
lookups. Everything here is read-only and runs outside the mutation service.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List

from django.db.models import Avg, Count, DecimalField, Sum, Value
from django.db.models.functions import Coalesce

from apps.catalog.models import Customer, Destination, Seller

from . import store
from .models import Sale, SaleFlight, SaleHotel, SalePriceHistory, SaleTransport

_ZERO = Value(Decimal("0.00"), output_field=DecimalField(max_digits=14, decimal_places=2))


def seller_performance() -> List[Dict[str, Any]]:
    """Sales count and revenue per seller, best seller first."""

    rows = (
        Seller.objects.annotate(
            sale_count=Count("sales"),
            revenue=Coalesce(Sum("sales__total_amount"), _ZERO),
        )
        .order_by("-revenue", "last_name", "first_name")
    )
    return [
        {
            "seller_id": seller.pk,
            "seller_name": str(seller),
            "sale_count": seller.sale_count,
            "revenue": seller.revenue,
        }
        for seller in rows
    ]


def destination_revenue() -> List[Dict[str, Any]]:
    """Sales count, revenue and average sale per destination."""

    rows = (
        Destination.objects.annotate(
            sale_count=Count("sales"),
            revenue=Coalesce(Sum("sales__total_amount"), _ZERO),
            average_sale=Avg("sales__total_amount"),
        )
        .order_by("-revenue", "name")
    )
    result = []
    for destination in rows:
        average = destination.average_sale
        result.append({
            "destination_id": destination.pk,
            "destination": destination.name,
            "country": destination.country,
            "sale_count": destination.sale_count,
            "revenue": destination.revenue,
            "average_sale": Decimal(average).quantize(Decimal("0.01")) if average is not None else None,
        })
    return result


def sale_itinerary(sale_id: int) -> List[Dict[str, Any]]:
    """
    All legs of one sale: hotels, then flights, then transport

    Each group is sorted by its own OrderInTrip (the three sequences are
    independent).
    """

    sale = store.get_sale(sale_id)
    legs: List[Dict[str, Any]] = []

    for link in SaleHotel.objects.filter(sale=sale).select_related("hotel").order_by("order_in_trip"):
        legs.append({
            "kind": "hotel",
            "order_in_trip": link.order_in_trip,
            "description": str(link.hotel),
            "start": link.check_in_date,
            "end": link.check_out_date,
        })
    for link in SaleFlight.objects.filter(sale=sale).select_related("flight").order_by("order_in_trip"):
        legs.append({
            "kind": "flight",
            "order_in_trip": link.order_in_trip,
            "description": f"{link.flight} {link.flight.departure_airport} -> {link.flight.arrival_airport}",
            "start": link.flight.departure_time,
            "end": link.flight.arrival_time,
        })
    for link in SaleTransport.objects.filter(sale=sale).select_related("transport").order_by("order_in_trip"):
        legs.append({
            "kind": "transport",
            "order_in_trip": link.order_in_trip,
            "description": f"{link.transport.type} {link.transport.provider}".strip(),
            "start": link.transport.departure_date,
            "end": link.transport.arrival_date,
        })
    return legs


def customer_sales(customer_id: int) -> List[Dict[str, Any]]:
    """A customer's sales, newest first."""

    customer = store.get_customer(customer_id)
    sales = (
        Sale.objects.filter(customer=customer)
        .select_related("destination", "seller")
        .order_by("-sale_date", "-id")
    )
    return [
        {
            "sale_id": sale.pk,
            "sale_date": sale.sale_date,
            "destination": sale.destination.name,
            "seller_name": str(sale.seller),
            "total_amount": sale.total_amount,
        }
        for sale in sales
    ]


def price_history(sale_id: int) -> List[SalePriceHistory]:
    sale = store.get_sale(sale_id)
    return list(SalePriceHistory.objects.filter(sale=sale).select_related("changed_by").order_by("change_date", "id"))


def top_customers(limit: int = 10) -> List[Dict[str, Any]]:
    """Customers ranked by total spend."""

    rows = (
        Customer.objects.annotate(
            sale_count=Count("sales"),
            spent=Coalesce(Sum("sales__total_amount"), _ZERO),
        )
        .filter(sale_count__gt=0)
        .order_by("-spent", "last_name")[:limit]
    )
    return [
        {"customer_id": c.pk, "customer_name": str(c), "sale_count": c.sale_count, "spent": c.spent}
        for c in rows
    ]
