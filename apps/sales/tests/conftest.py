"""
Pytest Configuration and Fixtures

Shared fixtures for the sales service tests.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timezone
from decimal import Decimal
from threading import Barrier

import pytest
from django.db import connection

from apps.catalog.models import Customer, Destination, Flight, Hotel, Seller, Transport
from apps.sales.exceptions import SalesServiceError
from apps.sales.models import Sale


# =============================================================================
# Catalog Fixtures
# =============================================================================

@pytest.fixture
def seller():
    return Seller.objects.create(first_name="Ana", last_name="Silva", email="ana@agency.test")


@pytest.fixture
def other_seller():
    return Seller.objects.create(first_name="Tomas", last_name="Novak", email="tomas@agency.test")


@pytest.fixture
def customer():
    return Customer.objects.create(first_name="Lea", last_name="Moreau", email="lea@example.com")


@pytest.fixture
def destination():
    """Trip window 2025-06-01 .. 2025-06-10."""
    return Destination.objects.create(
        name="Dalmatian Coast",
        country="Croatia",
        city="Split",
        start_date=date(2025, 6, 1),
        end_date=date(2025, 6, 10),
    )


@pytest.fixture
def transport_inside():
    return Transport.objects.create(
        type=Transport.Type.SHIP,
        provider="Jadrolinija",
        departure_date=date(2025, 6, 2),
        arrival_date=date(2025, 6, 9),
        price=Decimal("45.00"),
    )


@pytest.fixture
def transport_overrun():
    """Arrives two days after the destination window closes."""
    return Transport.objects.create(
        type=Transport.Type.BUS,
        provider="FlixBus",
        departure_date=date(2025, 6, 2),
        arrival_date=date(2025, 6, 12),
    )


@pytest.fixture
def hotel():
    return Hotel.objects.create(name="Hotel Park", city="Split", country="Croatia", stars=4)


@pytest.fixture
def flight():
    return Flight.objects.create(
        airline="Croatia Airlines",
        flight_number="OU 490",
        departure_airport="FRA",
        arrival_airport="SPU",
        departure_time=datetime(2025, 6, 1, 9, 30, tzinfo=timezone.utc),
        arrival_time=datetime(2025, 6, 1, 11, 15, tzinfo=timezone.utc),
        price=Decimal("180.00"),
    )


# =============================================================================
# Sale Fixtures
# =============================================================================

@pytest.fixture
def sale(customer, seller, destination):
    return Sale.objects.create(
        customer=customer,
        seller=seller,
        destination=destination,
        sale_date=date(2025, 3, 14),
        total_amount=Decimal("1000.00"),
    )


# =============================================================================
# Concurrency
# =============================================================================

@pytest.fixture
def run_concurrently():
    """
    Run each callable in its own thread, released together.

    Returns one (result, error) pair per callable, in order. Each thread uses
    its own database connection, so the test needs
    ``@pytest.mark.django_db(transaction=True)``.
    """

    def run(*calls):
        barrier = Barrier(len(calls))

        def worker(call):
            try:
                barrier.wait(timeout=10)
                return call(), None
            except SalesServiceError as exc:
                return None, exc
            finally:
                connection.close()

        with ThreadPoolExecutor(max_workers=len(calls)) as executor:
            return list(executor.map(worker, calls))

    return run
