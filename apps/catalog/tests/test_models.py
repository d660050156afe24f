"""Database constraint tests for catalog tables."""

from datetime import date

import pytest
from django.db import IntegrityError, transaction

from apps.catalog.models import Destination, Hotel, Transport
from shared.domain.value_objects import DateRange


@pytest.mark.django_db
class TestCatalogConstraints:

    def test_destination_window(self):
        destination = Destination.objects.create(
            name="Porto", country="Portugal", start_date=date(2025, 9, 1), end_date=date(2025, 9, 7)
        )

        assert destination.window == DateRange(date(2025, 9, 1), date(2025, 9, 7))

    def test_destination_dates_must_be_ordered(self):
        with pytest.raises(IntegrityError), transaction.atomic():
            Destination.objects.create(
                name="Porto", country="Portugal", start_date=date(2025, 9, 7), end_date=date(2025, 9, 1)
            )

    def test_transport_type_must_be_known(self):
        with pytest.raises(IntegrityError), transaction.atomic():
            Transport.objects.create(
                type="Plane", departure_date=date(2025, 9, 1), arrival_date=date(2025, 9, 2)
            )

    def test_transport_arrival_not_before_departure(self):
        with pytest.raises(IntegrityError), transaction.atomic():
            Transport.objects.create(
                type=Transport.Type.TRAIN, departure_date=date(2025, 9, 3), arrival_date=date(2025, 9, 2)
            )

    def test_hotel_stars_range(self):
        with pytest.raises(IntegrityError), transaction.atomic():
            Hotel.objects.create(name="Nowhere Inn", city="X", country="Y", stars=6)

    def test_travel_dates(self):
        transport = Transport.objects.create(
            type=Transport.Type.BUS, departure_date=date(2025, 9, 1), arrival_date=date(2025, 9, 2)
        )

        assert len(transport.travel_dates) == 2
