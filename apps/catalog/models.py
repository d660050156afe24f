"""Reference data for the travel agency: people, destinations, inventory."""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from shared.domain.value_objects import DateRange


class Customer(models.Model):
    """A traveller who buys trips."""

    first_name = models.CharField(max_length=50)
    last_name = models.CharField(max_length=50)
    email = models.EmailField(max_length=100, unique=True)
    phone = models.CharField(max_length=20, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["last_name", "first_name"]

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Seller(models.Model):
    """An agency employee; sellers are the actors behind price changes."""

    first_name = models.CharField(max_length=50)
    last_name = models.CharField(max_length=50)
    email = models.EmailField(max_length=100, unique=True)
    hire_date = models.DateField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["last_name", "first_name"]

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Destination(models.Model):
    """A trip destination with the date window travel must fall into."""

    name = models.CharField(max_length=100)
    country = models.CharField(max_length=50)
    city = models.CharField(max_length=50, blank=True)
    description = models.TextField(blank=True)
    start_date = models.DateField()
    end_date = models.DateField()

    class Meta:
        ordering = ["start_date", "name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(start_date__lte=models.F("end_date")),
                name="destination_valid_dates",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.country})"

    @property
    def window(self) -> DateRange:
        return DateRange(self.start_date, self.end_date)


class Flight(models.Model):
    airline = models.CharField(max_length=50)
    flight_number = models.CharField(max_length=10)
    departure_airport = models.CharField(max_length=50)
    arrival_airport = models.CharField(max_length=50)
    departure_time = models.DateTimeField()
    arrival_time = models.DateTimeField()
    price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        ordering = ["departure_time"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(arrival_time__gte=models.F("departure_time")),
                name="flight_valid_times",
            ),
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="flight_price_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.airline} {self.flight_number}"


class Hotel(models.Model):
    name = models.CharField(max_length=100)
    city = models.CharField(max_length=50)
    country = models.CharField(max_length=50)
    stars = models.PositiveSmallIntegerField(
        default=3,
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )
    price_per_night = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stars__gte=1) & models.Q(stars__lte=5),
                name="hotel_stars_range",
            ),
            models.CheckConstraint(
                condition=models.Q(price_per_night__gte=0),
                name="hotel_price_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.city})"


class Transport(models.Model):
    """A ground or sea transport leg (bus, train, ferry, rental car...)."""

    class Type(models.TextChoices):
        BUS = "Bus", "Bus"
        TRAIN = "Train", "Train"
        SHIP = "Ship", "Ship"
        CAR = "Car", "Car"
        OTHER = "Other", "Other"

    type = models.CharField(max_length=10, choices=Type.choices)
    provider = models.CharField(max_length=100, blank=True)
    departure_date = models.DateField()
    arrival_date = models.DateField()
    price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        ordering = ["departure_date"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(arrival_date__gte=models.F("departure_date")),
                name="transport_valid_dates",
            ),
            models.CheckConstraint(
                condition=models.Q(type__in=["Bus", "Train", "Ship", "Car", "Other"]),
                name="transport_type_valid",
            ),
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="transport_price_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.type} {self.departure_date} - {self.arrival_date}"

    @property
    def travel_dates(self) -> DateRange:
        return DateRange(self.departure_date, self.arrival_date)
