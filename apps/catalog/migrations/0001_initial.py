from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("first_name", models.CharField(max_length=50)),
                ("last_name", models.CharField(max_length=50)),
                ("email", models.EmailField(max_length=100, unique=True)),
                ("phone", models.CharField(blank=True, max_length=20)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["last_name", "first_name"],
            },
        ),
        migrations.CreateModel(
            name="Seller",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("first_name", models.CharField(max_length=50)),
                ("last_name", models.CharField(max_length=50)),
                ("email", models.EmailField(max_length=100, unique=True)),
                ("hire_date", models.DateField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
            ],
            options={
                "ordering": ["last_name", "first_name"],
            },
        ),
        migrations.CreateModel(
            name="Destination",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                ("country", models.CharField(max_length=50)),
                ("city", models.CharField(blank=True, max_length=50)),
                ("description", models.TextField(blank=True)),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
            ],
            options={
                "ordering": ["start_date", "name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("start_date__lte", models.F("end_date"))),
                        name="destination_valid_dates",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Flight",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("airline", models.CharField(max_length=50)),
                ("flight_number", models.CharField(max_length=10)),
                ("departure_airport", models.CharField(max_length=50)),
                ("arrival_airport", models.CharField(max_length=50)),
                ("departure_time", models.DateTimeField()),
                ("arrival_time", models.DateTimeField()),
                ("price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)),
            ],
            options={
                "ordering": ["departure_time"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("arrival_time__gte", models.F("departure_time"))),
                        name="flight_valid_times",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("price__gte", 0)),
                        name="flight_price_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Hotel",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                ("city", models.CharField(max_length=50)),
                ("country", models.CharField(max_length=50)),
                (
                    "stars",
                    models.PositiveSmallIntegerField(
                        default=3,
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(5),
                        ],
                    ),
                ),
                ("price_per_night", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)),
            ],
            options={
                "ordering": ["name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("stars__gte", 1), ("stars__lte", 5)),
                        name="hotel_stars_range",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("price_per_night__gte", 0)),
                        name="hotel_price_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Transport",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("Bus", "Bus"),
                            ("Train", "Train"),
                            ("Ship", "Ship"),
                            ("Car", "Car"),
                            ("Other", "Other"),
                        ],
                        max_length=10,
                    ),
                ),
                ("provider", models.CharField(blank=True, max_length=100)),
                ("departure_date", models.DateField()),
                ("arrival_date", models.DateField()),
                ("price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)),
            ],
            options={
                "ordering": ["departure_date"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("arrival_date__gte", models.F("departure_date"))),
                        name="transport_valid_dates",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("type__in", ["Bus", "Train", "Ship", "Car", "Other"])),
                        name="transport_type_valid",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("price__gte", 0)),
                        name="transport_price_non_negative",
                    ),
                ],
            },
        ),
    ]
