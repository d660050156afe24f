from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Sale",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("sale_date", models.DateField(default=django.utils.timezone.localdate)),
                ("total_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("version", models.PositiveIntegerField(default=1)),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sales",
                        to="catalog.customer",
                    ),
                ),
                (
                    "destination",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sales",
                        to="catalog.destination",
                    ),
                ),
                (
                    "seller",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sales",
                        to="catalog.seller",
                    ),
                ),
            ],
            options={
                "ordering": ["-sale_date", "-id"],
                "indexes": [
                    models.Index(fields=["seller", "sale_date"], name="sale_seller_date_idx"),
                    models.Index(fields=["customer"], name="sale_customer_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("total_amount__gte", 0)),
                        name="sale_total_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="SaleHotel",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("order_in_trip", models.PositiveIntegerField()),
                ("check_in_date", models.DateField(blank=True, null=True)),
                ("check_out_date", models.DateField(blank=True, null=True)),
                (
                    "hotel",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sale_legs",
                        to="catalog.hotel",
                    ),
                ),
                (
                    "sale",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="hotel_legs",
                        to="sales.sale",
                    ),
                ),
            ],
            options={
                "ordering": ["sale", "order_in_trip"],
                "abstract": False,
                "constraints": [
                    models.UniqueConstraint(fields=("sale", "order_in_trip"), name="sale_hotel_unique_order"),
                    models.UniqueConstraint(fields=("sale", "hotel"), name="sale_hotel_unique_hotel"),
                    models.CheckConstraint(
                        condition=models.Q(("order_in_trip__gt", 0)),
                        name="sale_hotel_order_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="SaleFlight",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("order_in_trip", models.PositiveIntegerField()),
                (
                    "flight",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sale_legs",
                        to="catalog.flight",
                    ),
                ),
                (
                    "sale",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="flight_legs",
                        to="sales.sale",
                    ),
                ),
            ],
            options={
                "ordering": ["sale", "order_in_trip"],
                "abstract": False,
                "constraints": [
                    models.UniqueConstraint(fields=("sale", "order_in_trip"), name="sale_flight_unique_order"),
                    models.UniqueConstraint(fields=("sale", "flight"), name="sale_flight_unique_flight"),
                    models.CheckConstraint(
                        condition=models.Q(("order_in_trip__gt", 0)),
                        name="sale_flight_order_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="SaleTransport",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("order_in_trip", models.PositiveIntegerField()),
                ("assigned_date", models.DateField(default=django.utils.timezone.localdate)),
                (
                    "sale",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="transport_legs",
                        to="sales.sale",
                    ),
                ),
                (
                    "transport",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sale_legs",
                        to="catalog.transport",
                    ),
                ),
            ],
            options={
                "ordering": ["sale", "order_in_trip"],
                "abstract": False,
                "constraints": [
                    models.UniqueConstraint(fields=("sale", "order_in_trip"), name="sale_transport_unique_order"),
                    models.UniqueConstraint(fields=("sale", "transport"), name="sale_transport_unique_transport"),
                    models.CheckConstraint(
                        condition=models.Q(("order_in_trip__gt", 0)),
                        name="sale_transport_order_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="SalePriceHistory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("old_amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("new_amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("change_date", models.DateTimeField(auto_now_add=True)),
                (
                    "changed_by",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="price_changes",
                        to="catalog.seller",
                    ),
                ),
                (
                    "sale",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="price_history",
                        to="sales.sale",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "sale price history",
                "ordering": ["change_date", "id"],
            },
        ),
    ]
