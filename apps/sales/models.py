"""Sale aggregate models: sales, their itinerary legs and the price audit."""

from __future__ import annotations

from decimal import Decimal

from django.db import models
from django.utils import timezone

from .exceptions import ConstraintViolationError


class Sale(models.Model):
    """A purchased trip."""

    customer = models.ForeignKey(
        "catalog.Customer",
        on_delete=models.PROTECT,
        related_name="sales",
    )
    seller = models.ForeignKey(
        "catalog.Seller",
        on_delete=models.PROTECT,
        related_name="sales",
    )
    destination = models.ForeignKey(
        "catalog.Destination",
        on_delete=models.PROTECT,
        related_name="sales",
    )
    sale_date = models.DateField(default=timezone.localdate)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    # Bumped on every amount change; guards against lost updates.
    version = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ["-sale_date", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=0),
                name="sale_total_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["seller", "sale_date"], name="sale_seller_date_idx"),
            models.Index(fields=["customer"], name="sale_customer_idx"),
        ]

    def __str__(self) -> str:
        return f"Sale #{self.pk} ({self.total_amount})"


class SaleLeg(models.Model):
    """Common columns of the junction tables linking inventory to a sale."""

    order_in_trip = models.PositiveIntegerField()

    class Meta:
        abstract = True
        ordering = ["sale", "order_in_trip"]


class SaleHotel(SaleLeg):
    sale = models.ForeignKey(Sale, on_delete=models.CASCADE, related_name="hotel_legs")
    hotel = models.ForeignKey("catalog.Hotel", on_delete=models.PROTECT, related_name="sale_legs")
    check_in_date = models.DateField(null=True, blank=True)
    check_out_date = models.DateField(null=True, blank=True)

    class Meta(SaleLeg.Meta):
        constraints = [
            models.UniqueConstraint(fields=["sale", "order_in_trip"], name="sale_hotel_unique_order"),
            models.UniqueConstraint(fields=["sale", "hotel"], name="sale_hotel_unique_hotel"),
            models.CheckConstraint(condition=models.Q(order_in_trip__gt=0), name="sale_hotel_order_positive"),
        ]

    def __str__(self) -> str:
        return f"Sale #{self.sale_id} hotel #{self.order_in_trip}"


class SaleFlight(SaleLeg):
    sale = models.ForeignKey(Sale, on_delete=models.CASCADE, related_name="flight_legs")
    flight = models.ForeignKey("catalog.Flight", on_delete=models.PROTECT, related_name="sale_legs")

    class Meta(SaleLeg.Meta):
        constraints = [
            models.UniqueConstraint(fields=["sale", "order_in_trip"], name="sale_flight_unique_order"),
            models.UniqueConstraint(fields=["sale", "flight"], name="sale_flight_unique_flight"),
            models.CheckConstraint(condition=models.Q(order_in_trip__gt=0), name="sale_flight_order_positive"),
        ]

    def __str__(self) -> str:
        return f"Sale #{self.sale_id} flight #{self.order_in_trip}"


class SaleTransport(SaleLeg):
    sale = models.ForeignKey(Sale, on_delete=models.CASCADE, related_name="transport_legs")
    transport = models.ForeignKey("catalog.Transport", on_delete=models.PROTECT, related_name="sale_legs")
    assigned_date = models.DateField(default=timezone.localdate)

    class Meta(SaleLeg.Meta):
        constraints = [
            models.UniqueConstraint(fields=["sale", "order_in_trip"], name="sale_transport_unique_order"),
            models.UniqueConstraint(fields=["sale", "transport"], name="sale_transport_unique_transport"),
            models.CheckConstraint(condition=models.Q(order_in_trip__gt=0), name="sale_transport_order_positive"),
        ]

    def __str__(self) -> str:
        return f"Sale #{self.sale_id} transport #{self.order_in_trip}"


class SalePriceHistory(models.Model):
    """Append-only record of one change to a sale's total amount."""

    sale = models.ForeignKey(Sale, on_delete=models.PROTECT, related_name="price_history")
    old_amount = models.DecimalField(max_digits=12, decimal_places=2)
    new_amount = models.DecimalField(max_digits=12, decimal_places=2)
    change_date = models.DateTimeField(auto_now_add=True)
    changed_by = models.ForeignKey(
        "catalog.Seller",
        on_delete=models.PROTECT,
        related_name="price_changes",
    )

    class Meta:
        ordering = ["change_date", "id"]
        verbose_name_plural = "sale price history"

    def __str__(self) -> str:
        return f"Sale #{self.sale_id}: {self.old_amount} -> {self.new_amount}"

    def save(self, *args, **kwargs):  # type: ignore
        if not self._state.adding:
            raise ConstraintViolationError(
                "Price history records cannot be modified",
                rule="audit_append_only",
                details={"history_id": self.pk},
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):  # type: ignore
        raise ConstraintViolationError(
            "Price history records cannot be deleted",
            rule="audit_append_only",
            details={"history_id": self.pk},
        )
