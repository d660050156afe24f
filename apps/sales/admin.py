"""Admin registration for sales."""

from __future__ import annotations

from django.contrib import admin

from .models import Sale, SaleFlight, SaleHotel, SalePriceHistory, SaleTransport


class ReadOnlyLegInline(admin.TabularInline):
    extra = 0
    can_delete = False

    def has_add_permission(self, request, obj=None) -> bool:
        return False

    def has_change_permission(self, request, obj=None) -> bool:
        return False


class SaleHotelInline(ReadOnlyLegInline):
    model = SaleHotel


class SaleFlightInline(ReadOnlyLegInline):
    model = SaleFlight


class SaleTransportInline(ReadOnlyLegInline):
    model = SaleTransport


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ("id", "customer", "seller", "destination", "sale_date", "total_amount", "version")
    list_filter = ("sale_date", "seller")
    search_fields = ("customer__last_name", "customer__email", "destination__name")
    # Amount changes go through the mutation service so they are audited.
    readonly_fields = ("total_amount", "version")
    inlines = (SaleHotelInline, SaleFlightInline, SaleTransportInline)


@admin.register(SalePriceHistory)
class SalePriceHistoryAdmin(admin.ModelAdmin):
    list_display = ("sale", "old_amount", "new_amount", "change_date", "changed_by")
    list_filter = ("change_date",)
    readonly_fields = ("sale", "old_amount", "new_amount", "change_date", "changed_by")

    def has_add_permission(self, request) -> bool:
        return False

    def has_change_permission(self, request, obj=None) -> bool:
        return False

    def has_delete_permission(self, request, obj=None) -> bool:
        return False
