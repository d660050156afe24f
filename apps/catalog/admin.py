"""Admin registration for catalog data."""

from __future__ import annotations

from django.contrib import admin

from .models import Customer, Destination, Flight, Hotel, Seller, Transport


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("id", "first_name", "last_name", "email", "phone", "created_at")
    search_fields = ("first_name", "last_name", "email")


@admin.register(Seller)
class SellerAdmin(admin.ModelAdmin):
    list_display = ("id", "first_name", "last_name", "email", "hire_date", "is_active")
    list_filter = ("is_active",)
    search_fields = ("first_name", "last_name", "email")


@admin.register(Destination)
class DestinationAdmin(admin.ModelAdmin):
    list_display = ("name", "country", "city", "start_date", "end_date")
    list_filter = ("country",)
    search_fields = ("name", "city")


@admin.register(Flight)
class FlightAdmin(admin.ModelAdmin):
    list_display = ("airline", "flight_number", "departure_airport", "arrival_airport", "departure_time", "price")
    search_fields = ("airline", "flight_number")


@admin.register(Hotel)
class HotelAdmin(admin.ModelAdmin):
    list_display = ("name", "city", "country", "stars", "price_per_night")
    list_filter = ("stars", "country")


@admin.register(Transport)
class TransportAdmin(admin.ModelAdmin):
    list_display = ("type", "provider", "departure_date", "arrival_date", "price")
    list_filter = ("type",)
