"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "equipment",
        "renter",
        "owner",
        "status",
        "rental_mode",
        "start_at",
        "end_at",
        "total_price",
        "created_at",
    )
    list_filter = ("status", "rental_mode", "payment_method")
    search_fields = ("id", "equipment__name", "renter__username", "owner__username")
    # Status changes go through the booking service so lifecycle rules apply
    readonly_fields = (
        "id",
        "equipment",
        "renter",
        "owner",
        "start_at",
        "end_at",
        "rental_mode",
        "hours",
        "total_price",
        "currency",
        "payment_method",
        "status",
        "created_at",
        "updated_at",
    )

    def has_add_permission(self, request):  # type: ignore
        return False
