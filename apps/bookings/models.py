"""Booking persistence model.

Rows are written only through the booking store adapter in
``apps.bookings.infrastructure.django_store``; the lifecycle rules live in
the domain package.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

# Largest values the hours and total_price columns hold
MAX_HOURS = 32767
MAX_TOTAL_PRICE = Decimal("9999999999.99")


class Booking(models.Model):
    """One renter's reservation of one piece of equipment."""

    class Status(models.TextChoices):
        REQUESTED = "requested", _("Requested")
        ACCEPTED = "accepted", _("Accepted")
        REJECTED = "rejected", _("Rejected")

    class RentalMode(models.TextChoices):
        HOURLY = "hourly", _("Hourly")
        DAILY = "daily", _("Daily")

    class PaymentMethod(models.TextChoices):
        CASH_ON_DELIVERY = "cod", _("Cash on delivery")
        ONLINE = "online", _("Online")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    equipment = models.ForeignKey(
        "equipment.Equipment",
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    renter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="owner_bookings",
        help_text=_("Equipment owner at the time the booking was requested."),
    )
    start_at = models.DateTimeField()
    end_at = models.DateTimeField()
    rental_mode = models.CharField(max_length=10, choices=RentalMode.choices)
    hours = models.PositiveSmallIntegerField(null=True, blank=True)
    total_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3)
    payment_method = models.CharField(max_length=10, choices=PaymentMethod.choices)
    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.REQUESTED,
    )
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_at__gt=models.F("start_at")),
                name="booking_valid_interval",
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(rental_mode="daily", hours__isnull=True)
                    | models.Q(rental_mode="hourly", hours__gt=0)
                ),
                name="booking_hours_match_mode",
            ),
        ]
        indexes = [
            models.Index(fields=["equipment", "status"], name="booking_equipment_status_idx"),
            models.Index(fields=["equipment", "start_at", "end_at"], name="booking_equipment_window_idx"),
            models.Index(fields=["renter", "-created_at"], name="booking_renter_created_idx"),
            models.Index(fields=["owner", "-created_at"], name="booking_owner_created_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking {self.id} for {self.equipment_id} ({self.status})"
