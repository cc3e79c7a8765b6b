"""Serializers for the booking API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.bookings.domain.entities import PaymentMethod, RentalMode
from apps.bookings.domain.pricing import HOURLY_CHOICES
from apps.bookings.models import MAX_HOURS


class BookingRequestSerializer(serializers.Serializer):
    """A renter's request: equipment, start and rental mode."""

    equipment = serializers.UUIDField()
    start = serializers.DateTimeField()
    mode = serializers.ChoiceField(choices=[m.value for m in RentalMode])
    hours = serializers.IntegerField(min_value=1, max_value=MAX_HOURS, required=False, allow_null=True)
    payment_method = serializers.ChoiceField(
        choices=[p.value for p in PaymentMethod],
        default=PaymentMethod.CASH_ON_DELIVERY.value,
    )

    def validate(self, attrs):  # type: ignore
        mode = RentalMode(attrs["mode"])
        hours = attrs.get("hours")
        if mode is RentalMode.HOURLY and hours is None:
            raise serializers.ValidationError(
                {"hours": f"Choose how many hours to rent for, e.g. one of {list(HOURLY_CHOICES)}."}
            )
        if mode is RentalMode.DAILY:
            attrs["hours"] = None
        attrs["mode"] = mode
        attrs["payment_method"] = PaymentMethod(attrs["payment_method"])
        return attrs


class BookingSerializer(serializers.Serializer):
    """Read-only view of a domain booking."""

    id = serializers.UUIDField(read_only=True)
    equipment_id = serializers.UUIDField(read_only=True)
    renter_id = serializers.ReadOnlyField()
    owner_id = serializers.ReadOnlyField()
    start = serializers.DateTimeField(source="interval.start", read_only=True)
    end = serializers.DateTimeField(source="interval.end", read_only=True)
    mode = serializers.CharField(source="mode.value", read_only=True)
    hours = serializers.IntegerField(read_only=True, allow_null=True)
    total_price = serializers.DecimalField(
        source="total_price.amount",
        max_digits=12,
        decimal_places=2,
        read_only=True,
    )
    currency = serializers.CharField(source="total_price.currency", read_only=True)
    payment_method = serializers.CharField(source="payment_method.value", read_only=True)
    status = serializers.CharField(source="status.value", read_only=True)
    created_at = serializers.DateTimeField(read_only=True)
