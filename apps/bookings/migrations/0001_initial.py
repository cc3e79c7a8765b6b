import uuid
from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("equipment", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("start_at", models.DateTimeField()),
                ("end_at", models.DateTimeField()),
                (
                    "rental_mode",
                    models.CharField(choices=[("hourly", "Hourly"), ("daily", "Daily")], max_length=10),
                ),
                ("hours", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("total_price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("currency", models.CharField(max_length=3)),
                (
                    "payment_method",
                    models.CharField(
                        choices=[("cod", "Cash on delivery"), ("online", "Online")],
                        max_length=10,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("requested", "Requested"), ("accepted", "Accepted"), ("rejected", "Rejected")],
                        default="requested",
                        max_length=16,
                    ),
                ),
                ("created_at", models.DateTimeField()),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "equipment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bookings",
                        to="equipment.equipment",
                    ),
                ),
                (
                    "owner",
                    models.ForeignKey(
                        help_text="Equipment owner at the time the booking was requested.",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="owner_bookings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "renter",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bookings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Booking",
                "verbose_name_plural": "Bookings",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["equipment", "status"], name="booking_equipment_status_idx"),
                    models.Index(fields=["equipment", "start_at", "end_at"], name="booking_equipment_window_idx"),
                    models.Index(fields=["renter", "-created_at"], name="booking_renter_created_idx"),
                    models.Index(fields=["owner", "-created_at"], name="booking_owner_created_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("end_at__gt", models.F("start_at"))),
                        name="booking_valid_interval",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("hours__isnull", True), ("rental_mode", "daily")),
                            models.Q(("hours__gt", 0), ("rental_mode", "hourly")),
                            _connector="OR",
                        ),
                        name="booking_hours_match_mode",
                    ),
                ],
            },
        ),
    ]
