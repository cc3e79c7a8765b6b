"""Equipment listed for rent on the marketplace."""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Equipment(models.Model):
    """A machine one owner offers for hourly or daily rent."""

    class EquipmentType(models.TextChoices):
        TRACTOR = "tractor", _("Tractor")
        ROTAVATOR = "rotavator", _("Rotavator")
        CULTIVATOR = "cultivator", _("Cultivator")
        THRESHER = "thresher", _("Thresher")
        SPRAYER = "sprayer", _("Sprayer")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="equipment",
    )
    name = models.CharField(max_length=255)
    equipment_type = models.CharField(max_length=20, choices=EquipmentType.choices)
    description = models.TextField(blank=True)
    hourly_rate = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    daily_rate = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Equipment")
        verbose_name_plural = _("Equipment")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(hourly_rate__gte=0) & models.Q(daily_rate__gte=0),
                name="equipment_non_negative_rates",
            ),
        ]
        indexes = [
            models.Index(fields=["owner", "is_active"], name="equipment_owner_active_idx"),
        ]

    def __str__(self) -> str:
        return self.name

    def activate(self) -> None:
        if not self.is_active:
            self.is_active = True
            self.save(update_fields=["is_active", "updated_at"])

    def deactivate(self) -> None:
        if self.is_active:
            self.is_active = False
            self.save(update_fields=["is_active", "updated_at"])
