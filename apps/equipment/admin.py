"""Admin registration for equipment."""

from __future__ import annotations

from django.contrib import admin

from .models import Equipment


@admin.register(Equipment)
class EquipmentAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "equipment_type",
        "owner",
        "hourly_rate",
        "daily_rate",
        "city",
        "is_active",
        "created_at",
    )
    list_filter = ("equipment_type", "is_active", "state")
    search_fields = ("name", "city", "owner__username")
    actions = ("deactivate_selected",)

    @admin.action(description="Deactivate selected equipment")
    def deactivate_selected(self, request, queryset):  # type: ignore
        for equipment in queryset:
            equipment.deactivate()
