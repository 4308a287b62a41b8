"""Admin registrations for the fleet."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Car


@admin.register(Car)
class CarAdmin(admin.ModelAdmin):
    list_display = ("brand", "model", "year", "type", "price_per_day", "deposit", "status")
    list_filter = ("type", "status", "fuel_type", "transmission")
    search_fields = ("brand", "model")
    readonly_fields = ("created_at", "updated_at")
