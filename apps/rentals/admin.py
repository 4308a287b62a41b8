"""Admin registrations for rentals."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Penalty, Rental


class PenaltyInline(admin.TabularInline):
    model = Penalty
    extra = 0
    readonly_fields = ("created_at",)


@admin.register(Rental)
class RentalAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "client",
        "car",
        "start_date",
        "expected_end_date",
        "actual_end_date",
        "status",
        "total_cost",
        "penalty_amount",
    )
    list_filter = ("status", "start_date")
    search_fields = ("client__full_name", "client__phone", "car__brand", "car__model")
    readonly_fields = ("created_at", "updated_at")
    raw_id_fields = ("client", "car")
    inlines = [PenaltyInline]


@admin.register(Penalty)
class PenaltyAdmin(admin.ModelAdmin):
    list_display = ("rental", "amount", "reason", "date")
    search_fields = ("reason",)
    raw_id_fields = ("rental",)
