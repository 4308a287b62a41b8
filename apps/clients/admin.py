from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Client


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ("full_name", "phone", "email", "registration_date", "user")
    search_fields = ("full_name", "phone", "email", "address")
    readonly_fields = ("created_at", "updated_at")
    raw_id_fields = ("user",)
