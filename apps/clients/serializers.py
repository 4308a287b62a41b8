"""Serializers for the client registry."""

from __future__ import annotations

from typing import Any

from rest_framework import serializers  # type: ignore

from .models import Client
from .services import normalize_phone, phone_is_taken


class ClientSerializer(serializers.ModelSerializer):
    class Meta:
        model = Client
        fields = [
            "id",
            "full_name",
            "address",
            "phone",
            "email",
            "registration_date",
            "user",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "user", "created_at", "updated_at"]
        extra_kwargs = {
            "registration_date": {"required": False},
            "email": {"required": False, "allow_blank": True},
        }

    def validate_full_name(self, value: str) -> str:  # type: ignore
        if not value.strip():
            raise serializers.ValidationError("This field may not be blank.")
        return value.strip()

    def validate_phone(self, value: str) -> str:  # type: ignore
        value = normalize_phone(value)
        exclude_id = self.instance.pk if self.instance is not None else None
        if phone_is_taken(value, exclude_id=exclude_id):
            raise serializers.ValidationError("Client with this phone number already exists.")
        return value


class ClientRegisterSerializer(serializers.ModelSerializer):
    """Input for register-or-get; the phone may already exist."""

    class Meta:
        model = Client
        fields = ["full_name", "address", "phone", "email"]
        extra_kwargs = {"email": {"required": False, "allow_blank": True}}

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        attrs["phone"] = normalize_phone(attrs.get("phone"))
        if not attrs["phone"]:
            raise serializers.ValidationError({"phone": "Phone is required."})
        return attrs
