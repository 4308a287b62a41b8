"""Serializers for user management endpoints."""

from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model  # type: ignore
from django.contrib.auth.password_validation import validate_password  # type: ignore
from rest_framework import serializers  # type: ignore

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Public representation of an account; never exposes the password."""

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "role",
            "full_name",
            "address",
            "phone",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "role", "is_active", "created_at", "updated_at"]


class UserCreateSerializer(serializers.ModelSerializer):
    """Admin creates an account; staff accounts default to ``employee``."""

    password = serializers.CharField(write_only=True, min_length=6)
    role = serializers.ChoiceField(choices=User.Role.choices, default=User.Role.EMPLOYEE)

    class Meta:
        model = User
        fields = ["id", "username", "email", "password", "role", "full_name", "address", "phone"]
        read_only_fields = ["id"]

    def validate_password(self, value: str) -> str:  # type: ignore
        validate_password(value)
        return value

    def create(self, validated_data: dict[str, Any]):  # type: ignore
        password = validated_data.pop("password")
        return User.objects.create_user(password=password, **validated_data)

    def to_representation(self, instance):  # type: ignore
        return UserSerializer(instance, context=self.context).data


class UserRoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=User.Role.choices)


class UserStatusSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()
