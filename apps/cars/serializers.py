"""Serializers for the fleet API."""

from __future__ import annotations

import datetime
from typing import Any

from rest_framework import serializers  # type: ignore

from .images import get_all_car_images, parse_image_urls, serialize_image_urls
from .models import Car


class ImageUrlListField(serializers.Field):
    """Reads the stored JSON text as a list; accepts a list or a JSON/plain string."""

    def to_representation(self, value):  # type: ignore
        return parse_image_urls(value)

    def to_internal_value(self, data):  # type: ignore
        if data is not None and not isinstance(data, (str, list, tuple)):
            raise serializers.ValidationError("Expected a list of URLs.")
        return serialize_image_urls(parse_image_urls(data))


class FeaturesField(serializers.Field):
    """Features are kept as comma separated text; a list is joined on input."""

    def to_representation(self, value):  # type: ignore
        return value or ""

    def to_internal_value(self, data):  # type: ignore
        if isinstance(data, (list, tuple)):
            return ", ".join(str(item).strip() for item in data if str(item).strip())
        if data is None:
            return ""
        if not isinstance(data, str):
            raise serializers.ValidationError("Expected text or a list of strings.")
        return data


class CarSerializer(serializers.ModelSerializer):
    image_urls = ImageUrlListField(required=False)
    features = FeaturesField(required=False)
    images = serializers.SerializerMethodField()

    class Meta:
        model = Car
        fields = [
            "id",
            "brand",
            "model",
            "year",
            "type",
            "price_per_day",
            "deposit",
            "status",
            "description",
            "image_url",
            "image_urls",
            "images",
            "body_type",
            "drive_type",
            "transmission",
            "engine",
            "fuel_type",
            "seats",
            "mileage",
            "color",
            "features",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "images", "created_at", "updated_at"]
        extra_kwargs = {
            "description": {"required": False, "allow_blank": True},
            "image_url": {"required": False, "allow_blank": True},
        }

    def get_images(self, obj: Car) -> list[str]:
        return get_all_car_images(obj)

    def validate_year(self, value: int) -> int:  # type: ignore
        max_year = datetime.date.today().year + 1
        if value < 1900 or value > max_year:
            raise serializers.ValidationError(f"Year must be between 1900 and {max_year}.")
        return value

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        for field in ("brand", "model"):
            if field in attrs and not str(attrs[field]).strip():
                raise serializers.ValidationError({field: "This field may not be blank."})
        return attrs


class CarStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Car.Status.choices)


class BookedPeriodSerializer(serializers.Serializer):
    rental_id = serializers.IntegerField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    status = serializers.CharField()


class QuoteRequestSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
