"""Serializers for image uploads."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from rest_framework import serializers  # type: ignore

from .services import ImageValidationError, validate_image


def _checked(upload):  # type: ignore
    try:
        validate_image(upload)
    except ImageValidationError as exc:
        raise serializers.ValidationError(str(exc)) from exc
    return upload


class ImageUploadSerializer(serializers.Serializer):
    image = serializers.FileField(help_text="JPEG, PNG, GIF, WebP, BMP or SVG, 5 MB max")

    def validate_image(self, value):  # type: ignore
        return _checked(value)


class ImagesUploadSerializer(serializers.Serializer):
    images = serializers.ListField(child=serializers.FileField(), allow_empty=False)

    def validate_images(self, value):  # type: ignore
        limit = settings.UPLOAD_MAX_FILES
        if len(value) > limit:
            raise serializers.ValidationError(f"Too many files. Max {limit} per request.")
        return [_checked(upload) for upload in value]
