"""Image upload endpoints for the fleet catalogue (admins and managers)."""

from __future__ import annotations

from rest_framework import exceptions, status  # type: ignore
from rest_framework.parsers import FormParser, MultiPartParser  # type: ignore
from rest_framework.permissions import IsAuthenticated  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import IsAdminOrManager

from . import services
from .serializers import ImagesUploadSerializer, ImageUploadSerializer


class UploadView(APIView):
    permission_classes = [IsAuthenticated, IsAdminOrManager]
    parser_classes = [MultiPartParser, FormParser]


class ImageUploadView(UploadView):
    def post(self, request, format=None):  # type: ignore
        serializer = ImageUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        info = services.store_image(serializer.validated_data["image"], request)
        return Response(info, status=status.HTTP_201_CREATED)


class ImagesUploadView(UploadView):
    def post(self, request, format=None):  # type: ignore
        serializer = ImagesUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        stored = [services.store_image(upload, request) for upload in serializer.validated_data["images"]]
        return Response(stored, status=status.HTTP_201_CREATED)


class ImageDeleteView(UploadView):
    def delete(self, request, filename, format=None):  # type: ignore
        if not services.delete_image(filename):
            raise exceptions.NotFound("Image not found.")
        return Response({"message": "Image deleted successfully"})
