"""Client registry API views."""

from __future__ import annotations

import structlog
from django.db.models import ProtectedError  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import filters, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.permissions import IsAuthenticated  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import IsStaffMember
from shared.infrastructure.exceptions import ConflictError

from .models import Client
from .serializers import ClientRegisterSerializer, ClientSerializer
from .services import normalize_phone, register_or_get_client

logger = structlog.get_logger(__name__)


class ClientViewSet(viewsets.ModelViewSet):
    """Clients are managed by office staff."""

    queryset = Client.objects.all()
    serializer_class = ClientSerializer
    permission_classes = [IsAuthenticated, IsStaffMember]
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ["full_name", "phone", "address", "email"]
    ordering_fields = ["full_name", "registration_date", "created_at"]

    def perform_create(self, serializer):  # type: ignore
        client = serializer.save()
        logger.info("client.created", client_id=client.pk, by=self.request.user.pk)

    def perform_update(self, serializer):  # type: ignore
        client = serializer.save()
        logger.info("client.updated", client_id=client.pk, by=self.request.user.pk)

    def perform_destroy(self, instance):  # type: ignore
        try:
            instance.delete()
        except ProtectedError:
            raise ConflictError("Client has rentals and cannot be deleted.") from None
        logger.info("client.deleted", client_id=instance.pk, by=self.request.user.pk)

    @action(detail=False, methods=["get"], url_path=r"phone/(?P<phone>[^/]+)")
    def by_phone(self, request, phone: str | None = None):
        client = get_object_or_404(Client.objects.order_by("id"), phone=normalize_phone(phone))
        return Response(ClientSerializer(client).data)

    @action(detail=False, methods=["post"], url_path="register")
    def register(self, request):
        """Return the client with the given phone, creating it when missing."""
        serializer = ClientRegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        client, created = register_or_get_client(serializer.validated_data)
        return Response(
            ClientSerializer(client).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
