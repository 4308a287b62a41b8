"""User management API views (administrators only)."""

from __future__ import annotations

import structlog
from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import exceptions, mixins, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.permissions import IsAuthenticated  # type: ignore
from rest_framework.response import Response  # type: ignore

from .permissions import IsAdmin
from .serializers import (
    UserCreateSerializer,
    UserRoleSerializer,
    UserSerializer,
    UserStatusSerializer,
)

User = get_user_model()
logger = structlog.get_logger(__name__)


class UserViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Account administration.

    - list/detail/create/delete
    - `role/<role>/` lists accounts with one role
    - `<id>/role/` and `<id>/status/` change role or activation;
      administrators cannot change, deactivate or delete themselves
    """

    queryset = User.objects.all().order_by("-created_at")
    permission_classes = [IsAuthenticated, IsAdmin]
    filterset_fields = ["role", "is_active"]

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return UserCreateSerializer
        if self.action == "change_role":
            return UserRoleSerializer
        if self.action == "change_status":
            return UserStatusSerializer
        return UserSerializer

    def perform_create(self, serializer):  # type: ignore
        user = serializer.save()
        logger.info("users.created", user_id=user.pk, role=user.role, by=self.request.user.pk)

    def perform_destroy(self, instance):  # type: ignore
        if instance.pk == self.request.user.pk:
            raise exceptions.PermissionDenied("Cannot delete your own account.")
        logger.info("users.deleted", user_id=instance.pk, by=self.request.user.pk)
        instance.delete()

    @action(detail=False, methods=["get"], url_path=r"role/(?P<role>[^/.]+)", pagination_class=None)
    def by_role(self, request, role: str | None = None):
        if role not in User.Role.values:
            raise exceptions.ValidationError({"role": f"Invalid role. Must be one of: {', '.join(User.Role.values)}"})
        users = self.get_queryset().filter(role=role)
        return Response(UserSerializer(users, many=True).data)

    @action(detail=True, methods=["put"], url_path="role")
    def change_role(self, request, pk=None):
        user = self.get_object()
        if user.pk == request.user.pk:
            raise exceptions.PermissionDenied("Cannot change your own role.")
        serializer = UserRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user.role = serializer.validated_data["role"]
        user.save(update_fields=["role", "updated_at"])
        logger.info("users.role_changed", user_id=user.pk, role=user.role, by=request.user.pk)
        return Response(UserSerializer(user).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["put"], url_path="status")
    def change_status(self, request, pk=None):
        user = self.get_object()
        serializer = UserStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        is_active = serializer.validated_data["is_active"]
        if user.pk == request.user.pk and not is_active:
            raise exceptions.PermissionDenied("Cannot deactivate your own account.")
        user.is_active = is_active
        user.save(update_fields=["is_active", "updated_at"])
        logger.info("users.status_changed", user_id=user.pk, is_active=is_active, by=request.user.pk)
        return Response(UserSerializer(user).data, status=status.HTTP_200_OK)
