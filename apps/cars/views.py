"""Fleet API views."""

from __future__ import annotations

import structlog
from django.db.models import ProtectedError  # type: ignore
from rest_framework import exceptions, permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore

from apps.rentals.services import get_booked_periods, quote_rental
from apps.users.permissions import IsAdminOrManagerOrReadOnly
from shared.infrastructure.exceptions import ConflictError

from .filters import CarFilterSet
from .models import Car
from .serializers import (
    BookedPeriodSerializer,
    CarSerializer,
    CarStatusSerializer,
    QuoteRequestSerializer,
)

logger = structlog.get_logger(__name__)


class CarViewSet(viewsets.ModelViewSet):
    """Fleet catalogue: anyone can browse, admins and managers edit."""

    queryset = Car.objects.all()
    serializer_class = CarSerializer
    permission_classes = [IsAdminOrManagerOrReadOnly]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = CarFilterSet
    ordering_fields = ["price_per_day", "year", "brand", "created_at"]

    def get_permissions(self):  # type: ignore
        if self.action in {"booked_dates", "quote"}:
            return [permissions.AllowAny()]
        return super().get_permissions()

    def get_serializer_class(self):  # type: ignore
        if self.action == "change_status":
            return CarStatusSerializer
        if self.action == "quote":
            return QuoteRequestSerializer
        return CarSerializer

    def perform_create(self, serializer):  # type: ignore
        car = serializer.save()
        logger.info("car.created", car_id=car.pk, brand=car.brand, model=car.model)

    def perform_update(self, serializer):  # type: ignore
        car = serializer.save()
        logger.info("car.updated", car_id=car.pk)

    def perform_destroy(self, instance):  # type: ignore
        try:
            instance.delete()
        except ProtectedError:
            raise ConflictError("Car has rentals and cannot be deleted.") from None
        logger.info("car.deleted", car_id=instance.pk)

    def _list(self, queryset):  # type: ignore
        return Response(CarSerializer(queryset, many=True).data)

    @action(detail=False, methods=["get"])
    def available(self, request):
        return self._list(self.filter_queryset(self.get_queryset()).filter(status=Car.Status.AVAILABLE))

    @action(detail=False, methods=["get"], url_path=r"type/(?P<car_type>[^/.]+)")
    def by_type(self, request, car_type: str | None = None):
        if car_type not in Car.Type.values:
            raise exceptions.ValidationError(f"Invalid car type. Must be one of: {', '.join(Car.Type.values)}")
        return self._list(self.get_queryset().filter(type=car_type))

    @action(detail=True, methods=["patch"], url_path="status")
    def change_status(self, request, pk=None):
        car = self.get_object()
        serializer = CarStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        car.status = serializer.validated_data["status"]
        car.save(update_fields=["status", "updated_at"])
        logger.info("car.status_changed", car_id=car.pk, status=car.status)
        return Response(CarSerializer(car).data)

    @action(detail=True, methods=["get"], url_path="booked-dates")
    def booked_dates(self, request, pk=None):
        car = self.get_object()
        periods = get_booked_periods(car)
        return Response(BookedPeriodSerializer(periods, many=True).data)

    @action(detail=True, methods=["get"])
    def quote(self, request, pk=None):
        """Price of renting this car for ``start_date``..``end_date``."""
        car = self.get_object()
        serializer = QuoteRequestSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        start_date = serializer.validated_data["start_date"]
        end_date = serializer.validated_data["end_date"]
        if start_date >= end_date:
            raise exceptions.ValidationError({"end_date": "Start date must be before end date."})
        quote = quote_rental(car, start_date, end_date)
        return Response(
            {
                "car_id": car.pk,
                "start_date": start_date,
                "end_date": end_date,
                "days": quote["days"],
                "price": f"{quote['price']:.2f}",
                "deposit": f"{quote['deposit']:.2f}",
                "total": f"{quote['total']:.2f}",
                "available": quote["available"],
            }
        )
