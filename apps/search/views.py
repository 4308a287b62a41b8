"""Search endpoints.

Cars and rentals take their criteria as a JSON body and reuse the
listing filter sets; clients are searched by a free text ``q``.
"""

from __future__ import annotations

import structlog
from django_filters.utils import translate_validation  # type: ignore
from rest_framework import exceptions, permissions  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.cars.filters import CarFilterSet
from apps.cars.models import Car
from apps.cars.serializers import CarSerializer
from apps.clients.serializers import ClientSerializer
from apps.clients.services import search_clients
from apps.rentals.filters import RentalFilterSet
from apps.rentals.models import Rental
from apps.rentals.serializers import RentalSerializer
from apps.users.permissions import IsStaffMember

logger = structlog.get_logger(__name__)


def _filtered(filterset_class, data, queryset):  # type: ignore
    if not isinstance(data, dict):
        raise exceptions.ValidationError("Search criteria must be a JSON object.")
    filterset = filterset_class(data=data, queryset=queryset)
    if not filterset.is_valid():
        raise translate_validation(filterset.errors)
    return filterset.qs


class CarSearchView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request, format=None):  # type: ignore
        cars = _filtered(CarFilterSet, request.data, Car.objects.order_by("id"))
        logger.info("search.cars", criteria=sorted(request.data), found=len(cars))
        return Response(CarSerializer(cars, many=True, context={"request": request}).data)


class ClientSearchView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsStaffMember]

    def get(self, request, format=None):  # type: ignore
        text = (request.query_params.get("q") or "").strip()
        if not text:
            raise exceptions.ValidationError({"q": "Search query is required."})
        clients = search_clients(text).order_by("full_name", "id")
        return Response(ClientSerializer(clients, many=True).data)


class RentalSearchView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsStaffMember]

    def post(self, request, format=None):  # type: ignore
        queryset = Rental.objects.select_related("car", "client").prefetch_related("penalties").order_by("-start_date", "-id")
        rentals = _filtered(RentalFilterSet, request.data, queryset)
        return Response(RentalSerializer(rentals, many=True, context={"request": request}).data)
