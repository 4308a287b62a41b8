"""Rental and penalty API views."""

from __future__ import annotations

from django.db.models import Sum  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import exceptions, mixins, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.permissions import IsAuthenticated  # type: ignore
from rest_framework.response import Response  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore

from apps.users.permissions import IsStaffMember

from .filters import RentalFilterSet
from .models import Penalty, Rental
from .serializers import (
    BookingSerializer,
    PenaltySerializer,
    RentalCloseSerializer,
    RentalCreateSerializer,
    RentalPenaltySerializer,
    RentalSerializer,
    as_api_error,
)
from .services import (
    RentalError,
    add_penalty,
    cancel_rental,
    complete_rental,
    remove_penalty,
    rentals_for_user,
    user_owns_rental,
)


class RentalViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """Rentals are run by staff; customers see and book their own.

    - `my/` and `book/` serve any signed-in account
    - `<id>/cancel/` is open to customers for their own rentals
    """

    queryset = Rental.objects.select_related("car", "client").prefetch_related("penalties")
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = RentalFilterSet
    ordering_fields = ["start_date", "expected_end_date", "created_at", "total_cost"]

    def get_permissions(self):  # type: ignore
        if self.action in {"my", "book", "cancel"}:
            return [IsAuthenticated()]
        return [IsAuthenticated(), IsStaffMember()]

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return RentalCreateSerializer
        if self.action == "book":
            return BookingSerializer
        if self.action in {"complete", "cancel"}:
            return RentalCloseSerializer
        if self.action == "penalty":
            return RentalPenaltySerializer
        return RentalSerializer

    def _list(self, queryset):  # type: ignore
        return Response(RentalSerializer(queryset, many=True, context=self.get_serializer_context()).data)

    @action(detail=False, methods=["get"])
    def active(self, request):
        return self._list(self.get_queryset().filter(status=Rental.Status.ACTIVE).order_by("start_date"))

    @action(detail=False, methods=["get"], url_path=r"client/(?P<client_id>\d+)")
    def by_client(self, request, client_id=None):
        return self._list(self.get_queryset().filter(client_id=client_id))

    @action(detail=False, methods=["get"], url_path=r"car/(?P<car_id>\d+)")
    def by_car(self, request, car_id=None):
        return self._list(self.get_queryset().filter(car_id=car_id))

    @action(detail=False, methods=["get"])
    def my(self, request):
        return self._list(rentals_for_user(request.user).prefetch_related("penalties"))

    @action(detail=False, methods=["post"])
    def book(self, request):
        serializer = BookingSerializer(data=request.data, context=self.get_serializer_context())
        serializer.is_valid(raise_exception=True)
        rental = serializer.save()
        return Response(serializer.to_representation(rental), status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["put", "post"])
    def complete(self, request, pk=None):
        rental = self.get_object()
        serializer = RentalCloseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            rental = complete_rental(rental, serializer.validated_data.get("actual_end_date"))
        except RentalError as exc:
            raise as_api_error(exc) from exc
        return Response(RentalSerializer(rental).data)

    @action(detail=True, methods=["put", "post"])
    def cancel(self, request, pk=None):
        rental = get_object_or_404(self.get_queryset(), pk=pk)
        customer = request.user.is_customer()
        if customer and not user_owns_rental(request.user, rental):
            raise exceptions.PermissionDenied("You can only cancel your own rentals.")
        serializer = RentalCloseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        # customers always cancel as of today
        cancellation_date = None if customer else serializer.validated_data.get("cancellation_date")
        try:
            rental = cancel_rental(rental, cancellation_date)
        except RentalError as exc:
            raise as_api_error(exc) from exc
        return Response(RentalSerializer(rental).data)

    @action(detail=True, methods=["post"])
    def penalty(self, request, pk=None):
        rental = self.get_object()
        serializer = RentalPenaltySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            penalty = add_penalty(rental, serializer.validated_data["amount"], serializer.validated_data["reason"])
        except RentalError as exc:
            raise as_api_error(exc) from exc
        return Response(PenaltySerializer(penalty).data, status=status.HTTP_201_CREATED)


class PenaltyViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    queryset = Penalty.objects.select_related("rental")
    serializer_class = PenaltySerializer
    permission_classes = [IsAuthenticated, IsStaffMember]
    filterset_fields = ["rental"]

    def perform_destroy(self, instance):  # type: ignore
        remove_penalty(instance)

    @action(detail=False, methods=["get"], url_path=r"rental/(?P<rental_id>\d+)")
    def by_rental(self, request, rental_id=None):
        penalties = self.get_queryset().filter(rental_id=rental_id)
        return Response(PenaltySerializer(penalties, many=True).data)

    @action(detail=False, methods=["get"], url_path=r"rental/(?P<rental_id>\d+)/total")
    def rental_total(self, request, rental_id=None):
        rental = get_object_or_404(Rental, pk=rental_id)
        total = rental.penalties.aggregate(total=Sum("amount"))["total"] or 0
        return Response({"rental_id": rental.pk, "total": f"{total:.2f}"})
