"""Serializers for the rental domain."""

from __future__ import annotations

from typing import Any

from rest_framework import serializers  # type: ignore

from apps.cars.models import Car
from apps.clients.models import Client
from shared.infrastructure.exceptions import ConflictError

from .models import Penalty, Rental
from .pricing import calculate_days
from .services import (
    BookingConflictError,
    RentalError,
    add_penalty,
    create_booking_for_user,
    create_rental,
)


def as_api_error(exc: RentalError) -> Exception:
    """Translate a rental workflow error into a DRF exception."""
    if isinstance(exc, BookingConflictError):
        return ConflictError(str(exc))
    return serializers.ValidationError({"non_field_errors": [str(exc)]})


class RentalCarSerializer(serializers.ModelSerializer):
    class Meta:
        model = Car
        fields = ["id", "brand", "model", "year", "type", "price_per_day", "deposit", "status", "image_url"]


class RentalClientSerializer(serializers.ModelSerializer):
    class Meta:
        model = Client
        fields = ["id", "full_name", "phone", "email"]


class PenaltySerializer(serializers.ModelSerializer):
    rental_id = serializers.PrimaryKeyRelatedField(source="rental", queryset=Rental.objects.all())

    class Meta:
        model = Penalty
        fields = ["id", "rental_id", "amount", "reason", "date", "created_at"]
        read_only_fields = ["id", "date", "created_at"]

    def create(self, validated_data: dict[str, Any]):  # type: ignore
        try:
            return add_penalty(validated_data["rental"], validated_data["amount"], validated_data["reason"])
        except RentalError as exc:
            raise as_api_error(exc) from exc


class RentalPenaltySerializer(serializers.Serializer):
    """Body of ``POST /rentals/<id>/penalty/``."""

    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    reason = serializers.CharField(max_length=500)


class RentalSerializer(serializers.ModelSerializer):
    client = RentalClientSerializer(read_only=True)
    car = RentalCarSerializer(read_only=True)
    client_id = serializers.ReadOnlyField(source="client.id")
    car_id = serializers.ReadOnlyField(source="car.id")
    days = serializers.SerializerMethodField()
    penalties = PenaltySerializer(many=True, read_only=True)

    class Meta:
        model = Rental
        fields = [
            "id",
            "client_id",
            "car_id",
            "client",
            "car",
            "start_date",
            "expected_end_date",
            "actual_end_date",
            "days",
            "deposit_amount",
            "total_cost",
            "penalty_amount",
            "status",
            "penalties",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_days(self, obj: Rental) -> int:
        return calculate_days(obj.start_date, obj.effective_end_date)


class RentalCreateSerializer(serializers.Serializer):
    """Staff books a car for a registered client."""

    client_id = serializers.PrimaryKeyRelatedField(queryset=Client.objects.all())
    car_id = serializers.PrimaryKeyRelatedField(queryset=Car.objects.all())
    start_date = serializers.DateField()
    expected_end_date = serializers.DateField()

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        if attrs["start_date"] >= attrs["expected_end_date"]:
            raise serializers.ValidationError(
                {"expected_end_date": "Start date must be before expected end date."}
            )
        return attrs

    def create(self, validated_data: dict[str, Any]):  # type: ignore
        try:
            return create_rental(
                validated_data["client_id"],
                validated_data["car_id"],
                validated_data["start_date"],
                validated_data["expected_end_date"],
            )
        except RentalError as exc:
            raise as_api_error(exc) from exc

    def to_representation(self, instance):  # type: ignore
        return RentalSerializer(instance, context=self.context).data


class BookingSerializer(RentalCreateSerializer):
    """A customer books a car for themselves."""

    client_id = None

    def create(self, validated_data: dict[str, Any]):  # type: ignore
        user = self.context["request"].user
        try:
            return create_booking_for_user(
                user,
                validated_data["car_id"],
                validated_data["start_date"],
                validated_data["expected_end_date"],
            )
        except RentalError as exc:
            raise as_api_error(exc) from exc


class RentalCloseSerializer(serializers.Serializer):
    """Optional date for completing or cancelling a rental; defaults to today."""

    actual_end_date = serializers.DateField(required=False, allow_null=True)
    cancellation_date = serializers.DateField(required=False, allow_null=True)
