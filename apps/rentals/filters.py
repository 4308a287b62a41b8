"""FilterSet definitions for rental listing and search."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Rental


class RentalFilterSet(django_filters.FilterSet):
    client = django_filters.NumberFilter(field_name="client_id")
    car = django_filters.NumberFilter(field_name="car_id")
    status = django_filters.ChoiceFilter(field_name="status", choices=Rental.Status.choices)
    start_date_from = django_filters.DateFilter(field_name="start_date", lookup_expr="gte")
    start_date_to = django_filters.DateFilter(field_name="start_date", lookup_expr="lte")

    class Meta:
        model = Rental
        fields = ["client", "car", "status"]
