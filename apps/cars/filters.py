"""FilterSet definitions for fleet listing and search."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .models import Car


class CarFilterSet(django_filters.FilterSet):
    """Filters shared by ``GET /cars/`` and ``POST /search/cars/``."""

    brand = django_filters.CharFilter(field_name="brand", lookup_expr="icontains")
    model = django_filters.CharFilter(field_name="model", lookup_expr="icontains")
    type = django_filters.ChoiceFilter(field_name="type", choices=Car.Type.choices)
    status = django_filters.ChoiceFilter(field_name="status", choices=Car.Status.choices)

    min_price = django_filters.NumberFilter(field_name="price_per_day", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price_per_day", lookup_expr="lte")
    min_year = django_filters.NumberFilter(field_name="year", lookup_expr="gte")
    max_year = django_filters.NumberFilter(field_name="year", lookup_expr="lte")

    body_type = django_filters.CharFilter(field_name="body_type", lookup_expr="iexact")
    fuel_type = django_filters.CharFilter(field_name="fuel_type", lookup_expr="iexact")
    transmission = django_filters.CharFilter(field_name="transmission", lookup_expr="iexact")

    # Free text over brand and model
    q = django_filters.CharFilter(method="filter_text")

    class Meta:
        model = Car
        fields = ["brand", "model", "type", "status"]

    def filter_text(self, queryset, name, value):  # type: ignore
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(Q(brand__icontains=value) | Q(model__icontains=value))
