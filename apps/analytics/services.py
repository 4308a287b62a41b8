"""Aggregations behind the staff dashboard."""

from __future__ import annotations

import datetime
from collections import OrderedDict
from decimal import Decimal
from typing import Any

from django.db.models import Count, DecimalField, Q, Sum, Value  # type: ignore
from django.db.models.functions import Coalesce  # type: ignore
from django.utils import timezone  # type: ignore

from apps.cars.models import Car
from apps.clients.models import Client
from apps.rentals.models import Rental
from apps.rentals.pricing import calculate_days, money
from shared.domain.value_objects import DateRange

ZERO = Decimal("0.00")


def _sum(field: str, **extra: Any):
    return Coalesce(Sum(field, **extra), Value(ZERO), output_field=DecimalField(max_digits=14, decimal_places=2))


def month_start(day: datetime.date) -> datetime.date:
    return day.replace(day=1)


def default_period(today: datetime.date | None = None) -> DateRange:
    """First day of the current month up to today."""
    today = today or timezone.localdate()
    return DateRange(month_start(today), today)


def rentals_started_in(period: DateRange):
    return Rental.objects.filter(start_date__gte=period.start_date, start_date__lte=period.end_date)


def total_revenue(period: DateRange) -> Decimal:
    qs = rentals_started_in(period).filter(status=Rental.Status.COMPLETED)
    return qs.aggregate(total=_sum("total_cost"))["total"]


def total_penalties(period: DateRange) -> Decimal:
    qs = rentals_started_in(period).filter(status=Rental.Status.COMPLETED)
    return qs.aggregate(total=_sum("penalty_amount"))["total"]


def total_active_deposits() -> Decimal:
    return Rental.objects.filter(status=Rental.Status.ACTIVE).aggregate(total=_sum("deposit_amount"))["total"]


def average_rental_duration() -> float:
    completed = Rental.objects.filter(status=Rental.Status.COMPLETED).only(
        "start_date", "expected_end_date", "actual_end_date"
    )
    durations = [calculate_days(r.start_date, r.effective_end_date) for r in completed]
    if not durations:
        return 0.0
    return round(sum(durations) / len(durations), 2)


def occupancy_rate() -> float:
    """Share of the fleet tied up by active rentals, in percent."""
    cars = Car.objects.count()
    if cars == 0:
        return 0.0
    active = Rental.objects.filter(status=Rental.Status.ACTIVE).count()
    return round(active / cars * 100, 2)


def dashboard(period: DateRange) -> dict[str, Any]:
    car_counts = Car.objects.aggregate(
        total=Count("id"),
        available=Count("id", filter=Q(status=Car.Status.AVAILABLE)),
        rented=Count("id", filter=Q(status=Car.Status.RENTED)),
        maintenance=Count("id", filter=Q(status=Car.Status.MAINTENANCE)),
    )
    rental_counts = Rental.objects.aggregate(
        active=Count("id", filter=Q(status=Rental.Status.ACTIVE)),
        completed=Count("id", filter=Q(status=Rental.Status.COMPLETED)),
    )
    revenue = total_revenue(period)
    penalties = total_penalties(period)
    completed_in_period = rentals_started_in(period).filter(status=Rental.Status.COMPLETED).count()

    return {
        "overview": {
            "total_cars": car_counts["total"],
            "available_cars": car_counts["available"],
            "rented_cars": car_counts["rented"],
            "maintenance_cars": car_counts["maintenance"],
            "total_clients": Client.objects.count(),
            "active_rentals": rental_counts["active"],
            "completed_rentals": rental_counts["completed"],
        },
        "financial": {
            "total_revenue": revenue,
            "total_penalties": penalties,
            "total_deposits": total_active_deposits(),
            "net_revenue": revenue + penalties,
        },
        "metrics": {
            "average_rental_duration": average_rental_duration(),
            "occupancy_rate": occupancy_rate(),
            "average_revenue_per_rental": (
                money(revenue / completed_in_period) if completed_in_period else ZERO
            ),
        },
        "period": {"start_date": period.start_date, "end_date": period.end_date},
    }


def revenue_stats(period: DateRange) -> dict[str, Any]:
    completed = (
        rentals_started_in(period)
        .filter(status=Rental.Status.COMPLETED)
        .select_related("car")
        .order_by("start_date", "id")
    )
    by_day: OrderedDict[datetime.date, Decimal] = OrderedDict()
    by_type: OrderedDict[str, Decimal] = OrderedDict()
    for rental in completed:
        day = rental.effective_end_date
        by_day[day] = by_day.get(day, ZERO) + rental.total_cost
        by_type[rental.car.type] = by_type.get(rental.car.type, ZERO) + rental.total_cost

    return {
        "total_revenue": total_revenue(period),
        "revenue_by_day": [{"date": day, "amount": amount} for day, amount in sorted(by_day.items())],
        "revenue_by_type": [{"type": car_type, "amount": amount} for car_type, amount in by_type.items()],
        "period": {"start_date": period.start_date, "end_date": period.end_date},
    }


def popular_cars(limit: int = 10) -> list[dict[str, Any]]:
    cars = (
        Car.objects.annotate(
            rental_count=Count("rentals"),
            completed_revenue=_sum("rentals__total_cost", filter=Q(rentals__status=Rental.Status.COMPLETED)),
        )
        .filter(rental_count__gt=0)
        .order_by("-rental_count", "id")[:limit]
    )
    return [
        {
            "car": {"id": car.id, "brand": car.brand, "model": car.model, "type": car.type},
            "rental_count": car.rental_count,
            "total_revenue": car.completed_revenue,
        }
        for car in cars
    ]


def top_clients(limit: int = 10) -> list[dict[str, Any]]:
    completed = Q(rentals__status=Rental.Status.COMPLETED)
    clients = (
        Client.objects.annotate(
            rental_count=Count("rentals"),
            spent_cost=_sum("rentals__total_cost", filter=completed),
            spent_penalties=_sum("rentals__penalty_amount", filter=completed),
        )
        .filter(rental_count__gt=0)
    )
    ranked = sorted(
        clients,
        key=lambda client: (-(client.spent_cost + client.spent_penalties), client.id),
    )[:limit]
    return [
        {
            "client": {"id": client.id, "full_name": client.full_name, "phone": client.phone},
            "rental_count": client.rental_count,
            "total_spent": client.spent_cost + client.spent_penalties,
        }
        for client in ranked
    ]


def revenue_forecast(today: datetime.date | None = None) -> dict[str, Any]:
    """Next month is expected to earn what the previous calendar month did."""
    today = today or timezone.localdate()
    last_month_end = month_start(today) - datetime.timedelta(days=1)
    last_month = DateRange(month_start(last_month_end), last_month_end)
    return {
        "forecast": total_revenue(last_month),
        "based_on": {"start_date": last_month.start_date, "end_date": last_month.end_date},
    }
