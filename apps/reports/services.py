"""Staff reports.

Every report follows the same two steps: ``collect`` loads the rows it
needs and ``build`` turns them into the response payload. ``rows`` gives
the flat, tabular shape used for CSV exports.
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from typing import Any, Iterable

from django.utils import timezone  # type: ignore

from apps.cars.models import Car
from apps.rentals.models import Rental
from apps.rentals.pricing import money
from shared.domain.value_objects import DateRange

ZERO = Decimal("0.00")


def year_before(day: datetime.date) -> datetime.date:
    return day - datetime.timedelta(days=365)


def deposit_to_return(rental: Rental) -> Decimal:
    """Penalties are withheld from the deposit; the rest goes back."""
    return max(ZERO, rental.deposit_amount - rental.penalty_amount)


def _total(values: Iterable[Decimal]) -> Decimal:
    return money(sum(values, ZERO))


def _by_status(rentals: list[Rental]) -> dict[str, list[Rental]]:
    grouped: dict[str, list[Rental]] = {value: [] for value in Rental.Status.values}
    for rental in rentals:
        grouped[rental.status].append(rental)
    return grouped


def rental_days(rental: Rental, today: datetime.date) -> int:
    """Days a rental actually kept the car off the lot."""
    if rental.status == Rental.Status.ACTIVE:
        end = today
    elif rental.actual_end_date is not None:
        end = rental.actual_end_date
    else:
        return 0
    return max(0, (end - rental.start_date).days)


class Report:
    name = "report"

    def __init__(self, today: datetime.date | None = None) -> None:
        self.today = today or timezone.localdate()

    def generate(self) -> dict[str, Any]:
        return self.build(self.collect())

    def collect(self) -> Any:
        raise NotImplementedError

    def build(self, data: Any) -> dict[str, Any]:
        raise NotImplementedError

    def rows(self, result: dict[str, Any]) -> Any:
        return result


class FinancialReport(Report):
    """Revenue, penalties and deposits over rentals started in a period.

    Without a period every rental is included.
    """

    name = "financial"

    def __init__(self, period: DateRange | None = None, today: datetime.date | None = None) -> None:
        super().__init__(today)
        self.period = period

    def collect(self) -> list[Rental]:
        rentals = Rental.objects.all()
        if self.period is not None:
            rentals = rentals.filter(
                start_date__gte=self.period.start_date, start_date__lte=self.period.end_date
            )
        return list(rentals.order_by("id"))

    def build(self, rentals: list[Rental]) -> dict[str, Any]:
        grouped = _by_status(rentals)
        completed = grouped[Rental.Status.COMPLETED]
        active = grouped[Rental.Status.ACTIVE]
        cancelled = grouped[Rental.Status.CANCELLED]

        completed_revenue = _total(r.total_cost + r.penalty_amount for r in completed)
        expected_revenue = _total(r.total_cost for r in active)
        # a cancellation never produces negative revenue
        cancelled_net = _total(
            max(ZERO, r.total_cost + r.penalty_amount - deposit_to_return(r)) for r in cancelled
        )

        return {
            "total_revenue": completed_revenue + expected_revenue,
            "completed_revenue": completed_revenue,
            "expected_revenue": expected_revenue,
            "total_penalties": _total(r.penalty_amount for r in completed),
            "total_deposits": _total(r.deposit_amount for r in rentals),
            "deposits_to_return": _total(deposit_to_return(r) for r in completed),
            "cancelled_deposits_to_return": _total(deposit_to_return(r) for r in cancelled),
            "net_revenue": completed_revenue + cancelled_net,
            "period": {
                "start_date": self.period.start_date if self.period else None,
                "end_date": self.period.end_date if self.period else self.today,
            },
            "rentals": {
                "total": len(rentals),
                "completed": len(completed),
                "active": len(active),
                "cancelled": len(cancelled),
            },
        }


class OccupancyReport(Report):
    name = "occupancy"

    def collect(self) -> list[Car]:
        return list(Car.objects.only("id", "type", "status"))

    def build(self, cars: list[Car]) -> dict[str, Any]:
        total = len(cars)
        rented = sum(1 for car in cars if car.status == Car.Status.RENTED)
        by_type = {}
        for car_type in Car.Type.values:
            of_type = [car for car in cars if car.type == car_type]
            by_type[car_type] = {
                "total": len(of_type),
                "available": sum(1 for car in of_type if car.status == Car.Status.AVAILABLE),
                "rented": sum(1 for car in of_type if car.status == Car.Status.RENTED),
            }
        return {
            "total_cars": total,
            "available_cars": sum(1 for car in cars if car.status == Car.Status.AVAILABLE),
            "rented_cars": rented,
            "maintenance_cars": sum(1 for car in cars if car.status == Car.Status.MAINTENANCE),
            "occupancy_rate": round(rented / total * 100, 2) if total else 0.0,
            "by_type": by_type,
        }


class AvailabilityReport(Report):
    name = "availability"

    def collect(self) -> tuple[list[Car], dict[int, Rental]]:
        cars = list(Car.objects.order_by("id"))
        active: dict[int, Rental] = {}
        for rental in Rental.objects.filter(status=Rental.Status.ACTIVE).order_by("expected_end_date"):
            active.setdefault(rental.car_id, rental)
        return cars, active

    def build(self, data: tuple[list[Car], dict[int, Rental]]) -> dict[str, Any]:
        cars, active = data
        statuses = [car.status for car in cars]
        return {
            "available_cars": statuses.count(Car.Status.AVAILABLE),
            "unavailable_cars": statuses.count(Car.Status.RENTED) + statuses.count(Car.Status.MAINTENANCE),
            "maintenance_cars": statuses.count(Car.Status.MAINTENANCE),
            "cars": [
                {
                    "id": car.id,
                    "brand": car.brand,
                    "model": car.model,
                    "status": car.status,
                    "next_available_date": active[car.id].expected_end_date if car.id in active else None,
                }
                for car in cars
            ],
        }

    def rows(self, result: dict[str, Any]) -> list[dict[str, Any]]:
        return result["cars"]


class CarReport(Report):
    """Occupancy and money per car, best earners first."""

    name = "cars"

    def __init__(self, period: DateRange | None = None, today: datetime.date | None = None) -> None:
        super().__init__(today)
        self.period = period or DateRange(year_before(self.today), self.today)

    def collect(self) -> tuple[list[Car], dict[int, list[Rental]]]:
        cars = list(Car.objects.order_by("id"))
        rentals = Rental.objects.filter(
            start_date__gte=self.period.start_date, start_date__lte=self.period.end_date
        ).order_by("start_date", "id")
        per_car: dict[int, list[Rental]] = {car.id: [] for car in cars}
        for rental in rentals:
            per_car.setdefault(rental.car_id, []).append(rental)
        return cars, per_car

    def build(self, data: tuple[list[Car], dict[int, list[Rental]]]) -> dict[str, Any]:
        cars, per_car = data
        period_days = (self.period.end_date - self.period.start_date).days
        reports = [self._car_entry(car, per_car[car.id], period_days) for car in cars]
        reports.sort(key=lambda entry: entry["financial"]["net_revenue"], reverse=True)

        return {
            "period": {"start_date": self.period.start_date, "end_date": self.period.end_date},
            "summary": {
                "total_cars": len(cars),
                "total_revenue": _total(r["financial"]["total_revenue"] for r in reports),
                "total_net_revenue": _total(r["financial"]["net_revenue"] for r in reports),
                "total_penalties": _total(r["financial"]["total_penalties"] for r in reports),
                "average_occupancy_rate": (
                    round(sum(r["occupancy"]["occupancy_rate"] for r in reports) / len(reports), 2)
                    if reports
                    else 0.0
                ),
            },
            "cars": reports,
        }

    def _car_entry(self, car: Car, rentals: list[Rental], period_days: int) -> dict[str, Any]:
        grouped = _by_status(rentals)
        completed = grouped[Rental.Status.COMPLETED]
        active = grouped[Rental.Status.ACTIVE]

        days = sum(rental_days(rental, self.today) for rental in rentals)
        occupancy = min(100.0, days / period_days * 100) if period_days > 0 else 0.0
        net_revenue = _total(r.total_cost + r.penalty_amount for r in completed)

        if active:
            next_available = active[0].expected_end_date
        elif car.status == Car.Status.AVAILABLE:
            next_available = self.today
        else:
            next_available = None

        return {
            "car": {
                "id": car.id,
                "brand": car.brand,
                "model": car.model,
                "year": car.year,
                "type": car.type,
                "price_per_day": car.price_per_day,
                "status": car.status,
            },
            "occupancy": {
                "total_rental_days": days,
                "period_days": period_days,
                "occupancy_rate": round(occupancy, 2),
                "rental_count": len(rentals),
                "completed_count": len(completed),
                "active_count": len(active),
                "cancelled_count": len(grouped[Rental.Status.CANCELLED]),
                "is_currently_rented": car.status == Car.Status.RENTED,
                "next_available_date": next_available,
            },
            "financial": {
                "total_revenue": net_revenue,
                "expected_revenue": _total(r.total_cost for r in active),
                "total_penalties": _total(r.penalty_amount for r in completed),
                "total_deposits": _total(r.deposit_amount for r in rentals),
                "net_revenue": net_revenue,
                "average_revenue_per_rental": money(net_revenue / len(completed)) if completed else ZERO,
            },
        }

    def rows(self, result: dict[str, Any]) -> list[dict[str, Any]]:
        return result["cars"]
