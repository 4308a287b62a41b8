"""Tests for dashboard analytics."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.analytics import services
from apps.cars.models import Car
from apps.clients.models import Client
from apps.rentals.models import Rental
from apps.users.models import User

MARCH = {"start_date": "2024-03-01", "end_date": "2024-03-31"}


class AnalyticsAPITests(APITestCase):
    def setUp(self) -> None:
        self.manager = User.objects.create_user(
            username="manager", email="manager@example.com", password="secret123", role=User.Role.MANAGER
        )
        self.economy = Car.objects.create(
            brand="Skoda", model="Fabia", year=2020, type=Car.Type.ECONOMY,
            price_per_day=Decimal("500.00"), deposit=Decimal("1000.00"), status=Car.Status.RENTED,
        )
        self.premium = Car.objects.create(
            brand="BMW", model="X5", year=2022, type=Car.Type.PREMIUM,
            price_per_day=Decimal("2000.00"), deposit=Decimal("5000.00"),
        )
        Car.objects.create(
            brand="Toyota", model="Camry", year=2021, type=Car.Type.BUSINESS,
            price_per_day=Decimal("1000.00"), deposit=Decimal("2000.00"),
        )
        self.ivan = Client.objects.create(full_name="Ivan", phone="+380500000001")
        self.olena = Client.objects.create(full_name="Olena", phone="+380500000002")

        self._rental(self.ivan, self.economy, date(2024, 3, 2), date(2024, 3, 5), "1500.00",
                     penalty="100.00", status=Rental.Status.COMPLETED, actual=date(2024, 3, 5))
        self._rental(self.ivan, self.premium, date(2024, 3, 10), date(2024, 3, 12), "4000.00",
                     status=Rental.Status.COMPLETED, actual=date(2024, 3, 12))
        self._rental(self.olena, self.economy, date(2024, 3, 20), date(2024, 3, 25), "2500.00",
                     deposit="1375.00")
        self._rental(self.olena, self.premium, date(2024, 2, 10), date(2024, 2, 12), "4000.00",
                     status=Rental.Status.COMPLETED, actual=date(2024, 2, 12))

        self.client.force_authenticate(self.manager)

    def _rental(self, client, car, start, end, cost, penalty="0.00", deposit="1000.00",
                status=Rental.Status.ACTIVE, actual=None) -> Rental:
        return Rental.objects.create(
            client=client,
            car=car,
            start_date=start,
            expected_end_date=end,
            actual_end_date=actual,
            total_cost=Decimal(cost),
            penalty_amount=Decimal(penalty),
            deposit_amount=Decimal(deposit),
            status=status,
        )

    def test_dashboard(self) -> None:
        response = self.client.get(reverse("analytics-dashboard"), MARCH)
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

        overview = response.data["overview"]
        self.assertEqual(overview["total_cars"], 3)
        self.assertEqual(overview["available_cars"], 2)
        self.assertEqual(overview["rented_cars"], 1)
        self.assertEqual(overview["total_clients"], 2)
        self.assertEqual(overview["active_rentals"], 1)
        self.assertEqual(overview["completed_rentals"], 3)

        financial = response.data["financial"]
        self.assertEqual(financial["total_revenue"], Decimal("5500.00"))
        self.assertEqual(financial["total_penalties"], Decimal("100.00"))
        self.assertEqual(financial["net_revenue"], Decimal("5600.00"))
        self.assertEqual(financial["total_deposits"], Decimal("1375.00"))

        metrics = response.data["metrics"]
        self.assertEqual(metrics["occupancy_rate"], 33.33)
        self.assertEqual(metrics["average_rental_duration"], 2.33)
        self.assertEqual(metrics["average_revenue_per_rental"], Decimal("2750.00"))
        self.assertEqual(response.data["period"]["start_date"], date(2024, 3, 1))

    def test_revenue_by_day_and_type(self) -> None:
        response = self.client.get(reverse("analytics-revenue"), MARCH)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response.data["revenue_by_day"],
            [
                {"date": date(2024, 3, 5), "amount": Decimal("1500.00")},
                {"date": date(2024, 3, 12), "amount": Decimal("4000.00")},
            ],
        )
        by_type = {item["type"]: item["amount"] for item in response.data["revenue_by_type"]}
        self.assertEqual(by_type, {"economy": Decimal("1500.00"), "premium": Decimal("4000.00")})

    def test_popular_cars_and_top_clients(self) -> None:
        cars = self.client.get(reverse("analytics-popular-cars"), {"limit": 1}).data
        self.assertEqual(len(cars), 1)
        self.assertEqual(cars[0]["car"]["id"], self.economy.id)
        self.assertEqual(cars[0]["rental_count"], 2)
        self.assertEqual(cars[0]["total_revenue"], Decimal("1500.00"))

        clients = self.client.get(reverse("analytics-top-clients")).data
        self.assertEqual([item["client"]["id"] for item in clients], [self.ivan.id, self.olena.id])
        self.assertEqual(clients[0]["total_spent"], Decimal("5600.00"))
        self.assertEqual(clients[1]["total_spent"], Decimal("4000.00"))

    def test_occupancy_rate(self) -> None:
        response = self.client.get(reverse("analytics-occupancy-rate"))
        self.assertEqual(response.data, {"occupancy_rate": 33.33})

    def test_invalid_period_is_rejected(self) -> None:
        response = self.client.get(reverse("analytics-dashboard"), {"start_date": "2024-04-01", "end_date": "2024-03-01"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.get(reverse("analytics-revenue"), {"start_date": "yesterday"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_employees_are_forbidden(self) -> None:
        employee = User.objects.create_user(
            username="employee", email="employee@example.com", password="secret123", role=User.Role.EMPLOYEE
        )
        self.client.force_authenticate(employee)
        self.assertEqual(self.client.get(reverse("analytics-dashboard")).status_code, status.HTTP_403_FORBIDDEN)

    def test_forecast_uses_previous_month(self) -> None:
        forecast = services.revenue_forecast(today=date(2024, 4, 15))
        self.assertEqual(forecast["forecast"], Decimal("5500.00"))
        self.assertEqual(forecast["based_on"]["start_date"], date(2024, 3, 1))
        self.assertEqual(forecast["based_on"]["end_date"], date(2024, 3, 31))

    def test_occupancy_without_cars_is_zero(self) -> None:
        Rental.objects.all().delete()
        Car.objects.all().delete()
        self.assertEqual(services.occupancy_rate(), 0.0)
