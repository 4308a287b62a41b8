"""API tests for the fleet catalogue."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.cars.models import Car
from apps.clients.models import Client
from apps.rentals.models import Rental
from apps.users.models import User


class CarAPITests(APITestCase):
    def setUp(self) -> None:
        self.manager = User.objects.create_user(
            username="manager", email="manager@example.com", password="secret123", role=User.Role.MANAGER
        )
        self.employee = User.objects.create_user(
            username="employee", email="employee@example.com", password="secret123", role=User.Role.EMPLOYEE
        )
        self.economy = Car.objects.create(
            brand="Skoda",
            model="Octavia",
            year=2020,
            type=Car.Type.ECONOMY,
            price_per_day=Decimal("500.00"),
            deposit=Decimal("1000.00"),
        )
        self.premium = Car.objects.create(
            brand="BMW",
            model="X5",
            year=2023,
            type=Car.Type.PREMIUM,
            price_per_day=Decimal("2500.00"),
            deposit=Decimal("5000.00"),
            status=Car.Status.MAINTENANCE,
        )

    def test_anyone_can_list_cars(self) -> None:
        response = self.client.get(reverse("car-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["pagination"]["total"], 2)
        self.assertEqual(response.data["pagination"]["page"], 1)

    def test_filters(self) -> None:
        response = self.client.get(reverse("car-list"), {"brand": "sko"})
        self.assertEqual([car["model"] for car in response.data["data"]], ["Octavia"])

        response = self.client.get(reverse("car-list"), {"min_price": "1000", "min_year": "2022"})
        self.assertEqual([car["brand"] for car in response.data["data"]], ["BMW"])

        response = self.client.get(reverse("car-list"), {"status": "maintenance"})
        self.assertEqual(len(response.data["data"]), 1)

    def test_available_and_by_type(self) -> None:
        response = self.client.get(reverse("car-available"))
        self.assertEqual([car["id"] for car in response.data], [self.economy.id])

        response = self.client.get(reverse("car-by-type", kwargs={"car_type": "premium"}))
        self.assertEqual([car["id"] for car in response.data], [self.premium.id])

        response = self.client.get(reverse("car-by-type", kwargs={"car_type": "truck"}))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_manager_creates_car_with_image_list(self) -> None:
        self.client.force_authenticate(self.manager)
        payload = {
            "brand": "Toyota",
            "model": "Camry",
            "year": 2022,
            "type": "business",
            "price_per_day": "1200.00",
            "deposit": "3000.00",
            "image_url": "/uploads/images/camry.jpg",
            "image_urls": ["/uploads/images/camry-2.jpg", "/uploads/images/camry.jpg"],
            "features": ["Cruise control", "Heated seats"],
        }
        response = self.client.post(reverse("car-list"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], "available")
        self.assertEqual(response.data["image_urls"], ["/uploads/images/camry-2.jpg", "/uploads/images/camry.jpg"])
        self.assertEqual(response.data["images"], ["/uploads/images/camry.jpg", "/uploads/images/camry-2.jpg"])
        self.assertEqual(response.data["features"], "Cruise control, Heated seats")

    def test_employee_and_anonymous_cannot_write(self) -> None:
        payload = {"brand": "Lada", "model": "Vesta", "year": 2021, "price_per_day": "300", "deposit": "500"}
        self.assertEqual(
            self.client.post(reverse("car-list"), payload, format="json").status_code,
            status.HTTP_401_UNAUTHORIZED,
        )
        self.client.force_authenticate(self.employee)
        self.assertEqual(
            self.client.post(reverse("car-list"), payload, format="json").status_code,
            status.HTTP_403_FORBIDDEN,
        )

    def test_change_status(self) -> None:
        self.client.force_authenticate(self.manager)
        url = reverse("car-change-status", kwargs={"pk": self.premium.pk})
        response = self.client.patch(url, {"status": "available"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.premium.refresh_from_db()
        self.assertEqual(self.premium.status, Car.Status.AVAILABLE)

        response = self.client.patch(url, {"status": "flying"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_booked_dates_and_quote(self) -> None:
        client = Client.objects.create(full_name="Ivan Petrenko", phone="+380501234567")
        start = date.today() + timedelta(days=2)
        Rental.objects.create(
            client=client,
            car=self.economy,
            start_date=start,
            expected_end_date=start + timedelta(days=3),
            deposit_amount=Decimal("1150.00"),
            total_cost=Decimal("1500.00"),
        )

        response = self.client.get(reverse("car-booked-dates", kwargs={"pk": self.economy.pk}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]["start_date"], start.isoformat())
        self.assertEqual(response.data[0]["end_date"], (start + timedelta(days=3)).isoformat())

        quote_url = reverse("car-quote", kwargs={"pk": self.economy.pk})
        overlapping = self.client.get(
            quote_url,
            {"start_date": (start + timedelta(days=3)).isoformat(), "end_date": (start + timedelta(days=6)).isoformat()},
        )
        self.assertEqual(overlapping.status_code, status.HTTP_200_OK, overlapping.data)
        self.assertEqual(overlapping.data["days"], 3)
        self.assertEqual(overlapping.data["deposit"], "1150.00")
        self.assertFalse(overlapping.data["available"])

        free = self.client.get(
            quote_url,
            {"start_date": (start + timedelta(days=4)).isoformat(), "end_date": (start + timedelta(days=5)).isoformat()},
        )
        self.assertTrue(free.data["available"])

    def test_car_with_rentals_cannot_be_deleted(self) -> None:
        client = Client.objects.create(full_name="Olena", phone="+380671112233")
        Rental.objects.create(
            client=client,
            car=self.economy,
            start_date=date.today(),
            expected_end_date=date.today() + timedelta(days=1),
            deposit_amount=Decimal("1000.00"),
            total_cost=Decimal("500.00"),
        )
        self.client.force_authenticate(self.manager)
        response = self.client.delete(reverse("car-detail", kwargs={"pk": self.economy.pk}))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["statusCode"], 409)
