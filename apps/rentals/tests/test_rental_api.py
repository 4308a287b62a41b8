"""Integration tests for rental and penalty API endpoints."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from django.test import override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.cars.models import Car
from apps.clients.models import Client
from apps.rentals.models import Penalty, Rental
from apps.users.models import User


@override_settings(RENTAL_PRICING_STRATEGIES=["base"])
class RentalAPITests(APITestCase):
    """Covers staff bookings, conflicts, completion, cancellation and self-service."""

    def setUp(self) -> None:
        self.employee = User.objects.create_user(
            username="employee", email="employee@example.com", password="secret123", role=User.Role.EMPLOYEE
        )
        self.customer = User.objects.create_user(
            username="customer", email="customer@example.com", password="secret123", role=User.Role.USER,
            full_name="Customer One",
        )
        self.other_customer = User.objects.create_user(
            username="other", email="other@example.com", password="secret123", role=User.Role.USER
        )
        self.car = Car.objects.create(
            brand="Skoda",
            model="Octavia",
            year=2020,
            price_per_day=Decimal("500.00"),
            deposit=Decimal("1000.00"),
        )
        self.walk_in = Client.objects.create(full_name="Ivan Petrenko", phone="+380501234567")
        self.start = date.today() + timedelta(days=1)
        self.list_url = reverse("rental-list")

    def _payload(self, start: date, end: date) -> dict[str, object]:
        return {
            "client_id": self.walk_in.id,
            "car_id": self.car.id,
            "start_date": str(start),
            "expected_end_date": str(end),
        }

    def test_staff_creates_rental(self) -> None:
        self.client.force_authenticate(self.employee)
        response = self.client.post(self.list_url, self._payload(self.start, self.start + timedelta(days=3)), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["total_cost"], "1500.00")
        self.assertEqual(response.data["deposit_amount"], "1150.00")
        self.assertEqual(response.data["status"], "active")
        self.assertEqual(response.data["car"]["id"], self.car.id)
        self.assertEqual(response.data["days"], 3)

    def test_overlapping_booking_is_a_conflict(self) -> None:
        self.client.force_authenticate(self.employee)
        first = self.client.post(self.list_url, self._payload(self.start, self.start + timedelta(days=2)), format="json")
        self.assertEqual(first.status_code, status.HTTP_201_CREATED, first.data)

        conflict = self.client.post(
            self.list_url,
            self._payload(self.start + timedelta(days=1), self.start + timedelta(days=4)),
            format="json",
        )
        self.assertEqual(conflict.status_code, status.HTTP_409_CONFLICT, conflict.data)
        self.assertEqual(conflict.data["statusCode"], 409)
        self.assertIn("already booked", conflict.data["error"])

    def test_invalid_dates_are_rejected(self) -> None:
        self.client.force_authenticate(self.employee)
        response = self.client.post(self.list_url, self._payload(self.start, self.start), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        past = date.today() - timedelta(days=3)
        response = self.client.post(self.list_url, self._payload(past, past + timedelta(days=1)), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("past", response.data["error"])

    def test_customer_cannot_use_staff_endpoints(self) -> None:
        self.client.force_authenticate(self.customer)
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_complete_and_list_views(self) -> None:
        self.client.force_authenticate(self.employee)
        created = self.client.post(
            self.list_url, self._payload(date.today(), date.today() + timedelta(days=4)), format="json"
        )
        rental_id = created.data["id"]

        active = self.client.get(reverse("rental-active"))
        self.assertEqual([item["id"] for item in active.data], [rental_id])
        by_car = self.client.get(reverse("rental-by-car", kwargs={"car_id": self.car.id}))
        self.assertEqual(len(by_car.data), 1)
        by_client = self.client.get(reverse("rental-by-client", kwargs={"client_id": self.walk_in.id}))
        self.assertEqual(len(by_client.data), 1)

        complete_url = reverse("rental-complete", kwargs={"pk": rental_id})
        response = self.client.put(
            complete_url, {"actual_end_date": str(date.today() + timedelta(days=2))}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "completed")
        self.assertEqual(response.data["total_cost"], "1000.00")
        self.assertEqual(response.data["deposit_amount"], "1075.00")

        again = self.client.put(complete_url, {}, format="json")
        self.assertEqual(again.status_code, status.HTTP_400_BAD_REQUEST)

    def test_filtering_rental_list(self) -> None:
        self.client.force_authenticate(self.employee)
        self.client.post(self.list_url, self._payload(self.start, self.start + timedelta(days=1)), format="json")
        response = self.client.get(self.list_url, {"status": "active", "car": self.car.id})
        self.assertEqual(response.data["pagination"]["total"], 1)
        response = self.client.get(self.list_url, {"status": "completed"})
        self.assertEqual(response.data["pagination"]["total"], 0)

    def test_customer_books_and_sees_own_rentals(self) -> None:
        self.client.force_authenticate(self.customer)
        response = self.client.post(
            reverse("rental-book"),
            {"car_id": self.car.id, "start_date": str(self.start), "expected_end_date": str(self.start + timedelta(days=2))},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["client"]["full_name"], "Customer One")

        mine = self.client.get(reverse("rental-my"))
        self.assertEqual(mine.status_code, status.HTTP_200_OK)
        self.assertEqual([item["id"] for item in mine.data], [response.data["id"]])

        self.client.force_authenticate(self.other_customer)
        self.assertEqual(self.client.get(reverse("rental-my")).data, [])

    def test_customer_can_cancel_only_own_rental(self) -> None:
        self.client.force_authenticate(self.customer)
        booked = self.client.post(
            reverse("rental-book"),
            {"car_id": self.car.id, "start_date": str(self.start), "expected_end_date": str(self.start + timedelta(days=2))},
            format="json",
        )
        cancel_url = reverse("rental-cancel", kwargs={"pk": booked.data["id"]})

        self.client.force_authenticate(self.other_customer)
        forbidden = self.client.put(cancel_url, {}, format="json")
        self.assertEqual(forbidden.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.customer)
        response = self.client.put(cancel_url, {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "cancelled")
        self.assertEqual(response.data["total_cost"], "0.00")
        self.car.refresh_from_db()
        self.assertEqual(self.car.status, Car.Status.AVAILABLE)

    def test_customer_cannot_backdate_cancellation(self) -> None:
        today = timezone.localdate()
        own_client = Client.objects.create(full_name="Customer One", user=self.customer)
        rental = Rental.objects.create(
            client=own_client,
            car=self.car,
            start_date=today - timedelta(days=2),
            expected_end_date=today + timedelta(days=2),
            deposit_amount=Decimal("1300.00"),
            total_cost=Decimal("2000.00"),
        )
        cancel_url = reverse("rental-cancel", kwargs={"pk": rental.id})
        backdated = {"cancellation_date": str(today - timedelta(days=5))}

        self.client.force_authenticate(self.customer)
        response = self.client.put(cancel_url, backdated, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["actual_end_date"], str(today))
        self.assertEqual(response.data["total_cost"], "1000.00")

    def test_staff_may_cancel_as_of_an_earlier_date(self) -> None:
        today = timezone.localdate()
        rental = Rental.objects.create(
            client=Client.objects.create(full_name="Walk-in"),
            car=self.car,
            start_date=today - timedelta(days=2),
            expected_end_date=today + timedelta(days=2),
            deposit_amount=Decimal("1300.00"),
            total_cost=Decimal("2000.00"),
        )
        self.client.force_authenticate(self.employee)
        response = self.client.put(
            reverse("rental-cancel", kwargs={"pk": rental.id}),
            {"cancellation_date": str(today - timedelta(days=3))},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["total_cost"], "0.00")

    def test_penalties_through_rental_and_penalty_endpoints(self) -> None:
        self.client.force_authenticate(self.employee)
        created = self.client.post(self.list_url, self._payload(self.start, self.start + timedelta(days=2)), format="json")
        rental_id = created.data["id"]

        response = self.client.post(
            reverse("rental-penalty", kwargs={"pk": rental_id}),
            {"amount": "200.00", "reason": "Scratch on door"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

        response = self.client.post(
            reverse("penalty-list"),
            {"rental_id": rental_id, "amount": "50.00", "reason": "Late fuel refill"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        second_id = response.data["id"]

        invalid = self.client.post(
            reverse("penalty-list"),
            {"rental_id": rental_id, "amount": "-5.00", "reason": "Nope"},
            format="json",
        )
        self.assertEqual(invalid.status_code, status.HTTP_400_BAD_REQUEST)

        total = self.client.get(reverse("penalty-rental-total", kwargs={"rental_id": rental_id}))
        self.assertEqual(total.data["total"], "250.00")
        self.assertEqual(Rental.objects.get(pk=rental_id).penalty_amount, Decimal("250.00"))

        listed = self.client.get(reverse("penalty-by-rental", kwargs={"rental_id": rental_id}))
        self.assertEqual(len(listed.data), 2)

        deleted = self.client.delete(reverse("penalty-detail", kwargs={"pk": second_id}))
        self.assertEqual(deleted.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(Rental.objects.get(pk=rental_id).penalty_amount, Decimal("200.00"))
        self.assertEqual(Penalty.objects.filter(rental_id=rental_id).count(), 1)
