"""API tests for the client registry."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.clients.models import Client
from apps.users.models import User


class ClientAPITests(APITestCase):
    def setUp(self) -> None:
        self.employee = User.objects.create_user(
            username="employee", email="employee@example.com", password="secret123", role=User.Role.EMPLOYEE
        )
        self.customer = User.objects.create_user(
            username="customer", email="customer@example.com", password="secret123", role=User.Role.USER
        )
        self.existing = Client.objects.create(
            full_name="Ivan Petrenko", address="Kyiv, Khreshchatyk 1", phone="+380501234567"
        )
        self.client.force_authenticate(self.employee)

    def test_create_client(self) -> None:
        payload = {"full_name": "Olena Shevchenko", "address": "Lviv", "phone": "+380671112233"}
        response = self.client.post(reverse("client-list"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["phone"], "+380671112233")
        self.assertIsNotNone(response.data["registration_date"])

    def test_duplicate_phone_is_rejected(self) -> None:
        payload = {"full_name": "Someone Else", "address": "Odesa", "phone": "+380501234567"}
        response = self.client.post(reverse("client-list"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("phone", response.data["details"])

    def test_update_keeps_own_phone(self) -> None:
        url = reverse("client-detail", kwargs={"pk": self.existing.pk})
        response = self.client.patch(url, {"phone": "+380501234567", "address": "Kyiv"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

    def test_lookup_by_phone(self) -> None:
        response = self.client.get(reverse("client-by-phone", kwargs={"phone": "+380501234567"}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["id"], self.existing.id)

        missing = self.client.get(reverse("client-by-phone", kwargs={"phone": "000"}))
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)

    def test_register_or_get(self) -> None:
        url = reverse("client-register")
        existing = self.client.post(
            url, {"full_name": "Ivan P.", "address": "Kyiv", "phone": "+380501234567"}, format="json"
        )
        self.assertEqual(existing.status_code, status.HTTP_200_OK, existing.data)
        self.assertEqual(existing.data["id"], self.existing.id)

        created = self.client.post(
            url, {"full_name": "Petro", "address": "Dnipro", "phone": "+380931234567"}, format="json"
        )
        self.assertEqual(created.status_code, status.HTTP_201_CREATED, created.data)
        self.assertEqual(Client.objects.count(), 2)

    def test_search_param(self) -> None:
        Client.objects.create(full_name="Maria Bondar", address="Kharkiv", phone="+380661234567")
        response = self.client.get(reverse("client-list"), {"search": "kharkiv"})
        self.assertEqual([item["full_name"] for item in response.data["data"]], ["Maria Bondar"])

    def test_customer_cannot_access_registry(self) -> None:
        self.client.force_authenticate(self.customer)
        response = self.client.get(reverse("client-list"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
