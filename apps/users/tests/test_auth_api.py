"""API tests for authentication endpoints."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import User


class AuthAPITests(APITestCase):
    def test_register_creates_customer_and_returns_tokens(self) -> None:
        payload = {
            "username": "alice",
            "email": "alice@example.com",
            "password": "secret123",
            "full_name": "Alice Driver",
        }

        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertIn("access", response.data["tokens"])
        self.assertEqual(response.data["user"]["role"], User.Role.USER)
        self.assertNotIn("password", response.data["user"])
        self.assertEqual(User.objects.get(username="alice").role, User.Role.USER)

    def test_register_rejects_duplicate_email(self) -> None:
        User.objects.create_user(username="bob", email="bob@example.com", password="secret123")
        payload = {"username": "bobby", "email": "BOB@example.com", "password": "secret123"}

        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["statusCode"], 400)
        self.assertIn("email", response.data["details"])

    def test_register_rejects_short_password(self) -> None:
        payload = {"username": "carl", "email": "carl@example.com", "password": "123"}
        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_login_by_username_or_email(self) -> None:
        User.objects.create_user(username="dana", email="dana@example.com", password="secret123")
        url = reverse("auth:login")

        by_username = self.client.post(url, {"login": "dana", "password": "secret123"}, format="json")
        self.assertEqual(by_username.status_code, status.HTTP_200_OK, by_username.data)
        self.assertIn("refresh", by_username.data["tokens"])

        by_email = self.client.post(url, {"email": "dana@example.com", "password": "secret123"}, format="json")
        self.assertEqual(by_email.status_code, status.HTTP_200_OK, by_email.data)
        self.assertEqual(by_email.data["user"]["username"], "dana")

    def test_login_rejects_wrong_password_and_inactive_account(self) -> None:
        user = User.objects.create_user(username="eve", email="eve@example.com", password="secret123")
        url = reverse("auth:login")

        response = self.client.post(url, {"login": "eve", "password": "wrong-one"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        user.is_active = False
        user.save(update_fields=["is_active"])
        response = self.client.post(url, {"login": "eve", "password": "secret123"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("deactivated", response.data["error"])

    def test_bearer_token_grants_access_to_me(self) -> None:
        User.objects.create_user(username="finn", email="finn@example.com", password="secret123")
        login = self.client.post(reverse("auth:login"), {"login": "finn", "password": "secret123"}, format="json")
        token = login.data["tokens"]["access"]

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        response = self.client.get(reverse("auth:me"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["email"], "finn@example.com")

    def test_me_requires_authentication(self) -> None:
        response = self.client.get(reverse("auth:me"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["statusCode"], 401)

    def test_profile_update_and_password_change(self) -> None:
        user = User.objects.create_user(username="gina", email="gina@example.com", password="secret123")
        self.client.force_authenticate(user)

        response = self.client.patch(
            reverse("auth:profile"),
            {"full_name": "Gina Road", "phone": "+380501112233"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["full_name"], "Gina Road")

        wrong = self.client.put(
            reverse("auth:password"),
            {"current_password": "nope", "new_password": "another123"},
            format="json",
        )
        self.assertEqual(wrong.status_code, status.HTTP_400_BAD_REQUEST)

        ok = self.client.put(
            reverse("auth:password"),
            {"current_password": "secret123", "new_password": "another123"},
            format="json",
        )
        self.assertEqual(ok.status_code, status.HTTP_200_OK, ok.data)
        user.refresh_from_db()
        self.assertTrue(user.check_password("another123"))
