"""User domain models for AutoRent.

Office staff and customers share one account table. Staff roles
(admin, manager, employee) run the rental office; the ``user`` role is a
customer who can browse the fleet and book cars for themselves.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth.models import AbstractUser, BaseUserManager  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class UserManager(BaseUserManager):
    """Manager creating accounts by username with a mandatory email."""

    use_in_migrations = True

    def _create_user(self, username: str, email: str, password: str | None, **extra_fields: Any):
        if not username:
            raise ValueError("Username is required.")
        if not email:
            raise ValueError("Email is required.")
        email = self.normalize_email(email)
        username = self.model.normalize_username(username)

        user = self.model(username=username, email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, username: str, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("role", User.Role.EMPLOYEE)
        return self._create_user(username, email, password, **extra_fields)

    def create_superuser(self, username: str, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", User.Role.ADMIN)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(username, email, password, **extra_fields)

    def find_by_login(self, login: str):
        """Return the account whose username or email equals ``login``."""
        login = (login or "").strip()
        if not login:
            return None
        return (
            self.filter(models.Q(username=login) | models.Q(email__iexact=login))
            .order_by("id")
            .first()
        )


class User(AbstractUser):
    """Account with one of four roles."""

    class Role(models.TextChoices):
        ADMIN = "admin", _("Administrator")
        MANAGER = "manager", _("Manager")
        EMPLOYEE = "employee", _("Employee")
        USER = "user", _("Customer")

    STAFF_ROLES = (Role.ADMIN, Role.MANAGER, Role.EMPLOYEE)

    email = models.EmailField(_("Email"), unique=True)
    role = models.CharField(
        _("Role"),
        max_length=20,
        choices=Role.choices,
        default=Role.EMPLOYEE,
    )
    full_name = models.CharField(_("Full name"), max_length=255, blank=True)
    address = models.CharField(_("Address"), max_length=255, blank=True)
    phone = models.CharField(_("Phone"), max_length=20, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "username"
    REQUIRED_FIELDS = ["email"]

    class Meta:
        verbose_name = _("User")
        verbose_name_plural = _("Users")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.username} ({self.get_role_display()})"

    # --- Role helpers -------------------------------------------------------
    def is_admin(self) -> bool:
        return self.role == self.Role.ADMIN or self.is_superuser

    def is_manager(self) -> bool:
        return self.role == self.Role.MANAGER

    def is_customer(self) -> bool:
        return self.role == self.Role.USER and not self.is_superuser

    def is_staff_member(self) -> bool:
        return self.role in self.STAFF_ROLES or self.is_superuser

    def is_admin_or_manager(self) -> bool:
        return self.is_admin() or self.is_manager()
