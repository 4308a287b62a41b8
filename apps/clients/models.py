"""Client registry models."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Client(models.Model):
    """A person who rents cars from the office.

    Walk-in clients are registered by staff and have no account; a client
    created through self-service booking is linked to its user account.
    """

    full_name = models.CharField(_("Full name"), max_length=255)
    address = models.CharField(_("Address"), max_length=255, blank=True)
    phone = models.CharField(_("Phone"), max_length=32, blank=True, db_index=True)
    email = models.EmailField(_("Email"), blank=True)
    registration_date = models.DateTimeField(_("Registration date"), default=timezone.now)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="client_profile",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Client")
        verbose_name_plural = _("Clients")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.full_name} ({self.phone})" if self.phone else self.full_name
