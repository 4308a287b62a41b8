"""Domain services for the client registry."""

from __future__ import annotations

from typing import Any

import structlog
from django.db import transaction  # type: ignore
from django.db.models import Q  # type: ignore

from .models import Client

logger = structlog.get_logger(__name__)


class ClientPhoneConflictError(Exception):
    """Raised when a phone number already belongs to another client."""


def normalize_phone(phone: str | None) -> str:
    return (phone or "").strip()


def phone_is_taken(phone: str | None, *, exclude_id: int | None = None) -> bool:
    phone = normalize_phone(phone)
    if not phone:
        return False
    qs = Client.objects.filter(phone=phone)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return qs.exists()


def find_by_phone(phone: str | None) -> Client | None:
    phone = normalize_phone(phone)
    if not phone:
        return None
    return Client.objects.filter(phone=phone).order_by("id").first()


@transaction.atomic
def register_or_get_client(data: dict[str, Any]) -> tuple[Client, bool]:
    """Return the client owning ``data['phone']`` or register a new one."""
    existing = find_by_phone(data.get("phone"))
    if existing is not None:
        return existing, False
    client = Client.objects.create(**data)
    logger.info("client.registered", client_id=client.pk)
    return client, True


def search_clients(text: str | None):
    """Free text search over name, phone and address."""
    qs = Client.objects.all()
    text = (text or "").strip()
    if not text:
        return qs
    return qs.filter(
        Q(full_name__icontains=text) | Q(phone__icontains=text) | Q(address__icontains=text)
    )
