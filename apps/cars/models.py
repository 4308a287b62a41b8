"""Fleet models."""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Car(models.Model):
    """A rentable vehicle with its tariff and optional specifications."""

    class Type(models.TextChoices):
        ECONOMY = "economy", _("Economy")
        BUSINESS = "business", _("Business")
        PREMIUM = "premium", _("Premium")

    class Status(models.TextChoices):
        AVAILABLE = "available", _("Available")
        RENTED = "rented", _("Rented")
        MAINTENANCE = "maintenance", _("Maintenance")

    brand = models.CharField(_("Brand"), max_length=100)
    model = models.CharField(_("Model"), max_length=100)
    year = models.PositiveIntegerField(_("Year"))
    type = models.CharField(_("Type"), max_length=20, choices=Type.choices, default=Type.ECONOMY)
    price_per_day = models.DecimalField(
        _("Price per day"),
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    deposit = models.DecimalField(
        _("Deposit"),
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    status = models.CharField(
        _("Status"), max_length=20, choices=Status.choices, default=Status.AVAILABLE
    )
    description = models.TextField(_("Description"), blank=True)
    image_url = models.CharField(_("Main image"), max_length=500, blank=True)
    # JSON encoded list of additional image URLs
    image_urls = models.TextField(_("Additional images"), blank=True, default="")

    body_type = models.CharField(_("Body type"), max_length=50, blank=True)
    drive_type = models.CharField(_("Drive type"), max_length=50, blank=True)
    transmission = models.CharField(_("Transmission"), max_length=50, blank=True)
    engine = models.CharField(_("Engine"), max_length=100, blank=True)
    fuel_type = models.CharField(_("Fuel type"), max_length=50, blank=True)
    seats = models.PositiveSmallIntegerField(_("Seats"), null=True, blank=True)
    mileage = models.PositiveIntegerField(_("Mileage"), null=True, blank=True)
    color = models.CharField(_("Color"), max_length=50, blank=True)
    features = models.TextField(_("Features"), blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Car")
        verbose_name_plural = _("Cars")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="car_status_idx"),
            models.Index(fields=["type"], name="car_type_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.brand} {self.model} ({self.year})"

    def is_in_maintenance(self) -> bool:
        return self.status == self.Status.MAINTENANCE
