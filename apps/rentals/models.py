"""Rental domain models for AutoRent."""

from __future__ import annotations

from decimal import Decimal

from django.db import models  # type: ignore
from django.db.models import Sum  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Rental(models.Model):
    """A car booked by a client over a range of days."""

    class Status(models.TextChoices):
        ACTIVE = "active", _("Active")
        COMPLETED = "completed", _("Completed")
        CANCELLED = "cancelled", _("Cancelled")

    client = models.ForeignKey(
        "clients.Client",
        on_delete=models.PROTECT,
        related_name="rentals",
    )
    car = models.ForeignKey(
        "cars.Car",
        on_delete=models.PROTECT,
        related_name="rentals",
    )
    start_date = models.DateField(_("Start date"))
    expected_end_date = models.DateField(_("Expected end date"))
    actual_end_date = models.DateField(_("Actual end date"), null=True, blank=True)
    deposit_amount = models.DecimalField(max_digits=10, decimal_places=2)
    total_cost = models.DecimalField(max_digits=10, decimal_places=2)
    penalty_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Rental")
        verbose_name_plural = _("Rentals")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["car", "status"], name="rental_car_status_idx"),
            models.Index(fields=["status", "start_date"], name="rental_status_start_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(expected_end_date__gt=models.F("start_date")),
                name="rental_end_after_start",
            ),
        ]

    def __str__(self) -> str:
        return f"Rental #{self.pk} {self.car_id} {self.start_date}–{self.expected_end_date}"

    @property
    def effective_end_date(self):
        return self.actual_end_date or self.expected_end_date

    @property
    def is_active(self) -> bool:
        return self.status == self.Status.ACTIVE

    def sync_penalty_amount(self) -> Decimal:
        """Store the sum of attached penalties on the rental."""
        total = self.penalties.aggregate(total=Sum("amount"))["total"] or Decimal("0.00")
        self.penalty_amount = total
        self.save(update_fields=["penalty_amount", "updated_at"])
        return total


class Penalty(models.Model):
    """A monetary charge attached to a rental: late return, damage and so on."""

    rental = models.ForeignKey(Rental, on_delete=models.CASCADE, related_name="penalties")
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    reason = models.CharField(max_length=500)
    date = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Penalty")
        verbose_name_plural = _("Penalties")
        ordering = ["-date"]

    def __str__(self) -> str:
        return f"{self.amount} for rental #{self.rental_id}: {self.reason}"
