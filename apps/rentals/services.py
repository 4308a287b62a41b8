"""Domain services for rental workflows."""

from __future__ import annotations

import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import structlog
from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from django.db.models import Q  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.cars.models import Car
from apps.clients.models import Client

from .pricing import (
    BookedPeriod,
    PricingStrategy,
    build_pricing_strategy,
    calculate_days,
    calculate_deposit,
    calculate_late_penalty,
    is_date_range_valid,
    money,
    rental_charge,
)

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from .models import Penalty, Rental

logger = structlog.get_logger(__name__)

LATE_RETURN_REASON = "Late return"


class RentalError(Exception):
    """Base class for rental workflow errors."""


class RentalValidationError(RentalError):
    """Input dates or amounts break a rental rule."""


class CarUnavailableError(RentalError):
    """The car cannot be rented right now (maintenance)."""


class BookingConflictError(RentalError):
    """Raised when a car is already booked for requested dates."""


class RentalStateError(RentalError):
    """The rental is not in a state that allows the operation."""


def current_date() -> datetime.date:
    return timezone.localdate()


def get_pricing_strategy() -> PricingStrategy:
    return build_pricing_strategy(getattr(settings, "RENTAL_PRICING_STRATEGIES", ["base", "year", "duration"]))


def _deposit_rate() -> Decimal:
    return getattr(settings, "RENTAL_DEPOSIT_DAILY_RATE", Decimal("0.15"))


def _late_penalty_rate() -> Decimal:
    return getattr(settings, "RENTAL_LATE_PENALTY_RATE", Decimal("0.5"))


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def blocking_rentals(car, *, on: datetime.date | None = None, exclude_rental_id=None):
    """Rentals that keep a car busy.

    Active rentals always block. Completed and cancelled rentals keep
    blocking until their effective end (actual, else expected) passes.
    """
    from .models import Rental  # Local import to prevent circular dependency

    on = on or current_date()
    finished = (Rental.Status.COMPLETED, Rental.Status.CANCELLED)
    qs = Rental.objects.filter(car=car).filter(
        Q(status=Rental.Status.ACTIVE)
        | Q(status__in=finished, actual_end_date__gte=on)
        | Q(status__in=finished, actual_end_date__isnull=True, expected_end_date__gte=on)
    )
    if exclude_rental_id is not None:
        qs = qs.exclude(pk=exclude_rental_id)
    return qs


def get_booked_periods(car, today: datetime.date | None = None) -> list[BookedPeriod]:
    """Periods a car cannot be booked for, ordered by start date."""
    periods = []
    for rental in blocking_rentals(car, on=today).order_by("start_date"):
        end = rental.effective_end_date
        if end < rental.start_date:
            # Cancelled before it started: occupies no days.
            continue
        periods.append(
            BookedPeriod(
                start_date=rental.start_date,
                end_date=end,
                rental_id=rental.pk,
                status=rental.status,
            )
        )
    return periods


def ensure_car_is_available(car, start_date, end_date, *, exclude_rental_id=None, on=None) -> None:
    """Raise when the car is busy for any day of ``start_date``..``end_date``."""
    qs = _lock_queryset_if_possible(blocking_rentals(car, on=on, exclude_rental_id=exclude_rental_id))
    booked = [
        (rental.start_date, rental.effective_end_date)
        for rental in qs
    ]
    if not is_date_range_valid(start_date, end_date, booked):
        raise BookingConflictError(
            "Car is already booked for the selected dates. Please choose different dates."
        )


def validate_rental_dates(start_date, expected_end_date, *, today: datetime.date | None = None) -> None:
    if start_date is None or expected_end_date is None:
        raise RentalValidationError("Start date and expected end date are required.")
    if start_date >= expected_end_date:
        raise RentalValidationError("Start date must be before expected end date.")
    if start_date < (today or current_date()):
        raise RentalValidationError("Start date cannot be in the past.")


def quote_rental(car, start_date, end_date, *, strategy: PricingStrategy | None = None) -> dict[str, Any]:
    """Price a prospective rental without persisting anything."""
    days = calculate_days(start_date, end_date)
    strategy = strategy or get_pricing_strategy()
    price = rental_charge(strategy, car, days)
    deposit = calculate_deposit(days, car.deposit, car.price_per_day, _deposit_rate())
    return {
        "days": days,
        "price": price,
        "deposit": deposit,
        "total": money(price + deposit),
        "available": is_date_range_valid(start_date, end_date, get_booked_periods(car)),
    }


@transaction.atomic
def create_rental(client, car, start_date, expected_end_date, *, today: datetime.date | None = None) -> "Rental":
    """Book ``car`` for ``client`` and mark the car rented."""
    from .models import Rental

    today = today or current_date()
    validate_rental_dates(start_date, expected_end_date, today=today)

    # Serialise concurrent bookings of one car on the car row.
    car = _lock_queryset_if_possible(Car.objects.filter(pk=car.pk)).get()
    if car.is_in_maintenance():
        raise CarUnavailableError("Car is in maintenance and cannot be rented.")

    ensure_car_is_available(car, start_date, expected_end_date, on=today)

    days = calculate_days(start_date, expected_end_date)
    rental = Rental.objects.create(
        client=client,
        car=car,
        start_date=start_date,
        expected_end_date=expected_end_date,
        deposit_amount=calculate_deposit(days, car.deposit, car.price_per_day, _deposit_rate()),
        total_cost=rental_charge(get_pricing_strategy(), car, days),
        penalty_amount=Decimal("0.00"),
        status=Rental.Status.ACTIVE,
    )

    car.status = Car.Status.RENTED
    car.save(update_fields=["status", "updated_at"])

    logger.info(
        "rental.created",
        rental_id=rental.pk,
        car_id=car.pk,
        client_id=client.pk,
        start_date=str(start_date),
        expected_end_date=str(expected_end_date),
        total_cost=str(rental.total_cost),
    )
    return rental


def _release_car(rental: "Rental") -> None:
    """Return the car to the available pool unless something else holds it."""
    from .models import Rental

    car = rental.car
    if car.is_in_maintenance():
        return
    has_other_active = (
        Rental.objects.filter(car=car, status=Rental.Status.ACTIVE).exclude(pk=rental.pk).exists()
    )
    if has_other_active:
        return
    car.status = Car.Status.AVAILABLE
    car.save(update_fields=["status", "updated_at"])


def _charge_late_return(rental: "Rental", end_date: datetime.date) -> Decimal:
    from .models import Penalty

    days_late = (end_date - rental.expected_end_date).days
    amount = calculate_late_penalty(rental.car.price_per_day, days_late, _late_penalty_rate())
    if amount > 0:
        Penalty.objects.create(
            rental=rental,
            amount=amount,
            reason=f"{LATE_RETURN_REASON}: {days_late} day(s)",
        )
    return amount


def _lock_rental(rental: "Rental") -> "Rental":
    """Lock the car row, then the rental row.

    Bookings lock the car before its rentals; closing a rental keeps the
    same order.
    """
    from .models import Rental

    _lock_queryset_if_possible(Car.objects.filter(pk=rental.car_id)).get()
    return _lock_queryset_if_possible(Rental.objects.select_related("car", "client").filter(pk=rental.pk)).get()


@transaction.atomic
def complete_rental(rental: "Rental", actual_end_date: datetime.date | None = None) -> "Rental":
    """Close an active rental on return of the car.

    Charges for the days actually used. An early return also shrinks the
    deposit to the actual duration; a late return adds a late penalty.
    """
    rental = _lock_rental(rental)
    if not rental.is_active:
        raise RentalStateError("Rental is not active.")

    end_date = actual_end_date or current_date()
    if end_date < rental.start_date:
        raise RentalValidationError("Actual end date cannot be before start date.")

    car = rental.car
    actual_days = calculate_days(rental.start_date, end_date)
    rental.total_cost = rental_charge(get_pricing_strategy(), car, actual_days)
    if end_date < rental.expected_end_date:
        rental.deposit_amount = calculate_deposit(actual_days, car.deposit, car.price_per_day, _deposit_rate())

    late_fee = _charge_late_return(rental, end_date)

    rental.actual_end_date = end_date
    rental.status = rental.Status.COMPLETED
    rental.save(update_fields=["total_cost", "deposit_amount", "actual_end_date", "status", "updated_at"])
    rental.sync_penalty_amount()
    _release_car(rental)

    logger.info(
        "rental.completed",
        rental_id=rental.pk,
        actual_end_date=str(end_date),
        actual_days=actual_days,
        total_cost=str(rental.total_cost),
        late_fee=str(late_fee),
    )
    return rental


@transaction.atomic
def cancel_rental(rental: "Rental", cancellation_date: datetime.date | None = None) -> "Rental":
    """Cancel an active rental.

    Before the start date nothing is charged. Afterwards the days used are
    charged (at least one) and a late penalty applies past the expected end.
    """
    rental = _lock_rental(rental)
    if not rental.is_active:
        raise RentalStateError("Only active rentals can be cancelled.")

    cancel_date = cancellation_date or current_date()
    late_fee = Decimal("0.00")
    if cancel_date < rental.start_date:
        rental.total_cost = Decimal("0.00")
    else:
        days_used = calculate_days(rental.start_date, cancel_date)
        rental.total_cost = rental_charge(get_pricing_strategy(), rental.car, days_used)
        late_fee = _charge_late_return(rental, cancel_date)

    rental.actual_end_date = cancel_date
    rental.status = rental.Status.CANCELLED
    rental.save(update_fields=["total_cost", "actual_end_date", "status", "updated_at"])
    rental.sync_penalty_amount()
    _release_car(rental)

    logger.info(
        "rental.cancelled",
        rental_id=rental.pk,
        cancellation_date=str(cancel_date),
        total_cost=str(rental.total_cost),
        late_fee=str(late_fee),
    )
    return rental


@transaction.atomic
def add_penalty(rental: "Rental", amount, reason: str, date: datetime.datetime | None = None) -> "Penalty":
    from .models import Penalty

    amount = money(amount)
    if amount <= 0:
        raise RentalValidationError("Penalty amount must be greater than zero.")
    reason = (reason or "").strip()
    if not reason:
        raise RentalValidationError("Penalty reason is required.")

    rental = _lock_rental(rental)
    penalty = Penalty.objects.create(rental=rental, amount=amount, reason=reason, date=date or timezone.now())
    rental.sync_penalty_amount()
    logger.info("penalty.added", rental_id=rental.pk, penalty_id=penalty.pk, amount=str(amount))
    return penalty


@transaction.atomic
def remove_penalty(penalty: "Penalty") -> None:
    rental = _lock_rental(penalty.rental)
    penalty_id = penalty.pk
    penalty.delete()
    rental.sync_penalty_amount()
    logger.info("penalty.removed", rental_id=rental.pk, penalty_id=penalty_id)


# --- Self-service booking -------------------------------------------------


@transaction.atomic
def get_or_create_client_for_user(user) -> Client:
    """Client record behind a customer account.

    Uses the linked record when there is one, otherwise adopts an unlinked
    client with the same email, otherwise registers a new client.
    """
    client = Client.objects.filter(user=user).first()
    if client is not None:
        return client

    if user.email:
        client = (
            Client.objects.filter(user__isnull=True, email__iexact=user.email)
            .order_by("id")
            .first()
        )
        if client is not None:
            client.user = user
            client.save(update_fields=["user", "updated_at"])
            logger.info("client.linked_to_user", client_id=client.pk, user_id=user.pk)
            return client

    client = Client.objects.create(
        user=user,
        full_name=user.full_name or user.get_username(),
        address=user.address or "",
        phone=user.phone or "",
        email=user.email or "",
    )
    logger.info("client.created_for_user", client_id=client.pk, user_id=user.pk)
    return client


def create_booking_for_user(user, car, start_date, expected_end_date) -> "Rental":
    client = get_or_create_client_for_user(user)
    return create_rental(client, car, start_date, expected_end_date)


def rentals_for_user(user):
    from .models import Rental

    return (
        Rental.objects.select_related("car", "client")
        .filter(client__user=user)
        .order_by("-created_at")
    )


def user_owns_rental(user, rental: "Rental") -> bool:
    return rental.client.user_id is not None and rental.client.user_id == user.pk
