"""Rental interval and cost calculations.

Pure functions over ``Decimal`` and ``datetime.date``; nothing here touches
the database, so the same rules back the booking service, the quote
endpoint and the reports.
"""

from __future__ import annotations

import datetime
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Sequence

from shared.domain.value_objects import DateRange, as_date

CENTS = Decimal("0.01")
DEFAULT_DEPOSIT_DAILY_RATE = Decimal("0.15")
DEFAULT_LATE_PENALTY_RATE = Decimal("0.5")


def money(value: Any) -> Decimal:
    """Coerce to a Decimal rounded to cents."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class BookedPeriod:
    """A date range during which a car is not bookable."""

    start_date: datetime.date
    end_date: datetime.date
    rental_id: int | None = None
    status: str | None = None


@dataclass(frozen=True)
class CostBreakdown:
    price: Decimal
    deposit: Decimal
    total: Decimal


def _period_bounds(period: Any) -> tuple[Any, Any]:
    if isinstance(period, (tuple, list)):
        return period[0], period[1]
    return period.start_date, period.end_date


def is_date_range_valid(start: Any, end: Any, booked: Iterable[Any] = ()) -> bool:
    """Check a candidate rental range against already booked periods.

    Returns ``False`` when a bound is missing, when ``start`` is after
    ``end`` or when the range shares at least one day with a booked
    period. Both ends of every range are inclusive.
    """
    try:
        start_date = as_date(start)
        end_date = as_date(end)
    except (TypeError, ValueError):
        return False
    if start_date is None or end_date is None:
        return False
    if start_date > end_date:
        return False

    candidate = DateRange(start_date, end_date)
    for period in booked:
        booked_start, booked_end = (as_date(value) for value in _period_bounds(period))
        if booked_start is None or booked_end is None or booked_end < booked_start:
            continue
        if candidate.overlaps_with(DateRange(booked_start, booked_end)):
            return False
    return True


def calculate_rental_price(days: int, price_per_day: Any) -> Decimal:
    return money(Decimal(days) * money(price_per_day))


def calculate_deposit(
    days: int,
    base_deposit: Any,
    price_per_day: Any,
    daily_rate: Decimal = DEFAULT_DEPOSIT_DAILY_RATE,
) -> Decimal:
    """Tiered deposit: the car's base deposit plus a share of the daily
    price for every day after the first."""
    extra_days = max(0, int(days) - 1)
    return money(money(base_deposit) + daily_rate * money(price_per_day) * extra_days)


def calculate_total_cost(
    days: int,
    price_per_day: Any,
    base_deposit: Any,
    daily_rate: Decimal = DEFAULT_DEPOSIT_DAILY_RATE,
) -> CostBreakdown:
    price = calculate_rental_price(days, price_per_day)
    deposit = calculate_deposit(days, base_deposit, price_per_day, daily_rate)
    return CostBreakdown(price=price, deposit=deposit, total=money(price + deposit))


def get_duration_days(duration: Any) -> int:
    """Convert a ``"min-max"`` duration preset to its rounded average.

    Malformed input falls back to a single day.
    """
    if not isinstance(duration, str) or "-" not in duration:
        return 1
    low_text, _, high_text = duration.partition("-")
    try:
        low = int(low_text.strip())
        high = int(high_text.strip())
    except ValueError:
        return 1
    if low < 1 or high < low:
        return 1
    return int((Decimal(low + high) / 2).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_days(start: Any, end: Any) -> int:
    """Whole days between two dates, never less than one."""
    start_date = as_date(start)
    end_date = as_date(end)
    return max(1, (end_date - start_date).days)


def calculate_late_penalty(
    price_per_day: Any,
    days_late: int,
    rate: Decimal = DEFAULT_LATE_PENALTY_RATE,
) -> Decimal:
    if days_late <= 0:
        return Decimal("0.00")
    return money(rate * money(price_per_day) * days_late)


# --- Pricing strategies ---------------------------------------------------


class PricingStrategy(ABC):
    """Computes the rental charge for a car over a number of days."""

    name = "abstract"

    @abstractmethod
    def calculate_price(self, car: Any, days: int) -> Decimal:
        raise NotImplementedError


class BasePricingStrategy(PricingStrategy):
    name = "base"

    def calculate_price(self, car: Any, days: int) -> Decimal:
        return money(car.price_per_day) * days


class YearBasedPricingStrategy(PricingStrategy):
    """Newer cars cost more, older cars less."""

    name = "year"

    def __init__(self, current_year: int | None = None) -> None:
        self.current_year = current_year

    @staticmethod
    def multiplier_for_age(age: int) -> Decimal:
        if age <= 2:
            return Decimal("1.2")
        if age <= 5:
            return Decimal("1.0")
        if age <= 10:
            return Decimal("0.9")
        return Decimal("0.8")

    def calculate_price(self, car: Any, days: int) -> Decimal:
        current_year = self.current_year or datetime.date.today().year
        age = current_year - int(car.year)
        return money(car.price_per_day) * days * self.multiplier_for_age(age)


class DurationBasedPricingStrategy(PricingStrategy):
    """Long rentals get a discount."""

    name = "duration"

    @staticmethod
    def discount_for_days(days: int) -> Decimal:
        if days >= 30:
            return Decimal("0.15")
        if days >= 14:
            return Decimal("0.10")
        if days >= 7:
            return Decimal("0.05")
        return Decimal("0")

    def calculate_price(self, car: Any, days: int) -> Decimal:
        return money(car.price_per_day) * days * (1 - self.discount_for_days(days))


class CombinedPricingStrategy(PricingStrategy):
    """Average of the member strategies; plain daily price when empty."""

    name = "combined"

    def __init__(self, strategies: Sequence[PricingStrategy]) -> None:
        self.strategies = list(strategies)

    def calculate_price(self, car: Any, days: int) -> Decimal:
        if not self.strategies:
            return money(car.price_per_day) * days
        total = sum((strategy.calculate_price(car, days) for strategy in self.strategies), Decimal("0"))
        return total / len(self.strategies)


STRATEGY_REGISTRY: dict[str, type[PricingStrategy]] = {
    BasePricingStrategy.name: BasePricingStrategy,
    YearBasedPricingStrategy.name: YearBasedPricingStrategy,
    DurationBasedPricingStrategy.name: DurationBasedPricingStrategy,
}


def build_pricing_strategy(names: Iterable[str]) -> CombinedPricingStrategy:
    strategies = []
    for name in names:
        try:
            strategies.append(STRATEGY_REGISTRY[name]())
        except KeyError:
            raise ValueError(f"Unknown pricing strategy: {name}") from None
    return CombinedPricingStrategy(strategies)


def rental_charge(strategy: PricingStrategy, car: Any, days: int) -> Decimal:
    return money(strategy.calculate_price(car, days))
