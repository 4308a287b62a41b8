"""Tests for rental interval and cost calculations."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from apps.rentals.pricing import (
    BasePricingStrategy,
    BookedPeriod,
    CombinedPricingStrategy,
    DurationBasedPricingStrategy,
    YearBasedPricingStrategy,
    build_pricing_strategy,
    calculate_days,
    calculate_deposit,
    calculate_late_penalty,
    calculate_rental_price,
    calculate_total_cost,
    get_duration_days,
    is_date_range_valid,
    rental_charge,
)

BOOKED = [(date(2024, 1, 10), date(2024, 1, 15))]


@pytest.mark.parametrize(
    "start, end",
    [
        (date(2024, 1, 8), date(2024, 1, 10)),
        (date(2024, 1, 15), date(2024, 1, 18)),
        (date(2024, 1, 11), date(2024, 1, 12)),
        (date(2024, 1, 1), date(2024, 1, 31)),
    ],
)
def test_overlapping_ranges_are_rejected(start, end) -> None:
    assert is_date_range_valid(start, end, BOOKED) is False


@pytest.mark.parametrize(
    "start, end",
    [
        (date(2024, 1, 1), date(2024, 1, 9)),
        (date(2024, 1, 16), date(2024, 1, 20)),
    ],
)
def test_free_ranges_are_accepted(start, end) -> None:
    assert is_date_range_valid(start, end, BOOKED) is True


def test_missing_or_inverted_bounds_are_invalid() -> None:
    assert is_date_range_valid(None, date(2024, 1, 2)) is False
    assert is_date_range_valid(date(2024, 1, 2), None) is False
    assert is_date_range_valid(date(2024, 1, 5), date(2024, 1, 2)) is False
    assert is_date_range_valid("not-a-date", "2024-01-02") is False


def test_accepts_iso_strings_and_booked_period_objects() -> None:
    booked = [BookedPeriod(start_date=date(2024, 1, 10), end_date=date(2024, 1, 15))]
    assert is_date_range_valid("2024-01-14", "2024-01-20", booked) is False
    assert is_date_range_valid("2024-01-16", "2024-01-20", booked) is True


def test_total_cost_for_single_day() -> None:
    cost = calculate_total_cost(1, 500, 1000)
    assert cost.price == Decimal("500.00")
    assert cost.deposit == Decimal("1000.00")
    assert cost.total == Decimal("1500.00")


def test_total_cost_for_three_days() -> None:
    cost = calculate_total_cost(3, 500, 1000)
    assert cost.price == Decimal("1500.00")
    assert cost.deposit == Decimal("1150.00")
    assert cost.total == Decimal("2650.00")


def test_deposit_never_drops_below_base() -> None:
    assert calculate_deposit(0, 1000, 500) == Decimal("1000.00")
    assert calculate_deposit(1, 1000, 500) == Decimal("1000.00")
    assert calculate_deposit(2, Decimal("1000.00"), Decimal("500.00")) == Decimal("1075.00")


def test_rental_price() -> None:
    assert calculate_rental_price(4, "249.99") == Decimal("999.96")


@pytest.mark.parametrize(
    "duration, expected",
    [
        ("1-3", 2),
        ("7-14", 11),
        ("3-3", 3),
        ("abc", 1),
        ("5", 1),
        ("0-4", 1),
        ("5-2", 1),
        ("x-y", 1),
        (None, 1),
    ],
)
def test_get_duration_days(duration, expected) -> None:
    assert get_duration_days(duration) == expected


def test_calculate_days_minimum_one() -> None:
    assert calculate_days(date(2024, 3, 1), date(2024, 3, 1)) == 1
    assert calculate_days(date(2024, 3, 1), date(2024, 3, 4)) == 3


def test_late_penalty_is_half_daily_rate_per_day() -> None:
    assert calculate_late_penalty(500, 2) == Decimal("500.00")
    assert calculate_late_penalty(500, 0) == Decimal("0.00")
    assert calculate_late_penalty(500, -3) == Decimal("0.00")


def _car(price="100.00", year=2020):
    return SimpleNamespace(price_per_day=Decimal(price), year=year)


@pytest.mark.parametrize(
    "year, expected",
    [
        (2023, Decimal("120.0")),
        (2020, Decimal("100.0")),
        (2016, Decimal("90.0")),
        (2010, Decimal("80.0")),
    ],
)
def test_year_based_multipliers(year, expected) -> None:
    strategy = YearBasedPricingStrategy(current_year=2024)
    assert strategy.calculate_price(_car(year=year), 1) == expected


@pytest.mark.parametrize(
    "days, expected",
    [
        (6, Decimal("600")),
        (7, Decimal("665")),
        (14, Decimal("1260")),
        (30, Decimal("2550")),
    ],
)
def test_duration_discounts(days, expected) -> None:
    assert DurationBasedPricingStrategy().calculate_price(_car(), days) == expected


def test_combined_strategy_averages_members() -> None:
    strategy = CombinedPricingStrategy(
        [BasePricingStrategy(), YearBasedPricingStrategy(current_year=2024), DurationBasedPricingStrategy()]
    )
    # base 700, year (age 4) 700, duration 665
    assert rental_charge(strategy, _car(year=2020), 7) == Decimal("688.33")


def test_empty_combined_strategy_uses_base_price() -> None:
    assert CombinedPricingStrategy([]).calculate_price(_car(), 3) == Decimal("300.00")


def test_build_pricing_strategy_rejects_unknown_names() -> None:
    assert len(build_pricing_strategy(["base", "duration"]).strategies) == 2
    with pytest.raises(ValueError):
        build_pricing_strategy(["base", "weather"])
