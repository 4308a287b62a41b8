"""Query parameter parsing shared by analytics and reports."""

from __future__ import annotations

import datetime
from typing import Callable

from rest_framework import serializers  # type: ignore

from shared.domain.value_objects import DateRange, as_date


def parse_date_param(params, name: str) -> datetime.date | None:
    value = params.get(name)
    try:
        return as_date(value)
    except (TypeError, ValueError):
        raise serializers.ValidationError({name: "Date has wrong format. Use YYYY-MM-DD."}) from None


def period_from_params(
    params,
    default_start: Callable[[datetime.date], datetime.date],
    today: datetime.date,
) -> DateRange:
    """Read ``start_date``/``end_date``; missing bounds fall back to defaults.

    The end defaults to ``today`` and the start to ``default_start(end)``.
    """
    end = parse_date_param(params, "end_date") or today
    start = parse_date_param(params, "start_date") or default_start(end)
    if start > end:
        raise serializers.ValidationError({"start_date": "Start date must not be after end date."})
    return DateRange(start, end)


def positive_int_param(params, name: str, default: int, maximum: int = 100) -> int:
    value = params.get(name)
    if value in (None, ""):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise serializers.ValidationError({name: "A valid integer is required."}) from None
    if number < 1:
        raise serializers.ValidationError({name: "Must be at least 1."})
    return min(number, maximum)
