"""Quote calculation and the confirmation gate."""

from __future__ import annotations

import math
from collections.abc import Iterable
from decimal import Decimal

from .models import Addon, BookingSummary, Vehicle
from .util import DateInput, parse_calendar_date

TAX_RATE = Decimal("0.18")
_SECONDS_PER_DAY = 86400


def rental_days(pickup: DateInput, dropoff: DateInput) -> int:
    """Return the whole-day span between two dates, or 0 if either is missing."""
    pickup_date = parse_calendar_date(pickup)
    dropoff_date = parse_calendar_date(dropoff)
    if pickup_date is None or dropoff_date is None:
        return 0
    seconds = abs((dropoff_date - pickup_date).total_seconds())
    return math.ceil(seconds / _SECONDS_PER_DAY)


def resolve_selected_addons(
    available: Iterable[Addon],
    selected_ids: Iterable[str],
) -> tuple[Addon, ...]:
    """Return available add-ons whose id is selected, in catalog order."""
    wanted = set(selected_ids)
    return tuple(addon for addon in available if addon.id in wanted)


def calculate_summary(
    vehicle: Vehicle | None,
    days: int,
    addons: Iterable[Addon],
) -> BookingSummary | None:
    """Price a completed selection.

    Returns None when there is nothing to price yet, so callers can tell
    "not computable" apart from a zero quote.
    """
    if vehicle is None or days <= 0:
        return None
    selected = tuple(addons)
    base_cost = vehicle.cost_per_day * days
    addons_cost = sum((addon.cost_per_day * days for addon in selected), Decimal(0))
    subtotal = base_cost + addons_cost
    tax = subtotal * TAX_RATE
    return BookingSummary(
        vehicle=vehicle,
        days=days,
        base_cost=base_cost,
        addons_cost=addons_cost,
        subtotal=subtotal,
        tax=tax,
        total=subtotal + tax,
        selected_addons=selected,
    )


def is_booking_valid(vehicle: Vehicle | None, pickup: DateInput, dropoff: DateInput) -> bool:
    if vehicle is None:
        return False
    if not pickup or not dropoff:
        return False
    return rental_days(pickup, dropoff) > 0
