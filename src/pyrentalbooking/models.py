"""Public data models."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True, slots=True)
class Vehicle:
    id: str
    name: str
    cost_per_day: Decimal
    emoji: str = ""


@dataclass(frozen=True, slots=True)
class Addon:
    id: str
    name: str
    cost_per_day: Decimal


@dataclass(frozen=True, slots=True)
class BookingSummary:
    vehicle: Vehicle
    days: int
    base_cost: Decimal
    addons_cost: Decimal
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    selected_addons: tuple[Addon, ...]


@dataclass(frozen=True, slots=True)
class FieldError:
    """Validation message tied to a single booking field."""

    field: str
    code: str
    message: str
