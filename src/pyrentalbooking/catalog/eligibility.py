"""Add-on eligibility per vehicle.

Eligibility is tiered. Every vehicle gets the base tier, a listed set of
vehicles gets the mid tier on top, and the top tier adds the mid-tier add-ons
plus the premium ones. Membership is an explicit per-vehicle table, never
inferred from price.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from enum import Enum

from ..models import Addon


class Tier(Enum):
    BASE = "base"
    MID = "mid"
    TOP = "top"


ADDONS: Mapping[str, Addon] = {
    addon.id: addon
    for addon in (
        Addon("1", "GPS Navigation", Decimal("200")),
        Addon("2", "Child Seat", Decimal("150")),
        Addon("3", "WiFi Hotspot", Decimal("300")),
        Addon("4", "Driver Service", Decimal("1000")),
        Addon("5", "Insurance", Decimal("500")),
        Addon("6", "Roadside Assistance", Decimal("250")),
        Addon("7", "Premium Insurance", Decimal("800")),
        Addon("8", "Concierge Service", Decimal("1200")),
        Addon("9", "Chauffeur Service", Decimal("1500")),
        Addon("10", "Premium Sound System", Decimal("400")),
    )
}

TIER_ADDON_IDS: Mapping[Tier, tuple[str, ...]] = {
    Tier.BASE: ("1", "2", "5", "6"),
    Tier.MID: ("1", "2", "5", "6", "3"),
    Tier.TOP: ("1", "2", "5", "6", "3", "4", "7", "8", "9", "10"),
}

VEHICLE_TIERS: Mapping[str, Tier] = {
    "1": Tier.BASE,  # Sedan
    "2": Tier.MID,  # SUV
    "3": Tier.TOP,  # Luxury
    "4": Tier.MID,  # Van
}


def tier_for_vehicle(vehicle_id: str | None) -> Tier:
    if vehicle_id is None:
        return Tier.BASE
    return VEHICLE_TIERS.get(str(vehicle_id), Tier.BASE)


def resolve_addons(
    vehicle_id: str | None,
    *,
    addons: Mapping[str, Addon] = ADDONS,
) -> tuple[Addon, ...]:
    """Return the add-ons a vehicle may select, in display order."""
    tier = tier_for_vehicle(vehicle_id)
    return tuple(addons[addon_id] for addon_id in TIER_ADDON_IDS[tier] if addon_id in addons)
