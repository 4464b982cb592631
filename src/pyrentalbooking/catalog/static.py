"""Built-in reference catalog."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal

from ..models import Addon, Vehicle
from .base import BaseCatalogProvider
from .eligibility import ADDONS, resolve_addons

_LOGGER = logging.getLogger(__name__)

REFERENCE_VEHICLES: tuple[Vehicle, ...] = (
    Vehicle("1", "Sedan", Decimal("2500"), emoji="🚗"),
    Vehicle("2", "SUV", Decimal("3500"), emoji="🚙"),
    Vehicle("3", "Luxury", Decimal("5000"), emoji="🏎️"),
    Vehicle("4", "Van", Decimal("4000"), emoji="🚐"),
)


class StaticCatalogProvider(BaseCatalogProvider):
    """Catalog served from memory, without network access."""

    catalog_id = "static"

    def __init__(
        self,
        vehicles: Iterable[Vehicle] = REFERENCE_VEHICLES,
        addons: Mapping[str, Addon] = ADDONS,
    ) -> None:
        self._vehicles = tuple(vehicles)
        self._addons = dict(addons)

    async def list_vehicles(self) -> list[Vehicle]:
        _LOGGER.debug("Catalog %s list_vehicles started", self.catalog_id)
        vehicles = list(self._vehicles)
        _LOGGER.debug("Catalog %s list_vehicles completed (%d)", self.catalog_id, len(vehicles))
        return vehicles

    async def list_addons(self, vehicle_id: str | None = None) -> list[Addon]:
        vehicle_id_value = self._optional_id(vehicle_id, "vehicle_id")
        _LOGGER.debug(
            "Catalog %s list_addons started for vehicle %s",
            self.catalog_id,
            vehicle_id_value or "none",
        )
        addons = list(resolve_addons(vehicle_id_value, addons=self._addons))
        _LOGGER.debug("Catalog %s list_addons completed (%d)", self.catalog_id, len(addons))
        return addons
