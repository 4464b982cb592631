"""Catalog provider base class and shared behavior."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..exceptions import NotFoundError, ValidationError
from ..models import Addon, Vehicle


class BaseCatalogProvider(ABC):
    """Read-only source of vehicles and per-vehicle add-ons."""

    catalog_id = "base"

    async def get_vehicle(self, vehicle_id: str) -> Vehicle:
        """Return a single vehicle from the catalog."""
        vehicle_id_value = self._require_id(vehicle_id, "vehicle_id")
        for vehicle in await self.list_vehicles():
            if vehicle.id == vehicle_id_value:
                return vehicle
        raise NotFoundError(f"Vehicle {vehicle_id_value} was not found.")

    def _require_id(self, value: object, field: str) -> str:
        if value is None or isinstance(value, bool):
            raise ValidationError(f"{field} is required.")
        text = str(value).strip()
        if not text:
            raise ValidationError(f"{field} is required.")
        return text

    def _optional_id(self, value: object, field: str) -> str | None:
        if value is None:
            return None
        return self._require_id(value, field)

    @abstractmethod
    async def list_vehicles(self) -> list[Vehicle]:
        """Return all rentable vehicles."""

    @abstractmethod
    async def list_addons(self, vehicle_id: str | None = None) -> list[Addon]:
        """Return add-ons for a vehicle, or the base tier when no vehicle is given."""
