"""In-flight booking state and its transitions.

``BookingSession`` owns one booking selection: vehicle, pickup and dropoff
dates, chosen add-ons and the confirmation flag. It is changed only through
the transition methods below. User-facing rejections never raise; they leave
the state as it was and record a ``FieldError`` for the affected field.

Add-ons are scoped to the selected vehicle. Selecting a vehicle drops the
previous add-on catalog and selections and starts a fetch for the new vehicle.
Each fetch is tagged with the vehicle id that started it, and a result whose
tag no longer matches the current vehicle is discarded on arrival.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from datetime import date
from enum import Enum

from .catalog.base import BaseCatalogProvider
from .exceptions import PyRentalBookingError, ValidationError
from .models import Addon, BookingSummary, FieldError, Vehicle
from .pricing import calculate_summary, is_booking_valid, rental_days, resolve_selected_addons
from .util import (
    DateInput,
    is_complete_date,
    is_not_past,
    is_valid_dropoff,
    min_dropoff_date,
    normalize_date_input,
    today,
)

_LOGGER = logging.getLogger(__name__)

PICKUP_FIELD = "pickup_date"
DROPOFF_FIELD = "dropoff_date"

INVALID_PICKUP_DATE = "invalid_pickup_date"
INVALID_DROPOFF_DATE = "invalid_dropoff_date"
PAST_DATE = "past_date"

MESSAGES = {
    INVALID_PICKUP_DATE: "Pickup date must be a valid date, today or later.",
    INVALID_DROPOFF_DATE: "Drop-off date must be after the pickup date.",
    PAST_DATE: "Date cannot be in the past.",
}


class BookingStage(Enum):
    EMPTY = "empty"
    VEHICLE_SELECTED = "vehicle_selected"
    DATES_PENDING = "dates_pending"
    READY = "ready"
    CONFIRMED = "confirmed"


class CatalogStatus(Enum):
    NOT_LOADED = "not_loaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class BookingSession:
    """State holder for a single booking being configured."""

    def __init__(
        self,
        catalog: BaseCatalogProvider | None = None,
        *,
        today: Callable[[], date] = today,
    ) -> None:
        self._catalog = catalog
        self._today = today
        self._vehicles: tuple[Vehicle, ...] = ()
        self._vehicles_status = CatalogStatus.NOT_LOADED
        self.catalog_error: PyRentalBookingError | None = None
        self._vehicle: Vehicle | None = None
        self._pickup = ""
        self._dropoff = ""
        self._selected_addon_ids: list[str] = []
        self._available_addons: tuple[Addon, ...] = ()
        self._addons_status = CatalogStatus.NOT_LOADED
        self._show_confirmation = False
        self._field_errors: dict[str, FieldError] = {}
        self._addons_task: asyncio.Task[bool] | None = None

    # Read access

    @property
    def vehicles(self) -> tuple[Vehicle, ...]:
        return self._vehicles

    @property
    def vehicles_status(self) -> CatalogStatus:
        return self._vehicles_status

    @property
    def vehicle(self) -> Vehicle | None:
        return self._vehicle

    @property
    def pickup_date(self) -> str:
        return self._pickup

    @property
    def dropoff_date(self) -> str:
        return self._dropoff

    @property
    def selected_addon_ids(self) -> tuple[str, ...]:
        return tuple(self._selected_addon_ids)

    @property
    def available_addons(self) -> tuple[Addon, ...]:
        return self._available_addons

    @property
    def addons_status(self) -> CatalogStatus:
        return self._addons_status

    @property
    def show_confirmation(self) -> bool:
        return self._show_confirmation and self.is_valid

    @property
    def field_errors(self) -> dict[str, FieldError]:
        return dict(self._field_errors)

    @property
    def min_dropoff_date(self) -> date:
        return min_dropoff_date(self._pickup, self._today())

    @property
    def days(self) -> int:
        return rental_days(self._pickup, self._dropoff)

    @property
    def summary(self) -> BookingSummary | None:
        """Quote for the current selection, recomputed on every read."""
        if not self._pickup or not self._dropoff:
            return None
        addons = resolve_selected_addons(self._available_addons, self._selected_addon_ids)
        return calculate_summary(self._vehicle, self.days, addons)

    @property
    def is_valid(self) -> bool:
        return is_booking_valid(self._vehicle, self._pickup, self._dropoff)

    @property
    def stage(self) -> BookingStage:
        if self._vehicle is None:
            return BookingStage.EMPTY
        if self.show_confirmation:
            return BookingStage.CONFIRMED
        if self.is_valid:
            return BookingStage.READY
        if self._pickup or self._dropoff:
            return BookingStage.DATES_PENDING
        return BookingStage.VEHICLE_SELECTED

    # Catalog

    async def load_vehicles(self) -> tuple[Vehicle, ...]:
        """Fetch the vehicle list once per session; call again to retry."""
        if self._vehicles_status is CatalogStatus.LOADED:
            return self._vehicles
        if self._catalog is None:
            return self._vehicles
        self._vehicles_status = CatalogStatus.LOADING
        self.catalog_error = None
        try:
            vehicles = await self._catalog.list_vehicles()
        except PyRentalBookingError as exc:
            _LOGGER.warning("Failed to fetch vehicles: %s", exc)
            self._vehicles_status = CatalogStatus.FAILED
            self.catalog_error = exc
            return self._vehicles
        self._vehicles = tuple(vehicles)
        self._vehicles_status = CatalogStatus.LOADED
        _LOGGER.info("Loaded %d vehicles", len(self._vehicles))
        return self._vehicles

    async def load_addons(self) -> bool:
        """Fetch add-ons for the current vehicle and apply them if still current."""
        vehicle_id = self._vehicle.id if self._vehicle is not None else None
        if self._catalog is None or vehicle_id is None:
            return False
        self._addons_status = CatalogStatus.LOADING
        try:
            addons = await self._catalog.list_addons(vehicle_id)
        except PyRentalBookingError as exc:
            return self._fail_addons(vehicle_id, exc)
        return self.apply_addons(vehicle_id, addons)

    def apply_addons(self, vehicle_id: str, addons: Iterable[Addon]) -> bool:
        """Apply a fetched add-on list tagged with the vehicle that requested it.

        Returns False and leaves the state untouched when the tag no longer
        matches the selected vehicle.
        """
        if self._vehicle is None or self._vehicle.id != vehicle_id:
            _LOGGER.warning("Discarding stale addons for vehicle %s", vehicle_id)
            return False
        self._available_addons = tuple(addons)
        self._addons_status = CatalogStatus.LOADED
        available_ids = {addon.id for addon in self._available_addons}
        self._selected_addon_ids = [
            addon_id for addon_id in self._selected_addon_ids if addon_id in available_ids
        ]
        _LOGGER.debug(
            "Applied %d addons for vehicle %s", len(self._available_addons), vehicle_id
        )
        return True

    def _fail_addons(self, vehicle_id: str, exc: PyRentalBookingError) -> bool:
        if self._vehicle is None or self._vehicle.id != vehicle_id:
            _LOGGER.debug("Ignoring addon fetch failure for stale vehicle %s", vehicle_id)
            return False
        _LOGGER.warning("Failed to fetch addons for vehicle %s: %s", vehicle_id, exc)
        self._available_addons = ()
        self._addons_status = CatalogStatus.FAILED
        self.catalog_error = exc
        return False

    # Transitions

    def select_vehicle(self, vehicle: Vehicle) -> asyncio.Task[bool] | None:
        """Select a vehicle and start fetching its add-ons.

        Dates are cleared only when a different vehicle was selected before.
        Add-on selections and the add-on catalog are cleared on every call.
        Returns the fetch task, or None when no fetch could be scheduled.
        The session keeps a reference to the task until it finishes.
        """
        previous = self._vehicle
        if previous is not None and previous.id != vehicle.id:
            self._pickup = ""
            self._dropoff = ""
            self._field_errors.clear()
        self._vehicle = vehicle
        self._selected_addon_ids = []
        self._available_addons = ()
        self._addons_status = CatalogStatus.NOT_LOADED
        self._drop_stale_confirmation()
        _LOGGER.debug("Selected vehicle %s", vehicle.id)
        if self._catalog is None:
            return None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            _LOGGER.debug("No running event loop; addons for vehicle %s not fetched", vehicle.id)
            return None
        self._addons_status = CatalogStatus.LOADING
        task = loop.create_task(self._fetch_addons(vehicle.id))
        self._addons_task = task
        task.add_done_callback(self._forget_addons_task)
        return task

    def _forget_addons_task(self, task: asyncio.Task[bool]) -> None:
        if self._addons_task is task:
            self._addons_task = None

    async def _fetch_addons(self, vehicle_id: str) -> bool:
        assert self._catalog is not None
        try:
            addons = await self._catalog.list_addons(vehicle_id)
        except PyRentalBookingError as exc:
            return self._fail_addons(vehicle_id, exc)
        return self.apply_addons(vehicle_id, addons)

    def set_pickup_date(self, value: DateInput) -> bool:
        """Set the pickup date; returns False when the value was rejected."""
        text = self._normalize(PICKUP_FIELD, INVALID_PICKUP_DATE, value)
        if text is None:
            return False
        if text and not is_not_past(text, self._today()):
            self._set_error(PICKUP_FIELD, INVALID_PICKUP_DATE)
            _LOGGER.debug("Rejected past pickup date %s", text)
            return False
        self._pickup = text
        self._field_errors.pop(PICKUP_FIELD, None)
        if not text:
            self._clear_orphaned_dropoff()
        elif is_complete_date(text) and is_complete_date(self._dropoff):
            if is_valid_dropoff(self._dropoff, text):
                self._field_errors.pop(DROPOFF_FIELD, None)
            else:
                _LOGGER.debug("Clearing dropoff date %s after pickup change", self._dropoff)
                self._dropoff = ""
                self._set_error(DROPOFF_FIELD, INVALID_DROPOFF_DATE)
        self._drop_stale_confirmation()
        return True

    def commit_pickup_date(self) -> bool:
        """Finish editing the pickup field, clearing an incomplete or past value."""
        if not self._pickup:
            self._field_errors.pop(PICKUP_FIELD, None)
            return True
        if is_complete_date(self._pickup) and is_not_past(self._pickup, self._today()):
            self._field_errors.pop(PICKUP_FIELD, None)
            return True
        _LOGGER.debug("Clearing uncommitted pickup date %s", self._pickup)
        self._pickup = ""
        self._set_error(PICKUP_FIELD, INVALID_PICKUP_DATE)
        self._clear_orphaned_dropoff()
        self._drop_stale_confirmation()
        return False

    def set_dropoff_date(self, value: DateInput) -> bool:
        """Set the dropoff date; returns False when the value was rejected."""
        text = self._normalize(DROPOFF_FIELD, INVALID_DROPOFF_DATE, value)
        if text is None:
            return False
        if not text:
            self._dropoff = ""
            self._field_errors.pop(DROPOFF_FIELD, None)
            self._drop_stale_confirmation()
            return True
        if not self._pickup:
            self._set_error(DROPOFF_FIELD, INVALID_DROPOFF_DATE)
            _LOGGER.debug("Rejected dropoff date %s without pickup", text)
            return False
        if not is_not_past(text, self._today()):
            self._set_error(DROPOFF_FIELD, PAST_DATE)
            _LOGGER.debug("Rejected past dropoff date %s", text)
            return False
        if not is_valid_dropoff(text, self._pickup):
            self._set_error(DROPOFF_FIELD, INVALID_DROPOFF_DATE)
            _LOGGER.debug("Rejected dropoff date %s not after pickup %s", text, self._pickup)
            return False
        self._dropoff = text
        self._field_errors.pop(DROPOFF_FIELD, None)
        self._drop_stale_confirmation()
        return True

    def commit_dropoff_date(self) -> bool:
        """Finish editing the dropoff field, clearing an incomplete, past or early value."""
        if not self._dropoff:
            self._field_errors.pop(DROPOFF_FIELD, None)
            return True
        if not is_complete_date(self._dropoff):
            code = INVALID_DROPOFF_DATE
        elif not is_not_past(self._dropoff, self._today()):
            code = PAST_DATE
        elif not is_valid_dropoff(self._dropoff, self._pickup):
            code = INVALID_DROPOFF_DATE
        else:
            self._field_errors.pop(DROPOFF_FIELD, None)
            return True
        _LOGGER.debug("Clearing uncommitted dropoff date %s", self._dropoff)
        self._dropoff = ""
        self._set_error(DROPOFF_FIELD, code)
        self._drop_stale_confirmation()
        return False

    def toggle_addon(self, addon_id: str) -> bool:
        """Toggle an add-on; ids outside the available set are ignored."""
        addon_id = str(addon_id)
        if addon_id in self._selected_addon_ids:
            self._selected_addon_ids.remove(addon_id)
            return True
        if addon_id not in {addon.id for addon in self._available_addons}:
            _LOGGER.debug("Ignoring toggle for unavailable addon %s", addon_id)
            return False
        self._selected_addon_ids.append(addon_id)
        return True

    def show_confirmation_view(self) -> bool:
        if not self.is_valid:
            _LOGGER.debug("Confirmation requested for incomplete booking")
            return False
        self._show_confirmation = True
        return True

    def hide_confirmation_view(self) -> None:
        self._show_confirmation = False

    def reset(self) -> None:
        """Return to an empty booking; the loaded vehicle list is kept."""
        self._vehicle = None
        self._pickup = ""
        self._dropoff = ""
        self._selected_addon_ids = []
        self._available_addons = ()
        self._addons_status = CatalogStatus.NOT_LOADED
        self._show_confirmation = False
        self._field_errors.clear()

    def _set_error(self, field: str, code: str) -> None:
        self._field_errors[field] = FieldError(field=field, code=code, message=MESSAGES[code])

    def _normalize(self, field: str, code: str, value: DateInput) -> str | None:
        try:
            return normalize_date_input(value)
        except ValidationError:
            self._set_error(field, code)
            _LOGGER.debug("Rejected %s value of type %s", field, type(value).__name__)
            return None

    def _clear_orphaned_dropoff(self) -> None:
        # A dropoff cannot outlive the pickup it was checked against.
        if not self._dropoff:
            return
        _LOGGER.debug("Clearing dropoff date %s after pickup was cleared", self._dropoff)
        self._dropoff = ""
        self._set_error(DROPOFF_FIELD, INVALID_DROPOFF_DATE)

    def _drop_stale_confirmation(self) -> None:
        if self._show_confirmation and not self.is_valid:
            self._show_confirmation = False
