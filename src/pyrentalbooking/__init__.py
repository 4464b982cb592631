"""pyRentalBooking package."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from .booking import BookingSession, BookingStage, CatalogStatus
from .client import Client
from .exceptions import (
    CatalogError,
    ConfigError,
    NetworkError,
    PyRentalBookingError,
    ValidationError,
)
from .models import Addon, BookingSummary, FieldError, Vehicle
from .pricing import TAX_RATE, calculate_summary, is_booking_valid, rental_days

try:
    __version__ = version("pyrentalbooking")
except PackageNotFoundError:  # pragma: no cover - not installed
    __version__ = "0.0.0"

__all__ = [
    "TAX_RATE",
    "Addon",
    "BookingSession",
    "BookingStage",
    "BookingSummary",
    "CatalogError",
    "CatalogStatus",
    "Client",
    "ConfigError",
    "FieldError",
    "NetworkError",
    "PyRentalBookingError",
    "ValidationError",
    "Vehicle",
    "__version__",
    "calculate_summary",
    "is_booking_valid",
    "rental_days",
]
