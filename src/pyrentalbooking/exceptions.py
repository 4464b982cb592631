"""Library exceptions."""

from __future__ import annotations


class PyRentalBookingError(Exception):
    """Base exception for the library."""

    error_type = "unknown"
    default_error_code: str | None = None

    def __init__(
        self,
        message: str | None = None,
        *,
        error_code: str | None = None,
        detail: str | None = None,
        user_message: str | None = None,
    ) -> None:
        text = message if message is not None else detail
        super().__init__(text if text is not None else "")
        self.error_code = error_code if error_code is not None else self.default_error_code
        self.detail = detail if detail is not None else message
        self.user_message = user_message


class ValidationError(PyRentalBookingError):
    """Raised when inputs fail validation."""

    error_type = "validation"
    default_error_code = "validation_error"


class ConfigError(PyRentalBookingError):
    """Raised when the client is misconfigured."""

    error_type = "config"
    default_error_code = "config_error"


class CatalogError(PyRentalBookingError):
    """Raised when the catalog returns an error or invalid data."""

    error_type = "catalog"
    default_error_code = "catalog_error"


class NotFoundError(CatalogError):
    """Raised when a catalog resource does not exist."""

    default_error_code = "not_found"


class RateLimitError(CatalogError):
    """Raised when the catalog rejects requests due to rate limiting."""

    default_error_code = "rate_limit"


class ServiceUnavailableError(CatalogError):
    """Raised when the catalog service is temporarily unavailable."""

    default_error_code = "service_unavailable"


class NetworkError(PyRentalBookingError):
    """Raised when network communication fails."""

    error_type = "network"
    default_error_code = "network_error"


class TimeoutError(NetworkError):  # noqa: A001
    """Raised when a catalog request times out."""

    default_error_code = "timeout"
