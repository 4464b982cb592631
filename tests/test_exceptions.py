from pyrentalbooking.exceptions import (
    CatalogError,
    ConfigError,
    NetworkError,
    NotFoundError,
    PyRentalBookingError,
    RateLimitError,
    ServiceUnavailableError,
    TimeoutError,
    ValidationError,
)


def test_error_defaults() -> None:
    exc = PyRentalBookingError("base error")
    assert exc.error_type == "unknown"
    assert exc.error_code is None
    assert exc.detail == "base error"
    assert exc.user_message is None


def test_error_detail_fallback() -> None:
    exc = CatalogError(detail="short detail")
    assert str(exc) == "short detail"
    assert exc.detail == "short detail"
    assert exc.error_code == "catalog_error"


def test_error_overrides() -> None:
    exc = NetworkError(
        "network down",
        error_code="network_timeout",
        detail="timeout talking to catalog",
        user_message="Network issue. Please try again later.",
    )
    assert exc.error_type == "network"
    assert exc.error_code == "network_timeout"
    assert exc.detail == "timeout talking to catalog"
    assert exc.user_message == "Network issue. Please try again later."


def test_error_types_have_codes() -> None:
    assert NetworkError("nope").error_code == "network_error"
    assert ValidationError("nope").error_code == "validation_error"
    assert CatalogError("nope").error_code == "catalog_error"
    assert RateLimitError("nope").error_code == "rate_limit"
    assert ServiceUnavailableError("nope").error_code == "service_unavailable"
    assert NotFoundError("nope").error_code == "not_found"
    assert TimeoutError("nope").error_code == "timeout"
    assert ConfigError("nope").error_code == "config_error"


def test_error_hierarchy() -> None:
    assert issubclass(NotFoundError, CatalogError)
    assert issubclass(TimeoutError, NetworkError)
    assert NotFoundError("nope").error_type == "catalog"
