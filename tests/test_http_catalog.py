from __future__ import annotations

import asyncio
from decimal import Decimal
from typing import Any

import aiohttp
import pytest

from pyrentalbooking.catalog import http as http_module
from pyrentalbooking.catalog.http import HttpCatalogProvider
from pyrentalbooking.exceptions import (
    CatalogError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ServiceUnavailableError,
    TimeoutError,
    ValidationError,
)

VEHICLES_SAMPLE = [
    {"id": 1, "name": "Sedan", "emoji": "🚗", "costPerDay": 2500.0},
    {"id": 3, "name": "Luxury", "emoji": "🏎️", "costPerDay": 5000.0},
]

ADDONS_SAMPLE = [
    {"id": 1, "name": "GPS Navigation", "costPerDay": 200.0},
    {"id": 5, "name": "Insurance", "costPerDay": 500.0},
]


class _FakeResponse:
    def __init__(
        self,
        payload: Any = None,
        *,
        status: int = 200,
        json_error: Exception | None = None,
    ) -> None:
        self.status = status
        self._payload = payload
        self._json_error = json_error

    async def json(self) -> Any:
        if self._json_error is not None:
            raise self._json_error
        return self._payload


class _FakeRequestContext:
    def __init__(self, response: _FakeResponse) -> None:
        self._response = response

    async def __aenter__(self) -> _FakeResponse:
        return self._response

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False


class _SequenceSession:
    def __init__(self, responses: list[object]) -> None:
        self._responses = responses
        self.calls: list[dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> _FakeRequestContext:
        self.calls.append({"method": method, "url": url, "kwargs": kwargs})
        response = self._responses[len(self.calls) - 1]
        if isinstance(response, Exception):
            raise response
        return _FakeRequestContext(response)


def _catalog(session: object, **kwargs: Any) -> HttpCatalogProvider:
    return HttpCatalogProvider(
        session,  # type: ignore[arg-type]
        base_url="https://rent.example/",
        **kwargs,
    )


@pytest.mark.asyncio
async def test_list_vehicles_maps_response() -> None:
    session = _SequenceSession([_FakeResponse(VEHICLES_SAMPLE)])
    vehicles = await _catalog(session).list_vehicles()

    assert [vehicle.id for vehicle in vehicles] == ["1", "3"]
    assert vehicles[0].name == "Sedan"
    assert vehicles[0].emoji == "🚗"
    assert vehicles[1].cost_per_day == Decimal("5000")
    assert session.calls[0]["method"] == "GET"
    assert session.calls[0]["url"] == "https://rent.example/api/v1/vehicles"


@pytest.mark.asyncio
async def test_list_addons_passes_vehicle_id() -> None:
    session = _SequenceSession([_FakeResponse(ADDONS_SAMPLE)])
    addons = await _catalog(session).list_addons("3")

    assert [addon.name for addon in addons] == ["GPS Navigation", "Insurance"]
    assert addons[1].cost_per_day == Decimal("500")
    assert session.calls[0]["url"] == "https://rent.example/api/v1/addons"
    assert session.calls[0]["kwargs"]["params"] == {"vehicleId": "3"}


@pytest.mark.asyncio
async def test_list_addons_without_vehicle_sends_no_params() -> None:
    session = _SequenceSession([_FakeResponse(ADDONS_SAMPLE)])
    await _catalog(session).list_addons()
    assert session.calls[0]["kwargs"]["params"] is None


@pytest.mark.asyncio
async def test_responses_are_cached_per_url() -> None:
    session = _SequenceSession(
        [_FakeResponse(ADDONS_SAMPLE), _FakeResponse(ADDONS_SAMPLE[:1])]
    )
    catalog = _catalog(session)
    first = await catalog.list_addons("3")
    second = await catalog.list_addons("3")
    other = await catalog.list_addons("1")

    assert first == second
    assert len(other) == 1
    assert len(session.calls) == 2


@pytest.mark.asyncio
async def test_cache_expires_after_ttl(monkeypatch: pytest.MonkeyPatch) -> None:
    clock = {"now": 1000.0}
    monkeypatch.setattr(http_module, "_now", lambda: clock["now"])
    session = _SequenceSession(
        [_FakeResponse(VEHICLES_SAMPLE), _FakeResponse(VEHICLES_SAMPLE[:1])]
    )
    catalog = _catalog(session, cache_ttl=300)

    assert len(await catalog.list_vehicles()) == 2
    clock["now"] += 299
    assert len(await catalog.list_vehicles()) == 2
    clock["now"] += 2
    assert len(await catalog.list_vehicles()) == 1
    assert len(session.calls) == 2


@pytest.mark.asyncio
async def test_clear_cache_forces_refetch() -> None:
    session = _SequenceSession(
        [_FakeResponse(VEHICLES_SAMPLE), _FakeResponse(VEHICLES_SAMPLE)]
    )
    catalog = _catalog(session)
    await catalog.list_vehicles()
    catalog.clear_cache()
    await catalog.list_vehicles()
    assert len(session.calls) == 2


@pytest.mark.asyncio
async def test_failed_response_is_not_cached() -> None:
    session = _SequenceSession(
        [_FakeResponse(status=503), _FakeResponse(VEHICLES_SAMPLE)]
    )
    catalog = _catalog(session)
    with pytest.raises(ServiceUnavailableError) as excinfo:
        await catalog.list_vehicles()
    assert excinfo.value.user_message is not None
    assert len(await catalog.list_vehicles()) == 2


@pytest.mark.asyncio
async def test_get_retries_on_client_error() -> None:
    session = _SequenceSession(
        [aiohttp.ClientError("boom"), _FakeResponse(VEHICLES_SAMPLE)]
    )
    vehicles = await _catalog(session, retry_count=1).list_vehicles()
    assert len(vehicles) == 2
    assert len(session.calls) == 2


@pytest.mark.asyncio
async def test_network_error_after_retries() -> None:
    session = _SequenceSession([aiohttp.ClientError("boom"), aiohttp.ClientError("boom")])
    with pytest.raises(NetworkError):
        await _catalog(session, retry_count=1).list_vehicles()
    assert len(session.calls) == 2


@pytest.mark.asyncio
async def test_timeout_maps_to_timeout_error() -> None:
    session = _SequenceSession([asyncio.TimeoutError()])
    with pytest.raises(TimeoutError) as excinfo:
        await _catalog(session).list_vehicles()
    assert excinfo.value.error_code == "timeout"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "error"),
    [
        (404, NotFoundError),
        (429, RateLimitError),
        (502, ServiceUnavailableError),
        (500, CatalogError),
    ],
)
async def test_status_mapping(status: int, error: type[Exception]) -> None:
    session = _SequenceSession([_FakeResponse(status=status)])
    with pytest.raises(error):
        await _catalog(session).list_vehicles()


@pytest.mark.asyncio
async def test_invalid_json_raises_catalog_error() -> None:
    session = _SequenceSession([_FakeResponse(json_error=ValueError("bad"))])
    with pytest.raises(CatalogError):
        await _catalog(session).list_vehicles()


@pytest.mark.asyncio
async def test_invalid_payload_shape() -> None:
    session = _SequenceSession([_FakeResponse({"vehicles": []})])
    with pytest.raises(CatalogError):
        await _catalog(session).list_vehicles()


@pytest.mark.asyncio
async def test_missing_cost_is_rejected() -> None:
    session = _SequenceSession([_FakeResponse([{"id": 1, "name": "GPS"}])])
    with pytest.raises(CatalogError):
        await _catalog(session).list_addons()


@pytest.mark.asyncio
@pytest.mark.parametrize("cost", ["NaN", "Infinity", "-Infinity", float("nan"), float("inf")])
async def test_non_finite_cost_is_rejected(cost: object) -> None:
    session = _SequenceSession([_FakeResponse([{"id": 1, "name": "GPS", "costPerDay": cost}])])
    with pytest.raises(CatalogError):
        await _catalog(session).list_addons()


@pytest.mark.asyncio
async def test_non_dict_items_are_skipped() -> None:
    session = _SequenceSession([_FakeResponse([None, "x", ADDONS_SAMPLE[0]])])
    addons = await _catalog(session).list_addons()
    assert [addon.id for addon in addons] == ["1"]


def test_base_url_is_required() -> None:
    with pytest.raises(ValidationError):
        HttpCatalogProvider(_SequenceSession([]), base_url=" ")  # type: ignore[arg-type]


def test_build_url_rejects_absolute_paths() -> None:
    catalog = _catalog(_SequenceSession([]), api_uri="/v2/")
    assert catalog._build_url("vehicles") == "https://rent.example/v2/vehicles"
    with pytest.raises(ValidationError):
        catalog._build_url("https://other.example/vehicles")
