"""HTTP catalog provider backed by the booking service API."""

from __future__ import annotations

import logging
import time
from decimal import Decimal, InvalidOperation
from typing import Any

import aiohttp

from ..exceptions import (
    CatalogError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ServiceUnavailableError,
    ValidationError,
)
from ..exceptions import TimeoutError as RequestTimeoutError
from ..models import Addon, Vehicle
from .base import BaseCatalogProvider
from .const import (
    ADDONS_ENDPOINT,
    DEFAULT_API_URI,
    DEFAULT_CACHE_TTL,
    DEFAULT_HEADERS,
    DEFAULT_TIMEOUT_SECONDS,
    VEHICLE_ID_PARAM,
    VEHICLES_ENDPOINT,
)

_LOGGER = logging.getLogger(__name__)
_DEFAULT_TIMEOUT = aiohttp.ClientTimeout(total=DEFAULT_TIMEOUT_SECONDS)


def _now() -> float:
    return time.monotonic()


class HttpCatalogProvider(BaseCatalogProvider):
    """Catalog fetched over HTTP, with GET responses cached for a freshness window."""

    catalog_id = "http"

    def __init__(
        self,
        session: aiohttp.ClientSession,
        *,
        base_url: str,
        api_uri: str | None = DEFAULT_API_URI,
        timeout: aiohttp.ClientTimeout | None = None,
        retry_count: int = 0,
        cache_ttl: float = DEFAULT_CACHE_TTL,
    ) -> None:
        if session is None:
            raise ValidationError("Session is required.")
        if cache_ttl < 0:
            raise ValidationError("cache_ttl must not be negative.")
        self._session = session
        self._base_url = self._normalize_base_url(base_url)
        self._api_uri = self._normalize_api_uri(api_uri)
        self._timeout = timeout or _DEFAULT_TIMEOUT
        self._retry_count = max(0, retry_count)
        self._cache_ttl = cache_ttl
        self._cache: dict[str, tuple[float, Any]] = {}

    async def list_vehicles(self) -> list[Vehicle]:
        """Return all rentable vehicles."""
        _LOGGER.debug("Catalog %s list_vehicles started", self.catalog_id)
        data = await self._get_json(VEHICLES_ENDPOINT)
        vehicles = self._map_vehicle_list(data)
        _LOGGER.info("Catalog %s returned %d vehicles", self.catalog_id, len(vehicles))
        return vehicles

    async def list_addons(self, vehicle_id: str | None = None) -> list[Addon]:
        """Return add-ons for a vehicle, or the base tier when no vehicle is given."""
        vehicle_id_value = self._optional_id(vehicle_id, "vehicle_id")
        _LOGGER.debug(
            "Catalog %s list_addons started for vehicle %s",
            self.catalog_id,
            vehicle_id_value or "none",
        )
        params = {VEHICLE_ID_PARAM: vehicle_id_value} if vehicle_id_value is not None else None
        data = await self._get_json(ADDONS_ENDPOINT, params=params)
        addons = self._map_addon_list(data)
        _LOGGER.info(
            "Catalog %s returned %d addons for vehicle %s",
            self.catalog_id,
            len(addons),
            vehicle_id_value or "none",
        )
        return addons

    def clear_cache(self) -> None:
        """Drop all cached responses."""
        self._cache.clear()

    def _build_url(self, path: str) -> str:
        if not isinstance(path, str) or not path:
            raise ValidationError("Path must be a non-empty string.")
        if path.startswith("http://") or path.startswith("https://"):
            raise ValidationError("Use relative paths when building catalog requests.")
        normalized_path = path if path.startswith("/") else f"/{path}"
        return f"{self._base_url}{self._api_uri}{normalized_path}"

    def _cache_key(self, url: str, params: dict[str, str] | None) -> str:
        if not params:
            return url
        query = "&".join(f"{key}={value}" for key, value in sorted(params.items()))
        return f"{url}?{query}"

    async def _get_json(self, path: str, *, params: dict[str, str] | None = None) -> Any:
        url = self._build_url(path)
        key = self._cache_key(url, params)
        cached = self._cache.get(key)
        if cached is not None:
            stored_at, data = cached
            if _now() - stored_at < self._cache_ttl:
                _LOGGER.debug("Catalog %s cache hit for %s", self.catalog_id, key)
                return data
            del self._cache[key]
        data = await self._request(
            "GET",
            url,
            params=params,
            headers=dict(DEFAULT_HEADERS),
        )
        self._cache[key] = (_now(), data)
        return data

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        retries = self._retry_count if method.upper() == "GET" else 0
        attempts = retries + 1
        last_error: Exception | None = None
        for attempt in range(attempts):
            try:
                async with self._session.request(
                    method,
                    url,
                    timeout=self._timeout,
                    **kwargs,
                ) as response:
                    self._raise_for_status(response)
                    try:
                        return await response.json()
                    except (aiohttp.ContentTypeError, ValueError) as exc:
                        raise CatalogError("Response did not contain valid JSON.") from exc
            except TimeoutError as exc:
                last_error = exc
                if attempt >= attempts - 1:
                    raise RequestTimeoutError("Catalog request timed out.") from exc
            except aiohttp.ClientError as exc:
                last_error = exc
                if attempt >= attempts - 1:
                    raise NetworkError("Network request failed.") from exc
            _LOGGER.warning(
                "Catalog %s request %s %s failed, retrying (%d/%d)",
                self.catalog_id,
                method,
                url,
                attempt + 1,
                retries,
            )
        if last_error is not None:
            raise NetworkError("Network request failed.") from last_error
        raise CatalogError("Request failed.")

    def _raise_for_status(self, response: aiohttp.ClientResponse) -> None:
        if 200 <= response.status < 300:
            return
        if response.status == 404:
            raise NotFoundError("Catalog resource was not found.")
        if response.status == 429:
            raise RateLimitError("Catalog rate limit exceeded.")
        if response.status in (502, 503, 504):
            raise ServiceUnavailableError(
                f"Catalog service unavailable (status {response.status}).",
                user_message="The booking service is temporarily unavailable. Please try again.",
            )
        raise CatalogError(f"Catalog request failed with status {response.status}.")

    def _map_vehicle_list(self, data: Any) -> list[Vehicle]:
        if data is None:
            return []
        if not isinstance(data, list):
            raise CatalogError("Catalog response included invalid vehicles.")
        return [self._map_vehicle(item) for item in data if isinstance(item, dict)]

    def _map_vehicle(self, data: Any) -> Vehicle:
        if not isinstance(data, dict):
            raise CatalogError("Catalog response included invalid vehicle data.")
        vehicle_id = self._coerce_response_id(data.get("id"), "vehicle id")
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise CatalogError("Catalog response missing vehicle name.")
        emoji = data.get("emoji") or ""
        if not isinstance(emoji, str):
            emoji = str(emoji)
        return Vehicle(
            id=vehicle_id,
            name=name,
            cost_per_day=self._parse_cost(data.get("costPerDay"), "vehicle"),
            emoji=emoji,
        )

    def _map_addon_list(self, data: Any) -> list[Addon]:
        if data is None:
            return []
        if not isinstance(data, list):
            raise CatalogError("Catalog response included invalid addons.")
        return [self._map_addon(item) for item in data if isinstance(item, dict)]

    def _map_addon(self, data: Any) -> Addon:
        if not isinstance(data, dict):
            raise CatalogError("Catalog response included invalid addon data.")
        addon_id = self._coerce_response_id(data.get("id"), "addon id")
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise CatalogError("Catalog response missing addon name.")
        return Addon(
            id=addon_id,
            name=name,
            cost_per_day=self._parse_cost(data.get("costPerDay"), "addon"),
        )

    def _coerce_response_id(self, value: Any, field: str) -> str:
        if value is None or isinstance(value, bool):
            raise CatalogError(f"Catalog response missing {field}.")
        text = str(value).strip()
        if not text:
            raise CatalogError(f"Catalog response missing {field}.")
        return text

    def _parse_cost(self, value: Any, kind: str) -> Decimal:
        if value is None or isinstance(value, bool):
            raise CatalogError(f"Catalog response missing {kind} cost.")
        try:
            # str() keeps 2500.0 as Decimal("2500.0") instead of binary float noise.
            cost = Decimal(str(value))
        except InvalidOperation as exc:
            raise CatalogError(f"Catalog response included invalid {kind} cost.") from exc
        if not cost.is_finite():
            raise CatalogError(f"Catalog response included invalid {kind} cost.")
        return cost

    def _normalize_base_url(self, base_url: str | None) -> str:
        if not isinstance(base_url, str) or not base_url.strip():
            raise ValidationError("base_url must be a non-empty string.")
        return base_url.strip().rstrip("/")

    def _normalize_api_uri(self, api_uri: str | None) -> str:
        if api_uri is None:
            return ""
        if not isinstance(api_uri, str):
            raise ValidationError("api_uri must be a string.")
        normalized = api_uri.strip().strip("/")
        if not normalized:
            return ""
        return f"/{normalized}"
