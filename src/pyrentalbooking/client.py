"""Client facade for catalog access and booking sessions."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date

import aiohttp

from .booking import BookingSession
from .catalog.base import BaseCatalogProvider
from .catalog.const import DEFAULT_API_URI, DEFAULT_CACHE_TTL, DEFAULT_TIMEOUT_SECONDS
from .catalog.http import HttpCatalogProvider
from .catalog.static import StaticCatalogProvider
from .exceptions import ConfigError

_DEFAULT_TIMEOUT = aiohttp.ClientTimeout(total=DEFAULT_TIMEOUT_SECONDS)
CATALOG_KINDS = ("static", "http")


class Client:
    """Facade for catalog access and booking sessions.

    Without a ``base_url`` the built-in reference catalog is used and no HTTP
    session is opened.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        *,
        base_url: str | None = None,
        api_uri: str | None = DEFAULT_API_URI,
        timeout: aiohttp.ClientTimeout | None = None,
        retry_count: int = 0,
        cache_ttl: float = DEFAULT_CACHE_TTL,
    ) -> None:
        self._session = session
        self._owns_session = session is None
        self._base_url = base_url
        self._api_uri = api_uri
        self._timeout = timeout or _DEFAULT_TIMEOUT
        self._retry_count = max(0, retry_count)
        self._cache_ttl = cache_ttl
        self._catalog: BaseCatalogProvider | None = None

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
        self._catalog = None

    async def get_catalog(self, kind: str | None = None) -> BaseCatalogProvider:
        """Return the shared catalog provider, building it on first use."""
        kind = kind or ("http" if self._base_url else "static")
        if kind not in CATALOG_KINDS:
            raise ConfigError(f"Unknown catalog kind: {kind}.")
        if self._catalog is not None and self._catalog.catalog_id == kind:
            return self._catalog
        if kind == "static":
            self._catalog = StaticCatalogProvider()
            return self._catalog
        if not self._base_url:
            raise ConfigError("base_url is required for the http catalog.")
        self._catalog = HttpCatalogProvider(
            self._ensure_session(),
            base_url=self._base_url,
            api_uri=self._api_uri,
            timeout=self._timeout,
            retry_count=self._retry_count,
            cache_ttl=self._cache_ttl,
        )
        return self._catalog

    async def new_booking(
        self,
        *,
        today: Callable[[], date] | None = None,
    ) -> BookingSession:
        catalog = await self.get_catalog()
        if today is None:
            return BookingSession(catalog)
        return BookingSession(catalog, today=today)

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session
