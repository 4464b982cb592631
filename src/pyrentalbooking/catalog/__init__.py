"""Catalog providers for vehicles and add-ons."""

from .base import BaseCatalogProvider
from .eligibility import resolve_addons
from .http import HttpCatalogProvider
from .static import StaticCatalogProvider

__all__ = [
    "BaseCatalogProvider",
    "HttpCatalogProvider",
    "StaticCatalogProvider",
    "resolve_addons",
]
