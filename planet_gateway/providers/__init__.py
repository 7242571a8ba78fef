"""Imagery provider adapters.

- ImageryProvider: Abstract base class the request handler talks to
- PlanetDataAdapter: Planet Data API v1 (quick-search, assets, activation)
"""

from planet_gateway.providers.base import (
    AssetUnavailableError,
    ImageryProvider,
    ProviderError,
    ProviderRequestFailed,
    ProviderResponseError,
)
from planet_gateway.providers.planet import PlanetDataAdapter, build_search_filter

__all__ = [
    "AssetUnavailableError",
    "ImageryProvider",
    "PlanetDataAdapter",
    "ProviderError",
    "ProviderRequestFailed",
    "ProviderResponseError",
    "build_search_filter",
]
