"""In-memory stand-in for the Planet Data API.

``PlanetApiStub`` is an ``httpx.MockTransport`` handler: it records every
request and answers quick-search, item-assets and activation calls from
canned data.  Queued ``failures`` are served (or raised) before any
routing happens; ``activation_failures`` answer activation POSTs only.

Usage::

    stub = PlanetApiStub(features=[feature("a")])
    adapter = stub.adapter(GatewayConfig(api_key="k"))
"""

from __future__ import annotations

import base64
from typing import Any

import httpx

from planet_gateway.core.config import GatewayConfig
from planet_gateway.providers.planet import PlanetDataAdapter

ITEM_ID = "20240115_183909_00_2461"
ACTIVATE_URL = "https://api.planet.com/data/v1/assets/eyJpIjoiMjAyNDAxMTUi/activate"
SELF_URL = "https://api.planet.com/data/v1/assets/eyJpIjoiMjAyNDAxMTUi"
DOWNLOAD_URL = "https://api.planet.com/data/v1/download?token=eyJhbGciOiJIUzI1NiJ9"

# Small orchard block near Yakima, WA (closed ring, lon/lat).
SAMPLE_POLYGON: dict[str, Any] = {
    "type": "Polygon",
    "coordinates": [
        [
            [-120.5, 46.5],
            [-120.0, 46.5],
            [-120.0, 46.0],
            [-120.5, 46.0],
            [-120.5, 46.5],
        ]
    ],
}


def basic_auth_header(api_key: str) -> str:
    token = base64.b64encode(f"{api_key}:".encode()).decode()
    return f"Basic {token}"


def feature(item_id: str, cloud_cover: float = 0.05) -> dict[str, Any]:
    """Minimal quick-search feature record."""
    return {
        "type": "Feature",
        "id": item_id,
        "geometry": {"type": "Polygon", "coordinates": []},
        "properties": {
            "acquired": "2024-01-15T18:39:09.000Z",
            "cloud_cover": cloud_cover,
            "item_type": "PSScene",
        },
    }


def asset_record(
    status: str,
    *,
    activate: bool = True,
    location: str | None = None,
    asset_type: str = "basic_analytic_4b",
) -> dict[str, Any]:
    """Asset record shaped like Planet's item-assets response."""
    links: dict[str, Any] = {
        "_self": SELF_URL,
        "type": f"https://api.planet.com/data/v1/asset-types/{asset_type}",
    }
    if activate:
        links["activate"] = ACTIVATE_URL
    record: dict[str, Any] = {
        "_links": links,
        "_permissions": ["download"],
        "md5_digest": None,
        "status": status,
        "type": asset_type,
    }
    if location is not None:
        record["location"] = location
    return record


def asset_map(status: str, **kwargs: Any) -> dict[str, Any]:
    """Item-assets response with the target asset plus an unrelated one."""
    return {
        "basic_analytic_4b": asset_record(status, **kwargs),
        "ortho_visual": asset_record("active", location=DOWNLOAD_URL, asset_type="ortho_visual"),
    }


class PlanetApiStub:
    """Routes requests to canned Planet responses and records them."""

    def __init__(
        self,
        *,
        features: list[dict[str, Any]] | None = None,
        assets: dict[str, Any] | None = None,
        assets_after_activation: dict[str, Any] | None = None,
        search_payload: Any = None,
    ) -> None:
        self.features = features if features is not None else []
        self.assets = assets if assets is not None else asset_map("inactive")
        if assets_after_activation is None:
            assets_after_activation = asset_map("activating")
        self.assets_after_activation = assets_after_activation
        self.search_payload = search_payload
        self.failures: list[httpx.Response | Exception] = []
        self.activation_failures: list[httpx.Response] = []
        self.requests: list[httpx.Request] = []
        self.activated = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.failures:
            failure = self.failures.pop(0)
            if isinstance(failure, Exception):
                raise failure
            return failure

        path = request.url.path.rstrip("/")
        if request.method == "POST" and path.endswith("/quick-search"):
            payload = self.search_payload
            if payload is None:
                payload = {"type": "FeatureCollection", "features": self.features}
            return httpx.Response(200, json=payload)
        if request.method == "GET" and path.endswith("/assets"):
            current = self.assets_after_activation if self.activated else self.assets
            return httpx.Response(200, json=current)
        if request.method == "POST" and path.endswith("/activate"):
            if self.activation_failures:
                return self.activation_failures.pop(0)
            self.activated = True
            return httpx.Response(202)
        return httpx.Response(404, text='{"message": "Not found"}')

    # -- helpers --

    def adapter(self, config: GatewayConfig) -> PlanetDataAdapter:
        return PlanetDataAdapter(config, transport=httpx.MockTransport(self))

    def fail_with(self, *failures: httpx.Response | Exception) -> None:
        self.failures.extend(failures)

    def calls(self, method: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method]

    @property
    def activation_posts(self) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if r.method == "POST" and r.url.path.rstrip("/").endswith("/activate")
        ]
