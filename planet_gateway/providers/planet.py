"""Planet Data API adapter.

Concrete ``ImageryProvider`` implementation over the Planet Data API v1
(``https://api.planet.com/data/v1``).  Uses ``httpx`` with HTTP Basic
auth (API key as username, empty password), a bounded timeout, and a
fixed-delay retry policy applied to every outbound call.

Search translates a ``SearchFilter`` into Planet's nested filter JSON::

    {"type": "AndFilter", "config": [
        {"type": "GeometryFilter", "field_name": "geometry", "config": <polygon>},
        {"type": "DateRangeFilter", "field_name": "acquired",
         "config": {"gte": "2024-01-01T00:00:00Z", "lte": "2024-01-31T23:59:59Z"}},
        {"type": "RangeFilter", "field_name": "cloud_cover", "config": {"lte": 20}},
    ]}

Activation is one trigger POST (only when the asset is ``inactive``),
one fixed grace wait, and one re-fetch.  Reaching ``active`` is observed
by later calls, never by looping here.

References:
    Planet Data API: https://developers.planet.com/docs/apis/data/
"""

from __future__ import annotations

import logging
import time
from urllib.parse import quote
from typing import TYPE_CHECKING, Any

import httpx

from planet_gateway.core.constants import (
    ASSETS_ENDPOINT_TEMPLATE,
    PROVIDER_NAME,
    QUICK_SEARCH_ENDPOINT,
)
from planet_gateway.models.assets import Asset, AssetStatus
from planet_gateway.providers.base import (
    AssetUnavailableError,
    ImageryProvider,
    ProviderRequestFailed,
    ProviderResponseError,
)

if TYPE_CHECKING:
    from datetime import date

    from planet_gateway.core.config import GatewayConfig
    from planet_gateway.models.search import SearchFilter

logger = logging.getLogger(__name__)

_JSON_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}

# 4xx codes worth repeating alongside 5xx; any other 4xx fails on the first attempt.
_RETRYABLE_STATUS_CODES = frozenset({408, 425, 429})


class PlanetDataAdapter(ImageryProvider):
    """Planet Data API adapter.

    One ``httpx.Client`` is created per adapter and reused for every call.
    *transport* replaces the network transport (``httpx.MockTransport`` in
    tests).
    """

    name = PROVIDER_NAME

    def __init__(
        self,
        config: GatewayConfig,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        super().__init__(config)
        self._client = httpx.Client(
            base_url=_with_trailing_slash(config.base_url),
            auth=httpx.BasicAuth(config.api_key, ""),
            timeout=config.timeout_s,
            headers=_JSON_HEADERS,
            verify=config.verify_tls,
            transport=transport,
        )

    def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        self._client.close()

    # ------------------------------------------------------------------
    # search
    # ------------------------------------------------------------------

    def search(self, search_filter: SearchFilter) -> list[dict[str, Any]]:
        """Run a quick-search and return the ``features`` of the response.

        Raises:
            ProviderRequestFailed: On non-2xx responses or transport errors.
            ProviderResponseError: If the response body is not a JSON object.
        """
        request_body = {
            "item_types": [self.config.item_type],
            "filter": build_search_filter(search_filter),
        }
        response = self._request("POST", QUICK_SEARCH_ENDPOINT, json=request_body)

        features = response.get("features") or []
        if not isinstance(features, list):
            msg = f"quick-search 'features' must be a list, got {type(features).__name__}"
            raise ProviderResponseError(self.name, msg)

        logger.info(
            "Planet search: %d features | item_type=%s | dates=%s..%s | max_cloud_cover=%s",
            len(features),
            self.config.item_type,
            search_filter.start_date.isoformat(),
            search_filter.end_date.isoformat(),
            search_filter.max_cloud_cover,
        )
        return features

    # ------------------------------------------------------------------
    # assets
    # ------------------------------------------------------------------

    def list_assets(self, item_id: str) -> dict[str, Any]:
        """Return the asset map for *item_id* exactly as Planet sends it."""
        endpoint = ASSETS_ENDPOINT_TEMPLATE.format(
            item_type=self.config.item_type,
            item_id=_path_segment(item_id),
        )
        assets = self._request("GET", endpoint)
        logger.info("Planet assets listed | item=%s | assets=%d", item_id, len(assets))
        return assets

    def get_asset(self, item_id: str) -> Asset:
        """Fetch assets and return the target asset without activating it."""
        return self._target_asset(item_id, self.list_assets(item_id))

    def activate_and_check(self, item_id: str) -> Asset:
        """Trigger activation when inactive, wait once, and re-check.

        The activation POST runs under the same retry policy as every other
        call, so a trigger whose response was lost may be sent again.

        Raises:
            AssetUnavailableError: If the target asset is missing, or is
                inactive without an activation link.
            ProviderRequestFailed: On API errors.
        """
        asset = self._target_asset(item_id, self.list_assets(item_id))

        if asset.status is not AssetStatus.INACTIVE:
            logger.info(
                "Activation skipped | item=%s | asset=%s | status=%s",
                item_id,
                asset.name,
                asset.status.value,
            )
            return asset

        if not asset.activate_link:
            raise AssetUnavailableError(
                self.name,
                item_id,
                asset.name,
                reason=f"{asset.name} asset has no activation link for this item",
            )

        self._request("POST", asset.activate_link)
        logger.info(
            "Activation requested | item=%s | asset=%s | grace=%.2fs",
            item_id,
            asset.name,
            self.config.activation_grace_s,
        )
        time.sleep(self.config.activation_grace_s)

        refreshed = self._target_asset(item_id, self.list_assets(item_id))
        logger.info(
            "Activation re-checked | item=%s | asset=%s | status=%s",
            item_id,
            refreshed.name,
            refreshed.status.value,
        )
        return refreshed

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _target_asset(self, item_id: str, assets: dict[str, Any]) -> Asset:
        record = assets.get(self.asset_type)
        if record is None:
            raise AssetUnavailableError(self.name, item_id, self.asset_type)
        return Asset.from_provider(self.asset_type, record)

    def _request(
        self,
        method: str,
        url: str,
        *,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send an authenticated request with the configured retry policy.

        Retries request errors (connection, timeout, decoding, redirects),
        5xx and throttling responses with a fixed delay between attempts.
        Other non-2xx responses fail immediately.

        Returns:
            The decoded JSON object; ``{}`` for an empty body.

        Raises:
            ProviderRequestFailed: When the final attempt fails.
            ProviderResponseError: If a 2xx body is not a JSON object.
        """
        attempts = self.config.retry_attempts
        attempt = 0

        while True:
            attempt += 1
            try:
                response = self._client.request(method, url, json=json)
            except httpx.RequestError as exc:
                error = ProviderRequestFailed(
                    self.name,
                    status_code=None,
                    body=f"{type(exc).__name__}: {exc}",
                    retryable=True,
                )
            else:
                if response.is_success:
                    return self._decode(response)
                error = ProviderRequestFailed(
                    self.name,
                    status_code=response.status_code,
                    body=response.text,
                    retryable=_is_retryable_status(response.status_code),
                )
                if not error.retryable:
                    raise error

            if attempt >= attempts:
                break
            logger.warning(
                "Planet request attempt %d/%d failed (retryable) | %s %s | error=%s",
                attempt,
                attempts,
                method,
                url,
                error.message,
            )
            time.sleep(self.config.retry_delay_s)

        logger.error(
            "Planet request retries exhausted | %s %s | attempts=%d | error=%s",
            method,
            url,
            attempts,
            error.message,
        )
        raise error

    def _decode(self, response: httpx.Response) -> dict[str, Any]:
        if not response.content.strip():
            return {}
        try:
            payload = response.json()
        except ValueError as exc:
            msg = f"response from {response.request.url} is not valid JSON"
            raise ProviderResponseError(self.name, msg) from exc
        if not isinstance(payload, dict):
            msg = f"response from {response.request.url} must be a JSON object"
            raise ProviderResponseError(self.name, msg)
        return payload


# ---------------------------------------------------------------------------
# Filter construction
# ---------------------------------------------------------------------------


def build_search_filter(search_filter: SearchFilter) -> dict[str, Any]:
    """Build Planet's ``AndFilter`` for a ``SearchFilter``.

    Geometry and date-range clauses are always present; the cloud-cover
    clause is added only when ``max_cloud_cover`` is set.
    """
    clauses: list[dict[str, Any]] = [
        _geometry_clause(search_filter.geometry),
        _date_range_clause(search_filter.start_date, search_filter.end_date),
    ]
    if search_filter.max_cloud_cover is not None:
        clauses.append(_cloud_cover_clause(search_filter.max_cloud_cover))
    return {"type": "AndFilter", "config": clauses}


def _geometry_clause(geometry: dict[str, Any]) -> dict[str, Any]:
    return {
        "type": "GeometryFilter",
        "field_name": "geometry",
        "config": geometry,
    }


def _date_range_clause(start: date, end: date) -> dict[str, Any]:
    """Whole-day UTC bounds: start of *start* to the last second of *end*."""
    return {
        "type": "DateRangeFilter",
        "field_name": "acquired",
        "config": {
            "gte": f"{start.isoformat()}T00:00:00Z",
            "lte": f"{end.isoformat()}T23:59:59Z",
        },
    }


def _cloud_cover_clause(max_cloud_cover: float) -> dict[str, Any]:
    return {
        "type": "RangeFilter",
        "field_name": "cloud_cover",
        "config": {"lte": max_cloud_cover},
    }


def _is_retryable_status(status_code: int) -> bool:
    return status_code >= 500 or status_code in _RETRYABLE_STATUS_CODES


def _path_segment(value: str) -> str:
    """Escape *value* so it stays one path segment, dot segments included."""
    return quote(value, safe="").replace(".", "%2E")


def _with_trailing_slash(url: str) -> str:
    return url if url.endswith("/") else f"{url}/"
