"""Shared gateway constants — single source of truth.

Centralises the Planet Data API defaults, the asset type this gateway
activates, and the human-readable status messages returned to clients.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Planet Data API
# ---------------------------------------------------------------------------

DEFAULT_BASE_URL: str = "https://api.planet.com/data/v1"
"""Planet Data API v1 root."""

DEFAULT_ITEM_TYPE: str = "PSScene"
"""PlanetScope scene item type searched and activated by the gateway."""

DEFAULT_ASSET_TYPE: str = "basic_analytic_4b"
"""Asset type targeted by activation and surfaced in asset listings."""

PROVIDER_NAME: str = "planet"

QUICK_SEARCH_ENDPOINT: str = "quick-search"

ASSETS_ENDPOINT_TEMPLATE: str = "item-types/{item_type}/items/{item_id}/assets"

# ---------------------------------------------------------------------------
# Request policy
# ---------------------------------------------------------------------------

DEFAULT_TIMEOUT_S: float = 30.0
DEFAULT_RETRY_ATTEMPTS: int = 3
DEFAULT_RETRY_DELAY_S: float = 0.1

DEFAULT_ACTIVATION_GRACE_S: float = 0.5
"""Single wait after triggering activation, before the one re-check."""

# ---------------------------------------------------------------------------
# Client-facing messages
# ---------------------------------------------------------------------------

MESSAGE_ACTIVE = "Asset ready for download"
MESSAGE_ACTIVATING = "Asset is activating, check again later"
MESSAGE_INACTIVE = "Asset is not active yet, check again later"
