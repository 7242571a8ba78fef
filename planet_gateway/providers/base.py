"""ImageryProvider abstract base class and provider exceptions.

Defines the contract the request handler relies on.  The handler talks
only to this interface, so tests (and any future provider) can stand in
for the Planet adapter.

Lifecycle of one activation request:
    1. ``list_assets(item_id)``          — raw asset map for an item.
    2. ``activate_and_check(item_id)``   — trigger activation if inactive,
       wait once, re-fetch, return the target asset's state.
    3. ``get_asset(item_id)``            — read-only status check.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any

from planet_gateway.core.exceptions import ContractError, ErrorKind, GatewayError

if TYPE_CHECKING:
    from planet_gateway.core.config import GatewayConfig
    from planet_gateway.models.assets import Asset
    from planet_gateway.models.search import SearchFilter


class ImageryProvider(abc.ABC):
    """Abstract base class for imagery provider adapters.

    The constructor receives the immutable ``GatewayConfig`` carrying the
    API URL, credentials, and retry/timeout policy.

    Example usage::

        provider = PlanetDataAdapter(GatewayConfig.from_env())
        features = provider.search(search_filter)
        asset = provider.activate_and_check(features[0]["id"])
    """

    #: Provider identifier used in logs and error messages.
    name: str = ""

    def __init__(self, config: GatewayConfig) -> None:
        self._config = config

    @property
    def config(self) -> GatewayConfig:
        """Return the provider configuration (read-only)."""
        return self._config

    @property
    def asset_type(self) -> str:
        """Asset type targeted by activation."""
        return self._config.asset_type

    @abc.abstractmethod
    def search(self, search_filter: SearchFilter) -> list[dict[str, Any]]:
        """Search the archive and return provider feature records.

        Returns:
            Feature dicts in provider order; empty list when nothing matches.

        Raises:
            ProviderError: On API errors.
        """

    @abc.abstractmethod
    def list_assets(self, item_id: str) -> dict[str, Any]:
        """Return the provider's asset map for *item_id*, verbatim.

        Raises:
            ProviderError: On API errors.
        """

    @abc.abstractmethod
    def activate_and_check(self, item_id: str) -> Asset:
        """Activate the target asset if inactive and return its fresh state.

        Performs at most one activation request and one re-check; does not
        poll until the asset becomes active.

        Raises:
            AssetUnavailableError: If the item has no asset of the target type.
            ProviderError: On API errors.
        """

    @abc.abstractmethod
    def get_asset(self, item_id: str) -> Asset:
        """Return the current state of the target asset without activating it.

        Raises:
            AssetUnavailableError: If the item has no asset of the target type.
            ProviderError: On API errors.
        """


# ---------------------------------------------------------------------------
# Provider exceptions
# ---------------------------------------------------------------------------


class ProviderError(GatewayError):
    """Base exception for provider adapter errors.

    Attributes:
        provider: Name of the provider that raised the error.
        message: Human-readable error description.
        retryable: Whether the caller could retry the operation.
    """

    default_stage = "provider"
    default_code = "PROVIDER_ERROR"

    def __init__(
        self,
        provider: str,
        message: str,
        *,
        retryable: bool = False,
    ) -> None:
        self.provider = provider
        super().__init__(
            message,
            retryable=retryable,
            code=self.default_code,
            stage=self.default_stage,
        )

    def __str__(self) -> str:
        return f"[{self.provider}] {self.message}"


class ProviderRequestFailed(ProviderError):
    """Non-2xx response or transport failure from the provider API.

    Attributes:
        status_code: HTTP status of the failed response, ``None`` when no
            response was received (connection error, timeout).
        body: Response body text, or the transport error description.
    """

    default_code = "PROVIDER_REQUEST_FAILED"
    kind = ErrorKind.PROVIDER_REQUEST_FAILED

    def __init__(
        self,
        provider: str,
        *,
        status_code: int | None,
        body: str,
        retryable: bool = False,
    ) -> None:
        self.status_code = status_code
        self.body = body
        status = status_code if status_code is not None else "transport error"
        super().__init__(
            provider,
            f"API request failed: {status} - {body}",
            retryable=retryable,
        )


class ProviderResponseError(ProviderError, ContractError):
    """A successful response whose body is not the expected JSON object."""

    default_code = "PROVIDER_RESPONSE_INVALID"
    kind = ErrorKind.PROVIDER_REQUEST_FAILED


class AssetUnavailableError(ProviderError):
    """The item has no asset of the requested type, or it cannot be activated.

    Attributes:
        item_id: Item that was inspected.
        asset_type: Asset type that was missing.
    """

    default_code = "ASSET_UNAVAILABLE"
    kind = ErrorKind.UPSTREAM_UNAVAILABLE

    def __init__(self, provider: str, item_id: str, asset_type: str, reason: str = "") -> None:
        self.item_id = item_id
        self.asset_type = asset_type
        message = reason or f"{asset_type} asset not available for this item"
        super().__init__(provider, message, retryable=False)
