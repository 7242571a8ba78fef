"""Request handler — validate input, call the provider, shape responses.

Each operation returns a ``HandlerResponse`` and never raises for
per-request failures: validation problems become a 422 envelope without
contacting the provider, and every provider failure becomes a 500
envelope after one error log entry.  No retries happen at this layer.

Engineering standards:
    Validate before calling upstream; invalid input never reaches the adapter.
    One response per request: either full success or a single error object.
    Structured logging at the handler boundary.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import TYPE_CHECKING, Any

from planet_gateway.core.constants import (
    MESSAGE_ACTIVATING,
    MESSAGE_ACTIVE,
    MESSAGE_INACTIVE,
)
from planet_gateway.core.exceptions import ErrorKind, GatewayError, InvalidInputError
from planet_gateway.models.assets import AssetStatus
from planet_gateway.models.responses import (
    ActivationBody,
    AssetsBody,
    ErrorBody,
    HandlerResponse,
    SearchBody,
    ValidationErrorBody,
)
from planet_gateway.models.search import parse_search_request

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from planet_gateway.models.assets import Asset
    from planet_gateway.providers.base import ImageryProvider

logger = logging.getLogger("planet_gateway.handlers.imagery")

ERROR_SEARCH = "Search failed"
ERROR_ASSETS = "Get assets failed"
ERROR_ACTIVATION = "Activation failed"
ERROR_ACTIVATION_CHECK = "Activation check failed"
ERROR_VALIDATION = "Validation error"

_MESSAGES_BY_STATUS = {
    AssetStatus.ACTIVE: MESSAGE_ACTIVE,
    AssetStatus.ACTIVATING: MESSAGE_ACTIVATING,
    AssetStatus.INACTIVE: MESSAGE_INACTIVE,
}

# Planet item ids, e.g. 20240115_183909_00_2461.
_ITEM_ID_RE = re.compile(r"[A-Za-z0-9_-]+")

_HTTP_STATUS_BY_KIND = {
    ErrorKind.INVALID_INPUT: 422,
    ErrorKind.UPSTREAM_UNAVAILABLE: 500,
    ErrorKind.PROVIDER_REQUEST_FAILED: 500,
    ErrorKind.CONFIGURATION: 500,
}


class ImageryHandler:
    """HTTP-agnostic handler for the gateway's endpoints.

    Args:
        provider: Adapter used for every upstream call.
    """

    def __init__(self, provider: ImageryProvider) -> None:
        self._provider = provider

    @property
    def provider(self) -> ImageryProvider:
        return self._provider

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def search(self, params: Mapping[str, Any], *, correlation_id: str = "") -> HandlerResponse:
        """Validate *params*, run the search, and list the matching scenes."""
        try:
            search_filter = parse_search_request(params)
        except InvalidInputError as exc:
            return validation_error_response(exc, correlation_id=correlation_id)

        def _run() -> HandlerResponse:
            features = self._provider.search(search_filter)
            body: SearchBody = {
                "status_code": 200,
                "features": features,
                "image_ids": [feature.get("id") for feature in features],
                "count": len(features),
            }
            return HandlerResponse(200, body)

        return self._guard(ERROR_SEARCH, "search", _run, correlation_id)

    def list_assets(self, item_id: str, *, correlation_id: str = "") -> HandlerResponse:
        """Return the asset map plus the target asset's status and activation link."""
        invalid = _check_item_id(item_id, correlation_id)
        if invalid is not None:
            return invalid

        def _run() -> HandlerResponse:
            assets = self._provider.list_assets(item_id)
            target = assets.get(self._provider.asset_type)
            if not isinstance(target, dict):
                target = {}
            links = target.get("_links")
            if not isinstance(links, dict):
                links = {}
            body: AssetsBody = {
                "status_code": 200,
                "assets": assets,
                "basic_analytic_status": target.get("status"),
                "activation_link": links.get("activate"),
            }
            return HandlerResponse(200, body)

        return self._guard(ERROR_ASSETS, f"list_assets item={item_id}", _run, correlation_id)

    def activate(self, item_id: str, *, correlation_id: str = "") -> HandlerResponse:
        """Activate the target asset if needed and report its state."""
        invalid = _check_item_id(item_id, correlation_id)
        if invalid is not None:
            return invalid

        return self._guard(
            ERROR_ACTIVATION,
            f"activate item={item_id}",
            lambda: _activation_response(self._provider.activate_and_check(item_id)),
            correlation_id,
        )

    def check_activation(self, item_id: str, *, correlation_id: str = "") -> HandlerResponse:
        """Report the target asset's state without requesting activation."""
        invalid = _check_item_id(item_id, correlation_id)
        if invalid is not None:
            return invalid

        return self._guard(
            ERROR_ACTIVATION_CHECK,
            f"check_activation item={item_id}",
            lambda: _activation_response(self._provider.get_asset(item_id)),
            correlation_id,
        )

    # ------------------------------------------------------------------
    # Error boundary
    # ------------------------------------------------------------------

    def _guard(
        self,
        error: str,
        context: str,
        operation: Callable[[], HandlerResponse],
        correlation_id: str,
    ) -> HandlerResponse:
        """Run *operation*, converting any failure into an error envelope.

        Gateway errors are tagged with *correlation_id* and logged once with
        their ``to_error_dict()`` payload under the ``error_details`` extra.
        """
        try:
            return operation()
        except InvalidInputError as exc:
            return validation_error_response(exc, correlation_id=correlation_id)
        except GatewayError as exc:
            exc.correlation_id = exc.correlation_id or correlation_id
            details = exc.to_error_dict()
            logger.error(
                "%s | %s | kind=%s | category=%s | code=%s | correlation_id=%s | error=%s",
                error,
                context,
                details["kind"],
                details["category"],
                details["code"],
                details["correlation_id"],
                details["message"],
                extra={"error_details": details},
            )
            return _error(error, exc.message, status_code=_HTTP_STATUS_BY_KIND[exc.kind])
        except Exception as exc:
            logger.exception(
                "%s | %s | unexpected error | correlation_id=%s",
                error,
                context,
                correlation_id,
            )
            return _error(error, str(exc))


# ---------------------------------------------------------------------------
# Response builders
# ---------------------------------------------------------------------------


def _activation_response(asset: Asset) -> HandlerResponse:
    body: ActivationBody = {
        "status_code": 200,
        "status": asset.status.value,
        "download_url": asset.download_url,
        "message": _MESSAGES_BY_STATUS[asset.status],
    }
    return HandlerResponse(200, body)


def validation_error_response(
    exc: InvalidInputError, *, correlation_id: str = ""
) -> HandlerResponse:
    """Build the 422 envelope for *exc* (no provider call is made)."""
    exc.correlation_id = exc.correlation_id or correlation_id
    logger.info(
        "Rejected invalid input | fields=%s | correlation_id=%s",
        ",".join(sorted(exc.messages)),
        exc.correlation_id,
    )
    body: ValidationErrorBody = {
        "status_code": 422,
        "error": ERROR_VALIDATION,
        "messages": exc.messages,
    }
    return HandlerResponse(422, body)


def _error(error: str, message: str, *, status_code: int = 500) -> HandlerResponse:
    body: ErrorBody = {
        "status_code": status_code,
        "error": error,
        "message": message,
    }
    return HandlerResponse(status_code, body)


def _check_item_id(item_id: str, correlation_id: str) -> HandlerResponse | None:
    """Reject ids that are blank or would not stay a single URL path segment."""
    if not item_id or not item_id.strip():
        problem = InvalidInputError.for_field("item_id", "must not be empty")
    elif not _ITEM_ID_RE.fullmatch(item_id):
        problem = InvalidInputError.for_field(
            "item_id", "must contain only letters, digits, '_' or '-'"
        )
    else:
        return None
    return validation_error_response(problem, correlation_id=correlation_id)


# ---------------------------------------------------------------------------
# Process-wide handler
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_handler() -> ImageryHandler:
    """Build the handler once per worker from environment configuration.

    Raises:
        ConfigurationError: If ``PLANET_API_KEY`` is missing or any setting
            is invalid.  Not cached, so the next call tries again.
    """
    from planet_gateway.core.config import GatewayConfig
    from planet_gateway.providers.planet import PlanetDataAdapter

    config = GatewayConfig.from_env()
    logger.info(
        "Creating Planet gateway | base_url=%s | item_type=%s | asset_type=%s",
        config.base_url,
        config.item_type,
        config.asset_type,
    )
    return ImageryHandler(PlanetDataAdapter(config))
