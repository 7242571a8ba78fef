"""Thin ingress boundary helpers for the Azure Functions HTTP routes.

Keeps transport concerns out of ``function_app.py`` so that each route
only binds a trigger and hands off to the handler:

- **read_json_body** — decodes the request body into a JSON object.
- **read_item_id** — pulls the ``{id}`` route parameter.
- **request_correlation_id** — picks a correlation id for log lines.
- **to_http_response** — serialises a ``HandlerResponse``.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

import azure.functions as func

from planet_gateway.core.exceptions import InvalidInputError

if TYPE_CHECKING:
    from planet_gateway.models.responses import HandlerResponse

logger = logging.getLogger("planet_gateway.core.ingress")

JSON_MIMETYPE = "application/json"

# Header names checked in order; the Functions host sets the last one.
_CORRELATION_HEADERS = ("x-correlation-id", "x-request-id", "x-ms-client-request-id")


# ---------------------------------------------------------------------------
# Request decoding
# ---------------------------------------------------------------------------


def read_json_body(req: func.HttpRequest) -> dict[str, Any]:
    """Decode the request body as a JSON object.

    An empty body decodes to ``{}`` so that schema validation reports the
    missing fields individually.

    Raises:
        InvalidInputError: For ``body`` when the payload is not valid JSON
            or is not a JSON object.
    """
    raw = req.get_body()
    if not raw or not raw.strip():
        return {}
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.debug("Rejected request body | reason=invalid JSON | error=%s", exc)
        raise InvalidInputError.for_field("body", "must be valid JSON") from exc
    if not isinstance(parsed, dict):
        logger.debug(
            "Rejected request body | reason=not an object | type=%s", type(parsed).__name__
        )
        raise InvalidInputError.for_field("body", "must be a JSON object")
    return parsed


def read_item_id(req: func.HttpRequest) -> str:
    """Return the ``{id}`` route parameter, stripped (``""`` when absent)."""
    return (req.route_params.get("id") or "").strip()


def request_correlation_id(req: func.HttpRequest) -> str:
    for header in _CORRELATION_HEADERS:
        value = req.headers.get(header)
        if value:
            return value
    return ""


# ---------------------------------------------------------------------------
# Response encoding
# ---------------------------------------------------------------------------


def to_http_response(result: HandlerResponse) -> func.HttpResponse:
    """Serialise a handler result into a JSON ``func.HttpResponse``."""
    return func.HttpResponse(
        json.dumps(result.body),
        status_code=result.status_code,
        mimetype=JSON_MIMETYPE,
    )
