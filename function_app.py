"""Azure Functions entry point — Planet imagery gateway.

This module registers the HTTP routes using the Python v2 programming model.

All business logic lives in the planet_gateway package. This file is purely
the wiring layer between HTTP triggers and the request handler.
"""

from __future__ import annotations

import logging

import azure.functions as func

from planet_gateway.core.exceptions import InvalidInputError
from planet_gateway.core.ingress import (
    read_item_id,
    read_json_body,
    request_correlation_id,
    to_http_response,
)
from planet_gateway.handlers import get_handler, validation_error_response

app = func.FunctionApp(http_auth_level=func.AuthLevel.ANONYMOUS)

logger = logging.getLogger("planet_gateway.function_app")


# ---------------------------------------------------------------------------
# HTTP: Search
# ---------------------------------------------------------------------------


@app.function_name("search")
@app.route(route="search", methods=["POST"])
def search(req: func.HttpRequest) -> func.HttpResponse:
    """Search the Planet archive by polygon, date range and cloud cover."""
    correlation_id = request_correlation_id(req)
    logger.info("search invoked | correlation_id=%s", correlation_id)
    try:
        params = read_json_body(req)
    except InvalidInputError as exc:
        return to_http_response(validation_error_response(exc, correlation_id=correlation_id))

    return to_http_response(get_handler().search(params, correlation_id=correlation_id))


# ---------------------------------------------------------------------------
# HTTP: Item assets
# ---------------------------------------------------------------------------


@app.function_name("list_assets")
@app.route(route="items/{id}/assets", methods=["GET"])
def list_assets(req: func.HttpRequest) -> func.HttpResponse:
    """List every asset of an item with the target asset's status."""
    item_id = read_item_id(req)
    correlation_id = request_correlation_id(req)
    logger.info("list_assets invoked | item=%s | correlation_id=%s", item_id, correlation_id)
    return to_http_response(get_handler().list_assets(item_id, correlation_id=correlation_id))


@app.function_name("activate_asset")
@app.route(route="items/{id}/activate", methods=["POST"])
def activate_asset(req: func.HttpRequest) -> func.HttpResponse:
    """Request activation of the item's target asset and report its state.

    One trigger, one short wait, one re-check. Clients poll
    ``check-activation`` until the asset reports ``active``.
    """
    item_id = read_item_id(req)
    correlation_id = request_correlation_id(req)
    logger.info("activate invoked | item=%s | correlation_id=%s", item_id, correlation_id)
    return to_http_response(get_handler().activate(item_id, correlation_id=correlation_id))


@app.function_name("check_activation")
@app.route(route="items/{id}/check-activation", methods=["GET"])
def check_activation(req: func.HttpRequest) -> func.HttpResponse:
    """Report the target asset's activation state without triggering it."""
    item_id = read_item_id(req)
    correlation_id = request_correlation_id(req)
    logger.info("check_activation invoked | item=%s | correlation_id=%s", item_id, correlation_id)
    result = get_handler().check_activation(item_id, correlation_id=correlation_id)
    return to_http_response(result)
