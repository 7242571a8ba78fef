"""Tests for the Azure Functions HTTP routes.

Each route is unwrapped with ``build().get_user_function()`` and called
with a real ``func.HttpRequest``.  ``get_handler`` is patched to return a
handler over the stubbed Planet adapter, so no environment or network is
needed.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from typing import Any
from unittest.mock import MagicMock, patch

import azure.functions as func
import httpx
import pytest

import function_app
from planet_gateway.core.config import GatewayConfig
from planet_gateway.handlers.imagery import ImageryHandler
from tests.unit.planet_stub import DOWNLOAD_URL, ITEM_ID, PlanetApiStub, asset_map, feature

HANDLER_LOGGER = "planet_gateway.handlers.imagery"


@pytest.fixture()
def stub() -> PlanetApiStub:
    return PlanetApiStub(features=[feature("a"), feature("b")])


@pytest.fixture(autouse=True)
def _handler(stub: PlanetApiStub, no_sleep: MagicMock) -> Iterator[ImageryHandler]:
    handler = ImageryHandler(stub.adapter(GatewayConfig(api_key="test-key")))
    with patch("function_app.get_handler", return_value=handler):
        yield handler


def _call(route: Any, req: func.HttpRequest) -> tuple[int, dict[str, Any]]:
    response = route.build().get_user_function()(req)
    assert response.mimetype == "application/json"
    return response.status_code, json.loads(response.get_body())


def _item_request(method: str, item_id: str, suffix: str) -> func.HttpRequest:
    return func.HttpRequest(
        method=method,
        url=f"/api/items/{item_id}/{suffix}",
        route_params={"id": item_id},
        body=b"",
    )


class TestSearchRoute:
    def test_search(self, search_body: dict[str, Any]) -> None:
        body = json.dumps(search_body).encode()
        req = func.HttpRequest(method="POST", url="/api/search", body=body)
        status, body = _call(function_app.search, req)
        assert status == 200
        assert body["image_ids"] == ["a", "b"]
        assert body["count"] == 2

    def test_malformed_json(self, stub: PlanetApiStub) -> None:
        req = func.HttpRequest(method="POST", url="/api/search", body=b"{not json")
        status, body = _call(function_app.search, req)
        assert status == 422
        assert body == {
            "status_code": 422,
            "error": "Validation error",
            "messages": {"body": ["must be valid JSON"]},
        }
        assert stub.requests == []

    def test_missing_fields(self, stub: PlanetApiStub) -> None:
        req = func.HttpRequest(method="POST", url="/api/search", body=b"{}")
        status, body = _call(function_app.search, req)
        assert status == 422
        assert set(body["messages"]) == {"geometry", "date_range"}
        assert stub.requests == []


class TestItemRoutes:
    def test_list_assets(self) -> None:
        status, body = _call(function_app.list_assets, _item_request("GET", ITEM_ID, "assets"))
        assert status == 200
        assert body["basic_analytic_status"] == "inactive"

    def test_activate(self, stub: PlanetApiStub) -> None:
        req = _item_request("POST", ITEM_ID, "activate")
        status, body = _call(function_app.activate_asset, req)
        assert status == 200
        assert body["status"] == "activating"
        assert len(stub.activation_posts) == 1

    def test_check_activation(self, stub: PlanetApiStub) -> None:
        stub.assets = asset_map("active", location=DOWNLOAD_URL)
        req = _item_request("GET", ITEM_ID, "check-activation")
        status, body = _call(function_app.check_activation, req)
        assert status == 200
        assert body == {
            "status_code": 200,
            "status": "active",
            "download_url": DOWNLOAD_URL,
            "message": "Asset ready for download",
        }
        assert stub.activation_posts == []

    def test_missing_asset_is_500(self, stub: PlanetApiStub) -> None:
        del stub.assets["basic_analytic_4b"]
        req = _item_request("POST", ITEM_ID, "activate")
        status, body = _call(function_app.activate_asset, req)
        assert status == 500
        assert body["error"] == "Activation failed"
        assert body["message"] == "basic_analytic_4b asset not available for this item"

    def test_query_characters_in_id_rejected(self, stub: PlanetApiStub) -> None:
        req = _item_request("GET", "abc?x=1#", "assets")
        status, body = _call(function_app.list_assets, req)
        assert status == 422
        assert body["messages"] == {"item_id": ["must contain only letters, digits, '_' or '-'"]}
        assert stub.requests == []


class TestCorrelationHeader:
    def test_header_reaches_error_log(
        self, stub: PlanetApiStub, caplog: pytest.LogCaptureFixture
    ) -> None:
        stub.fail_with(httpx.Response(401, text="Unauthorized"))
        req = func.HttpRequest(
            method="GET",
            url=f"/api/items/{ITEM_ID}/check-activation",
            route_params={"id": ITEM_ID},
            headers={"x-correlation-id": "corr-route-1"},
            body=b"",
        )
        with caplog.at_level(logging.ERROR, logger=HANDLER_LOGGER):
            status, _ = _call(function_app.check_activation, req)
        assert status == 500
        [record] = [r for r in caplog.records if r.name == HANDLER_LOGGER]
        assert record.error_details["correlation_id"] == "corr-route-1"
