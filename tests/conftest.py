"""Shared pytest fixtures for the Planet gateway test suite."""

from __future__ import annotations

import copy
from collections.abc import Iterator
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from planet_gateway.core.config import GatewayConfig
from tests.unit.planet_stub import SAMPLE_POLYGON

# ---------------------------------------------------------------------------
# Sample request data
# ---------------------------------------------------------------------------


@pytest.fixture()
def polygon() -> dict[str, Any]:
    """Return a fresh copy of the sample polygon."""
    return copy.deepcopy(SAMPLE_POLYGON)


@pytest.fixture()
def search_body(polygon: dict[str, Any]) -> dict[str, Any]:
    """Valid ``POST /search`` body for January 2024, max 20 % cloud."""
    return {
        "geometry": polygon,
        "date_range": {"start": "2024-01-01", "end": "2024-01-31"},
        "max_cloud_cover": 20,
    }


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@pytest.fixture()
def gateway_config() -> GatewayConfig:
    """Config with a test key and production retry/grace defaults."""
    return GatewayConfig(api_key="test-key")


# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------


@pytest.fixture()
def no_sleep() -> Iterator[MagicMock]:
    """Patch the adapter's ``time.sleep`` and yield the mock."""
    with patch("planet_gateway.providers.planet.time.sleep") as mock_sleep:
        yield mock_sleep
