"""Response contracts for the gateway's HTTP endpoints.

Every handler operation returns a ``HandlerResponse``: the HTTP status
plus a JSON-serialisable body.  The body shapes are defined here as
``TypedDict`` so that field names have a single source of truth.

Design notes:
- ``TypedDict`` was chosen over ``dataclass`` for bodies because they go
  straight to ``json.dumps`` and need no conversion.
- Every body repeats the HTTP status in ``status_code``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypedDict

# ---------------------------------------------------------------------------
# Success bodies
# ---------------------------------------------------------------------------


class SearchBody(TypedDict):
    """``POST /search`` → 200."""

    status_code: int
    features: list[dict[str, Any]]
    image_ids: list[Any]
    count: int


class AssetsBody(TypedDict):
    """``GET /items/{id}/assets`` → 200."""

    status_code: int
    assets: dict[str, Any]
    basic_analytic_status: str | None
    activation_link: str | None


class ActivationBody(TypedDict):
    """``POST /items/{id}/activate`` and ``GET /items/{id}/check-activation`` → 200."""

    status_code: int
    status: str
    download_url: str | None
    message: str


# ---------------------------------------------------------------------------
# Error bodies
# ---------------------------------------------------------------------------


class ValidationErrorBody(TypedDict):
    """Any endpoint → 422."""

    status_code: int
    error: str
    messages: dict[str, list[str]]


class ErrorBody(TypedDict):
    """Any endpoint → 500."""

    status_code: int
    error: str
    message: str


# ---------------------------------------------------------------------------
# Handler result
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class HandlerResponse:
    """Result of a handler operation, success or failure.

    Attributes:
        status_code: HTTP status to send.
        body: JSON body (one of the ``*Body`` contracts above).
    """

    status_code: int
    body: Mapping[str, Any]
