"""Search request schema and the validated search filter.

Two layers:

- ``SearchRequest`` (pydantic): the inbound JSON body of ``POST /search``.
  Produces per-field error messages when the body is malformed.
- ``SearchFilter`` (frozen dataclass): the validated domain filter handed
  to the provider adapter.  Re-checks its own invariants so that a filter
  built in code is held to the same rules as one parsed from JSON.

Usage::

    search_filter = parse_search_request(body)
    features = adapter.search(search_filter)
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any, Literal

import pydantic
from pydantic import BaseModel, Field, ValidationInfo, field_validator

from planet_gateway.core.exceptions import InvalidInputError

POLYGON = "Polygon"

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DATE_FORMAT_HINT = "must be a calendar date in YYYY-MM-DD format"
_MIN_RING_POSITIONS = 4


class PolygonGeometry(BaseModel):
    """GeoJSON polygon: an exterior ring followed by optional holes.

    Attributes:
        type: Always ``"Polygon"``.
        coordinates: ``[exterior_ring, *interior_rings]``, each ring a list
            of ``[lon, lat]`` (or ``[lon, lat, alt]``) positions in WGS 84.
    """

    type: Literal["Polygon"]
    coordinates: list[list[list[float]]] = Field(min_length=1)

    @field_validator("coordinates")
    @classmethod
    def _check_rings(cls, rings: list[list[list[float]]]) -> list[list[list[float]]]:
        for ring in rings:
            if len(ring) < _MIN_RING_POSITIONS:
                msg = f"each ring needs at least {_MIN_RING_POSITIONS} positions"
                raise ValueError(msg)
            for position in ring:
                if len(position) not in (2, 3):
                    msg = "each position must be [lon, lat] or [lon, lat, alt]"
                    raise ValueError(msg)
                lon, lat = position[0], position[1]
                if not -180.0 <= lon <= 180.0:
                    msg = f"longitude {lon} is outside [-180, 180]"
                    raise ValueError(msg)
                if not -90.0 <= lat <= 90.0:
                    msg = f"latitude {lat} is outside [-90, 90]"
                    raise ValueError(msg)
        return rings


class DateRange(BaseModel):
    """Inclusive acquisition date range (calendar days, UTC)."""

    start: date
    end: date

    @field_validator("start", "end", mode="before")
    @classmethod
    def _calendar_date(cls, value: Any) -> Any:
        if not isinstance(value, str) or not _DATE_PATTERN.match(value):
            raise ValueError(_DATE_FORMAT_HINT)
        try:
            return date.fromisoformat(value)
        except ValueError:
            raise ValueError(_DATE_FORMAT_HINT) from None

    @field_validator("end")
    @classmethod
    def _end_not_before_start(cls, value: date, info: ValidationInfo) -> date:
        start = info.data.get("start")
        if start is not None and value < start:
            msg = "must be a date after or equal to date_range.start"
            raise ValueError(msg)
        return value


class SearchRequest(BaseModel):
    """Inbound body of ``POST /search``."""

    geometry: PolygonGeometry
    date_range: DateRange
    max_cloud_cover: float | None = Field(default=None, ge=0, le=100)

    def to_filter(self) -> SearchFilter:
        """Convert the validated request into a ``SearchFilter``."""
        return SearchFilter(
            geometry=self.geometry.model_dump(),
            start_date=self.date_range.start,
            end_date=self.date_range.end,
            max_cloud_cover=self.max_cloud_cover,
        )


@dataclass(frozen=True, slots=True)
class SearchFilter:
    """Validated search criteria passed to the provider adapter.

    Attributes:
        geometry: GeoJSON polygon dict (``type`` + ``coordinates``).
        start_date: First acquisition day (inclusive).
        end_date: Last acquisition day (inclusive).
        max_cloud_cover: Optional upper bound on cloud cover (0-100).
    """

    geometry: dict[str, Any]
    start_date: date
    end_date: date
    max_cloud_cover: float | None = None

    def __post_init__(self) -> None:
        if self.geometry.get("type") != POLYGON:
            raise InvalidInputError.for_field("geometry.type", "must be Polygon")
        if self.end_date < self.start_date:
            raise InvalidInputError.for_field(
                "date_range.end",
                "must be a date after or equal to date_range.start",
            )
        if self.max_cloud_cover is not None and not 0 <= self.max_cloud_cover <= 100:
            raise InvalidInputError.for_field("max_cloud_cover", "must be between 0 and 100")


def parse_search_request(params: Mapping[str, Any]) -> SearchFilter:
    """Validate a raw ``/search`` body and return the domain filter.

    Raises:
        InvalidInputError: With per-field messages when validation fails.
    """
    if not isinstance(params, Mapping):
        raise InvalidInputError.for_field("body", "must be a JSON object")
    try:
        request = SearchRequest.model_validate(dict(params))
    except pydantic.ValidationError as exc:
        raise InvalidInputError(_collect_messages(exc)) from exc
    return request.to_filter()


def _collect_messages(exc: pydantic.ValidationError) -> dict[str, list[str]]:
    """Group pydantic errors by dotted field path."""
    messages: dict[str, list[str]] = {}
    for error in exc.errors():
        path = ".".join(str(part) for part in error["loc"]) or "body"
        text = str(error["msg"])
        if text.startswith("Value error, "):
            text = text[len("Value error, ") :]
        messages.setdefault(path, []).append(text)
    return messages
