"""Typed view over the Planet item-assets response.

The provider returns a mapping of asset name to asset record::

    {
        "basic_analytic_4b": {
            "_links": {"_self": "...", "activate": "...", "type": "..."},
            "_permissions": ["download"],
            "status": "inactive",
            "type": "basic_analytic_4b",
        },
        ...
    }

``Asset`` parses one record.  Assets are fetched fresh per request and
never cached; the lifecycle (``AssetStatus``) is owned by the provider
and only observed here.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from planet_gateway.core.exceptions import ContractError, ErrorKind


class AssetPayloadError(ContractError):
    """Raised when an asset record from the provider cannot be interpreted.

    Attributes:
        asset_name: Name of the asset whose record was malformed.
    """

    default_stage = "provider"
    default_code = "ASSET_PAYLOAD_INVALID"
    kind = ErrorKind.PROVIDER_REQUEST_FAILED

    def __init__(self, asset_name: str, message: str) -> None:
        self.asset_name = asset_name
        super().__init__(f"Asset {asset_name!r}: {message}")


class AssetStatus(enum.Enum):
    """Activation lifecycle of an asset, as reported by the provider.

    Values:
        INACTIVE:   Not prepared for download; activation must be requested.
        ACTIVATING: Activation requested, provider is preparing the asset.
        ACTIVE:     Asset is ready; ``location`` holds the download URL.
    """

    INACTIVE = "inactive"
    ACTIVATING = "activating"
    ACTIVE = "active"


@dataclass(frozen=True, slots=True)
class Asset:
    """A single downloadable product of an item.

    Attributes:
        name: Asset type name (e.g. ``"basic_analytic_4b"``).
        status: Current activation status.
        activate_link: Activation URL, when the provider offers one.
        location: Download URL, present once the asset is active.
    """

    name: str
    status: AssetStatus
    activate_link: str | None = None
    location: str | None = None

    @classmethod
    def from_provider(cls, name: str, record: object) -> Asset:
        """Parse a provider asset record.

        Raises:
            AssetPayloadError: If the record is not a dict or its status is
                missing or unknown.
        """
        if not isinstance(record, dict):
            raise AssetPayloadError(name, f"record must be an object, got {type(record).__name__}")

        raw_status = record.get("status")
        try:
            status = AssetStatus(raw_status)
        except ValueError:
            raise AssetPayloadError(name, f"unknown status {raw_status!r}") from None

        links = record.get("_links")
        if not isinstance(links, dict):
            links = {}

        return cls(
            name=name,
            status=status,
            activate_link=_optional_str(links.get("activate")),
            location=_optional_str(record.get("location")),
        )

    @property
    def download_url(self) -> str | None:
        """Download URL, exposed only while the asset is active."""
        return self.location if self.status is AssetStatus.ACTIVE else None


def _optional_str(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)
