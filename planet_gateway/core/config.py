"""Gateway configuration loaded from environment variables.

Azure Functions app settings (or ``local.settings.json`` for local dev)
are the source of truth.  Configuration is loaded once, validated, and
injected into the provider adapter as an immutable value.

Fail-fast validation:
    ``from_env()`` raises ``ConfigurationError`` when ``PLANET_API_KEY``
    is missing or any numeric value is unparseable or out of range, so a
    misconfigured app fails at construction instead of per request.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from planet_gateway.core.constants import (
    DEFAULT_ACTIVATION_GRACE_S,
    DEFAULT_ASSET_TYPE,
    DEFAULT_BASE_URL,
    DEFAULT_ITEM_TYPE,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_DELAY_S,
    DEFAULT_TIMEOUT_S,
)
from planet_gateway.core.exceptions import ErrorKind, PermanentError

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


class ConfigurationError(PermanentError):
    """Raised when configuration is missing or out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        detail: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"
    kind = ErrorKind.CONFIGURATION

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        self.detail = message
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class GatewayConfig:
    """Immutable gateway configuration.

    Attributes:
        api_key: Planet API key, sent as the Basic auth username.
        base_url: Planet Data API root URL.
        item_type: Item type used for search and asset lookups.
        asset_type: Asset type targeted by activation.
        timeout_s: Per-request timeout in seconds.
        retry_attempts: Total attempts per outbound call (first try included).
        retry_delay_s: Fixed delay between attempts in seconds.
        activation_grace_s: Single wait after an activation trigger, in seconds.
        verify_tls: Whether to verify the provider's TLS certificate.
    """

    api_key: str = field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    item_type: str = DEFAULT_ITEM_TYPE
    asset_type: str = DEFAULT_ASSET_TYPE
    timeout_s: float = DEFAULT_TIMEOUT_S
    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS
    retry_delay_s: float = DEFAULT_RETRY_DELAY_S
    activation_grace_s: float = DEFAULT_ACTIVATION_GRACE_S
    verify_tls: bool = True

    def __post_init__(self) -> None:
        _validate(self)

    @classmethod
    def from_env(cls) -> GatewayConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigurationError: If ``PLANET_API_KEY`` is missing, a value
                cannot be parsed, or a value is out of range.
        """
        return cls(
            api_key=os.getenv("PLANET_API_KEY", ""),
            base_url=os.getenv("PLANET_API_BASE_URL", DEFAULT_BASE_URL),
            item_type=os.getenv("PLANET_ITEM_TYPE", DEFAULT_ITEM_TYPE),
            asset_type=os.getenv("PLANET_ASSET_TYPE", DEFAULT_ASSET_TYPE),
            timeout_s=_env_float("PLANET_TIMEOUT_S", DEFAULT_TIMEOUT_S),
            retry_attempts=_env_int("PLANET_RETRY_ATTEMPTS", DEFAULT_RETRY_ATTEMPTS),
            retry_delay_s=_env_float("PLANET_RETRY_DELAY_S", DEFAULT_RETRY_DELAY_S),
            activation_grace_s=_env_float(
                "PLANET_ACTIVATION_GRACE_S", DEFAULT_ACTIVATION_GRACE_S
            ),
            verify_tls=_env_bool("PLANET_VERIFY_TLS", default=True),
        )


def _validate(config: GatewayConfig) -> None:
    """Validate configuration values.  Raises ``ConfigurationError``."""
    if not config.api_key or not config.api_key.strip():
        raise ConfigurationError("PLANET_API_KEY", "", "Planet API key is not configured")

    for key, value in (
        ("PLANET_API_BASE_URL", config.base_url),
        ("PLANET_ITEM_TYPE", config.item_type),
        ("PLANET_ASSET_TYPE", config.asset_type),
    ):
        if not value or not value.strip():
            raise ConfigurationError(key, value, "must not be empty")

    if config.timeout_s <= 0:
        raise ConfigurationError("PLANET_TIMEOUT_S", config.timeout_s, "must be > 0 (seconds)")

    if config.retry_attempts < 1:
        raise ConfigurationError(
            "PLANET_RETRY_ATTEMPTS",
            config.retry_attempts,
            "must be >= 1 (total attempts)",
        )

    if config.retry_delay_s < 0:
        raise ConfigurationError(
            "PLANET_RETRY_DELAY_S",
            config.retry_delay_s,
            "must be >= 0 (seconds)",
        )

    if config.activation_grace_s < 0:
        raise ConfigurationError(
            "PLANET_ACTIVATION_GRACE_S",
            config.activation_grace_s,
            "must be >= 0 (seconds)",
        )


def _env_float(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(key, raw, "must be a number") from exc


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(key, raw, "must be an integer") from exc


def _env_bool(key: str, *, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(key, raw, "must be a boolean (true/false)")
