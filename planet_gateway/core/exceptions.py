"""Unified gateway exception taxonomy.

Every domain exception inherits from ``GatewayError`` and carries an
``ErrorKind`` tag plus structured context fields.  The request handler
never lets these escape: it reads the tag and turns the error into a
JSON error envelope with the matching HTTP status.

Error kinds
-----------
- ``invalid_input``            — client parameters failed schema checks (422).
- ``upstream_unavailable``     — the target asset type is missing upstream (500).
- ``provider_request_failed``  — non-2xx or transport failure talking to Planet (500).
- ``configuration``            — missing/invalid settings, fatal at construction.

Taxonomy categories
-------------------
- ``ValidationError``   — input/contract violations, never retryable.
- ``PermanentError``    — unrecoverable domain failures, not retryable.
- ``ContractError``     — provider payload drift, never retryable.

Other errors fall into ``transient`` or ``permanent`` by their ``retryable`` flag.
"""

from __future__ import annotations

import enum


class ErrorKind(enum.Enum):
    """Tag identifying how an error is surfaced to the HTTP client."""

    INVALID_INPUT = "invalid_input"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    PROVIDER_REQUEST_FAILED = "provider_request_failed"
    CONFIGURATION = "configuration"


class GatewayError(Exception):
    """Base exception for all gateway-domain errors.

    Attributes:
        message: Human-readable error description.
        stage: Component where the error occurred
            (e.g. ``"search"``, ``"provider"``, ``"config"``).
        code: Machine-readable error code (e.g. ``"PROVIDER_REQUEST_FAILED"``).
        retryable: Whether repeating the same call may succeed.
        correlation_id: Request correlation identifier.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""
    #: Error kind used by the handler boundary to pick the response shape.
    kind: ErrorKind = ErrorKind.PROVIDER_REQUEST_FAILED

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ContractError):
            return "contract"
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, PermanentError):
            return "permanent"
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys for logging."""
        return {
            "kind": self.kind.value,
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(GatewayError):
    """Input or domain-model validation failure. Never retryable."""

    kind = ErrorKind.INVALID_INPUT

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(GatewayError):
    """Unrecoverable domain failure. Not retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class ContractError(GatewayError):
    """Provider payload or schema drift. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Client input
# ---------------------------------------------------------------------------


class InvalidInputError(ValidationError):
    """Client-supplied parameters failed schema or semantic checks.

    Attributes:
        messages: Field path → list of human-readable problems, e.g.
            ``{"date_range.end": ["must be on or after date_range.start"]}``.
    """

    default_stage = "validation"
    default_code = "INVALID_INPUT"

    def __init__(self, messages: dict[str, list[str]], **kwargs: object) -> None:
        self.messages = {field: list(errors) for field, errors in messages.items()}
        fields = ", ".join(sorted(self.messages)) or "request"
        super().__init__(f"Invalid input: {fields}", **kwargs)

    @classmethod
    def for_field(cls, field: str, problem: str) -> InvalidInputError:
        """Build an error carrying a single problem for *field*."""
        return cls({field: [problem]})
