"""HTTP-agnostic request handlers."""

from planet_gateway.handlers.imagery import (
    ImageryHandler,
    get_handler,
    validation_error_response,
)

__all__ = [
    "ImageryHandler",
    "get_handler",
    "validation_error_response",
]
