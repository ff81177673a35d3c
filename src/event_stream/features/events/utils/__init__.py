"""Event delivery utilities."""

from .header_builder import (
    build_webhook_body,
    build_webhook_headers,
    build_webhook_request,
    serialize_body,
    DEFAULT_SIGNATURE_HEADER,
    DEFAULT_USER_AGENT,
)

__all__ = [
    "build_webhook_body",
    "build_webhook_headers",
    "build_webhook_request",
    "serialize_body",
    "DEFAULT_SIGNATURE_HEADER",
    "DEFAULT_USER_AGENT",
]
