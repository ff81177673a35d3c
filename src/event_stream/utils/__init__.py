"""Utility helpers for event-stream."""

from .uuid import generate_uuid_v7, is_valid_uuid
from .datetime import utc_now, ensure_utc

__all__ = [
    "generate_uuid_v7",
    "is_valid_uuid",
    "utc_now",
    "ensure_utc",
]
